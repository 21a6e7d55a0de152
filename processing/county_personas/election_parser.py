"""
Election Record Parser
Turns the MIT Election Lab county presidential returns (tab-separated) into
per-county election histories.

Pipeline:
1. Split lines, locate columns by header name, skip malformed lines
2. Clean values in a DataFrame (FIPS padding, numeric votes, vote modes)
3. Group rows by county FIPS, then by year
4. Build one ElectionResult per (county, year), candidates sorted by votes
"""

import logging
from typing import Dict, List, Optional

import pandas as pd

from .data_loader import validate_fips_codes
from .errors import MalformedRowError
from .models import Candidate, CountyElectionData, ElectionResult, RawElectionRow

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = [
    'year', 'state', 'state_po', 'county_name', 'county_fips',
    'candidate', 'party', 'candidatevotes', 'totalvotes'
]

# Aggregate "other candidates" rows in the MIT file
EXCLUDED_LABEL = 'OTHER'

TOTAL_MODE = 'TOTAL'
DEFAULT_ELECTION_YEAR = 2000


# ============================================================================
# LINE SPLITTING
# ============================================================================

def split_row(line: str, column_count: int, line_number: Optional[int] = None) -> List[str]:
    """
    Split one tab-separated line into exactly column_count values.

    Raises:
        MalformedRowError: If the line has fewer columns than the header
    """
    values = line.rstrip('\r').split('\t')
    if len(values) < column_count:
        raise MalformedRowError(
            f"Expected {column_count} columns, found {len(values)}",
            line_number=line_number
        )
    return values[:column_count]


def read_election_frame(file_content: str) -> pd.DataFrame:
    """
    Read the raw file into a cleaned DataFrame of candidate rows.

    Args:
        file_content: Entire tab-separated file

    Returns:
        DataFrame with at least REQUIRED_COLUMNS; year and vote columns are
        integers and county_fips is a zero-padded 5-digit string

    Raises:
        ValueError: If the header lacks a required column
    """
    lines = [
        (number, line)
        for number, line in enumerate(file_content.split('\n'), start=1)
        if line.strip()
    ]
    if not lines:
        logger.warning("Election file is empty")
        return pd.DataFrame(columns=REQUIRED_COLUMNS)

    headers = [h.strip().strip('"') for h in lines[0][1].rstrip('\r').split('\t')]
    missing = [col for col in REQUIRED_COLUMNS if col not in headers]
    if missing:
        raise ValueError(f"Election file is missing required columns: {missing}")

    rows = []
    skipped = 0
    for line_number, line in lines[1:]:
        try:
            rows.append(split_row(line, len(headers), line_number))
        except MalformedRowError as e:
            skipped += 1
            logger.debug(f"Skipping line {e.line_number}: {e}")

    if skipped:
        logger.warning(f"Skipped {skipped:,} malformed lines")

    df = pd.DataFrame(rows, columns=headers, dtype=str)
    return clean_election_frame(df)


# ============================================================================
# CLEANING
# ============================================================================

def clean_election_frame(df: pd.DataFrame) -> pd.DataFrame:
    """
    Standardize raw string columns.

    Args:
        df: DataFrame of raw string values

    Returns:
        Cleaned DataFrame
    """
    df = df.copy()
    for col in df.columns:
        df[col] = df[col].astype(str).str.strip().str.strip('"')

    # Non-numeric years cannot be grouped
    df['year'] = pd.to_numeric(df['year'], errors='coerce')
    bad_years = df['year'].isna()
    if bad_years.any():
        logger.warning(f"Skipping {int(bad_years.sum()):,} rows with non-numeric year")
        df = df[~bad_years]
    df['year'] = df['year'].astype(int)

    # Unreadable vote counts count as zero
    for col in ['candidatevotes', 'totalvotes']:
        df[col] = pd.to_numeric(df[col], errors='coerce').fillna(0).astype(int)

    df = validate_fips_codes(df, 'county_fips')

    return collapse_vote_modes(df)


def collapse_vote_modes(df: pd.DataFrame) -> pd.DataFrame:
    """
    Reduce per-mode rows (absentee, election day, ...) to one row per candidate.

    Groups that report a TOTAL mode keep only those rows; otherwise a
    candidate's mode rows are summed. Files without a mode column pass
    through untouched.

    Args:
        df: Cleaned DataFrame

    Returns:
        DataFrame with one row per (county, year, candidate, party)
    """
    if 'mode' not in df.columns or df.empty:
        return df

    df = df.copy()
    is_total = df['mode'].str.upper() == TOTAL_MODE
    group_has_total = is_total.groupby([df['county_fips'], df['year']]).transform('any')
    df = df[~group_has_total | is_total]

    keys = ['county_fips', 'year', 'candidate', 'party']
    aggregations = {col: 'first' for col in df.columns if col not in keys}
    aggregations['candidatevotes'] = 'sum'

    before = len(df)
    df = df.groupby(keys, sort=False, as_index=False, dropna=False).agg(aggregations)

    if len(df) < before:
        logger.info(f"Collapsed vote modes: {before:,} -> {len(df):,} rows")

    return df


def frame_to_rows(df: pd.DataFrame) -> List[RawElectionRow]:
    """Convert a cleaned DataFrame into RawElectionRow records."""
    return [
        RawElectionRow(
            year=int(year),
            state_name=state,
            state_abbr=state_po,
            county_name=county_name,
            county_fips=fips,
            candidate_name=candidate,
            party=party,
            candidate_votes=int(candidate_votes),
            total_votes=int(total_votes),
        )
        for year, state, state_po, county_name, fips, candidate, party, candidate_votes, total_votes
        in zip(
            df['year'], df['state'], df['state_po'], df['county_name'], df['county_fips'],
            df['candidate'], df['party'], df['candidatevotes'], df['totalvotes']
        )
    ]


def parse_election_rows(file_content: str) -> List[RawElectionRow]:
    """Parse the file into one RawElectionRow per valid candidate line."""
    return frame_to_rows(read_election_frame(file_content))


# ============================================================================
# GROUPING
# ============================================================================

def build_election_result(rows: List[RawElectionRow]) -> Optional[ElectionResult]:
    """
    Build one county-year result from its candidate rows.

    Total votes come from the first row of the group (every row repeats the
    county total). Rows for the aggregate OTHER candidate/party are excluded.

    Args:
        rows: Rows sharing county FIPS and year

    Returns:
        ElectionResult, or None when no candidate survives filtering
    """
    if not rows:
        return None

    first = rows[0]
    total_votes = first.total_votes

    candidates = [
        Candidate(
            name=row.candidate_name,
            party=row.party,
            votes=row.candidate_votes,
            percentage=row.candidate_votes / total_votes if total_votes > 0 else 0.0,
        )
        for row in rows
        if row.candidate_name != EXCLUDED_LABEL and row.party != EXCLUDED_LABEL
    ]
    if not candidates:
        return None

    candidates.sort(key=lambda c: c.votes, reverse=True)

    return ElectionResult(
        year=first.year,
        county_fips=first.county_fips,
        county_name=first.county_name,
        state_abbr=first.state_abbr,
        state_name=first.state_name,
        candidates=candidates,
        total_votes=total_votes,
    )


def group_election_rows(rows: List[RawElectionRow]) -> List[CountyElectionData]:
    """
    Group candidate rows into per-county election histories.

    Counties keep first-seen order; each county's elections are sorted by
    year descending and counties without any valid election are omitted.
    """
    by_county: Dict[str, Dict[int, List[RawElectionRow]]] = {}
    for row in rows:
        by_county.setdefault(row.county_fips, {}).setdefault(row.year, []).append(row)

    county_data = []
    for fips, years in by_county.items():
        elections = [
            result for result in (build_election_result(group) for group in years.values())
            if result is not None
        ]
        if not elections:
            logger.debug(f"No valid elections for county {fips}")
            continue

        # Identity fields come from the first year seen for the county
        first = elections[0]
        elections.sort(key=lambda e: e.year, reverse=True)

        county_data.append(CountyElectionData(
            county_fips=fips,
            county_name=first.county_name,
            state_abbr=first.state_abbr,
            state_name=first.state_name,
            elections=elections,
        ))

    return county_data


def parse_election_data(file_content: str) -> List[CountyElectionData]:
    """
    Parse the tab-separated election file into per-county histories.

    Args:
        file_content: Entire file as text

    Returns:
        One CountyElectionData per distinct 5-digit county FIPS
    """
    rows = parse_election_rows(file_content)
    county_data = group_election_rows(rows)

    logger.info(f"Parsed {len(rows):,} candidate rows into {len(county_data):,} counties")

    return county_data


# ============================================================================
# LOOKUPS
# ============================================================================

def get_election_data_for_county(
    fips: str,
    election_data: List[CountyElectionData]
) -> Optional[CountyElectionData]:
    """Find a county's history by FIPS (padded before comparison)."""
    padded = str(fips).zfill(5)
    for county in election_data:
        if county.county_fips == padded:
            return county
    return None


def get_election_data_for_year(
    year: int,
    election_data: List[CountyElectionData]
) -> List[ElectionResult]:
    """All county results for one election year."""
    return [
        election
        for county in election_data
        for election in county.elections
        if election.year == year
    ]


def get_election_data_for_state(
    state_abbr: str,
    election_data: List[CountyElectionData]
) -> List[CountyElectionData]:
    state_abbr = state_abbr.upper()
    return [county for county in election_data if county.state_abbr == state_abbr]


def get_most_recent_election_year(election_data: List[CountyElectionData]) -> int:
    """Latest year present in the data; DEFAULT_ELECTION_YEAR when empty."""
    years = [county.elections[0].year for county in election_data if county.elections]
    return max(years) if years else DEFAULT_ELECTION_YEAR
