"""
State/County Aggregator
Builds the County and State entities the frontend shows from parsed
election histories.

County population and income are rough estimates until Census enrichment
replaces them:
- population = most recent total votes / assumed turnout (min 1,000)
- income = state average, bumped for large urban counties
"""

import logging
import math
from dataclasses import replace
from typing import Dict, List, Mapping, Optional

from .county_matcher import normalize_county_id_name
from .errors import MissingDataError
from .models import (
    AgeProfile, Coordinates, County, CountyElectionData, Demographics,
    PoliticalLean, State
)
from .political_lean import (
    DEFAULT_RECENT_YEARS, calculate_political_lean, classify_vote_shares,
    tally_two_party_votes
)
from .state_reference import (
    DEFAULT_COORDINATES, STATE_COORDINATES, STATE_NAMES, STATE_POPULATIONS,
    get_state_name
)

logger = logging.getLogger(__name__)

ESTIMATED_TURNOUT = 0.60
MIN_COUNTY_POPULATION = 1000

# Median household income by state, thousands of dollars
STATE_INCOME_AVERAGES = {
    'CA': 80, 'NY': 72, 'NJ': 85, 'MA': 85, 'CT': 80,
    'TX': 65, 'FL': 60, 'PA': 62, 'OH': 58, 'GA': 61,
    'NC': 57, 'MI': 59, 'AZ': 62, 'WA': 82, 'CO': 75,
    'VA': 76, 'MD': 87, 'OR': 67, 'MN': 74, 'WI': 66,
}
DEFAULT_STATE_INCOME = 60
URBAN_INCOME_BONUS = 10

LARGE_URBAN_COUNTIES = ['Los Angeles', 'New York', 'Cook', 'Harris', 'Maricopa', 'Dallas']

COUNTY_TYPE_WORDS = ('County', 'Parish', 'Borough')


# ============================================================================
# ESTIMATES
# ============================================================================

def estimate_population(total_votes: int) -> int:
    """Turnout-adjusted population estimate, rounded half up, at least 1,000."""
    estimate = int(math.floor(total_votes / ESTIMATED_TURNOUT + 0.5))
    return max(estimate, MIN_COUNTY_POPULATION)


def estimate_median_income(state_abbr: str, county_name: str) -> int:
    """State-average income with a bump for large urban counties."""
    base = STATE_INCOME_AVERAGES.get(state_abbr.upper(), DEFAULT_STATE_INCOME)
    lowered = county_name.lower()
    if any(city.lower() in lowered for city in LARGE_URBAN_COUNTIES):
        base += URBAN_INCOME_BONUS
    return base * 1000


def make_county_id(state_abbr: str, county_name: str) -> str:
    """
    Stable county id: state abbreviation plus the compacted name.

    >>> make_county_id('CA', 'Los Angeles County')
    'CA-LosAngeles'
    """
    return f"{state_abbr}-{normalize_county_id_name(county_name)}"


def format_county_name(county_name: str) -> str:
    if any(word in county_name for word in COUNTY_TYPE_WORDS):
        return county_name
    return f"{county_name} County"


def placeholder_demographics() -> Demographics:
    """National-average stand-in used until Census data is joined."""
    return Demographics(
        age=AgeProfile(median=38, distribution={'18-34': 28, '35-54': 28, '55+': 44}),
        race={'White': 75, 'Hispanic': 15, 'Black': 10, 'Asian': 5, 'Other': 5},
        education={'High School': 30, 'Some College': 20, 'Bachelor': 30, 'Graduate': 20},
    )


# ============================================================================
# COUNTIES
# ============================================================================

def county_from_election_data(
    data: CountyElectionData,
    coordinates: Optional[Coordinates] = None,
    recent_years: int = DEFAULT_RECENT_YEARS
) -> County:
    """
    Build a County from one county's election history.

    Args:
        data: Parsed election history
        coordinates: Optional map coordinates
        recent_years: Lean window

    Returns:
        County with placeholder demographics and the FIPS join key

    Raises:
        MissingDataError: If the county has no elections
    """
    most_recent = data.most_recent
    if most_recent is None:
        raise MissingDataError(f"No election data for county {data.county_fips}")

    state_abbr = data.state_abbr

    return County(
        id=make_county_id(state_abbr, data.county_name),
        name=format_county_name(data.county_name),
        state_id=state_abbr,
        state_name=get_state_name(state_abbr),
        population=estimate_population(most_recent.total_votes),
        political_lean=calculate_political_lean(data.elections, recent_years),
        median_income=estimate_median_income(state_abbr, data.county_name),
        demographics=placeholder_demographics(),
        top_issues=[],
        coordinates=coordinates,
        fips=str(data.county_fips).zfill(5),
    )


def build_counties_from_elections(
    election_data: List[CountyElectionData],
    coordinates: Optional[Mapping[str, Coordinates]] = None
) -> List[County]:
    """
    Build one County per election history, skipping unusable ones.

    Args:
        election_data: Parsed histories
        coordinates: Optional FIPS -> Coordinates

    Returns:
        List of counties in input order
    """
    coordinates = coordinates or {}
    counties = []
    for data in election_data:
        try:
            counties.append(county_from_election_data(data, coordinates.get(data.county_fips)))
        except MissingDataError as e:
            logger.warning(f"Skipping county: {e}")

    logger.info(f"Built {len(counties):,} counties from election data")

    return counties


def get_counties_by_state_from_elections(counties: List[County], state_id: str) -> List[County]:
    state_id = state_id.upper()
    return [county for county in counties if county.state_id == state_id]


def find_county_by_fips(counties: List[County], fips: str) -> Optional[County]:
    padded = str(fips).zfill(5)
    for county in counties:
        if county.fips == padded:
            return county
    return None


def attach_coordinates(
    counties: List[County],
    coordinates: Mapping[str, Coordinates]
) -> List[County]:
    """Set coordinates by FIPS on counties that lack them."""
    if not coordinates:
        return list(counties)
    return [
        replace(county, coordinates=coordinates[county.fips])
        if county.coordinates is None and county.fips in coordinates
        else county
        for county in counties
    ]


# ============================================================================
# STATES
# ============================================================================

def calculate_state_lean(
    county_data: List[CountyElectionData],
    recent_year_count: int = DEFAULT_RECENT_YEARS
) -> PoliticalLean:
    """
    Roll a state's counties up into one lean.

    The most recent election years are taken across the whole state, then
    every county's result for those years is pooled; a county missing a
    year simply contributes nothing for it.

    Args:
        county_data: Election histories for one state
        recent_year_count: Number of statewide years to pool

    Returns:
        PoliticalLean
    """
    if not county_data:
        return PoliticalLean.SWING

    years = sorted(
        {election.year for county in county_data for election in county.elections},
        reverse=True
    )
    recent_years = set(years[:recent_year_count])

    pool = [
        election
        for county in county_data
        for election in county.elections
        if election.year in recent_years
    ]

    dem_votes, rep_votes = tally_two_party_votes(pool)
    return classify_vote_shares(dem_votes, rep_votes)


def build_state(state_abbr: str, election_data: List[CountyElectionData]) -> State:
    """Build a State from the reference tables and its counties' elections."""
    state_abbr = state_abbr.upper()
    state_counties = [c for c in election_data if c.state_abbr == state_abbr]

    return State(
        id=state_abbr,
        name=STATE_NAMES.get(state_abbr, state_abbr),
        abbreviation=state_abbr,
        population=STATE_POPULATIONS.get(state_abbr, 0),
        political_lean=calculate_state_lean(state_counties),
        top_issues=[],
        coordinates=STATE_COORDINATES.get(state_abbr, DEFAULT_COORDINATES),
    )


def build_states(election_data: List[CountyElectionData]) -> List[State]:
    """One State per entry of the reference table (50 states plus DC)."""
    states = [build_state(abbr, election_data) for abbr in STATE_NAMES]

    lean_counts: Dict[str, int] = {}
    for state in states:
        lean_counts[state.political_lean.value] = lean_counts.get(state.political_lean.value, 0) + 1
    logger.info(f"Built {len(states)} states: {lean_counts}")

    return states


def get_state_with_elections(
    state_abbr: str,
    election_data: List[CountyElectionData]
) -> Optional[State]:
    if state_abbr.upper() not in STATE_NAMES:
        return None
    return build_state(state_abbr, election_data)
