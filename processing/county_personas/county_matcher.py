"""
County Matcher Utility
Handles matching counties across the election and Census datasets.

Strategy:
1. Try FIPS code match first (fastest, works for nearly every county)
2. Fall back to normalized county name within the state's records
3. Last resort: a FIPS code embedded in the county id (logged for review)
"""

import logging
import re
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from .models import CensusCountyData, County, CountyElectionData
from .state_reference import full_fips, get_state_fips

logger = logging.getLogger(__name__)

MATCH_FIPS = 'fips'
MATCH_NAME = 'name'
MATCH_ID = 'id'

COUNTY_SUFFIX_PATTERN = re.compile(r'\s(county|parish|borough|census area)$', re.IGNORECASE)


# ============================================================================
# NAME NORMALIZATION
# ============================================================================

def strip_county_suffix(name: str) -> str:
    """Remove one trailing County/Parish/Borough/Census Area word."""
    return COUNTY_SUFFIX_PATTERN.sub('', str(name).strip())


def normalize_county_name(name: Optional[str]) -> str:
    """
    Normalize county name for matching.

    "Los Angeles County, California" and "LOS ANGELES" both become
    "losangeles".

    Args:
        name: County name

    Returns:
        Normalized name
    """
    if not name:
        return ""

    # Census names carry ", State"
    name = str(name).split(',')[0].strip().lower()
    name = strip_county_suffix(name)
    name = re.sub(r'\s+', '', name)
    return re.sub(r'[^a-z0-9]', '', name)


def normalize_county_id_name(name: str) -> str:
    """Case-preserving variant used to build county ids ("Los Angeles" -> "LosAngeles")."""
    name = strip_county_suffix(name)
    name = re.sub(r'\s+', '', name)
    return re.sub(r'[^a-zA-Z0-9]', '', name)


# ============================================================================
# FIPS FROM ID
# ============================================================================

def extract_county_fips_from_id(county_id: str) -> Optional[str]:
    """
    Pull a county FIPS code out of a county id.

    Handles full FIPS ("06037" -> "037"), "ST-<digits>" ("CA-37" -> "37") and
    a bare 3-digit code. Name-based ids ("CA-LosAngeles") yield None.
    """
    county_id = str(county_id)

    if re.fullmatch(r'\d{5}', county_id):
        return county_id[2:]

    if '-' in county_id:
        last_part = county_id.split('-')[-1]
        if re.fullmatch(r'\d+', last_part):
            return last_part

    if re.fullmatch(r'\d{3}', county_id):
        return county_id

    return None


def fips_from_county_id(county: County) -> Optional[str]:
    """Full 5-digit FIPS implied by a county's id and state, or None."""
    county_fips = extract_county_fips_from_id(county.id)
    state_fips = get_state_fips(county.state_id)
    if county_fips is None or state_fips is None:
        return None
    return full_fips(state_fips, county_fips)


# ============================================================================
# MATCHING FUNCTIONS
# ============================================================================

def build_name_index(census_map: Mapping[str, CensusCountyData]) -> Dict[str, CensusCountyData]:
    """
    Index Census records by normalized county name.

    When two records normalize to the same name the later one wins and the
    collision is logged as ambiguous.

    Args:
        census_map: Full FIPS -> CensusCountyData

    Returns:
        Normalized name -> CensusCountyData
    """
    index: Dict[str, CensusCountyData] = {}
    for fips, record in census_map.items():
        key = normalize_county_name(record.name)
        if not key:
            continue
        previous = index.get(key)
        if previous is not None and previous.full_fips != record.full_fips:
            logger.warning(
                f"Ambiguous county name '{key}': {previous.full_fips} ({previous.name}) "
                f"and {fips} ({record.name}); using {fips}"
            )
        index[key] = record
    return index


def match_county(
    county: County,
    census_map: Mapping[str, CensusCountyData],
    name_index: Mapping[str, CensusCountyData]
) -> Tuple[Optional[CensusCountyData], Optional[str]]:
    """
    Find the Census record for a county.

    Args:
        county: County to match
        census_map: Full FIPS -> CensusCountyData
        name_index: Output of build_name_index(census_map)

    Returns:
        (record, strategy) where strategy is 'fips', 'name', 'id' or None
    """
    if county.fips:
        record = census_map.get(county.fips)
        if record is not None:
            return record, MATCH_FIPS

    record = name_index.get(normalize_county_name(county.name))
    if record is not None:
        return record, MATCH_NAME

    implied_fips = fips_from_county_id(county)
    if implied_fips is not None:
        record = census_map.get(implied_fips)
        if record is not None:
            logger.warning(
                f"Matched {county.name} ({county.id}) to Census FIPS {implied_fips} "
                f"using the county id; review this record"
            )
            return record, MATCH_ID

    return None, None


def find_county_by_name(
    name: str,
    county_data: Iterable[CountyElectionData]
) -> Optional[CountyElectionData]:
    """First election county whose normalized name equals name's."""
    key = normalize_county_name(name)
    if not key:
        return None
    for county in county_data:
        if normalize_county_name(county.county_name) == key:
            return county
    return None


def get_match_statistics(strategies: List[Optional[str]]) -> Dict:
    """
    Get detailed matching statistics.

    Args:
        strategies: Strategy used for each county (None when unmatched)

    Returns:
        Dictionary with statistics
    """
    total = len(strategies)
    matched = sum(1 for s in strategies if s is not None)
    stats = {
        'total': total,
        'matched': matched,
        'unmatched': total - matched,
        'match_rate': matched / total * 100 if total > 0 else 0,
        'by_fips': strategies.count(MATCH_FIPS),
        'by_name': strategies.count(MATCH_NAME),
        'by_id': strategies.count(MATCH_ID),
    }

    return stats
