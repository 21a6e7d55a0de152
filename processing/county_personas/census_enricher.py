"""
Census enrichment: replace a county's placeholder population, income and
demographics with ACS values.
"""

import logging
from dataclasses import replace
from typing import Dict, List, Mapping

from .county_matcher import build_name_index, get_match_statistics, match_county
from .models import AgeProfile, CensusCountyData, CensusEducation, CensusRace, County, Demographics

logger = logging.getLogger(__name__)


def convert_race_data(race: CensusRace) -> Dict[str, float]:
    return {
        'White': race.white,
        'Black or African American': race.black,
        'Asian': race.asian,
        'American Indian and Alaska Native': race.native_american,
        'Native Hawaiian and Other Pacific Islander': race.pacific_islander,
        'Hispanic or Latino': race.hispanic,
        'Other': race.other + race.two_or_more,
    }


def convert_education_data(education: CensusEducation) -> Dict[str, float]:
    return {
        'Less than High School': education.less_than_high_school,
        'High School': education.high_school,
        'Some College': education.some_college,
        "Associate's Degree": education.associates,
        "Bachelor's Degree": education.bachelors,
        'Graduate Degree': education.graduate,
    }


def create_age_distribution(median_age: float) -> Dict[str, float]:
    """Coarse adult age buckets implied by the median age."""
    if median_age < 35:
        return {'18-34': 35, '35-54': 30, '55+': 35}
    if median_age < 45:
        return {'18-34': 25, '35-54': 35, '55+': 40}
    return {'18-34': 20, '35-54': 30, '55+': 50}


def enrich_county_with_census_data(county: County, census: CensusCountyData) -> County:
    """
    Merge one Census record into a county.

    Population, median income and the whole demographics block are replaced;
    every other field (id, name, lean, fips, coordinates) is kept.
    """
    return replace(
        county,
        population=int(census.population),
        median_income=census.median_income,
        demographics=Demographics(
            age=AgeProfile(
                median=census.median_age,
                distribution=create_age_distribution(census.median_age),
            ),
            race=convert_race_data(census.race),
            education=convert_education_data(census.education),
        ),
    )


def enrich_counties_with_census_data(
    counties: List[County],
    census_map: Mapping[str, CensusCountyData]
) -> List[County]:
    """
    Enrich counties with Census data, matching by FIPS, then name, then id.

    Unmatched counties are returned unchanged; the output has the same
    length and order as the input.

    Args:
        counties: Counties to enrich
        census_map: Full 5-digit FIPS -> CensusCountyData

    Returns:
        Enriched counties
    """
    if not census_map:
        return list(counties)

    name_index = build_name_index(census_map)

    enriched = []
    strategies = []
    for county in counties:
        record, strategy = match_county(county, census_map, name_index)
        strategies.append(strategy)
        if record is None:
            logger.debug(f"No Census data for {county.name} ({county.fips or 'no FIPS'})")
            enriched.append(county)
            continue
        enriched.append(enrich_county_with_census_data(county, record))

    stats = get_match_statistics(strategies)
    logger.info(
        f"Census enrichment: {stats['matched']}/{stats['total']} matched "
        f"(fips={stats['by_fips']}, name={stats['by_name']}, id={stats['by_id']})"
    )

    return enriched
