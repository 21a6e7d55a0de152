"""Shared fixtures: election file text and Census records."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, List, Tuple

import pytest

from county_personas.models import (
    AgeProfile, CensusCountyData, CensusEducation, CensusRace, County,
    Demographics, PoliticalLean
)

HEADER = [
    'year', 'state', 'state_po', 'county_name', 'county_fips', 'office',
    'candidate', 'party', 'candidatevotes', 'totalvotes', 'version', 'mode',
]

# (year, state, state_po, county_name, county_fips, candidate, party, votes, total)
Row = Tuple[int, str, str, str, str, str, str, int, int]


def make_election_text(rows: Iterable[Row], mode: str = 'TOTAL') -> str:
    """Build a tab-separated file in the MIT Election Lab layout."""
    lines = ['\t'.join(HEADER)]
    for year, state, state_po, county, fips, candidate, party, votes, total in rows:
        lines.append('\t'.join([
            str(year), state, state_po, county, fips, 'US PRESIDENT',
            candidate, party, str(votes), str(total), '20220315', mode,
        ]))
    return '\n'.join(lines) + '\n'


def county_rows(
    year: int,
    state: str,
    state_po: str,
    county: str,
    fips: str,
    dem: int,
    rep: int,
    other: int = 0
) -> List[Row]:
    total = dem + rep + other
    rows: List[Row] = [
        (year, state, state_po, county, fips, 'DEM CANDIDATE', 'DEMOCRAT', dem, total),
        (year, state, state_po, county, fips, 'REP CANDIDATE', 'REPUBLICAN', rep, total),
    ]
    if other:
        rows.append((year, state, state_po, county, fips, 'OTHER', 'OTHER', other, total))
    return rows


@pytest.fixture
def sample_election_text() -> str:
    rows: List[Row] = []
    rows += county_rows(2020, 'CALIFORNIA', 'CA', 'LOS ANGELES', '6037', 3000, 1000, 100)
    rows += county_rows(2016, 'CALIFORNIA', 'CA', 'LOS ANGELES', '6037', 2800, 1100)
    rows += county_rows(2020, 'CALIFORNIA', 'CA', 'KERN', '6029', 400, 600)
    rows += county_rows(2020, 'TEXAS', 'TX', 'HARRIS', '48201', 510, 490)
    return make_election_text(rows)


@pytest.fixture
def election_file(tmp_path: Path, sample_election_text: str) -> Path:
    path = tmp_path / "countypres.tab"
    path.write_text(sample_election_text, encoding='utf-8')
    return path


def make_census_record(
    state_fips: str,
    county_fips: str,
    name: str,
    population: float = 1000.0,
    median_age: float = 38.0,
    median_income: float = 65000.0
) -> CensusCountyData:
    return CensusCountyData(
        county_fips=county_fips,
        state_fips=state_fips,
        name=name,
        population=population,
        median_age=median_age,
        race=CensusRace(white=50.0, black=10.0, asian=15.0, hispanic=25.0, other=3.0, two_or_more=2.0),
        education=CensusEducation(
            less_than_high_school=10.0, high_school=25.0, some_college=20.0,
            associates=8.0, bachelors=22.0, graduate=15.0,
        ),
        median_income=median_income,
        mean_income=median_income * 1.3,
    )


@pytest.fixture
def california_census() -> dict:
    records = [
        make_census_record('06', '037', 'Los Angeles County, California', 9936690, 37.2, 83411),
        make_census_record('06', '029', 'Kern County, California', 906883, 32.0, 63883),
    ]
    return {record.full_fips: record for record in records}


@pytest.fixture
def census_dir(tmp_path: Path, california_census: dict) -> Path:
    directory = tmp_path / "census"
    directory.mkdir()
    path = directory / "county-demographics-06.json"
    path.write_text(
        json.dumps([record.to_dict() for record in california_census.values()]),
        encoding='utf-8'
    )
    return directory


def make_county(
    county_id: str,
    name: str,
    state_id: str = 'CA',
    fips: str | None = None,
    lean: PoliticalLean = PoliticalLean.SWING
) -> County:
    return County(
        id=county_id,
        name=name,
        state_id=state_id,
        state_name='California' if state_id == 'CA' else state_id,
        population=1234,
        political_lean=lean,
        median_income=60000,
        demographics=Demographics(
            age=AgeProfile(median=38, distribution={'18-34': 28, '35-54': 28, '55+': 44}),
            race={'White': 75},
            education={'Bachelor': 30},
        ),
        top_issues=['Jobs'],
        fips=fips,
    )
