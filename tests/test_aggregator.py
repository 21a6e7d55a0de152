"""Tests for building County and State entities from election histories."""

from __future__ import annotations

import pytest

from county_personas.aggregator import (
    attach_coordinates,
    build_counties_from_elections,
    build_states,
    calculate_state_lean,
    county_from_election_data,
    estimate_median_income,
    estimate_population,
    find_county_by_fips,
    format_county_name,
    get_counties_by_state_from_elections,
    get_state_with_elections,
    make_county_id,
)
from county_personas.election_parser import parse_election_data
from county_personas.errors import MissingDataError
from county_personas.models import CountyElectionData, Coordinates, PoliticalLean

from conftest import county_rows, make_election_text


@pytest.mark.parametrize(
    "total_votes, expected",
    [(0, 1000), (600, 1000), (601, 1002), (6000, 10000), (3, 1000)],
)
def test_estimate_population(total_votes: int, expected: int) -> None:
    assert estimate_population(total_votes) == expected


def test_estimate_median_income() -> None:
    assert estimate_median_income('CA', 'LOS ANGELES') == 90000
    assert estimate_median_income('tx', 'Harris') == 75000
    assert estimate_median_income('WY', 'Laramie') == 60000


def test_county_id_and_display_name() -> None:
    assert make_county_id('CA', 'Los Angeles County') == 'CA-LosAngeles'
    assert make_county_id('LA', "St. John the Baptist Parish") == 'LA-StJohntheBaptist'
    assert format_county_name('Harris') == 'Harris County'
    assert format_county_name('Orleans Parish') == 'Orleans Parish'


def test_county_from_election_data(sample_election_text: str) -> None:
    la = parse_election_data(sample_election_text)[0]

    county = county_from_election_data(la, Coordinates(34.05, -118.24))

    assert county.id == 'CA-LOSANGELES'
    assert county.name == 'LOS ANGELES County'
    assert county.state_id == 'CA'
    assert county.state_name == 'California'
    assert county.fips == '06037'
    assert county.population == estimate_population(4100)
    assert county.political_lean == PoliticalLean.STRONGLY_DEMOCRATIC
    assert county.coordinates == Coordinates(34.05, -118.24)


def test_county_without_elections_raises() -> None:
    empty = CountyElectionData('06037', 'LOS ANGELES', 'CA', 'CALIFORNIA', [])
    with pytest.raises(MissingDataError):
        county_from_election_data(empty)


def test_build_counties_skips_unusable_histories(sample_election_text: str) -> None:
    data = parse_election_data(sample_election_text)
    data.append(CountyElectionData('06999', 'NOWHERE', 'CA', 'CALIFORNIA', []))

    counties = build_counties_from_elections(data, {'06029': Coordinates(35.3, -118.7)})

    assert [c.fips for c in counties] == ['06037', '06029', '48201']
    assert counties[1].coordinates == Coordinates(35.3, -118.7)
    assert counties[0].coordinates is None
    assert [c.fips for c in get_counties_by_state_from_elections(counties, 'tx')] == ['48201']
    assert find_county_by_fips(counties, '6029').name == 'KERN County'


def test_attach_coordinates_keeps_existing_points(sample_election_text: str) -> None:
    counties = build_counties_from_elections(
        parse_election_data(sample_election_text), {'06037': Coordinates(1.0, 2.0)}
    )

    updated = attach_coordinates(counties, {'06037': Coordinates(9.0, 9.0), '48201': Coordinates(29.8, -95.4)})

    assert updated[0].coordinates == Coordinates(1.0, 2.0)
    assert updated[1].coordinates is None
    assert updated[2].coordinates == Coordinates(29.8, -95.4)


def test_state_lean_pools_recent_statewide_years() -> None:
    rows = []
    rows += county_rows(2020, 'OHIO', 'OH', 'A', '39001', 450, 550)
    rows += county_rows(2016, 'OHIO', 'OH', 'A', '39001', 450, 550)
    rows += county_rows(2020, 'OHIO', 'OH', 'B', '39003', 600, 400)
    # B has no 2016 result; only A contributes that year
    rows += county_rows(2000, 'OHIO', 'OH', 'B', '39003', 0, 100000)
    data = parse_election_data(make_election_text(rows))

    # 2020, 2016 and 2000 are the three statewide years: 1500 D vs 101500 R
    assert calculate_state_lean(data) == PoliticalLean.STRONGLY_REPUBLICAN
    # Two years: 1500 D vs 1500 R
    assert calculate_state_lean(data, recent_year_count=2) == PoliticalLean.SWING


def test_state_lean_without_counties_is_swing() -> None:
    assert calculate_state_lean([]) == PoliticalLean.SWING


def test_build_states_covers_reference_table(sample_election_text: str) -> None:
    states = build_states(parse_election_data(sample_election_text))
    by_id = {state.id: state for state in states}

    assert len(states) == 51
    assert by_id['CA'].political_lean == PoliticalLean.STRONGLY_DEMOCRATIC
    assert by_id['TX'].political_lean == PoliticalLean.SWING
    assert by_id['WY'].political_lean == PoliticalLean.SWING
    assert by_id['CA'].name == 'California'


def test_get_state_with_elections_unknown_state() -> None:
    assert get_state_with_elections('ZZ', []) is None
    assert get_state_with_elections('ca', []).id == 'CA'
