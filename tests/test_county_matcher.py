"""Tests for matching counties to Census records."""

from __future__ import annotations

import logging

import pytest

from county_personas.county_matcher import (
    build_name_index,
    extract_county_fips_from_id,
    find_county_by_name,
    fips_from_county_id,
    get_match_statistics,
    match_county,
    normalize_county_name,
)
from county_personas.election_parser import parse_election_data

from conftest import make_census_record, make_county


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Los Angeles County, California", "losangeles"),
        ("LOS ANGELES", "losangeles"),
        ("St. Mary's Parish", "stmarys"),
        ("Anchorage Borough", "anchorage"),
        ("Bethel Census Area, Alaska", "bethel"),
        ("", ""),
        (None, ""),
    ],
)
def test_normalize_county_name(raw, expected: str) -> None:
    assert normalize_county_name(raw) == expected


@pytest.mark.parametrize(
    "county_id, expected",
    [("06037", "037"), ("CA-37", "37"), ("037", "037"), ("CA-LosAngeles", None)],
)
def test_extract_county_fips_from_id(county_id: str, expected) -> None:
    assert extract_county_fips_from_id(county_id) == expected


def test_fips_from_county_id_pads_short_codes() -> None:
    assert fips_from_county_id(make_county('CA-37', 'Somewhere')) == '06037'
    assert fips_from_county_id(make_county('CA-LosAngeles', 'Los Angeles')) is None


def test_match_prefers_fips(california_census: dict) -> None:
    index = build_name_index(california_census)
    county = make_county('CA-Kern', 'Los Angeles County', fips='06029')

    record, strategy = match_county(county, california_census, index)

    assert strategy == 'fips'
    assert record.full_fips == '06029'


def test_match_falls_back_to_name(california_census: dict) -> None:
    index = build_name_index(california_census)
    county = make_county('CA-LA', 'LOS ANGELES COUNTY')

    record, strategy = match_county(county, california_census, index)

    assert strategy == 'name'
    assert record.full_fips == '06037'


def test_match_by_id_is_last_resort(california_census: dict, caplog) -> None:
    index = build_name_index(california_census)
    county = make_county('CA-37', 'Unknown Name')

    with caplog.at_level(logging.WARNING):
        record, strategy = match_county(county, california_census, index)

    assert strategy == 'id'
    assert record.full_fips == '06037'
    assert 'county id' in caplog.text


def test_unmatched_county(california_census: dict) -> None:
    index = build_name_index(california_census)

    assert match_county(make_county('CA-X', 'Nowhere'), california_census, index) == (None, None)


def test_name_collision_keeps_later_record(caplog) -> None:
    census = {
        '29510': make_census_record('29', '510', 'St. Louis city, Missouri'),
        '29189': make_census_record('29', '189', 'St. Louis County, Missouri'),
    }

    with caplog.at_level(logging.WARNING):
        index = build_name_index({
            '29189': make_census_record('29', '189', 'St. Louis County, Missouri'),
            '29999': make_census_record('29', '999', 'St Louis, Missouri'),
        })

    assert index['stlouis'].full_fips == '29999'
    assert 'Ambiguous' in caplog.text
    # "city" is not a stripped suffix, so these two stay apart
    assert set(build_name_index(census)) == {'stlouiscity', 'stlouis'}


def test_find_county_by_name(sample_election_text: str) -> None:
    data = parse_election_data(sample_election_text)

    assert find_county_by_name('Kern County', data).county_fips == '06029'
    assert find_county_by_name('Nowhere', data) is None


def test_match_statistics() -> None:
    stats = get_match_statistics(['fips', 'fips', 'name', None])

    assert stats['total'] == 4
    assert stats['matched'] == 3
    assert stats['by_fips'] == 2
    assert stats['by_name'] == 1
    assert stats['match_rate'] == pytest.approx(75.0)
    assert get_match_statistics([])['match_rate'] == 0
