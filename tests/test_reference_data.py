"""Tests for state reference tables, sample data and record serialization."""

from __future__ import annotations

import logging

from county_personas import mock_data
from county_personas.models import CensusCountyData, CensusRace, PoliticalLean
from county_personas.state_reference import (
    STATE_COORDINATES,
    STATE_FIPS,
    STATE_NAMES,
    STATE_POPULATIONS,
    full_fips,
    get_state_abbr,
    get_state_fips,
    get_state_name,
)


def test_reference_tables_cover_the_same_states() -> None:
    assert len(STATE_FIPS) == 51
    assert set(STATE_NAMES) == set(STATE_FIPS)
    assert set(STATE_POPULATIONS) == set(STATE_FIPS)
    assert set(STATE_COORDINATES) == set(STATE_FIPS)


def test_state_lookups() -> None:
    assert get_state_fips('ca') == '06'
    assert get_state_fips('ZZ') is None
    assert get_state_abbr('6') == 'CA'
    assert get_state_abbr('48') == 'TX'
    assert get_state_abbr('99') is None
    assert get_state_name('dc') == 'District of Columbia'
    assert get_state_name('ZZ') == 'ZZ'
    assert full_fips('6', '37') == '06037'
    assert full_fips('48', '201') == '48201'


def test_sample_data_lookups() -> None:
    assert mock_data.get_state_by_id('CA').name == 'California'
    assert mock_data.get_state_by_id('ZZ') is None
    assert [c.id for c in mock_data.get_counties_by_state('TX')] == ['TX-Harris', 'TX-Montgomery']
    assert mock_data.get_persona_by_id('persona-2').county_id == 'TX-Harris'
    assert mock_data.get_persona_by_id('persona-99') is None


def test_sample_personas_point_at_sample_counties() -> None:
    county_ids = {county.id for county in mock_data.MOCK_COUNTIES}

    for persona in mock_data.MOCK_PERSONAS:
        assert persona.county_id in county_ids


def test_persona_serializes_household_and_priorities() -> None:
    data = mock_data.get_persona_by_county('CA-LA').to_dict()

    assert data['countyId'] == 'CA-LA'
    assert set(data['householdInfo']) == {'size', 'income', 'type'}
    assert all(set(p) == {'issue', 'importance', 'description'} for p in data['topPriorities'])
    assert data['politicalAlignment'] in {lean.value for lean in PoliticalLean}


def test_census_record_from_camel_case_json(caplog) -> None:
    with caplog.at_level(logging.WARNING):
        record = CensusCountyData.from_dict({
            'countyFips': '37',
            'stateFips': '6',
            'name': 'Los Angeles County, California',
            'population': 9936690,
            'medianAge': 37.2,
            'race': {'white': 48.2, 'nativeAmerican': 1.1, 'martian': 3},
            'education': {'bachelors': 22.0, 'graduate': None},
            'medianIncome': 83411,
        })

    assert record.full_fips == '06037'
    assert record.race == CensusRace(white=48.2, native_american=1.1)
    assert record.education.bachelors == 22.0
    assert record.education.graduate == 0.0
    assert record.mean_income == 0.0
    assert 'martian' in caplog.text
    assert CensusCountyData.from_dict(record.to_dict()) == record
