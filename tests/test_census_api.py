"""Tests for the ACS client, using httpx.MockTransport."""

from __future__ import annotations

import httpx
import pytest

from county_personas.census_api import (
    CensusApiClient,
    calculate_percentage,
    parse_value,
)
from county_personas.errors import ExternalServiceError

POPULATION = [
    ['NAME', 'B01003_001E', 'B01002_001E', 'state', 'county'],
    ['Los Angeles County, California', '9936690', '37.2', '06', '037'],
    ['Kern County, California', '906883', '32.0', '06', '029'],
]
RACE = [
    ['NAME', 'B02001_001E', 'B02001_002E', 'B02001_003E', 'B02001_004E', 'B02001_005E',
     'B02001_006E', 'B02001_007E', 'B02001_008E', 'B03002_012E', 'state', 'county'],
    ['Los Angeles County, California', '1000', '500', '80', '10', '150', '5', '155', '100', '490', '06', '037'],
    ['Kern County, California', '3', '1', '0', '0', '0', '0', '1', '1', '2', '06', '029'],
]
EDUCATION = [
    ['NAME', 'DP02_0059E', 'DP02_0060E', 'DP02_0061E', 'DP02_0062E', 'DP02_0063E',
     'DP02_0064E', 'DP02_0065E', 'DP02_0066E', 'state', 'county'],
    ['Los Angeles County, California', '1000', '100', '80', '200', '180', '70', '230', '140', '06', '037'],
]
INCOME = [
    ['NAME', 'DP03_0062E', 'DP03_0063E', 'state', 'county'],
    ['Los Angeles County, California', '83411', '118000', '06', '037'],
    ['Kern County, California', 'null', '', '06', '029'],
]


def acs_handler(request: httpx.Request) -> httpx.Response:
    variables = request.url.params['get']
    if 'B01003_001E' in variables:
        return httpx.Response(200, json=POPULATION)
    if 'B02001_001E' in variables:
        return httpx.Response(200, json=RACE)
    if 'DP02_0059E' in variables:
        return httpx.Response(200, json=EDUCATION)
    return httpx.Response(200, json=INCOME)


def make_client(handler) -> tuple[CensusApiClient, httpx.AsyncClient]:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return CensusApiClient("test-key", client=http), http


@pytest.mark.parametrize(
    "count, total, expected",
    [(1, 3, 33.3), (2, 3, 66.7), (1, 8, 12.5), (1, 16, 6.3), (5, 0, 0.0), (10, 10, 100.0)],
)
def test_calculate_percentage_rounds_half_up(count: float, total: float, expected: float) -> None:
    assert calculate_percentage(count, total) == pytest.approx(expected)


@pytest.mark.parametrize(
    "value, expected",
    [('12.5', 12.5), (None, 0.0), ('', 0.0), ('null', 0.0), ('abc', 0.0), (7, 7.0)],
)
def test_parse_value(value, expected: float) -> None:
    assert parse_value(value) == expected


@pytest.mark.asyncio
async def test_fetch_county_demographics_merges_queries() -> None:
    client, http = make_client(acs_handler)
    async with http:
        result = await client.fetch_county_demographics('06')

    assert list(result) == ['06037', '06029']
    la = result['06037']
    assert la.name == 'Los Angeles County, California'
    assert la.county_fips == '037'
    assert la.state_fips == '06'
    assert la.population == 9936690
    assert la.median_age == 37.2
    assert la.race.white == 50.0
    assert la.race.hispanic == 49.0
    assert la.education.less_than_high_school == 18.0
    assert la.education.graduate == 14.0
    assert la.median_income == 83411

    kern = result['06029']
    assert kern.race.white == 33.3
    assert kern.race.hispanic == 66.7
    # No education row for Kern
    assert kern.education.bachelors == 0.0
    assert kern.median_income == 0.0


@pytest.mark.asyncio
async def test_request_parameters() -> None:
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return acs_handler(request)

    client, http = make_client(handler)
    async with http:
        await client.fetch_single_county_demographics('06', '037')

    assert len(seen) == 4
    params = seen[0].url.params
    assert params['for'] == 'county:037'
    assert params['in'] == 'state:06'
    assert params['key'] == 'test-key'
    assert params['get'].startswith('NAME,')
    assert sum(1 for r in seen if r.url.path.endswith('/profile')) == 2


@pytest.mark.asyncio
async def test_county_without_population_row_is_skipped() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if 'B01003_001E' in request.url.params['get']:
            return httpx.Response(200, json=POPULATION[:2])
        return acs_handler(request)

    client, http = make_client(handler)
    async with http:
        result = await client.fetch_county_demographics('06')

    assert list(result) == ['06037']


@pytest.mark.asyncio
async def test_html_error_page_raises() -> None:
    client, http = make_client(lambda request: httpx.Response(200, text="<html>Invalid Key</html>"))
    async with http:
        with pytest.raises(ExternalServiceError):
            await client.fetch_population_and_age('06')


@pytest.mark.asyncio
async def test_error_status_raises_with_code() -> None:
    client, http = make_client(lambda request: httpx.Response(503, text="unavailable"))
    async with http:
        with pytest.raises(ExternalServiceError) as excinfo:
            await client.fetch_income_data('06')

    assert excinfo.value.status_code == 503


@pytest.mark.asyncio
async def test_fetch_states_tolerates_failed_state() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.params['in'] == 'state:99':
            return httpx.Response(400, text="error: unknown state")
        return acs_handler(request)

    client, http = make_client(handler)
    async with http:
        result = await client.fetch_states(['06', '99'])

    assert set(result) == {'06', '99'}
    assert len(result['06']) == 2
    assert result['99'] == {}


@pytest.mark.asyncio
async def test_injected_client_is_not_closed() -> None:
    http = httpx.AsyncClient(transport=httpx.MockTransport(acs_handler))
    async with CensusApiClient("test-key", client=http):
        pass

    assert not http.is_closed
    await http.aclose()
