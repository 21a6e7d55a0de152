"""Tests for the election and Census data stores."""

from __future__ import annotations

import json
from pathlib import Path

import httpx
import pytest

from county_personas.models import PoliticalLean
from county_personas.stores import CensusDataStore, ElectionDataStore, is_url


def test_is_url() -> None:
    assert is_url('https://example.org/data.tab')
    assert is_url('http://localhost:5000/api/census')
    assert not is_url('data/raw/countypres.tab')
    assert not is_url(Path('/tmp/file'))


@pytest.mark.asyncio
async def test_election_store_loads_file_once(election_file: Path) -> None:
    store = ElectionDataStore(election_file)

    first = await store.load()
    second = await store.load()

    assert first is second
    assert len(first) == 3
    assert (await store.get_county('6037')).county_name == 'LOS ANGELES'
    assert (await store.get_county_year('06037', 2016)).total_votes == 3900
    assert await store.get_county_year('06037', 1996) is None
    assert [c.county_fips for c in await store.get_state('TX')] == ['48201']
    assert await store.get_county_lean('06029') == PoliticalLean.REPUBLICAN
    assert await store.get_county_lean('99999') is None
    assert await store.get_most_recent_year() == 2020


@pytest.mark.asyncio
async def test_election_store_missing_file_is_empty_and_retried(tmp_path: Path, sample_election_text: str) -> None:
    path = tmp_path / "late.tab"
    store = ElectionDataStore(path)

    assert await store.load() == []
    assert await store.get_counties() == []

    path.write_text(sample_election_text, encoding='utf-8')

    assert len(await store.get_counties()) == 3


@pytest.mark.asyncio
async def test_election_store_from_url(sample_election_text: str) -> None:
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, text=sample_election_text)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        store = ElectionDataStore('https://data.example.org/countypres.tab', client=client)
        counties = await store.get_counties()
        await store.load()

    assert len(counties) == 3
    assert len(requests) == 1


@pytest.mark.asyncio
async def test_census_store_reads_files(census_dir: Path, tmp_path: Path) -> None:
    empty_dir = tmp_path / "public"
    empty_dir.mkdir()
    store = CensusDataStore([empty_dir, census_dir], ['6', '48'])

    loaded = await store.load_all()

    assert set(loaded) == {'06', '48'}
    assert set(loaded['06']) == {'06037', '06029'}
    assert loaded['48'] == {}
    assert store.get_states_with_data() == ['06']
    assert store.get_cached('06')['06037'].name == 'Los Angeles County, California'
    assert store.get_cached('36') == {}
    assert await store.has_state('CA')
    assert not await store.has_state('TX')
    assert not await store.has_state('ZZ')


@pytest.mark.asyncio
async def test_census_store_first_directory_wins(census_dir: Path, tmp_path: Path) -> None:
    public = tmp_path / "public"
    public.mkdir()
    (public / "county-demographics-06.json").write_text(json.dumps([
        {'countyFips': '1', 'stateFips': '6', 'name': 'Alameda County, California', 'population': 1600000},
    ]), encoding='utf-8')

    store = CensusDataStore([public, census_dir])

    assert list(await store.get_state('06')) == ['06001']


@pytest.mark.asyncio
async def test_census_store_malformed_file_is_empty(tmp_path: Path) -> None:
    (tmp_path / "county-demographics-06.json").write_text('{"not": "a list"}', encoding='utf-8')

    store = CensusDataStore(tmp_path)

    assert await store.get_state('06') == {}


@pytest.mark.asyncio
async def test_census_store_from_url(california_census: dict) -> None:
    payload = [record.to_dict() for record in california_census.values()]
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        state = request.url.params['stateFips']
        if state == '06':
            return httpx.Response(200, json=payload)
        if state == '12':
            return httpx.Response(200, text="<!DOCTYPE html><html>error</html>")
        return httpx.Response(404, json={'error': 'not found'})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        store = CensusDataStore('http://localhost:5000/api/census', ['06', '12', '36'], client=client)
        loaded = await store.load_all()
        await store.get_state('06')

    assert set(loaded['06']) == {'06037', '06029'}
    assert loaded['12'] == {}
    assert loaded['36'] == {}
    # Only the successful state is cached
    assert [r.url.params['stateFips'] for r in requests].count('06') == 1
    assert store.get_states_with_data() == ['06']
