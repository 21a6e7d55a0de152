"""
Process-wide data stores for election histories and per-state Census data.

Both stores load lazily through a SingleFlightCache and accept either a
local path or an http(s) URL as their source.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

import httpx

from .aggregator import build_counties_from_elections
from .cache import SingleFlightCache
from .data_loader import census_records_from_json, find_census_file, load_census_records, load_election_text
from .election_parser import (
    get_election_data_for_county, get_election_data_for_state,
    get_most_recent_election_year, parse_election_data
)
from .errors import ExternalServiceError, MissingDataError
from .models import CensusCountyData, County, CountyElectionData, ElectionResult, PoliticalLean
from .political_lean import calculate_political_lean
from .state_reference import get_state_fips

logger = logging.getLogger(__name__)

Source = Union[str, Path]


def is_url(source: Source) -> bool:
    return str(source).startswith(('http://', 'https://'))


async def fetch_text(client: httpx.AsyncClient, url: str, params: Optional[dict] = None) -> str:
    """
    GET a URL and return its body.

    Raises:
        MissingDataError: On HTTP 404
        ExternalServiceError: On other failures
    """
    try:
        response = await client.get(url, params=params)
    except httpx.HTTPError as e:
        raise ExternalServiceError(f"Request to {url} failed: {e}") from e

    if response.status_code == 404:
        raise MissingDataError(f"Not found: {response.url}")
    if response.status_code >= 400:
        raise ExternalServiceError(
            f"Request to {response.url} failed with {response.status_code}",
            status_code=response.status_code,
        )
    return response.text


# ============================================================================
# ELECTION DATA
# ============================================================================

class ElectionDataStore:
    """
    Parsed election histories, loaded once per process.

    Args:
        source: Path to the .tab file or URL serving it
        client: Optional httpx client for URL sources
    """

    _KEY = 'elections'

    def __init__(self, source: Source, client: Optional[httpx.AsyncClient] = None) -> None:
        self.source = source
        self._client = client
        self._cache: SingleFlightCache[str, List[CountyElectionData]] = SingleFlightCache(
            self._load, list, name="elections"
        )
        self._counties: Optional[List[County]] = None

    async def _load(self, _key: str) -> List[CountyElectionData]:
        if is_url(self.source):
            if self._client is not None:
                text = await fetch_text(self._client, str(self.source))
            else:
                async with httpx.AsyncClient(timeout=30.0) as client:
                    text = await fetch_text(client, str(self.source))
        else:
            text = load_election_text(Path(self.source))

        data = parse_election_data(text)
        logger.info(f"Loaded election data for {len(data):,} counties")
        return data

    async def load(self) -> List[CountyElectionData]:
        return await self._cache.get(self._KEY)

    async def get_county(self, fips: str) -> Optional[CountyElectionData]:
        return get_election_data_for_county(fips, await self.load())

    async def get_county_year(self, fips: str, year: int) -> Optional[ElectionResult]:
        county = await self.get_county(fips)
        if county is None:
            return None
        return next((e for e in county.elections if e.year == year), None)

    async def get_state(self, state_abbr: str) -> List[CountyElectionData]:
        return get_election_data_for_state(state_abbr, await self.load())

    async def get_county_lean(self, fips: str) -> Optional[PoliticalLean]:
        county = await self.get_county(fips)
        if county is None or not county.elections:
            return None
        return calculate_political_lean(county.elections)

    async def get_counties(self) -> List[County]:
        """All election-derived counties (built once)."""
        if self._counties is None:
            data = await self.load()
            counties = build_counties_from_elections(data)
            # A failed load returns an empty list; only cache real results
            if not data:
                return counties
            self._counties = counties
        return self._counties

    async def get_most_recent_year(self) -> int:
        return get_most_recent_election_year(await self.load())


# ============================================================================
# CENSUS DATA
# ============================================================================

class CensusDataStore:
    """
    Per-state Census maps (full FIPS -> CensusCountyData).

    Args:
        source: A directory (or list of directories, searched in order)
            holding county-demographics-XX.json files, or the base URL of
            the Census query endpoint
        state_fips_list: States loaded by load_all()
        client: Optional httpx client for URL sources
    """

    def __init__(
        self,
        source: Union[Source, Sequence[Source]],
        state_fips_list: Sequence[str] = (),
        client: Optional[httpx.AsyncClient] = None
    ) -> None:
        if isinstance(source, (str, Path)):
            self.sources = [source]
        else:
            self.sources = list(source)
        self.state_fips_list = [str(s).zfill(2) for s in state_fips_list]
        self._client = client
        self._cache: SingleFlightCache[str, Dict[str, CensusCountyData]] = SingleFlightCache(
            self._load_state, dict, name="census"
        )

    async def _load_state(self, state_fips: str) -> Dict[str, CensusCountyData]:
        url_sources = [s for s in self.sources if is_url(s)]
        if url_sources:
            return await self._load_state_from_url(str(url_sources[0]), state_fips)

        path = find_census_file(state_fips, [Path(s) for s in self.sources])
        if path is None:
            raise MissingDataError(f"No Census file for state {state_fips}")
        records = load_census_records(path)
        logger.info(f"Loaded Census data for state {state_fips}: {len(records)} counties")
        return records

    async def _load_state_from_url(self, url: str, state_fips: str) -> Dict[str, CensusCountyData]:
        params = {'stateFips': state_fips}
        if self._client is not None:
            text = await fetch_text(self._client, url, params)
        else:
            async with httpx.AsyncClient(timeout=30.0) as client:
                text = await fetch_text(client, url, params)

        # An HTML body means the endpoint answered with an error page
        if text.strip().startswith('<'):
            raise ExternalServiceError(f"Census endpoint returned HTML for state {state_fips}")

        try:
            data = json.loads(text)
        except ValueError as e:
            raise ExternalServiceError(f"Census endpoint returned invalid JSON: {e}") from e

        records = census_records_from_json(data, source=f"stateFips={state_fips}")
        logger.info(f"Loaded Census data for state {state_fips}: {len(records)} counties")
        return records

    async def get_state(self, state_fips: str) -> Dict[str, CensusCountyData]:
        """Census map for one state; empty when the state has no data."""
        return await self._cache.get(str(state_fips).zfill(2))

    async def load_all(self) -> Dict[str, Dict[str, CensusCountyData]]:
        """Load every configured state concurrently."""
        maps = await asyncio.gather(*(self.get_state(fips) for fips in self.state_fips_list))
        loaded = dict(zip(self.state_fips_list, maps))
        total = sum(len(m) for m in maps)
        logger.info(f"Census data ready: {total} counties across {len(loaded)} states")
        return loaded

    def get_cached(self, state_fips: str) -> Dict[str, CensusCountyData]:
        """Already-loaded map for a state, without loading."""
        return self._cache.peek(str(state_fips).zfill(2), {})

    async def has_state(self, state_abbr: str) -> bool:
        state_fips = get_state_fips(state_abbr)
        if state_fips is None:
            return False
        return bool(await self.get_state(state_fips))

    def get_states_with_data(self) -> List[str]:
        """State FIPS codes whose maps are loaded and non-empty."""
        return sorted(k for k in self._cache.keys() if self._cache.peek(k))
