"""
Census API client.

Fetches county demographics from the ACS 5-year estimates with httpx.
Each state needs four queries (population/age, race, education, income);
they run concurrently and are merged by full FIPS once all have returned.

ACS variables:
- B01003_001E  total population
- B01002_001E  median age
- B02001_001E..008E  race totals (total, white, black, native, asian,
  pacific islander, other, two or more)
- B03002_012E  Hispanic or Latino
- DP02_0059E..0066E  education, population 25+ (profile)
- DP03_0062E / DP03_0063E  median / mean household income (profile)
"""

import asyncio
import logging
import math
from typing import Any, Dict, List, Optional, Sequence

import httpx

from .errors import ExternalServiceError
from .models import CensusCountyData, CensusEducation, CensusRace

logger = logging.getLogger(__name__)

ACS_BASE_URL = "https://api.census.gov/data/2023/acs/acs5"
ACS_PROFILE_URL = "https://api.census.gov/data/2023/acs/acs5/profile"

POPULATION_VARIABLES = ['B01003_001E', 'B01002_001E']
RACE_VARIABLES = [
    'B02001_001E', 'B02001_002E', 'B02001_003E', 'B02001_004E',
    'B02001_005E', 'B02001_006E', 'B02001_007E', 'B02001_008E',
    'B03002_012E',
]
EDUCATION_VARIABLES = [
    'DP02_0059E', 'DP02_0060E', 'DP02_0061E', 'DP02_0062E',
    'DP02_0063E', 'DP02_0064E', 'DP02_0065E', 'DP02_0066E',
]
INCOME_VARIABLES = ['DP03_0062E', 'DP03_0063E']


def parse_value(value: Any) -> float:
    """Census cell to float; null, empty or non-numeric cells become 0."""
    if value is None or value == '' or value == 'null':
        return 0.0
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return 0.0
    return 0.0 if math.isnan(parsed) else parsed


def calculate_percentage(count: float, total: float) -> float:
    """Share of total in percent, rounded half up to one decimal."""
    if total == 0:
        return 0.0
    return math.floor(count / total * 100 * 10 + 0.5) / 10


def _row_fips(row: List[Any]) -> str:
    # Every response row ends with the state and county geography columns
    return f"{row[-2]}{row[-1]}"


class CensusApiClient:
    """
    Async client for the ACS county endpoints.

    Usable as an async context manager; an injected httpx.AsyncClient is
    never closed by this class.
    """

    def __init__(
        self,
        api_key: str,
        client: Optional[httpx.AsyncClient] = None,
        base_url: str = ACS_BASE_URL,
        profile_url: str = ACS_PROFILE_URL
    ) -> None:
        self._api_key = api_key
        self._client = client or httpx.AsyncClient(timeout=30.0)
        self._owns_client = client is None
        self.base_url = base_url
        self.profile_url = profile_url

    async def __aenter__(self) -> 'CensusApiClient':
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # ========================================================================
    # RAW REQUESTS
    # ========================================================================

    async def _fetch(
        self,
        endpoint: str,
        variables: Sequence[str],
        state_fips: str,
        county_fips: Optional[str] = None
    ) -> List[List[Any]]:
        """
        Run one ACS query and return its data rows (header row dropped).

        Raises:
            ExternalServiceError: On transport errors, non-success status,
                an HTML error page or an undecodable body
        """
        params = {
            'get': ','.join(['NAME', *variables]),
            'for': f"county:{county_fips or '*'}",
            'in': f"state:{state_fips}",
            'key': self._api_key,
        }

        try:
            response = await self._client.get(endpoint, params=params)
        except httpx.HTTPError as e:
            raise ExternalServiceError(f"Census API request failed: {e}") from e

        text = response.text
        if response.status_code >= 400 or text.strip().startswith('<'):
            raise ExternalServiceError(
                f"Census API error: {response.status_code} - {text[:200]}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ExternalServiceError(
                f"Census API returned invalid JSON: {e}",
                status_code=response.status_code,
            ) from e

        return data[1:]

    async def fetch_population_and_age(
        self, state_fips: str, county_fips: Optional[str] = None
    ) -> Dict[str, Dict[str, Any]]:
        rows = await self._fetch(self.base_url, POPULATION_VARIABLES, state_fips, county_fips)
        return {
            _row_fips(row): {
                'name': row[0],
                'population': parse_value(row[1]),
                'median_age': parse_value(row[2]),
            }
            for row in rows
        }

    async def fetch_race_data(
        self, state_fips: str, county_fips: Optional[str] = None
    ) -> Dict[str, CensusRace]:
        rows = await self._fetch(self.base_url, RACE_VARIABLES, state_fips, county_fips)
        result = {}
        for row in rows:
            total, white, black, native, asian, pacific, other, two_or_more, hispanic = (
                parse_value(v) for v in row[1:10]
            )
            result[_row_fips(row)] = CensusRace(
                white=calculate_percentage(white, total),
                black=calculate_percentage(black, total),
                asian=calculate_percentage(asian, total),
                native_american=calculate_percentage(native, total),
                pacific_islander=calculate_percentage(pacific, total),
                other=calculate_percentage(other, total),
                two_or_more=calculate_percentage(two_or_more, total),
                hispanic=calculate_percentage(hispanic, total),
            )
        return result

    async def fetch_education_data(
        self, state_fips: str, county_fips: Optional[str] = None
    ) -> Dict[str, CensusEducation]:
        rows = await self._fetch(self.profile_url, EDUCATION_VARIABLES, state_fips, county_fips)
        result = {}
        for row in rows:
            (total, below_ninth, no_diploma, high_school, some_college,
             associates, bachelors, graduate) = (parse_value(v) for v in row[1:9])
            result[_row_fips(row)] = CensusEducation(
                less_than_high_school=calculate_percentage(below_ninth + no_diploma, total),
                high_school=calculate_percentage(high_school, total),
                some_college=calculate_percentage(some_college, total),
                associates=calculate_percentage(associates, total),
                bachelors=calculate_percentage(bachelors, total),
                graduate=calculate_percentage(graduate, total),
            )
        return result

    async def fetch_income_data(
        self, state_fips: str, county_fips: Optional[str] = None
    ) -> Dict[str, Dict[str, float]]:
        rows = await self._fetch(self.profile_url, INCOME_VARIABLES, state_fips, county_fips)
        return {
            _row_fips(row): {
                'median_income': parse_value(row[1]),
                'mean_income': parse_value(row[2]),
            }
            for row in rows
        }

    # ========================================================================
    # COMBINED FETCHES
    # ========================================================================

    async def _fetch_all(
        self, state_fips: str, county_fips: Optional[str] = None
    ) -> Dict[str, CensusCountyData]:
        population, race, education, income = await asyncio.gather(
            self.fetch_population_and_age(state_fips, county_fips),
            self.fetch_race_data(state_fips, county_fips),
            self.fetch_education_data(state_fips, county_fips),
            self.fetch_income_data(state_fips, county_fips),
        )

        all_fips = list(dict.fromkeys([*population, *race, *education, *income]))
        result = {}
        for fips in all_fips:
            pop = population.get(fips)
            if pop is None:
                logger.warning(f"Missing population data for county FIPS: {fips}")
                continue
            money = income.get(fips, {})
            result[fips] = CensusCountyData(
                county_fips=fips[2:],
                state_fips=state_fips,
                name=pop['name'],
                population=pop['population'],
                median_age=pop['median_age'],
                race=race.get(fips, CensusRace()),
                education=education.get(fips, CensusEducation()),
                median_income=money.get('median_income', 0.0),
                mean_income=money.get('mean_income', 0.0),
            )
        return result

    async def fetch_county_demographics(self, state_fips: str) -> Dict[str, CensusCountyData]:
        """
        Fetch demographics for every county in a state.

        Args:
            state_fips: Two-digit state FIPS

        Returns:
            Full FIPS -> CensusCountyData

        Raises:
            ExternalServiceError: If any of the four queries fails
        """
        logger.info(f"Fetching demographics for all counties in state FIPS: {state_fips}")
        result = await self._fetch_all(state_fips)
        logger.info(f"Fetched {len(result)} counties for state {state_fips}")
        return result

    async def fetch_single_county_demographics(
        self, state_fips: str, county_fips: str
    ) -> Optional[CensusCountyData]:
        """Demographics for one county, or None if the API has no population row."""
        result = await self._fetch_all(state_fips, county_fips)
        return result.get(f"{state_fips}{county_fips}")

    async def fetch_states(
        self, state_fips_list: Sequence[str]
    ) -> Dict[str, Dict[str, CensusCountyData]]:
        """
        Fetch several states concurrently.

        A state whose fetch fails contributes an empty map.
        """
        async def fetch_one(state_fips: str) -> Dict[str, CensusCountyData]:
            try:
                return await self.fetch_county_demographics(state_fips)
            except ExternalServiceError as e:
                logger.error(f"Census fetch failed for state {state_fips}: {e}")
                return {}

        results = await asyncio.gather(*(fetch_one(fips) for fips in state_fips_list))
        return dict(zip(state_fips_list, results))
