"""
County service: the state -> counties -> enrichment flow the frontend uses.

Counties come from election data when the state has any, otherwise from
the hand-authored samples (with their lean re-derived from election data
where the county can be found). Either way they are then enriched with
the state's Census data.
"""

import asyncio
import logging
from dataclasses import replace
from typing import Dict, List, Mapping, Optional

from . import mock_data
from .aggregator import (
    attach_coordinates, build_states, get_counties_by_state_from_elections,
    get_state_with_elections
)
from .census_enricher import enrich_counties_with_census_data
from .county_matcher import find_county_by_name
from .models import Coordinates, County, CountyElectionData, Persona, State
from .political_lean import calculate_political_lean
from .state_reference import get_state_fips
from .stores import CensusDataStore, ElectionDataStore

logger = logging.getLogger(__name__)


class CountyService:
    """
    Args:
        election_store: Source of election histories
        census_store: Source of per-state Census maps
        coordinates: Optional FIPS -> Coordinates for map placement
    """

    def __init__(
        self,
        election_store: ElectionDataStore,
        census_store: CensusDataStore,
        coordinates: Optional[Mapping[str, Coordinates]] = None
    ) -> None:
        self.election_store = election_store
        self.census_store = census_store
        self.coordinates = dict(coordinates or {})

    # ========================================================================
    # STATES
    # ========================================================================

    async def get_all_states(self) -> List[State]:
        """All states, or the sample states when no election data loaded."""
        data = await self.election_store.load()
        if not data:
            logger.warning("No election data; using sample states")
            return list(mock_data.MOCK_STATES)
        return build_states(data)

    async def get_state(self, state_abbr: str) -> Optional[State]:
        data = await self.election_store.load()
        if not data:
            return mock_data.get_state_by_id(state_abbr.upper())
        return get_state_with_elections(state_abbr, data)

    # ========================================================================
    # COUNTIES
    # ========================================================================

    async def get_counties_by_state(self, state_id: str) -> List[County]:
        """
        Counties for a state, enriched with Census data.

        Args:
            state_id: State abbreviation

        Returns:
            Counties (empty when neither election nor sample data exists)
        """
        state_id = state_id.upper()
        counties = get_counties_by_state_from_elections(
            await self.election_store.get_counties(), state_id
        )

        if not counties:
            logger.info(f"No election counties for {state_id}; using sample counties")
            state_data = await self.election_store.get_state(state_id)
            counties = [
                self._with_election_lean(county, state_data)
                for county in mock_data.get_counties_by_state(state_id)
            ]

        counties = attach_coordinates(counties, self.coordinates)
        return await self.enrich_counties(counties)

    async def get_county_by_id(self, county_id: str) -> Optional[County]:
        """Single county by id, election data first, then sample data."""
        county = next(
            (c for c in await self.election_store.get_counties() if c.id == county_id),
            None
        )

        if county is None:
            county = mock_data.get_county_by_id(county_id)
            if county is None:
                return None
            state_data = await self.election_store.get_state(county.state_id)
            county = self._with_election_lean(county, state_data)

        enriched = await self.enrich_counties(attach_coordinates([county], self.coordinates))
        return enriched[0]

    async def get_persona_for_county(self, county_id: str) -> Optional[Persona]:
        return mock_data.get_persona_by_county(county_id)

    async def get_persona(self, persona_id: str) -> Optional[Persona]:
        return mock_data.get_persona_by_id(persona_id)

    # ========================================================================
    # ENRICHMENT
    # ========================================================================

    async def enrich_counties(self, counties: List[County]) -> List[County]:
        """
        Enrich counties with their states' Census data, keeping input order.

        States without Census data pass through unchanged.
        """
        positions: Dict[str, List[int]] = {}
        for index, county in enumerate(counties):
            state_fips = get_state_fips(county.state_id)
            if state_fips is not None:
                positions.setdefault(state_fips, []).append(index)

        state_keys = list(positions)
        census_maps = await asyncio.gather(
            *(self.census_store.get_state(state_fips) for state_fips in state_keys)
        )

        result = list(counties)
        for state_fips, census_map in zip(state_keys, census_maps):
            indexes = positions[state_fips]
            if not census_map:
                logger.debug(f"No Census data for state {state_fips}")
                continue
            enriched = enrich_counties_with_census_data([counties[i] for i in indexes], census_map)
            for index, county in zip(indexes, enriched):
                result[index] = county

        return result

    def _with_election_lean(
        self,
        county: County,
        state_data: List[CountyElectionData]
    ) -> County:
        """Re-derive a sample county's lean (and FIPS) from election data when found."""
        match = None
        if county.fips:
            match = next((c for c in state_data if c.county_fips == county.fips), None)
        if match is None:
            match = find_county_by_name(county.name, state_data)
        if match is None or not match.elections:
            return county

        return replace(
            county,
            political_lean=calculate_political_lean(match.elections),
            fips=county.fips or match.county_fips,
        )
