"""
03_fetch_census.py
Fetch ACS county demographics from the Census Bureau API.

This script:
1. Resolves the requested states (all states when none are given)
2. Fetches population, age, race, education and income per county
3. Saves county-demographics-{stateFips}.json to data/census and public/data/census
4. Prints a per-state summary

Requires CENSUS_API_KEY in the environment.

Usage:
    python processing/03_fetch_census.py [STATE ...] [--delay SECONDS]
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List

# Add parent directory to path
sys.path.append(str(Path(__file__).parent))
from config import (
    ACS_BASE_URL, ACS_PROFILE_URL, CENSUS_API_KEY, CENSUS_FETCH_DELAY,
    LOG_DIR, LOG_FORMAT, get_census_file_path
)
from county_personas.census_api import CensusApiClient
from county_personas.data_loader import save_census_records
from county_personas.errors import ExternalServiceError
from county_personas.state_reference import STATE_FIPS, get_state_abbr

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format=LOG_FORMAT,
    handlers=[
        logging.FileHandler(LOG_DIR / "03_fetch_census.log", encoding='utf-8'),
        logging.StreamHandler()
    ]
)
logger = logging.getLogger(__name__)


async def fetch_state(client: CensusApiClient, state_abbr: str) -> Dict[str, Any]:
    """
    Fetch and save one state's county demographics.

    Args:
        client: Census API client
        state_abbr: State abbreviation

    Returns:
        Result record for the summary
    """
    state_fips = STATE_FIPS.get(state_abbr)
    if state_fips is None:
        logger.error(f"Unknown state: {state_abbr}")
        return {'state': state_abbr, 'state_fips': '', 'county_count': 0, 'success': False}

    logger.info(f"\nFetching data for {state_abbr} (FIPS: {state_fips})...")

    try:
        records = await client.fetch_county_demographics(state_fips)
    except ExternalServiceError as e:
        logger.error(f"  [ERROR] {state_abbr}: {e}")
        return {'state': state_abbr, 'state_fips': state_fips, 'county_count': 0, 'success': False}

    ordered = [records[fips] for fips in sorted(records)]
    for public in (False, True):
        path = save_census_records(ordered, get_census_file_path(state_fips, public=public))
        logger.info(f"  Saved {path}")

    return {'state': state_abbr, 'state_fips': state_fips, 'county_count': len(ordered), 'success': True}


async def fetch_states(states: List[str], delay: float) -> List[Dict[str, Any]]:
    """Fetch states one after another, pausing between them to respect API limits."""
    results = []
    async with CensusApiClient(CENSUS_API_KEY, base_url=ACS_BASE_URL, profile_url=ACS_PROFILE_URL) as client:
        for index, state_abbr in enumerate(states):
            results.append(await fetch_state(client, state_abbr))
            if index < len(states) - 1 and delay > 0:
                await asyncio.sleep(delay)
    return results


def print_summary(results: List[Dict[str, Any]]):
    logger.info("\n" + "=" * 70)
    logger.info("SUMMARY")
    logger.info("=" * 70)

    successful = [r for r in results if r['success']]
    failed = [r for r in results if not r['success']]

    logger.info(f"Successful: {len(successful)}")
    logger.info(f"Failed: {len(failed)}")
    for result in successful:
        logger.info(f"  {result['state']} ({result['state_fips']}): {result['county_count']} counties")
    if failed:
        logger.warning(f"Failed states: {', '.join(r['state'] for r in failed)}")

    logger.info("=" * 70)


def main():
    """Main fetch function."""
    parser = argparse.ArgumentParser(
        description="Fetch ACS county demographics from the Census API"
    )
    parser.add_argument(
        "states",
        nargs="*",
        help="State abbreviations or 2-digit FIPS codes to fetch (default: all states)"
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=CENSUS_FETCH_DELAY,
        help=f"Seconds to wait between states (default: {CENSUS_FETCH_DELAY})"
    )

    args = parser.parse_args()

    if not CENSUS_API_KEY:
        logger.error("CENSUS_API_KEY not set. Get a key at https://api.census.gov/data/key_signup.html")
        return 1

    states = [
        (get_state_abbr(s) or s) if s.isdigit() else s.upper()
        for s in args.states
    ] or list(STATE_FIPS)
    logger.info(f"Fetching Census data for {len(states)} states")

    try:
        results = asyncio.run(fetch_states(states, args.delay))
        print_summary(results)
        return 0 if all(r['success'] for r in results) else 1

    except Exception as e:
        logger.error(f"\n[ERROR] Census fetch failed: {e}")
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
