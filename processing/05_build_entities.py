"""
05_build_entities.py
Build the State and County entities the explorer frontend loads.

This script:
1. Loads parsed election data and per-state Census files
2. Builds all states with their rolled-up political lean (sample states without election data)
3. Builds each state's counties (sample counties where no election data exists)
4. Enriches counties with Census demographics and attaches map coordinates
5. Exports states.json, counties/{ST}.json, personas.json and manifest.json

Usage:
    python processing/05_build_entities.py [--state ST] [--output-dir DIR] [--election-file PATH]
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional
import pandas as pd

# Add parent directory to path
sys.path.append(str(Path(__file__).parent))
from config import (
    CENSUS_DATA_DIR, COUNTY_COORDINATES_FILE, DEFAULT_CENSUS_STATES, ELECTION_FILE,
    FRONTEND_EXPORT_DIR, PUBLIC_CENSUS_DIR, LOG_DIR, LOG_FORMAT
)
from county_personas.county_service import CountyService
from county_personas.data_loader import load_county_coordinates
from county_personas.export import write_json
from county_personas.mock_data import MOCK_PERSONAS
from county_personas.models import County, State
from county_personas.political_lean import get_political_color
from county_personas.stores import CensusDataStore, ElectionDataStore

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format=LOG_FORMAT,
    handlers=[
        logging.FileHandler(LOG_DIR / "05_build_entities.log", encoding='utf-8'),
        logging.StreamHandler()
    ]
)
logger = logging.getLogger(__name__)


# ============================================================================
# EXPORT
# ============================================================================

def state_record(state: State) -> Dict[str, Any]:
    record = state.to_dict()
    record['color'] = get_political_color(state.political_lean)
    return record


def export_counties(state_abbr: str, counties: List[County], output_dir: Path) -> Dict[str, Any]:
    """
    Write one state's counties and report what was exported.

    Args:
        state_abbr: State abbreviation
        counties: Enriched counties
        output_dir: Export root

    Returns:
        Manifest entry for the state
    """
    output_file = write_json(
        [county.to_dict() for county in counties],
        output_dir / "counties" / f"{state_abbr}.json",
        compact=True
    )
    with_fips = sum(1 for c in counties if c.fips)
    with_coordinates = sum(1 for c in counties if c.coordinates is not None)

    logger.info(f"  {state_abbr}: {len(counties):,} counties "
                f"({with_fips} with FIPS, {with_coordinates} with coordinates)")

    return {
        'path': f"counties/{output_file.name}",
        'counties': len(counties),
    }


def generate_manifest(
    states: List[State],
    county_files: Dict[str, Dict[str, Any]],
    census_states: List[str],
    output_dir: Path
) -> Path:
    """Write manifest.json describing the exported files."""
    logger.info("\n" + "=" * 70)
    logger.info("GENERATING MANIFEST")
    logger.info("=" * 70)

    manifest = {
        'version': '1.0.0',
        'generated_at': pd.Timestamp.now().isoformat(),
        'description': 'County persona explorer data',
        'files': {
            'states': 'states.json',
            'personas': 'personas.json',
            'counties': county_files,
        },
        'summary': {
            'states': len(states),
            'states_exported': len(county_files),
            'total_counties': sum(entry['counties'] for entry in county_files.values()),
            'states_with_census_data': census_states,
        },
    }

    manifest_file = write_json(manifest, output_dir / "manifest.json")

    logger.info(f"  States: {manifest['summary']['states']}")
    logger.info(f"  County files: {manifest['summary']['states_exported']}")
    logger.info(f"  Total counties: {manifest['summary']['total_counties']:,}")
    logger.info(f"  States with Census data: {census_states}")

    return manifest_file


# ============================================================================
# BUILD
# ============================================================================

async def build_entities(
    election_file: Path,
    output_dir: Path,
    only_state: Optional[str] = None
) -> Dict[str, Any]:
    """
    Build and export every entity file.

    Args:
        election_file: Election .tab file
        output_dir: Export root
        only_state: Restrict county export to one state

    Returns:
        Build statistics
    """
    logger.info("=" * 70)
    logger.info("LOADING SOURCES")
    logger.info("=" * 70)

    election_store = ElectionDataStore(election_file)
    census_store = CensusDataStore([PUBLIC_CENSUS_DIR, CENSUS_DATA_DIR], DEFAULT_CENSUS_STATES)
    service = CountyService(election_store, census_store, load_county_coordinates(COUNTY_COORDINATES_FILE))

    await asyncio.gather(election_store.load(), census_store.load_all())

    logger.info("\n" + "=" * 70)
    logger.info("BUILDING STATES")
    logger.info("=" * 70)

    states = await service.get_all_states()
    write_json([state_record(state) for state in states], output_dir / "states.json")

    logger.info("\n" + "=" * 70)
    logger.info("BUILDING COUNTIES")
    logger.info("=" * 70)

    abbreviations = [only_state.upper()] if only_state else [state.id for state in states]
    county_files = {}
    for abbr in abbreviations:
        counties = await service.get_counties_by_state(abbr)
        if not counties:
            logger.warning(f"  {abbr}: no counties available")
            continue
        county_files[abbr] = export_counties(abbr, counties, output_dir)

    write_json([persona.to_dict() for persona in MOCK_PERSONAS], output_dir / "personas.json")

    census_states = census_store.get_states_with_data()
    generate_manifest(states, county_files, census_states, output_dir)

    return {
        'states': len(states),
        'county_files': len(county_files),
        'census_states': census_states,
    }


# ============================================================================
# MAIN
# ============================================================================

def main():
    """Main build function."""
    parser = argparse.ArgumentParser(
        description="Build state and county entities for the explorer frontend"
    )
    parser.add_argument(
        "--state",
        type=str,
        help="Only export counties for one state (abbreviation)"
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=FRONTEND_EXPORT_DIR,
        help="Frontend data output directory"
    )
    parser.add_argument(
        "--election-file",
        type=Path,
        default=ELECTION_FILE,
        help="Election .tab file"
    )

    args = parser.parse_args()

    try:
        args.output_dir.mkdir(parents=True, exist_ok=True)
        stats = asyncio.run(build_entities(args.election_file, args.output_dir, args.state))

        logger.info("\n" + "=" * 70)
        logger.info("[OK] Entity build complete")
        logger.info(f"States: {stats['states']}, county files: {stats['county_files']}")
        logger.info(f"Output: {args.output_dir}")
        logger.info("=" * 70)

        return 0 if stats['county_files'] > 0 else 1

    except Exception as e:
        logger.error(f"\n[ERROR] Build failed: {e}")
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
