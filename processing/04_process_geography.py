"""
04_process_geography.py
Derive county map coordinates from Census Bureau county shapefiles.

This script:
1. Loads the Census cartographic boundary county shapefile
2. Validates FIPS codes and geometries
3. Reprojects to WGS84
4. Extracts one interior point per county
5. Reports per-state coverage
6. Exports FIPS -> {lat, lng} as JSON for the entity build

Usage:
    python processing/04_process_geography.py [--validate-only]
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict
import geopandas as gpd

# Add parent directory to path
sys.path.append(str(Path(__file__).parent))
from config import (
    COUNTY_COORDINATES_FILE, CENSUS_COLUMNS_TO_KEEP, TARGET_CRS, SOURCE_CRS,
    LOG_DIR, LOG_FORMAT, get_shapefile_path
)
from county_personas.data_loader import load_shapefile, validate_fips_codes
from county_personas.export import write_json
from county_personas.geo_utils import (
    extract_county_centroids, get_bounds, reproject_gdf, set_crs_if_missing,
    validate_geometries
)
from county_personas.models import Coordinates
from county_personas.state_reference import STATE_FIPS, get_state_abbr

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format=LOG_FORMAT,
    handlers=[
        logging.FileHandler(LOG_DIR / "04_process_geography.log", encoding='utf-8'),
        logging.StreamHandler()
    ]
)
logger = logging.getLogger(__name__)


# ============================================================================
# LOADING
# ============================================================================

def load_county_shapefile() -> gpd.GeoDataFrame:
    """
    Load Census Bureau county shapefile.

    Returns:
        GeoDataFrame with county geometries
    """
    logger.info("=" * 70)
    logger.info("LOADING COUNTY SHAPEFILE")
    logger.info("=" * 70)

    gdf = load_shapefile(get_shapefile_path(), columns=CENSUS_COLUMNS_TO_KEEP)

    memory_mb = gdf.memory_usage(deep=True).sum() / 1024 / 1024
    logger.info(f"Memory usage: {memory_mb:.2f} MB")

    return gdf


# ============================================================================
# VALIDATION
# ============================================================================

def validate_shapefile(gdf: gpd.GeoDataFrame) -> Dict[str, Any]:
    """
    Validate shapefile data and geometries.

    Args:
        gdf: GeoDataFrame to validate

    Returns:
        Dictionary with validation results
    """
    logger.info("\nValidating shapefile...")

    validation = {
        'total_counties': len(gdf),
        'unique_fips': int(gdf['GEOID'].nunique()),
        'missing_geoid': int(gdf['GEOID'].isna().sum()),
        'missing_geometry': int(gdf['geometry'].isna().sum()),
        'invalid_geometries': int((~gdf.is_valid).sum()),
        'has_internal_points': 'INTPTLAT' in gdf.columns,
        'bounds': get_bounds(gdf),
    }

    logger.info(f"  Total counties: {validation['total_counties']:,}")
    logger.info(f"  Unique FIPS codes: {validation['unique_fips']:,}")
    logger.info(f"  Missing GEOID: {validation['missing_geoid']}")
    logger.info(f"  Missing geometry: {validation['missing_geometry']}")
    logger.info(f"  Invalid geometries: {validation['invalid_geometries']}")
    logger.info(f"  Internal points: {'yes' if validation['has_internal_points'] else 'no (computed)'}")

    bounds = validation['bounds']
    logger.info(f"  Bounds: ({bounds['minx']:.2f}, {bounds['miny']:.2f}) to ({bounds['maxx']:.2f}, {bounds['maxy']:.2f})")

    return validation


# ============================================================================
# CLEANING
# ============================================================================

def standardize_columns(gdf: gpd.GeoDataFrame) -> gpd.GeoDataFrame:
    """
    Rename Census columns and standardize FIPS codes.

    Args:
        gdf: GeoDataFrame with Census columns

    Returns:
        GeoDataFrame with fips, county_name, state_fips, county_fips
    """
    logger.info("\nStandardizing columns...")

    gdf = gdf.rename(columns={
        'GEOID': 'fips',
        'NAME': 'county_name',
        'STATEFP': 'state_fips',
        'COUNTYFP': 'county_fips',
    })
    gdf = validate_fips_codes(gdf, 'fips')

    duplicates = int(gdf['fips'].duplicated().sum())
    if duplicates > 0:
        logger.warning(f"  Found {duplicates} duplicate FIPS codes")

    logger.info(f"  Valid FIPS codes: {gdf['fips'].nunique():,} unique")

    return gdf


# ============================================================================
# COORDINATES
# ============================================================================

def summarize_coverage(centroids: Dict[str, Coordinates]) -> Dict[str, int]:
    """
    Count extracted points per state and log states with none.

    Territories (FIPS 60+) are counted under their FIPS code.
    """
    per_state: Dict[str, int] = {}
    for fips in centroids:
        state = get_state_abbr(fips[:2]) or fips[:2]
        per_state[state] = per_state.get(state, 0) + 1

    missing = sorted(abbr for abbr in STATE_FIPS if abbr not in per_state)
    logger.info(f"\nCoordinates for {len(per_state)} states/territories")
    if missing:
        logger.warning(f"  No counties for: {', '.join(missing)}")

    return per_state


# ============================================================================
# MAIN
# ============================================================================

def main():
    """Main processing function."""
    parser = argparse.ArgumentParser(
        description="Extract county coordinates from Census shapefiles"
    )
    parser.add_argument(
        "--validate-only",
        action="store_true",
        help="Only validate shapefile without exporting"
    )

    args = parser.parse_args()

    try:
        gdf = load_county_shapefile()
        validate_shapefile(gdf)

        if args.validate_only:
            logger.info("\n[OK] Validation complete. Use without --validate-only to process.")
            return 0

        gdf = standardize_columns(gdf)
        gdf = validate_geometries(gdf)
        gdf = reproject_gdf(set_crs_if_missing(gdf, SOURCE_CRS), TARGET_CRS)

        centroids = extract_county_centroids(gdf, 'fips')
        summarize_coverage(centroids)
        output = {fips: point.to_dict() for fips, point in sorted(centroids.items())}
        output_file = write_json(output, COUNTY_COORDINATES_FILE, compact=True)

        logger.info("\n" + "=" * 70)
        logger.info("[OK] Successfully extracted county coordinates")
        logger.info(f"Counties: {len(output):,}")
        logger.info(f"Output: {output_file}")
        logger.info("=" * 70)

        return 0

    except Exception as e:
        logger.error(f"\n[ERROR] Processing failed: {e}")
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
