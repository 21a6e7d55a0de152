"""
Geographic utility functions for county shapefiles.
"""

import logging
from typing import Dict

import geopandas as gpd
import pandas as pd

from .models import Coordinates

logger = logging.getLogger(__name__)

GEODETIC_CRS = 'EPSG:4326'


def reproject_gdf(gdf: gpd.GeoDataFrame, target_crs: str) -> gpd.GeoDataFrame:
    """
    Reproject GeoDataFrame to target CRS.

    Args:
        gdf: GeoDataFrame to reproject
        target_crs: Target CRS (e.g., 'EPSG:4326')

    Returns:
        Reprojected GeoDataFrame

    Raises:
        ValueError: If GeoDataFrame has no CRS defined
    """
    if gdf.crs is None:
        raise ValueError(
            "GeoDataFrame has no CRS defined. Cannot reproject. "
            "Set CRS first using: gdf.set_crs('EPSG:XXXX', inplace=True)"
        )

    current_crs = gdf.crs.to_string()
    if current_crs != target_crs:
        logger.info(f"Reprojecting from {current_crs} to {target_crs}")
        return gdf.to_crs(target_crs)

    logger.info(f"GeoDataFrame already in {target_crs}, no reprojection needed")
    return gdf


def set_crs_if_missing(gdf: gpd.GeoDataFrame, default_crs: str = 'EPSG:4269') -> gpd.GeoDataFrame:
    """Census cartographic boundaries ship in NAD83; assume it when the CRS is absent."""
    if gdf.crs is None:
        logger.warning(f"No CRS defined. Setting to {default_crs}")
        gdf = gdf.set_crs(default_crs)
    return gdf


def validate_geometries(gdf: gpd.GeoDataFrame) -> gpd.GeoDataFrame:
    """
    Validate and fix invalid geometries.

    Args:
        gdf: GeoDataFrame to validate

    Returns:
        GeoDataFrame with valid geometries
    """
    logger.info("Validating geometries...")

    invalid = ~gdf.is_valid
    invalid_count = int(invalid.sum())

    if invalid_count > 0:
        logger.warning(f"Found {invalid_count} invalid geometries. Attempting to fix...")
        gdf = gdf.copy()
        gdf.loc[invalid, 'geometry'] = gdf.loc[invalid, 'geometry'].buffer(0)

        still_invalid_count = int((~gdf.is_valid).sum())
        if still_invalid_count > 0:
            logger.warning(f"Could not fix {still_invalid_count} geometries. These will be dropped.")
            gdf = gdf[gdf.is_valid]
    else:
        logger.info("All geometries are valid")

    return gdf


def get_bounds(gdf: gpd.GeoDataFrame) -> dict:
    bounds = gdf.total_bounds
    return {
        'minx': float(bounds[0]),
        'miny': float(bounds[1]),
        'maxx': float(bounds[2]),
        'maxy': float(bounds[3])
    }


def extract_county_centroids(
    gdf: gpd.GeoDataFrame,
    fips_column: str = 'fips'
) -> Dict[str, Coordinates]:
    """
    Map each county FIPS to a point inside the county.

    Uses the Census internal point (INTPTLAT/INTPTLON) when the shapefile
    carries it, otherwise a representative point computed in WGS84.

    Args:
        gdf: County GeoDataFrame with a 5-digit FIPS column
        fips_column: Name of the FIPS column

    Returns:
        Dictionary of FIPS -> Coordinates
    """
    if 'INTPTLAT' in gdf.columns and 'INTPTLON' in gdf.columns:
        lat = pd.to_numeric(gdf['INTPTLAT'], errors='coerce')
        lng = pd.to_numeric(gdf['INTPTLON'], errors='coerce')
    else:
        points = reproject_gdf(set_crs_if_missing(gdf), GEODETIC_CRS).representative_point()
        lat = points.y
        lng = points.x

    centroids = {}
    missing = 0
    for fips, y, x in zip(gdf[fips_column], lat, lng):
        if pd.isna(y) or pd.isna(x):
            missing += 1
            continue
        centroids[str(fips)] = Coordinates(lat=round(float(y), 6), lng=round(float(x), 6))

    if missing:
        logger.warning(f"No usable point for {missing} counties")
    logger.info(f"Extracted coordinates for {len(centroids):,} counties")

    return centroids
