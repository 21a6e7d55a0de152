"""Tests for shapefile geometry helpers."""

from __future__ import annotations

import geopandas as gpd
import pytest
from shapely.geometry import Polygon, box

from county_personas.geo_utils import (
    extract_county_centroids,
    get_bounds,
    reproject_gdf,
    set_crs_if_missing,
    validate_geometries,
)
from county_personas.models import Coordinates


def make_counties(crs: str | None = 'EPSG:4326') -> gpd.GeoDataFrame:
    return gpd.GeoDataFrame(
        {'fips': ['06037', '06029']},
        geometry=[box(-119.0, 34.0, -117.0, 35.0), box(-120.0, 35.0, -118.0, 36.0)],
        crs=crs,
    )


def test_centroids_from_geometry() -> None:
    centroids = extract_county_centroids(make_counties())

    la = centroids['06037']
    assert -119.0 < la.lng < -117.0
    assert 34.0 < la.lat < 35.0
    assert set(centroids) == {'06037', '06029'}


def test_centroids_prefer_census_internal_points() -> None:
    gdf = make_counties()
    gdf['INTPTLAT'] = ['+34.1963983', '+35.3466288']
    gdf['INTPTLON'] = ['-118.2618616', 'bad']

    centroids = extract_county_centroids(gdf)

    assert centroids == {'06037': Coordinates(lat=34.196398, lng=-118.261862)}


def test_set_crs_if_missing_does_not_modify_input() -> None:
    gdf = make_counties(crs=None)

    updated = set_crs_if_missing(gdf)

    assert gdf.crs is None
    assert updated.crs.to_epsg() == 4269
    assert set_crs_if_missing(make_counties()).crs.to_epsg() == 4326


def test_reproject_requires_crs() -> None:
    with pytest.raises(ValueError):
        reproject_gdf(make_counties(crs=None), 'EPSG:4326')


def test_reproject_to_web_mercator() -> None:
    projected = reproject_gdf(make_counties(), 'EPSG:3857')

    assert projected.crs.to_epsg() == 3857
    assert get_bounds(projected)['minx'] < -13_000_000


def test_validate_geometries_repairs_bow_tie() -> None:
    bow_tie = Polygon([(0, 0), (1, 1), (1, 0), (0, 1), (0, 0)])
    gdf = gpd.GeoDataFrame({'fips': ['01001']}, geometry=[bow_tie], crs='EPSG:4326')

    fixed = validate_geometries(gdf)

    assert fixed.is_valid.all()


def test_get_bounds() -> None:
    bounds = get_bounds(make_counties())

    assert bounds == {'minx': -120.0, 'miny': 34.0, 'maxx': -117.0, 'maxy': 36.0}
