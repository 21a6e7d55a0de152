import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

import geopandas as gpd
import pandas as pd

from .errors import MissingDataError
from .models import CensusCountyData, Coordinates

logger = logging.getLogger(__name__)

CENSUS_FILE_TEMPLATE = "county-demographics-{state_fips}.json"


def load_election_text(file_path: Path) -> str:
    """
    Read the raw tab-separated election file.

    Args:
        file_path: Path to the MIT Election Lab .tab file

    Returns:
        File contents as text

    Raises:
        MissingDataError: If the file does not exist
    """
    file_path = Path(file_path)
    logger.info(f"Loading election data from {file_path}")

    if not file_path.exists():
        raise MissingDataError(f"Election file not found: {file_path}")

    text = file_path.read_text(encoding='utf-8')
    logger.info(f"Read {file_path.stat().st_size / 1024 / 1024:.2f} MB")

    return text


def census_file_name(state_fips: str) -> str:
    return CENSUS_FILE_TEMPLATE.format(state_fips=str(state_fips).zfill(2))


def find_census_file(state_fips: str, search_dirs: List[Path]) -> Optional[Path]:
    """Return the first existing Census file for a state across search_dirs."""
    name = census_file_name(state_fips)
    for directory in search_dirs:
        candidate = Path(directory) / name
        if candidate.exists():
            return candidate
    return None


def load_census_records(file_path: Path) -> Dict[str, CensusCountyData]:
    """
    Load one state's Census file, keyed by full 5-digit FIPS.

    Args:
        file_path: Path to county-demographics-XX.json

    Returns:
        Dictionary of full FIPS -> CensusCountyData

    Raises:
        MissingDataError: If the file does not exist
        ValueError: If the file is not a JSON array of records
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise MissingDataError(f"Census file not found: {file_path}")

    with open(file_path, 'r', encoding='utf-8') as f:
        data = json.load(f)

    return census_records_from_json(data, source=file_path.name)


def census_records_from_json(data, source: str = "census") -> Dict[str, CensusCountyData]:
    """
    Convert a decoded JSON array of Census records into a FIPS-keyed map.

    Records missing a FIPS field are skipped with a warning.
    """
    if not isinstance(data, list):
        raise ValueError(f"Expected a JSON array of county records in {source}")

    records = {}
    skipped = 0
    for item in data:
        try:
            record = CensusCountyData.from_dict(item)
        except (KeyError, TypeError, ValueError) as e:
            skipped += 1
            logger.debug(f"Skipping Census record in {source}: {e}")
            continue
        records[record.full_fips] = record

    if skipped:
        logger.warning(f"Skipped {skipped} unreadable Census records in {source}")

    return records


def save_census_records(records: List[CensusCountyData], output_path: Path) -> Path:
    """Write Census records as a pretty-printed JSON array."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump([r.to_dict() for r in records], f, indent=2)
    return output_path


def load_county_coordinates(file_path: Path) -> Dict[str, Coordinates]:
    """
    Load FIPS -> {lat, lng} written by the geography stage.

    A missing file yields an empty map (counties are exported without
    coordinates).
    """
    file_path = Path(file_path)
    if not file_path.exists():
        logger.warning(f"Coordinates file not found: {file_path}")
        return {}

    with open(file_path, 'r', encoding='utf-8') as f:
        data = json.load(f)

    return {
        str(fips).zfill(5): Coordinates(lat=float(point['lat']), lng=float(point['lng']))
        for fips, point in data.items()
    }


def load_shapefile(
    shapefile_path: Path,
    columns: Optional[List[str]] = None
) -> gpd.GeoDataFrame:
    """
    Load county shapefile.

    Args:
        shapefile_path: Path to .shp file
        columns: Optional list of columns to load

    Returns:
        GeoDataFrame with county geometries
    """
    logger.info(f"Loading shapefile from {shapefile_path}")

    if not shapefile_path.exists():
        raise MissingDataError(f"Shapefile not found: {shapefile_path}")

    gdf = gpd.read_file(shapefile_path, engine="pyogrio")

    if columns:
        available_cols = [col for col in columns if col in gdf.columns and col != 'geometry']
        gdf = gdf[available_cols + ['geometry']]

    logger.info(f"Loaded {len(gdf):,} counties")
    logger.info(f"CRS: {gdf.crs}")

    return gdf


def validate_fips_codes(df: pd.DataFrame, fips_column: str = 'fips') -> pd.DataFrame:
    """
    Validate and standardize FIPS codes.

    Strips float formatting ("6037.0"), zero-pads to 5 digits and drops rows
    whose code is empty or non-numeric. Longer numeric codes (MIT uses
    7-digit ones for a few cities) are kept as they are.

    Args:
        df: DataFrame with FIPS codes
        fips_column: Name of FIPS column

    Returns:
        DataFrame with standardized FIPS codes
    """
    df = df.copy()
    raw = df[fips_column].astype(str).str.strip().str.replace(r'\.0$', '', regex=True)

    valid_fips = raw.str.fullmatch(r'\d+', na=False)
    invalid_count = int((~valid_fips).sum())

    df[fips_column] = raw.str.zfill(5)

    if invalid_count > 0:
        logger.warning(f"Removing {invalid_count} rows with invalid FIPS codes")
        df = df[valid_fips]

    return df


def check_data_quality(df: pd.DataFrame, required_columns: List[str]) -> dict:
    """
    Perform basic data quality checks.

    Args:
        df: DataFrame to check
        required_columns: List of required column names

    Returns:
        Dictionary with quality metrics
    """
    metrics = {
        'total_rows': len(df),
        'missing_columns': [],
        'null_counts': {},
        'duplicate_rows': 0
    }

    for col in required_columns:
        if col not in df.columns:
            metrics['missing_columns'].append(col)

    for col in df.columns:
        null_count = int(df[col].isnull().sum())
        if null_count > 0:
            metrics['null_counts'][col] = null_count

    metrics['duplicate_rows'] = int(df.duplicated().sum())

    return metrics
