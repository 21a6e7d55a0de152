import os
from pathlib import Path
from typing import Dict

# DATA PATHS =================================================================

PROJECT_ROOT = Path(__file__).parent.parent
DATA_DIR = PROJECT_ROOT / "data"

RAW_DATA_DIR = DATA_DIR / "raw"
MIT_DIR = RAW_DATA_DIR / "mit-election-lab"
CENSUS_SHAPEFILE_DIR = RAW_DATA_DIR / "census-shapefiles"

# Per-state ACS demographics (county-demographics-XX.json)
CENSUS_DATA_DIR = DATA_DIR / "census"

PROCESSED_DATA_DIR = DATA_DIR / "processed"
ELECTIONS_DIR = PROCESSED_DATA_DIR / "elections"
GEOGRAPHY_DIR = PROCESSED_DATA_DIR / "geography"

PUBLIC_DATA_DIR = PROJECT_ROOT / "public" / "data"
PUBLIC_CENSUS_DIR = PUBLIC_DATA_DIR / "census"
FRONTEND_EXPORT_DIR = PUBLIC_DATA_DIR / "explorer"

for directory in [RAW_DATA_DIR, MIT_DIR, CENSUS_SHAPEFILE_DIR, CENSUS_DATA_DIR, PROCESSED_DATA_DIR,
                  ELECTIONS_DIR, GEOGRAPHY_DIR, PUBLIC_CENSUS_DIR, FRONTEND_EXPORT_DIR]:
    directory.mkdir(parents=True, exist_ok=True)

# DATA SOURCES ==============================================================

MIT_DATAVERSE_DOI = "doi:10.7910/DVN/VOQCHQ"
MIT_DATAVERSE_URL = f"https://dataverse.harvard.edu/dataset.xhtml?persistentId={MIT_DATAVERSE_DOI}"

ELECTION_FILE_NAME = "countypres_2000-2024.tab"
ELECTION_FILE = MIT_DIR / ELECTION_FILE_NAME

CENSUS_BASE_URL = "https://www2.census.gov/geo/tiger"
CENSUS_YEAR = "2024"
DEFAULT_SHAPEFILE_NAME = f"cb_{CENSUS_YEAR}_us_county_500k"
DEFAULT_SHAPEFILE_URL = f"{CENSUS_BASE_URL}/GENZ{CENSUS_YEAR}/shp/{DEFAULT_SHAPEFILE_NAME}.zip"

ACS_BASE_URL = "https://api.census.gov/data/2023/acs/acs5"
ACS_PROFILE_URL = f"{ACS_BASE_URL}/profile"

# Read from the environment; never commit a key
CENSUS_API_KEY = os.environ.get("CENSUS_API_KEY") or os.environ.get("NEXT_PUBLIC_CENSUS_API_KEY")

# PIPELINE CONFIG ===========================================================

RECENT_ELECTION_WINDOW = 3

# States loaded up front by the entity build (CA, FL, NY, TX)
DEFAULT_CENSUS_STATES = ["06", "12", "36", "48"]

# Pause between states when calling the ACS API
CENSUS_FETCH_DELAY = 1.0

TARGET_CRS = "EPSG:4326"
SOURCE_CRS = "EPSG:4269"

COUNTY_COORDINATES_FILE = GEOGRAPHY_DIR / "county_coordinates.json"
ELECTION_SUMMARY_FILE = ELECTIONS_DIR / "county_elections.json"

# Census shapefile columns to keep
CENSUS_COLUMNS_TO_KEEP = [
    "GEOID",      # FIPS code
    "NAME",       # County name
    "STATEFP",    # State FIPS
    "COUNTYFP",   # County FIPS
    "INTPTLAT",   # Internal point latitude (TIGER files only)
    "INTPTLON",   # Internal point longitude
    "geometry"
]

# SERVER CONFIG =============================================================

SERVER_HOST = "127.0.0.1"
SERVER_PORT = 5000
CENSUS_CACHE_MAX_AGE = 3600

# LOGGING CONFIG ===========================================================

LOG_DIR = PROJECT_ROOT / "logs"
LOG_DIR.mkdir(exist_ok=True)

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"

# UTILS =====================================================================

CENSUS_FILE_TEMPLATE = "county-demographics-{state_fips}.json"


def get_census_file_path(state_fips: str, public: bool = False) -> Path:
    """Get path to a state's Census demographics file."""
    directory = PUBLIC_CENSUS_DIR if public else CENSUS_DATA_DIR
    return directory / CENSUS_FILE_TEMPLATE.format(state_fips=str(state_fips).zfill(2))



def get_shapefile_path() -> Path:
    return CENSUS_SHAPEFILE_DIR / DEFAULT_SHAPEFILE_NAME / f"{DEFAULT_SHAPEFILE_NAME}.shp"

# DATA QUALITY CHECKS ==================================================

def check_data_directory_structure() -> Dict[str, bool]:
    """Verify that all required directories exist."""
    dirs_to_check = {
        "raw_data": RAW_DATA_DIR.exists(),
        "mit_lab": MIT_DIR.exists(),
        "census_shapefiles": CENSUS_SHAPEFILE_DIR.exists(),
        "census_data": CENSUS_DATA_DIR.exists(),
        "processed": PROCESSED_DATA_DIR.exists(),
        "elections": ELECTIONS_DIR.exists(),
        "geography": GEOGRAPHY_DIR.exists(),
        "public_census": PUBLIC_CENSUS_DIR.exists(),
        "frontend_export": FRONTEND_EXPORT_DIR.exists(),
    }
    return dirs_to_check


if __name__ == "__main__":
    print("=" * 70)
    print("COUNTY PERSONA EXPLORER - CONFIGURATION")
    print("=" * 70)
    print(f"\nProject Root: {PROJECT_ROOT}")
    print(f"Data Directory: {DATA_DIR}")
    print(f"\nElection File: {ELECTION_FILE_NAME}")
    print(f"Default Shapefile: {DEFAULT_SHAPEFILE_NAME}")
    print(f"Census API key: {'set' if CENSUS_API_KEY else 'NOT SET'}")
    print(f"Default Census states: {DEFAULT_CENSUS_STATES}")
    print("\nDirectory Structure:")
    for name, exists in check_data_directory_structure().items():
        status = "OK" if exists else "ERROR"
        print(f"  {status} {name}")
    print("\n" + "=" * 70)
