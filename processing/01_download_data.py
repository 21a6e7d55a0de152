"""
01_download_data.py
Download the raw inputs for the county persona pipeline.

This script:
1. Fetches the MIT Election Lab county presidential returns (.tab) from a
   mirror, or explains the manual Dataverse download
2. Downloads and extracts the Census county cartographic boundary shapefile
3. Reports which inputs (including per-state Census files) are present

Usage:
    python processing/01_download_data.py [--skip-election] [--skip-census]
                                          [--election-url URL] [--force]
"""

import argparse
import logging
import sys
import zipfile
from pathlib import Path
from typing import Dict, Optional
import requests
from tqdm import tqdm

# Add parent directory to path to import config
sys.path.append(str(Path(__file__).parent))
from config import (
    MIT_DIR, CENSUS_SHAPEFILE_DIR, CENSUS_DATA_DIR, PUBLIC_CENSUS_DIR,
    DEFAULT_SHAPEFILE_URL, DEFAULT_SHAPEFILE_NAME, DEFAULT_CENSUS_STATES,
    ELECTION_FILE, ELECTION_FILE_NAME, MIT_DATAVERSE_URL, LOG_DIR, LOG_FORMAT,
    get_shapefile_path
)
from county_personas.data_loader import find_census_file
from county_personas.state_reference import get_state_abbr

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format=LOG_FORMAT,
    handlers=[
        logging.FileHandler(LOG_DIR / "01_download.log", encoding='utf-8'),
        logging.StreamHandler()
    ]
)
logger = logging.getLogger(__name__)


def download_file(url: str, output_path: Path, force: bool = False) -> bool:
    """
    Download a file with progress bar.

    Args:
        url: URL to download from
        output_path: Path to save file
        force: If True, re-download even if file exists

    Returns:
        True if download successful, False otherwise
    """
    if output_path.exists() and not force:
        logger.info(f"File already exists: {output_path.name}")
        return True

    try:
        logger.info(f"Downloading from {url}")

        response = requests.get(url, stream=True, timeout=60)
        response.raise_for_status()

        total_size = int(response.headers.get('content-length', 0))
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, 'wb') as f, tqdm(
            desc=output_path.name,
            total=total_size,
            unit='B',
            unit_scale=True,
            unit_divisor=1024,
        ) as pbar:
            for chunk in response.iter_content(chunk_size=8192):
                size = f.write(chunk)
                pbar.update(size)

        logger.info(f"Successfully downloaded: {output_path.name}")
        return True

    except requests.exceptions.RequestException as e:
        logger.error(f"Failed to download {url}: {e}")
        return False


def extract_zip(zip_path: Path, extract_dir: Path) -> bool:
    """Extract a ZIP file; False if the archive is corrupt."""
    try:
        logger.info(f"Extracting {zip_path.name}")
        with zipfile.ZipFile(zip_path, 'r') as zip_ref:
            zip_ref.extractall(extract_dir)
        logger.info(f"Extracted to {extract_dir}")
        return True

    except zipfile.BadZipFile as e:
        logger.error(f"Failed to extract {zip_path}: {e}")
        return False


def fetch_election_data(url: Optional[str] = None, force: bool = False) -> bool:
    """
    Make sure the MIT Election Lab county returns are on disk.

    Dataverse downloads sit behind a terms-of-use page, so without a mirror
    URL the steps for a manual download are logged instead.

    Args:
        url: Optional mirror serving the .tab file directly
        force: Re-download from url even when the file exists

    Returns:
        True if the election file is available
    """
    logger.info("=" * 70)
    logger.info("MIT ELECTION LAB DATA")
    logger.info("=" * 70)

    if ELECTION_FILE.exists() and not force:
        logger.info(f"Election data found: {ELECTION_FILE.name}")
        logger.info(f"  Size: {ELECTION_FILE.stat().st_size / 1024 / 1024:.2f} MB")
        return True

    if url:
        return download_file(url, ELECTION_FILE, force)

    logger.warning("Election data not found!")
    logger.info("\nMANUAL DOWNLOAD REQUIRED:")
    logger.info(f"1. Visit: {MIT_DATAVERSE_URL}")
    logger.info("2. Download 'County Presidential Election Returns 2000-2024' (tab-separated)")
    logger.info(f"3. Place '{ELECTION_FILE_NAME}' in: {MIT_DIR}")
    logger.info("   or rerun with --election-url pointing at a copy of the file")
    logger.info("\n" + "=" * 70)

    return False


def download_county_shapefile(force: bool = False) -> bool:
    """
    Download and unpack the Census cartographic boundary county shapefile.

    Args:
        force: Re-download even if the shapefile exists

    Returns:
        True if the shapefile is available
    """
    logger.info("=" * 70)
    logger.info("CENSUS COUNTY SHAPEFILE")
    logger.info("=" * 70)

    shapefile_path = get_shapefile_path()
    if shapefile_path.exists() and not force:
        logger.info(f"Shapefile already exists: {shapefile_path.name}")
        return True

    zip_path = CENSUS_SHAPEFILE_DIR / f"{DEFAULT_SHAPEFILE_NAME}.zip"
    if not download_file(DEFAULT_SHAPEFILE_URL, zip_path, force):
        return False
    if not extract_zip(zip_path, shapefile_path.parent):
        return False

    zip_path.unlink()
    if not shapefile_path.exists():
        logger.error(f"Shapefile not found after extraction: {shapefile_path}")
        return False

    logger.info(f"  Location: {shapefile_path}")
    return True


def verify_downloads() -> Dict[str, bool]:
    """
    Report which inputs the later stages will find.

    The election file and shapefile are required; per-state Census files
    are optional (counties without them keep placeholder demographics).

    Returns:
        Dictionary of input name -> present, plus 'all_ready'
    """
    logger.info("=" * 70)
    logger.info("VERIFICATION")
    logger.info("=" * 70)

    status = {
        'election_data': ELECTION_FILE.exists(),
        'shapefile': get_shapefile_path().exists(),
    }
    for name, present in status.items():
        logger.info(f"  {'OK     ' if present else 'MISSING'} {name}")

    census_dirs = [PUBLIC_CENSUS_DIR, CENSUS_DATA_DIR]
    for state_fips in DEFAULT_CENSUS_STATES:
        found = find_census_file(state_fips, census_dirs)
        label = f"census {get_state_abbr(state_fips)} ({state_fips})"
        logger.info(f"  {'OK     ' if found else 'optional'} {label}")

    status['all_ready'] = status['election_data'] and status['shapefile']

    if status['all_ready']:
        logger.info("\nAll required data is ready for processing!")
    else:
        logger.warning("\nSome required files are missing.")
    logger.info("Fetch Census demographics with 03_fetch_census.py")
    logger.info("=" * 70)

    return status


def main():
    """Main download function."""
    parser = argparse.ArgumentParser(
        description="Download election returns and the county shapefile"
    )
    parser.add_argument(
        "--skip-election",
        action="store_true",
        help="Skip the election data step"
    )
    parser.add_argument(
        "--skip-census",
        action="store_true",
        help="Skip the county shapefile download"
    )
    parser.add_argument(
        "--election-url",
        type=str,
        help=f"URL serving {ELECTION_FILE_NAME} (skips the manual Dataverse step)"
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Force re-download of existing files"
    )

    args = parser.parse_args()

    logger.info(f"Force mode: {args.force}")

    if not args.skip_election:
        fetch_election_data(args.election_url, args.force)

    if not args.skip_census:
        download_county_shapefile(args.force)

    status = verify_downloads()

    return 0 if status['all_ready'] else 1


if __name__ == "__main__":
    sys.exit(main())
