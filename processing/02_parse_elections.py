"""
02_parse_elections.py
Parse MIT Election Lab county presidential returns into county histories.

This script:
1. Loads the raw tab-separated election file
2. Validates columns, FIPS codes and vote counts
3. Groups rows into per-county, per-year results
4. Classifies each county's recent political lean
5. Exports the county histories as JSON

Usage:
    python processing/02_parse_elections.py [--file PATH] [--state ST] [--validate-only]
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List
import pandas as pd

# Add parent directory to path
sys.path.append(str(Path(__file__).parent))
from config import (
    ELECTION_FILE, ELECTION_SUMMARY_FILE, RECENT_ELECTION_WINDOW,
    LOG_DIR, LOG_FORMAT
)
from county_personas.data_loader import check_data_quality, load_election_text
from county_personas.election_parser import (
    REQUIRED_COLUMNS, frame_to_rows, get_election_data_for_state,
    group_election_rows, read_election_frame
)
from county_personas.export import write_json
from county_personas.models import CountyElectionData
from county_personas.political_lean import classify_lean_series, tally_two_party_votes

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format=LOG_FORMAT,
    handlers=[
        logging.FileHandler(LOG_DIR / "02_parse_elections.log", encoding='utf-8'),
        logging.StreamHandler()
    ]
)
logger = logging.getLogger(__name__)


# ============================================================================
# DATA LOADING AND VALIDATION
# ============================================================================

def load_election_frame(file_path: Path) -> pd.DataFrame:
    """
    Load and clean the raw election file.

    Args:
        file_path: Path to the .tab file

    Returns:
        Cleaned DataFrame of candidate rows
    """
    logger.info("=" * 70)
    logger.info("LOADING RAW ELECTION DATA")
    logger.info("=" * 70)

    text = load_election_text(file_path)
    df = read_election_frame(text)

    logger.info(f"Loaded {len(df):,} rows")
    if not df.empty:
        logger.info(f"Years: {sorted(df['year'].unique().tolist())}")
        logger.info(f"States: {df['state_po'].nunique()} unique")

    return df


def validate_election_frame(df: pd.DataFrame) -> Dict[str, Any]:
    """
    Perform validation checks on cleaned rows.

    Args:
        df: Cleaned election DataFrame

    Returns:
        Dictionary with validation results
    """
    logger.info("\nValidating election data...")

    quality = check_data_quality(df, REQUIRED_COLUMNS)
    validation = {
        'total_rows': quality['total_rows'],
        'missing_columns': quality['missing_columns'],
        'duplicate_rows': quality['duplicate_rows'],
        'zero_total_votes': int((df['totalvotes'] <= 0).sum()) if 'totalvotes' in df else 0,
        'negative_votes': int((df['candidatevotes'] < 0).sum()) if 'candidatevotes' in df else 0,
        'unique_counties': int(df['county_fips'].nunique()) if 'county_fips' in df else 0,
        'parties': int(df['party'].nunique()) if 'party' in df else 0,
    }

    logger.info(f"  Total rows: {validation['total_rows']:,}")
    logger.info(f"  Missing columns: {validation['missing_columns'] or 'none'}")
    logger.info(f"  Duplicate rows: {validation['duplicate_rows']:,}")
    logger.info(f"  Rows with zero total votes: {validation['zero_total_votes']:,}")
    logger.info(f"  Negative votes: {validation['negative_votes']:,}")
    logger.info(f"  Unique counties: {validation['unique_counties']:,}")
    logger.info(f"  Unique parties: {validation['parties']}")

    return validation


# ============================================================================
# SUMMARY
# ============================================================================

def summarize_leans(county_data: List[CountyElectionData], window: int) -> pd.Series:
    """
    Count counties per political lean over the recent election window.

    Args:
        county_data: Parsed county histories
        window: Number of recent elections to pool

    Returns:
        Series of lean -> county count
    """
    tallies = [tally_two_party_votes(county.elections[:window]) for county in county_data]
    table = pd.DataFrame(tallies, columns=['dem_votes', 'rep_votes'])
    if table.empty:
        return pd.Series(dtype=int)

    table['lean'] = classify_lean_series(table['dem_votes'], table['rep_votes'])
    return table['lean'].value_counts()


def print_summary(county_data: List[CountyElectionData], window: int):
    """Log county, state and lean totals."""
    logger.info("\n" + "=" * 70)
    logger.info("PARSING SUMMARY")
    logger.info("=" * 70)

    states = {county.state_abbr for county in county_data}
    elections = sum(len(county.elections) for county in county_data)

    logger.info(f"Counties: {len(county_data):,}")
    logger.info(f"States: {len(states)}")
    logger.info(f"County-year results: {elections:,}")

    logger.info(f"\nPolitical lean (last {window} elections):")
    for lean, count in summarize_leans(county_data, window).items():
        logger.info(f"  {lean}: {count:,} counties")

    logger.info("\n" + "=" * 70)


# ============================================================================
# MAIN
# ============================================================================

def main():
    """Main processing function."""
    parser = argparse.ArgumentParser(
        description="Parse county presidential returns into county histories"
    )
    parser.add_argument(
        "--file",
        type=Path,
        default=ELECTION_FILE,
        help=f"Election file (default: {ELECTION_FILE.name})"
    )
    parser.add_argument(
        "--state",
        type=str,
        help="Only export counties for one state (abbreviation)"
    )
    parser.add_argument(
        "--validate-only",
        action="store_true",
        help="Only validate raw data without exporting"
    )

    args = parser.parse_args()

    try:
        df = load_election_frame(args.file)
        validation = validate_election_frame(df)

        if validation['missing_columns']:
            logger.error(f"Missing required columns: {validation['missing_columns']}")
            return 1

        if args.validate_only:
            logger.info("\n[OK] Validation complete. Run without --validate-only to export.")
            return 0

        county_data = group_election_rows(frame_to_rows(df))

        if args.state:
            county_data = get_election_data_for_state(args.state, county_data)
            logger.info(f"Filtered to {args.state.upper()}: {len(county_data):,} counties")

        print_summary(county_data, RECENT_ELECTION_WINDOW)

        output_file = write_json([county.to_dict() for county in county_data], ELECTION_SUMMARY_FILE, compact=True)
        logger.info(f"[OK] Exported county histories to {output_file}")

        return 0

    except Exception as e:
        logger.error(f"\n[ERROR] Processing failed: {e}")
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
