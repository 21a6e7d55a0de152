"""
serve_census.py
Serve per-state Census demographics over HTTP.

    GET /api/census?stateFips=06

Files are looked up in public/data/census first, then data/census.

Usage:
    python processing/serve_census.py [--host HOST] [--port PORT] [--debug]
"""

import argparse
import logging
import sys
from pathlib import Path

# Add parent directory to path
sys.path.append(str(Path(__file__).parent))
from config import (
    CENSUS_CACHE_MAX_AGE, CENSUS_DATA_DIR, PUBLIC_CENSUS_DIR,
    SERVER_HOST, SERVER_PORT, LOG_DIR, LOG_FORMAT
)
from county_personas.census_server import create_app

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format=LOG_FORMAT,
    handlers=[
        logging.FileHandler(LOG_DIR / "serve_census.log", encoding='utf-8'),
        logging.StreamHandler()
    ]
)
logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Serve Census demographics files")
    parser.add_argument("--host", default=SERVER_HOST, help=f"Bind address (default: {SERVER_HOST})")
    parser.add_argument("--port", type=int, default=SERVER_PORT, help=f"Port (default: {SERVER_PORT})")
    parser.add_argument("--debug", action="store_true", help="Run Flask in debug mode")

    args = parser.parse_args()

    app = create_app([PUBLIC_CENSUS_DIR, CENSUS_DATA_DIR], max_age=CENSUS_CACHE_MAX_AGE)
    logger.info(f"Serving Census data on http://{args.host}:{args.port}/api/census")
    app.run(host=args.host, port=args.port, debug=args.debug)

    return 0


if __name__ == "__main__":
    sys.exit(main())
