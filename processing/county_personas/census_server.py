"""
Census query endpoint.

GET /api/census?stateFips=06 returns the state's county demographics file
as JSON. Directories are searched in the order given (public before data).
"""

import json
import logging
import re
from pathlib import Path
from typing import Sequence

from flask import Flask, jsonify, request

from .data_loader import find_census_file

logger = logging.getLogger(__name__)

DEFAULT_MAX_AGE = 3600
STATE_FIPS_PATTERN = re.compile(r'\d{2}')


def create_app(census_dirs: Sequence[Path], max_age: int = DEFAULT_MAX_AGE) -> Flask:
    """
    Build the Flask app serving per-state Census files.

    Args:
        census_dirs: Directories holding county-demographics-XX.json
        max_age: Cache-Control max-age for successful responses

    Returns:
        Flask application
    """
    app = Flask(__name__)
    app.config['CENSUS_DIRS'] = [Path(d) for d in census_dirs]
    app.config['CENSUS_MAX_AGE'] = max_age

    @app.route('/api/census')
    def census_for_state():
        state_fips = request.args.get('stateFips')
        if not state_fips:
            return jsonify({'error': 'stateFips parameter is required'}), 400

        # Anything other than a 2-digit code cannot name a file
        path = None
        if STATE_FIPS_PATTERN.fullmatch(state_fips):
            path = find_census_file(state_fips, app.config['CENSUS_DIRS'])

        if path is None:
            logger.info(f"No Census data for state FIPS {state_fips!r}")
            return jsonify({'error': f'Census data not found for state FIPS: {state_fips}'}), 404

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to read {path}: {e}")
            return jsonify({'error': 'Failed to load Census data'}), 500

        response = jsonify(data)
        response.headers['Cache-Control'] = f"public, max-age={app.config['CENSUS_MAX_AGE']}"
        return response

    return app
