"""
JSON export helpers for the frontend bundle.
"""

import json
import logging
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)


def clean_value_for_json(value: Any) -> Any:
    """
    Clean a value for JSON export, handling NaN, numpy scalars and nesting.

    Args:
        value: Value to clean

    Returns:
        JSON-serializable value or None
    """
    if value is None:
        return None

    if isinstance(value, dict):
        return {str(k): clean_value_for_json(v) for k, v in value.items()}

    if isinstance(value, (list, tuple)):
        return [clean_value_for_json(v) for v in value]

    # Handle numpy scalars
    if isinstance(value, np.generic):
        value = value.item()

    if isinstance(value, bool):
        return value

    if isinstance(value, float):
        if np.isnan(value) or np.isinf(value):
            return None
        if value.is_integer():
            return int(value)
        return round(value, 6)

    if isinstance(value, int):
        return value

    if isinstance(value, str):
        return value

    if pd.isna(value):
        return None

    return str(value)


def write_json(data: Any, output_path: Path, compact: bool = False) -> Path:
    """
    Write cleaned JSON, compact (no whitespace) or indented.

    Returns:
        Path written
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w', encoding='utf-8') as f:
        if compact:
            json.dump(clean_value_for_json(data), f, separators=(',', ':'))
        else:
            json.dump(clean_value_for_json(data), f, indent=2)

    size_kb = output_path.stat().st_size / 1024
    logger.info(f"Wrote {output_path.name} ({size_kb:.1f} KB)")

    return output_path
