#!/usr/bin/env python3
"""
JSON Safety Utilities - Turn ranking tables into JSON-ready structures.

pandas and numpy values (NaN, pd.NA, numpy scalars, Timestamps) are not JSON
serializable as-is; everything written by the exporter goes through here.
"""

import math
from pathlib import Path
from typing import Any, Dict, List

import numpy as np
import pandas as pd


def to_json_safe(obj: Any) -> Any:
    """
    Recursively convert an object into plain JSON types.

    Missing and non-finite numbers become None, numpy scalars become Python
    scalars, Path objects become posix strings and DataFrames become lists of
    records.

    Args:
        obj: Any Python object

    Returns:
        Object containing only dict, list, str, int, float, bool and None
    """
    if isinstance(obj, pd.DataFrame):
        return frame_to_records(obj)
    if isinstance(obj, pd.Series):
        return [to_json_safe(x) for x in obj.tolist()]
    if isinstance(obj, dict):
        return {str(k): to_json_safe(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_json_safe(x) for x in obj]
    if isinstance(obj, Path):
        return obj.as_posix()
    if isinstance(obj, (bool, np.bool_)):
        return bool(obj)
    if isinstance(obj, (int, np.integer)):
        return int(obj)
    if isinstance(obj, (float, np.floating)):
        value = float(obj)
        return value if math.isfinite(value) else None
    if isinstance(obj, pd.Timestamp):
        return obj.isoformat()
    if obj is None or obj is pd.NA or obj is pd.NaT:
        return None
    return obj


def frame_to_records(df: pd.DataFrame) -> List[Dict[str, Any]]:
    """Convert a DataFrame to a list of JSON-safe row dicts."""
    return [
        {str(col): to_json_safe(value) for col, value in row.items()}
        for row in df.astype(object).to_dict(orient='records')
    ]
