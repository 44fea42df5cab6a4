import math
from enum import Enum

import numpy as np
import pandas as pd


def make_json_serializable(obj):
    """Convert numpy types and other non-serializable objects to JSON-compatible types"""
    if obj is None:
        return None
    elif isinstance(obj, dict):
        return {str(key): make_json_serializable(value) for key, value in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [make_json_serializable(item) for item in obj]
    elif isinstance(obj, np.ndarray):
        return [make_json_serializable(item) for item in obj.tolist()]
    elif isinstance(obj, Enum):
        return obj.value
    elif isinstance(obj, (np.bool_, bool)):
        return bool(obj)
    elif isinstance(obj, (np.integer, int)):
        return int(obj)
    elif isinstance(obj, (np.floating, float)):
        value = float(obj)
        if math.isnan(value):
            return None
        if math.isinf(value):
            return 'Infinity' if value > 0 else '-Infinity'
        return value
    elif isinstance(obj, str):
        return obj
    elif pd.isna(obj):
        return None
    elif hasattr(obj, 'isoformat'):  # datetime objects
        return obj.isoformat()
    elif hasattr(obj, 'item'):  # numpy scalars
        return obj.item()
    else:
        return obj


def frame_rows(df):
    """Rows of a DataFrame as lists of JSON-safe values, missing cells as None"""
    return [make_json_serializable(list(row)) for row in df.itertuples(index=False, name=None)]
