"""
JSON conversion for widget payloads.

Builder arguments are frequently numpy arrays or scalars (resolved formulas,
legend breaks); the renderer only understands plain JSON values.
"""

import json
import math
from typing import Any

import numpy as np


def to_jsonable(value: Any) -> Any:
    """
    Recursively convert a payload into JSON-compatible Python values.

    namedtuples become dicts, numpy arrays and tuples become lists, numpy
    scalars become int/float/bool and NaN or infinity becomes None (JSON has
    neither).
    """
    if hasattr(value, "_asdict"):
        return to_jsonable(value._asdict())
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    if isinstance(value, np.ndarray):
        return [to_jsonable(v) for v in value.tolist()]
    if isinstance(value, np.generic):
        value = value.item()
    elif hasattr(value, "tolist") and not isinstance(value, (str, bytes)):
        # pandas Series / Index
        return to_jsonable(value.tolist())
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def dumps(payload: Any, **kwargs) -> str:
    """Serialize a payload to a JSON string."""
    return json.dumps(to_jsonable(payload), **kwargs)
