"""Runtime tag detection for Primitive type specs.

Maps Python, numpy and pandas values onto the host-level tags a Primitive
spec can require ("character", "numeric", "integer", ...).

Uses isinstance() checks (not string matching on __name__).
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from typecontract.contracts.enums import PrimitiveTag

# NOTE: numpy and pandas are imported LAZILY inside the functions below to
# keep the contracts package a leaf module. Importing pandas at module level
# pulls in hundreds of modules just to define a contract.

_INTEGER_TAGS = frozenset({PrimitiveTag.INTEGER, PrimitiveTag.NUMERIC})
_DOUBLE_TAGS = frozenset({PrimitiveTag.DOUBLE, PrimitiveTag.NUMERIC})
_LOGICAL_TAGS = frozenset({PrimitiveTag.LOGICAL})
_CHARACTER_TAGS = frozenset({PrimitiveTag.CHARACTER})
_COMPLEX_TAGS = frozenset({PrimitiveTag.COMPLEX})


def is_missing(value: Any) -> bool:
    """True for None, NaN, pd.NA and pd.NaT.

    Containers are never "missing" themselves, whatever they hold.
    """
    import pandas as pd

    if value is None or value is pd.NA or value is pd.NaT:
        return True
    if isinstance(value, float):
        return math.isnan(value)
    try:
        result = pd.isna(value)
    except (TypeError, ValueError):
        return False
    # pd.isna() on array-likes returns an array; only scalars count here
    return result is True or (getattr(result, "shape", None) == () and bool(result))


def _dtype_tags(dtype: Any, values: Any) -> frozenset[str]:
    """Tags for a numpy/pandas dtype, inspecting values for object columns."""
    import pandas as pd
    from pandas.api import types as ptypes

    if isinstance(dtype, pd.CategoricalDtype):
        return _dtype_tags(dtype.categories.dtype, dtype.categories)
    if ptypes.is_bool_dtype(dtype):
        return _LOGICAL_TAGS
    if ptypes.is_integer_dtype(dtype):
        return _INTEGER_TAGS
    if ptypes.is_float_dtype(dtype):
        return _DOUBLE_TAGS
    if ptypes.is_complex_dtype(dtype):
        return _COMPLEX_TAGS
    if ptypes.is_string_dtype(dtype):
        # object dtype also reports as string dtype - confirm with the values
        present = [v for v in values if not is_missing(v)]
        if all(isinstance(v, str) for v in present):
            return _CHARACTER_TAGS
    if ptypes.is_object_dtype(dtype):
        present = [v for v in values if not is_missing(v)]
        if present and all(isinstance(v, bool) for v in present):
            return _LOGICAL_TAGS
        if present and all(isinstance(v, int) and not isinstance(v, bool) for v in present):
            return _INTEGER_TAGS
    return frozenset()


def runtime_tags(value: Any) -> frozenset[str]:
    """Return the host-level tags carried by a value.

    Args:
        value: Any Python value, numpy scalar/array or pandas object

    Returns:
        Frozen set of PrimitiveTag values (empty for unrecognized types)
    """
    import numpy as np
    import pandas as pd

    if value is None:
        return frozenset({PrimitiveTag.NULL})

    # bool before int: bool subclasses int but is never numeric here
    if isinstance(value, (bool, np.bool_)):
        return _LOGICAL_TAGS
    if isinstance(value, (int, np.integer)):
        return _INTEGER_TAGS
    if isinstance(value, (float, np.floating)):
        return _DOUBLE_TAGS
    if isinstance(value, (complex, np.complexfloating)):
        return _COMPLEX_TAGS
    if isinstance(value, (str, np.str_)):
        return _CHARACTER_TAGS
    if isinstance(value, (bytes, np.bytes_)):
        return frozenset({PrimitiveTag.RAW})

    if isinstance(value, pd.DataFrame):
        return frozenset({PrimitiveTag.DATA_FRAME})
    if isinstance(value, (pd.Series, pd.Index)):
        return _dtype_tags(value.dtype, value)
    if isinstance(value, np.ndarray):
        return _dtype_tags(value.dtype, value.ravel())

    if isinstance(value, (list, tuple)):
        return frozenset({PrimitiveTag.LIST})
    if isinstance(value, Mapping):
        return frozenset({PrimitiveTag.DICT})
    if callable(value):
        return frozenset({PrimitiveTag.FUNCTION})
    return frozenset()


def type_label(value: Any) -> str:
    """Short human-readable type name for error messages."""
    tags = runtime_tags(value)
    cls_name = type(value).__name__
    if not tags:
        return cls_name
    return f"{cls_name} ({', '.join(sorted(tags))})"
