# src/typecontract/engine/__init__.py
"""Validation engine: property matching, policies, typed functions and tables."""

from typecontract.engine.policy import apply_policy
from typecontract.engine.typed_function import (
    MISSING,
    Parameter,
    TypedFunction,
    define_typed_function,
    typed_function,
)
from typecontract.engine.typed_table import (
    TableFactory,
    TypedTable,
    check_frame,
    concat,
    define_table,
)
from typecontract.engine.validator import (
    coerce_column,
    coerce_property,
    matches,
    validate_column,
    validate_property,
)

__all__ = [
    "MISSING",
    "Parameter",
    "TableFactory",
    "TypedFunction",
    "TypedTable",
    "apply_policy",
    "check_frame",
    "coerce_column",
    "coerce_property",
    "concat",
    "define_table",
    "define_typed_function",
    "matches",
    "typed_function",
    "validate_column",
    "validate_property",
]
