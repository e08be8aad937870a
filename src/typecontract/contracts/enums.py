"""Status codes and kinds shared across the contracts and engine packages.

Every value here is a StrEnum so it compares equal to its plain string form.
That lets callers pass "error" or ViolationPolicy.ERROR interchangeably.
"""

from enum import StrEnum


class ViolationPolicy(StrEnum):
    """What to do when batched table validation finds problems.

    Values:
        ERROR: Raise TableValidationError and abort the operation
        WARNING: Emit TableValidationWarning and keep the result
        SILENT: Keep the result, log at debug level only
    """

    ERROR = "error"
    WARNING = "warning"
    SILENT = "silent"


class PrimitiveTag(StrEnum):
    """Runtime tags a Primitive type spec can require.

    Numeric tags follow the host's numeric tower: an integer carries both
    INTEGER and NUMERIC, a float carries both DOUBLE and NUMERIC. Booleans
    are LOGICAL only even though bool subclasses int in Python.
    """

    CHARACTER = "character"
    NUMERIC = "numeric"
    INTEGER = "integer"
    DOUBLE = "double"
    LOGICAL = "logical"
    COMPLEX = "complex"
    RAW = "raw"
    LIST = "list"
    DICT = "dict"
    DATA_FRAME = "data.frame"
    FUNCTION = "function"
    NULL = "null"


def parse_violation_policy(value: str | ViolationPolicy) -> ViolationPolicy:
    """Parse a violation policy, accepting "warn" as shorthand for "warning".

    Raises:
        ValueError: If value names no policy
    """
    if isinstance(value, ViolationPolicy):
        return value
    normalized = value.strip().lower()
    if normalized == "warn":
        return ViolationPolicy.WARNING
    try:
        return ViolationPolicy(normalized)
    except ValueError:
        valid = ", ".join(p.value for p in ViolationPolicy)
        raise ValueError(f"Invalid violation policy '{value}'. Valid policies: {valid}") from None
