"""Property validation: match a value against a TypeSpec.

validate_property() is the single dispatch point for every spec variant
and is pure: it never mutates the value and returns the same messages
for the same (value, spec) pair. Callers decide whether messages are
batched (construction) or raised immediately (reads, writes, calls).

Column variants (validate_column, coerce_column) apply the same rules to
a pandas Series, checking element by element where a whole-column check
would be meaningless (enums, nested contracts, class membership).
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from typecontract.contracts.contract import ContractInstance
from typecontract.contracts.enum_type import EnumInstance
from typecontract.contracts.errors import ContractConfigError, InvalidEnumValueError, TypeMismatchViolation
from typecontract.contracts.type_normalization import is_missing, runtime_tags
from typecontract.contracts.type_spec import (
    AnyType,
    ContractRef,
    EnumRef,
    InstanceOf,
    Predicate,
    Primitive,
    TypeSpec,
    Union,
)

if TYPE_CHECKING:
    import pandas as pd


def validate_property(name: str, value: Any, spec: TypeSpec, *, kind: str = "Property") -> list[str]:
    """Validate one value against one spec.

    Args:
        name: Property, argument or column name (for messages)
        value: Value to check
        spec: Resolved TypeSpec
        kind: Noun used in messages ("Property", "Argument", "Column")

    Returns:
        Error messages; empty list means valid

    Raises:
        ContractConfigError: If spec holds an unresolved by-name contract reference
    """
    match spec:
        case AnyType():
            return []
        case Primitive(tag=tag):
            if tag in runtime_tags(value):
                return []
            return [f"{kind} '{name}' must be of type {tag}"]
        case InstanceOf():
            if spec.accepts(value):
                return []
            return [f"{kind} '{name}' must be of type {spec.cls_name}, but got {type(value).__name__}"]
        case Predicate():
            return _run_predicate(name, value, spec, kind)
        case ContractRef():
            if not spec.resolved:
                raise ContractConfigError(
                    f"Contract reference '{spec.contract_name}' is unresolved: define it through a ContractRegistry"
                )
            if isinstance(value, ContractInstance) and value.contract.same_shape(spec.target):  # type: ignore[arg-type]
                return []
            return [f"{kind} '{name}' must be an object implementing the {spec.contract_name} interface"]
        case EnumRef(enum_type=enum_type):
            if isinstance(value, EnumInstance):
                if value.owning_type.same_values(enum_type):
                    return []
                return [f"Invalid value for {kind.lower()} '{name}': enum instance belongs to a different enum type"]
            try:
                enum_type.check(value)
            except InvalidEnumValueError as e:
                return [f"Invalid value for {kind.lower()} '{name}': {e}"]
            return []
        case Union(members=members):
            errors: list[str] = []
            for member in members:
                member_errors = validate_property(name, value, member, kind=kind)
                if not member_errors:
                    return []
                errors.extend(member_errors)
            return [f"{kind} '{name}' must be one of the following types:\n  - " + "\n  - ".join(errors)]
    raise ContractConfigError(f"Invalid validator for {kind.lower()} '{name}': {spec!r}")


def matches(value: Any, spec: TypeSpec) -> bool:
    """Boolean form of validate_property."""
    return not validate_property("value", value, spec)


def coerce_property(name: str, value: Any, spec: TypeSpec, *, kind: str = "Property") -> Any:
    """Validate a value for storage, wrapping raw enum members.

    A Union stores the value the way its first matching member would, so a
    raw enum member accepted by an EnumRef member is wrapped too.

    Returns:
        The value to store: an EnumInstance for EnumRef specs, else value itself

    Raises:
        TypeMismatchViolation: If value fails spec
    """
    if isinstance(spec, Union):
        for member in spec.members:
            if not validate_property(name, value, member, kind=kind):
                return coerce_property(name, value, member, kind=kind)
        raise TypeMismatchViolation(name, value, validate_property(name, value, spec, kind=kind))

    if isinstance(spec, EnumRef) and not isinstance(value, EnumInstance):
        try:
            return spec.enum_type.construct(value)
        except InvalidEnumValueError as e:
            raise TypeMismatchViolation(name, value, [f"Invalid value for {kind.lower()} '{name}': {e}"]) from e

    errors = validate_property(name, value, spec, kind=kind)
    if errors:
        raise TypeMismatchViolation(name, value, errors)
    return value


# =============================================================================
# Predicates
# =============================================================================


def _predicate_outcome(spec: Predicate, value: Any) -> str | None:
    """Run a predicate once. None means accepted, a string explains rejection."""
    import numpy as np

    try:
        result = spec.fn(value)
    except Exception as e:  # predicate failures are reported, never propagated raw
        return f"{spec.name} raised {type(e).__name__}: {e}"

    if isinstance(result, (bool, np.bool_)):
        return None if result else f"{spec.name} returned False"
    if isinstance(result, str):
        return result
    return f"{spec.name} must return a single boolean, got {type(result).__name__}"


def _elements(value: Any) -> Iterable[Any]:
    if isinstance(value, (str, bytes)):
        return [value]
    if isinstance(value, Mapping):
        return list(value.values())
    try:
        return list(value)
    except TypeError:
        return [value]


def _run_predicate(name: str, value: Any, spec: Predicate, kind: str) -> list[str]:
    if not spec.elementwise:
        reason = _predicate_outcome(spec, value)
        if reason is None:
            return []
        return [f"Invalid value for {kind.lower()} '{name}': {reason}"]

    failing: list[str] = []
    first_reason: str | None = None
    for position, element in enumerate(_elements(value)):
        reason = _predicate_outcome(spec, element)
        if reason is not None:
            failing.append(str(position))
            if first_reason is None:
                first_reason = reason
    if not failing:
        return []
    return [f"Invalid value for {kind.lower()} '{name}': {spec.name} failed at index {', '.join(failing)} ({first_reason})"]


# =============================================================================
# Columns
# =============================================================================

_ELEMENTWISE_SPECS = (EnumRef, ContractRef, InstanceOf)


def validate_column(name: str, column: pd.Series, spec: TypeSpec) -> list[str]:
    """Validate a whole table column.

    Primitive specs check the column dtype. Enum, contract and class specs
    check each non-missing element and report the failing row positions.
    Everything else receives the column as a single value.
    Empty and all-missing columns carry no dtype information and match
    every Primitive spec; allow_missing governs the gaps.

    Returns:
        Error messages; empty list means valid
    """
    if isinstance(spec, Primitive) and not bool(column.notna().any()):
        return []
    if isinstance(spec, _ELEMENTWISE_SPECS):
        errors: list[str] = []
        for position, element in enumerate(column):
            if is_missing(element):
                continue
            element_errors = validate_property(name, element, spec, kind="Column")
            errors.extend(f"Row {position + 1}: {message}" for message in element_errors)
        return errors
    if isinstance(spec, Union):
        member_errors: list[str] = []
        for member in spec.members:
            errors = validate_column(name, column, member)
            if not errors:
                return []
            member_errors.extend(errors)
        return [f"Column '{name}' must be one of the following types:\n  - " + "\n  - ".join(member_errors)]
    return validate_property(name, column, spec, kind="Column")


def coerce_column(name: str, column: pd.Series, spec: TypeSpec) -> tuple[pd.Series, list[str]]:
    """Validate a column and convert enum columns to pandas Categorical.

    Returns:
        (column, errors) - the column is converted only when it is valid
    """
    import pandas as pd

    errors = validate_column(name, column, spec)
    if errors or not isinstance(spec, EnumRef):
        return column, errors

    raw = [element.value if isinstance(element, EnumInstance) else element for element in column]
    categorical = pd.Categorical(raw, categories=list(spec.enum_type.values))
    return pd.Series(categorical, index=column.index, name=column.name), errors
