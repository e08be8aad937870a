# src/typecontract/testing/__init__.py
"""Test infrastructure for typecontract users.

Factories for constructing contracts, enums, typed functions and typed
tables with sensible defaults. When a definition signature changes,
update the factory here. Tests that use factories need ZERO changes.

Usage:
    from typecontract.testing import make_contract, make_instance
    from typecontract.testing import make_table_factory, make_table
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from typecontract.contracts import (
    Contract,
    ContractInstance,
    EnumInstance,
    EnumType,
    define_contract,
    define_enum,
)
from typecontract.engine import (
    TableFactory,
    TypedFunction,
    TypedTable,
    define_table,
    define_typed_function,
)

# =============================================================================
# Contracts
# =============================================================================


def _inferred_spec(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, ContractInstance):
        return value.contract
    if isinstance(value, EnumInstance):
        return value.owning_type
    return type(value)


def make_contract(
    data: Mapping[str, Any] | None = None,
    *,
    fields: Mapping[str, Any] | None = None,
    name: str = "Record",
    **options: Any,
) -> Contract:
    """Build a Contract from sample data or explicit field specs.

    Usage:
        contract = make_contract({"id": 1, "name": "Alice"})        # Infer from data
        contract = make_contract(fields={"id": int, "name": str})    # Explicit specs
        contract = make_contract()                                    # No properties

    Options (extends, validate_on_access, allow_extra) pass through to
    define_contract.
    """
    if fields is not None:
        properties = dict(fields)
    elif data is not None:
        properties = {key: _inferred_spec(value) for key, value in data.items()}
    else:
        properties = {}
    return define_contract(name, properties, **options)


def make_instance(
    data: Mapping[str, Any] | None = None,
    *,
    contract: Contract | None = None,
    **kwargs: Any,
) -> ContractInstance:
    """Build a ContractInstance from a dict.

    Usage:
        person = make_instance({"name": "Ada", "age": 36})
        person = make_instance(name="Ada", age=36)             # kwargs shorthand
        person = make_instance({"name": "Ada"}, contract=c)    # explicit contract
    """
    if data is None:
        data = kwargs
    if contract is None:
        contract = make_contract(data)
    return contract.instantiate(data)


def make_person_contract(**options: Any) -> Contract:
    """The canonical Person(name, age, email) contract used across examples."""
    return define_contract("Person", {"name": str, "age": float, "email": str}, **options)


# =============================================================================
# Enums
# =============================================================================


def make_enum(*values: Any, name: str | None = "Colour") -> EnumType:
    """Build an EnumType; defaults to red/green/blue."""
    if not values:
        values = ("red", "green", "blue")
    return define_enum(*values, name=name)


# =============================================================================
# Typed functions
# =============================================================================


def make_typed_function(
    impl: Callable[..., Any] | None = None,
    *,
    params: Mapping[str, Any] | None = None,
    returns: Any = float,
) -> TypedFunction:
    """Build a TypedFunction; defaults to add(x: numeric, y: numeric) -> numeric."""
    if impl is None:

        def add(x: float, y: float) -> float:
            return x + y

        impl = add
    if params is None:
        params = {"x": float, "y": float}
    return define_typed_function(params, returns, impl)


# =============================================================================
# Typed tables
# =============================================================================


def make_table_factory(columns: Mapping[str, Any] | None = None, **options: Any) -> TableFactory:
    """Build a TableFactory; defaults to (id: integer, name: character).

    Options (freeze_column_count, row_callback, allow_missing,
    on_violation, frame) pass through to define_table.
    """
    if columns is None:
        columns = {"id": int, "name": str}
    return define_table(columns, **options)


def make_table(
    data: Mapping[str, Any] | None = None,
    *,
    factory: TableFactory | None = None,
    **options: Any,
) -> TypedTable:
    """Build a TypedTable with valid default data.

    Usage:
        table = make_table()                                          # 3 rows of id/name
        table = make_table({"id": [1], "name": ["a"]}, on_violation="silent")
        table = make_table(data, factory=my_factory)
    """
    if data is None:
        data = {"id": [1, 2, 3], "name": ["a", "b", "c"]}
    if factory is None:
        factory = make_table_factory(**options)
    return factory(data)
