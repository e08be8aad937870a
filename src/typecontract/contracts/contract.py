"""Contracts: named structural types with typed properties.

This module implements:
- Contract: immutable definition (declared properties + merged extends)
- ContractInstance: a record validated against a Contract, with a
  checked read/write protocol
- define_contract / instantiate: the public entry points

Merge rule for extends: local declarations always win. Each extended
contract then contributes only the properties not already present, in
list order, so earlier extends win over later ones.
"""

from __future__ import annotations

import types
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from typecontract.contracts.errors import (
    ContractConfigError,
    ContractValidationError,
    TypeMismatchViolation,
    UndeclaredPropertyError,
)
from typecontract.contracts.reports import ValidationReport
from typecontract.contracts.type_spec import TypeSpec, as_type_spec, describe_spec, specs_equal
from typecontract.core.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True, eq=False)
class Contract:
    """Immutable structural type definition.

    Uses frozen dataclass pattern; share one Contract between any number
    of instances.

    Attributes:
        name: Display name used in error messages
        declared: Locally declared properties (name -> TypeSpec)
        extends: Contracts whose properties are merged in (non-overriding)
        validate_on_access: Re-validate stored values on every read
        allow_extra: Accept and store undeclared properties unchecked
    """

    name: str
    declared: Mapping[str, TypeSpec]
    extends: tuple[Contract, ...] = ()
    validate_on_access: bool = False
    allow_extra: bool = False

    # Computed in __post_init__
    _properties: Mapping[str, TypeSpec] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Freeze declarations and merge extended properties.

        Raises:
            ContractConfigError: If an extends entry is not a Contract
        """
        extends = tuple(self.extends)
        for ext in extends:
            if not isinstance(ext, Contract):
                raise ContractConfigError(f"Invalid extends argument: {ext!r} is not a contract")

        merged: dict[str, TypeSpec] = dict(self.declared)
        for ext in extends:
            for prop_name, spec in ext.properties.items():
                if prop_name not in merged:
                    merged[prop_name] = spec

        object.__setattr__(self, "declared", types.MappingProxyType(dict(self.declared)))
        object.__setattr__(self, "extends", extends)
        object.__setattr__(self, "_properties", types.MappingProxyType(merged))

    @property
    def properties(self) -> Mapping[str, TypeSpec]:
        """Merged property map: declared first, then inherited."""
        return self._properties

    @property
    def property_names(self) -> tuple[str, ...]:
        return tuple(self._properties)

    def same_shape(self, other: Contract) -> bool:
        """Structural equality: same property names with equal specs."""
        if self is other:
            return True
        if self._properties.keys() != other._properties.keys():
            return False
        return all(specs_equal(spec, other._properties[name]) for name, spec in self._properties.items())

    def check(self, values: Mapping[str, Any]) -> ValidationReport:
        """Validate values without building an instance.

        Returns:
            ValidationReport listing every problem (empty if valid)
        """
        _, errors = _build_fields(self, values)
        return ValidationReport.of(errors)

    def instantiate(self, values: Mapping[str, Any]) -> ContractInstance:
        """Create an instance from a mapping of property values.

        Raises:
            ContractValidationError: With every problem found, if any
        """
        return ContractInstance(self, values)

    def __call__(self, **values: Any) -> ContractInstance:
        return ContractInstance(self, values)

    def implemented_by(self, value: Any) -> bool:
        """True if value is an instance of a structurally equal contract."""
        return isinstance(value, ContractInstance) and value.contract.same_shape(self)

    def describe(self) -> str:
        lines = [f"Interface: {self.name}", "Properties:"]
        lines.extend(f"  {prop_name}: {describe_spec(spec)}" for prop_name, spec in self._properties.items())
        lines.append(f"Default validation on access: {_on_off(self.validate_on_access)}")
        return "\n".join(lines)

    def summary(self) -> str:
        return "\n".join(
            [
                f"Interface: {self.name}",
                f"Number of properties: {len(self._properties)}",
                f"Default validation on access: {_on_off(self.validate_on_access)}",
            ]
        )

    def __reduce__(self) -> tuple[Any, ...]:
        # MappingProxyType cannot be pickled; rebuild from plain declarations
        return (
            Contract,
            (self.name, dict(self.declared), self.extends, self.validate_on_access, self.allow_extra),
        )

    def __repr__(self) -> str:
        return f"<Contract {self.name}: {', '.join(self._properties)}>"


class ContractInstance:
    """A record that satisfies a Contract.

    Every write goes through the contract: attribute writes, item writes
    and set() all validate before committing. A rejected write leaves the
    stored value untouched.

    Property names that collide with methods (get, set, contract, ...) are
    still reachable through item access: instance["get"].

    Uses __slots__ so undeclared attributes cannot be attached directly.
    """

    __slots__ = ("_contract", "_fields")

    def __init__(self, contract: Contract, values: Mapping[str, Any]) -> None:
        """Validate values against contract and store them.

        Args:
            contract: The contract to satisfy
            values: Property values by name

        Raises:
            ContractValidationError: With every problem found, if any
        """
        fields, errors = _build_fields(contract, values)
        if errors:
            logger.debug("contract_instantiation_failed", contract=contract.name, errors=len(errors))
            raise ContractValidationError(contract.name, errors)
        object.__setattr__(self, "_contract", contract)
        object.__setattr__(self, "_fields", fields)

    @property
    def contract(self) -> Contract:
        return self._contract

    def get(self, name: str) -> Any:
        """Read a property.

        Raises:
            UndeclaredPropertyError: If name is not a declared property
                (or a stored extra when allow_extra is set)
            TypeMismatchViolation: If validate_on_access is set and the
                stored value no longer satisfies its spec
        """
        contract = self._contract
        spec = contract.properties.get(name)
        if spec is None:
            if contract.allow_extra and name in self._fields:
                return self._fields[name]
            raise UndeclaredPropertyError(name, contract.name)

        value = self._fields[name]
        if contract.validate_on_access:
            from typecontract.engine.validator import validate_property

            errors = validate_property(name, value, spec)
            if errors:
                raise TypeMismatchViolation(name, value, errors)
        return value

    def set(self, name: str, value: Any) -> None:
        """Write a property after validating it.

        Raises:
            UndeclaredPropertyError: If name is not declared and allow_extra is off
            TypeMismatchViolation: If value fails the property's spec
        """
        contract = self._contract
        spec = contract.properties.get(name)
        if spec is None:
            if not contract.allow_extra:
                raise UndeclaredPropertyError(name, contract.name)
            self._fields[name] = value
            return

        from typecontract.engine.validator import coerce_property

        self._fields[name] = coerce_property(name, value, spec)

    def __getattr__(self, name: str) -> Any:
        # Prevent infinite recursion for private attributes
        if name.startswith("_"):
            raise AttributeError(name)
        return self.get(name)

    def __setattr__(self, name: str, value: Any) -> None:
        self.set(name, value)

    def __getitem__(self, name: str) -> Any:
        return self.get(name)

    def __setitem__(self, name: str, value: Any) -> None:
        self.set(name, value)

    def __contains__(self, name: object) -> bool:
        return name in self._fields

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def to_dict(self) -> dict[str, Any]:
        """Shallow copy of stored values (no access validation)."""
        return dict(self._fields)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ContractInstance):
            return NotImplemented
        return self._contract.same_shape(other._contract) and self._fields == other._fields

    __hash__ = None  # type: ignore[assignment]

    def __reduce__(self) -> tuple[Any, ...]:
        # Copies go back through validation
        return (ContractInstance, (self._contract, dict(self._fields)))

    def __repr__(self) -> str:
        body = ", ".join(f"{k}={v!r}" for k, v in self._fields.items())
        return f"{self._contract.name}({body})"

    def describe(self) -> str:
        lines = [f"Object implementing {self._contract.name} interface:"]
        lines.extend(f"  {k}: {v}" for k, v in self._fields.items())
        lines.append(f"Validation on access: {_on_off(self._contract.validate_on_access)}")
        return "\n".join(lines)


def _build_fields(contract: Contract, values: Mapping[str, Any]) -> tuple[dict[str, Any], list[str]]:
    """Validate and coerce every property, collecting all problems.

    Returns:
        (fields, errors) - fields holds only the values that passed
    """
    from typecontract.engine.validator import coerce_property

    if not isinstance(values, Mapping):
        raise ContractConfigError(f"Property values for {contract.name} must be a mapping, got {type(values).__name__}")

    fields: dict[str, Any] = {}
    errors: list[str] = []

    for name, spec in contract.properties.items():
        if name not in values:
            errors.append(f"Missing required property: {name}")
            continue
        try:
            fields[name] = coerce_property(name, values[name], spec)
        except TypeMismatchViolation as e:
            errors.extend(e.errors)

    for name, value in values.items():
        if name in contract.properties:
            continue
        if contract.allow_extra:
            fields[name] = value
        else:
            errors.append(f"Undeclared property: {name}")

    return fields, errors


def define_contract(
    name: str,
    properties: Mapping[str, Any] | None = None,
    /,
    *,
    extends: Sequence[Contract] = (),
    validate_on_access: bool | None = None,
    allow_extra: bool | None = None,
    **kw_properties: Any,
) -> Contract:
    """Define a contract.

    Properties can be given as a mapping, as keyword arguments, or both
    (keywords win on conflict). Use the mapping form for property names
    that clash with the option keywords.

    Args:
        name: Contract name
        properties: Property name -> type spec shorthand
        extends: Contracts to merge in; local declarations always win
        validate_on_access: Re-validate on read (None = settings default)
        allow_extra: Store undeclared properties unchecked (None = settings default)
        **kw_properties: More property declarations

    Returns:
        The Contract (callable to instantiate)

    Raises:
        ContractConfigError: If a spec or an extends entry is invalid
    """
    from typecontract.core.config import get_settings

    settings = get_settings()
    if isinstance(extends, Contract):
        extends = (extends,)

    raw: dict[str, Any] = dict(properties or {})
    raw.update(kw_properties)
    declared: dict[str, TypeSpec] = {}
    for prop_name, spec in raw.items():
        try:
            declared[prop_name] = as_type_spec(spec)
        except ContractConfigError as e:
            raise ContractConfigError(f"Invalid validator for property '{prop_name}' of {name}: {e}") from e

    contract = Contract(
        name=name,
        declared=declared,
        extends=tuple(extends),
        validate_on_access=settings.validate_on_access if validate_on_access is None else validate_on_access,
        allow_extra=settings.allow_extra_properties if allow_extra is None else allow_extra,
    )
    logger.debug(
        "contract_defined",
        contract=name,
        properties=len(contract.properties),
        extends=[ext.name for ext in contract.extends],
    )
    return contract


def instantiate(contract: Contract, values: Mapping[str, Any]) -> ContractInstance:
    """Functional form of contract.instantiate(values)."""
    return contract.instantiate(values)


def _on_off(flag: bool) -> str:
    return "Enabled" if flag else "Disabled"
