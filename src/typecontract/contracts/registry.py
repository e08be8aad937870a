"""Named contract definitions with by-name references.

A ContractRegistry lets contracts refer to each other by name:

    registry = ContractRegistry()
    registry.define("Address", street=str, city=str)
    registry.define("Person", name=str, home=ContractRef("Address"))
    registry.define("Employee", extends=["Person"], salary=float)

References are resolved when the referring contract is defined, so every
name must already be registered. A contract referring to its own name is
rejected as a cycle; since definitions are immutable and can only point
at earlier ones, the reference graph stays acyclic.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from typing import Any

from typecontract.contracts.contract import Contract, define_contract
from typecontract.contracts.errors import ContractConfigError
from typecontract.contracts.type_spec import ContractRef, TypeSpec, Union, as_type_spec
from typecontract.core.logging import get_logger

logger = get_logger(__name__)


class ContractRegistry:
    """Name -> Contract table owned by the caller (there is no global one)."""

    def __init__(self) -> None:
        self._contracts: dict[str, Contract] = {}

    def define(
        self,
        name: str,
        properties: Mapping[str, Any] | None = None,
        /,
        *,
        extends: Sequence[Contract | str] = (),
        validate_on_access: bool | None = None,
        allow_extra: bool | None = None,
        **kw_properties: Any,
    ) -> Contract:
        """Define and register a contract, resolving by-name references.

        Args:
            name: Unique contract name
            properties: Property name -> type spec shorthand
            extends: Contracts or registered contract names
            validate_on_access: See define_contract
            allow_extra: See define_contract
            **kw_properties: More property declarations

        Returns:
            The registered Contract

        Raises:
            ContractConfigError: On duplicate names, unknown references or cycles
        """
        if name in self._contracts:
            raise ContractConfigError(f"Contract '{name}' is already registered")

        if isinstance(extends, (str, Contract)):
            extends = (extends,)
        resolved_extends = tuple(self._resolve_name(entry, owner=name) for entry in extends)

        raw: dict[str, Any] = dict(properties or {})
        raw.update(kw_properties)
        resolved: dict[str, TypeSpec] = {}
        for prop_name, spec in raw.items():
            try:
                resolved[prop_name] = self._resolve_spec(as_type_spec(spec), owner=name)
            except ContractConfigError as e:
                raise ContractConfigError(f"Invalid validator for property '{prop_name}' of {name}: {e}") from e

        contract = define_contract(
            name,
            resolved,
            extends=resolved_extends,
            validate_on_access=validate_on_access,
            allow_extra=allow_extra,
        )
        self._contracts[name] = contract
        logger.debug("contract_registered", contract=name, registered=len(self._contracts))
        return contract

    def register(self, contract: Contract) -> Contract:
        """Register an already-built contract under its own name."""
        if contract.name in self._contracts:
            raise ContractConfigError(f"Contract '{contract.name}' is already registered")
        self._contracts[contract.name] = contract
        return contract

    def _resolve_name(self, entry: Contract | str, *, owner: str) -> Contract:
        if isinstance(entry, Contract):
            return entry
        if not isinstance(entry, str):
            raise ContractConfigError(f"Invalid extends argument: {entry!r} is not a contract")
        if entry == owner:
            raise ContractConfigError(f"Contract '{owner}' references itself: reference cycles are not allowed")
        try:
            return self._contracts[entry]
        except KeyError:
            raise ContractConfigError(f"Unknown contract '{entry}' referenced by '{owner}'") from None

    def _resolve_spec(self, spec: TypeSpec, *, owner: str) -> TypeSpec:
        match spec:
            case ContractRef(target=str() as target):
                return ContractRef(self._resolve_name(target, owner=owner))
            case Union(members=members):
                return Union(tuple(self._resolve_spec(m, owner=owner) for m in members))
        return spec

    def get(self, name: str) -> Contract | None:
        return self._contracts.get(name)

    def __getitem__(self, name: str) -> Contract:
        try:
            return self._contracts[name]
        except KeyError:
            raise ContractConfigError(f"Unknown contract '{name}'") from None

    def __contains__(self, name: object) -> bool:
        return name in self._contracts

    def __iter__(self) -> Iterator[Contract]:
        return iter(self._contracts.values())

    def __len__(self) -> int:
        return len(self._contracts)

    def names(self) -> tuple[str, ...]:
        return tuple(self._contracts)
