"""Closed-set enumerations usable as property, argument and column types.

An EnumType is a generator: calling it with a member value returns an
EnumInstance. The instance invariant (value is always a member) is
enforced on construction and on every write, never on read.

Example:
    Colour = define_enum("red", "green", "blue")
    c = Colour("red")
    c.value = "green"      # ok
    c.value = "yellow"     # InvalidEnumValueError, value stays "green"
"""

from __future__ import annotations

from collections.abc import Hashable, Iterator
from typing import Any

from typecontract.contracts.errors import ContractConfigError, InvalidEnumValueError, InvalidFieldError
from typecontract.core.logging import get_logger

logger = get_logger(__name__)


class EnumType:
    """Enumeration definition: an ordered set of allowed values.

    Immutable once built and safe to share between any number of instances.
    """

    __slots__ = ("_name", "_value_set", "_values")

    def __init__(self, values: tuple[Any, ...], name: str | None = None) -> None:
        """Initialize EnumType.

        Args:
            values: Allowed values, in declaration order
            name: Optional display name

        Raises:
            ContractConfigError: If values is empty, contains duplicates or unhashable values
        """
        if not values:
            raise ContractConfigError("An enum requires at least one allowed value")
        for value in values:
            if not isinstance(value, Hashable):
                raise ContractConfigError(f"Enum values must be hashable, got {type(value).__name__}")
        if len(set(values)) != len(values):
            duplicates = sorted({str(v) for v in values if values.count(v) > 1})
            raise ContractConfigError(f"Duplicate enum values: {', '.join(duplicates)}")
        self._values = tuple(values)
        self._value_set = frozenset(values)
        self._name = name

    @property
    def values(self) -> tuple[Any, ...]:
        """Allowed values in declaration order."""
        return self._values

    @property
    def name(self) -> str | None:
        return self._name

    def __contains__(self, value: object) -> bool:
        if isinstance(value, EnumInstance):
            value = value.value
        try:
            return value in self._value_set
        except TypeError:
            # Unhashable values (lists, dicts) can never be members
            return False

    def __iter__(self) -> Iterator[Any]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def same_values(self, other: EnumType) -> bool:
        """Structural equality: same allowed values in the same order."""
        return self._values == other._values

    def check(self, value: Any) -> Any:
        """Return value unchanged if it is a single allowed member.

        Raises:
            InvalidEnumValueError: If value is a collection or not a member
        """
        if isinstance(value, (list, tuple, set, frozenset)) or _is_array_like(value):
            raise InvalidEnumValueError(
                value,
                self._values,
                f"An enum instance holds exactly one value, got {type(value).__name__}",
            )
        if value not in self:
            raise InvalidEnumValueError(value, self._values)
        return value

    def construct(self, value: Any) -> EnumInstance:
        """Create an instance holding value.

        An EnumInstance of a structurally equal enum is unwrapped first.

        Raises:
            InvalidEnumValueError: If value is not an allowed member
        """
        if isinstance(value, EnumInstance):
            value = value.value
        return EnumInstance(self, self.check(value))

    def __call__(self, value: Any) -> EnumInstance:
        return self.construct(value)

    def describe(self) -> str:
        return f"Enum generator: {', '.join(str(v) for v in self._values)}"

    def __repr__(self) -> str:
        label = f" {self._name}" if self._name else ""
        return f"<EnumType{label}: {', '.join(repr(v) for v in self._values)}>"


class EnumInstance:
    """A single value of an EnumType.

    Only the 'value' pseudo-property exists. Reading or writing any other
    attribute raises InvalidFieldError.
    """

    __slots__ = ("_owning_type", "_value")

    def __init__(self, owning_type: EnumType, value: Any) -> None:
        object.__setattr__(self, "_owning_type", owning_type)
        object.__setattr__(self, "_value", owning_type.check(value))

    @property
    def owning_type(self) -> EnumType:
        return self._owning_type

    @property
    def value(self) -> Any:
        return self._value

    @value.setter
    def value(self, new_value: Any) -> None:
        if isinstance(new_value, EnumInstance):
            new_value = new_value.value
        # check() raises before the write, so a rejected value leaves the old one
        object.__setattr__(self, "_value", self._owning_type.check(new_value))
        logger.debug("enum_value_set", value=new_value)

    def set_value(self, new_value: Any) -> None:
        """Explicit form of `instance.value = new_value`."""
        self.value = new_value

    def __getattr__(self, name: str) -> Any:
        # Only reached for names not found normally (slots and properties are)
        raise InvalidFieldError(name)

    def __setattr__(self, name: str, value: Any) -> None:
        if name != "value":
            raise InvalidFieldError(name)
        object.__setattr__(self, name, value)

    def __reduce__(self) -> tuple[Any, ...]:
        return (EnumInstance, (self._owning_type, self._value))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, EnumInstance):
            return bool(self._value == other._value)
        return bool(self._value == other)

    def __hash__(self) -> int:
        return hash(self._value)

    def __repr__(self) -> str:
        return f"Enum: {self._value}"

    def __str__(self) -> str:
        return str(self._value)


def define_enum(*values: Any, name: str | None = None) -> EnumType:
    """Define an enumeration.

    Args:
        *values: Allowed values (unique, hashable)
        name: Optional display name

    Returns:
        The EnumType, callable to construct instances

    Raises:
        ContractConfigError: If values are empty, duplicated or unhashable
    """
    enum_type = EnumType(tuple(values), name=name)
    logger.debug("enum_defined", name=name, values=len(enum_type))
    return enum_type


def _is_array_like(value: Any) -> bool:
    # numpy arrays and pandas objects, without importing either
    return hasattr(value, "shape") and getattr(value, "shape", ()) != ()
