"""Tests for EnumType and EnumInstance.

Tests for:
- define_enum(): validation of allowed values
- Construction: members accepted, non-members and collections rejected
- The 'value' pseudo-property: checked writes, other fields rejected
- Equality, hashing, copying and rendering
"""

import copy
import pickle

import numpy as np
import pytest

from typecontract.contracts.enum_type import EnumInstance, EnumType, define_enum
from typecontract.contracts.errors import ContractConfigError, InvalidEnumValueError, InvalidFieldError


@pytest.fixture
def colour() -> EnumType:
    return define_enum("red", "green", "blue", name="Colour")


class TestDefineEnum:
    """Definition-time checks."""

    def test_values_keep_order(self, colour: EnumType) -> None:
        """Allowed values keep declaration order."""
        assert colour.values == ("red", "green", "blue")
        assert list(colour) == ["red", "green", "blue"]
        assert len(colour) == 3
        assert colour.name == "Colour"

    def test_empty_rejected(self) -> None:
        """An enum needs at least one value."""
        with pytest.raises(ContractConfigError, match="at least one"):
            define_enum()

    def test_duplicates_rejected(self) -> None:
        """Duplicate values are rejected and named."""
        with pytest.raises(ContractConfigError, match="Duplicate enum values: a"):
            define_enum("a", "b", "a")

    def test_unhashable_rejected(self) -> None:
        """Unhashable values cannot be members."""
        with pytest.raises(ContractConfigError, match="hashable"):
            define_enum(["a"], "b")

    def test_describe(self, colour: EnumType) -> None:
        """describe() lists the allowed values."""
        assert colour.describe() == "Enum generator: red, green, blue"


class TestConstruction:
    """Building instances."""

    def test_member_accepted(self, colour: EnumType) -> None:
        """A member value builds an instance."""
        red = colour("red")
        assert isinstance(red, EnumInstance)
        assert red.value == "red"
        assert red.owning_type is colour

    def test_non_member_rejected(self, colour: EnumType) -> None:
        """A non-member raises with the allowed list."""
        with pytest.raises(InvalidEnumValueError, match="Invalid value. Must be one of: red, green, blue"):
            colour("yellow")

    @pytest.mark.parametrize("value", [["red"], ("red", "green"), {"red"}])
    def test_collections_rejected(self, colour: EnumType, value: object) -> None:
        """An instance holds exactly one value."""
        with pytest.raises(InvalidEnumValueError, match="exactly one value"):
            colour.construct(value)

    def test_array_rejected(self, colour: EnumType) -> None:
        """numpy arrays count as collections."""
        with pytest.raises(InvalidEnumValueError):
            colour.construct(np.array(["red"]))

    def test_instance_unwrapped(self, colour: EnumType) -> None:
        """Constructing from an instance of an equal enum copies its value."""
        other = define_enum("red", "green", "blue")
        assert colour(other("green")).value == "green"

    def test_membership(self, colour: EnumType) -> None:
        """'in' accepts raw values and instances, never unhashables."""
        assert "red" in colour
        assert colour("blue") in colour
        assert "yellow" not in colour
        assert ["red"] not in colour


class TestValueField:
    """The 'value' pseudo-property."""

    def test_set_valid_value(self, colour: EnumType) -> None:
        """Assigning a member updates the value."""
        instance = colour("red")
        instance.value = "green"
        assert instance.value == "green"

    def test_rejected_write_keeps_old_value(self, colour: EnumType) -> None:
        """A rejected write leaves the previous value in place."""
        instance = colour("red")
        instance.set_value("green")
        with pytest.raises(InvalidEnumValueError):
            instance.set_value("yellow")
        assert instance.value == "green"

    def test_other_field_read_rejected(self, colour: EnumType) -> None:
        """Only 'value' can be read."""
        instance = colour("red")
        with pytest.raises(InvalidFieldError, match="shade"):
            _ = instance.shade  # type: ignore[attr-defined]

    def test_other_field_write_rejected(self, colour: EnumType) -> None:
        """Only 'value' can be written."""
        instance = colour("red")
        with pytest.raises(InvalidFieldError):
            instance.shade = "dark"  # type: ignore[attr-defined]
        assert instance.value == "red"

    def test_hasattr_is_false(self, colour: EnumType) -> None:
        """InvalidFieldError is an AttributeError so hasattr() works."""
        assert not hasattr(colour("red"), "shade")


class TestInstanceProtocol:
    """Equality, hashing, rendering and copying."""

    def test_equality(self, colour: EnumType) -> None:
        """Instances equal instances and raw values with the same value."""
        assert colour("red") == colour("red")
        assert colour("red") == "red"
        assert colour("red") != colour("blue")

    def test_hash_follows_value(self, colour: EnumType) -> None:
        """Equal instances hash alike."""
        assert hash(colour("red")) == hash("red")
        assert len({colour("red"), colour("red")}) == 1

    def test_repr_and_str(self, colour: EnumType) -> None:
        """repr shows 'Enum: value'; str shows the value."""
        assert repr(colour("red")) == "Enum: red"
        assert str(colour("red")) == "red"

    def test_copy_is_independent(self, colour: EnumType) -> None:
        """A copy shares the type but not later writes."""
        original = colour("red")
        duplicate = copy.copy(original)
        duplicate.value = "blue"
        assert original.value == "red"
        assert duplicate.owning_type is colour

    def test_pickle_round_trip(self) -> None:
        """Instances survive pickling with the value intact."""
        restored = pickle.loads(pickle.dumps(define_enum("a", "b")("b")))
        assert restored.value == "b"
        assert restored.owning_type.values == ("a", "b")
