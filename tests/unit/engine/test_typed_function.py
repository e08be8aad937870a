"""Tests for typed functions.

Tests for:
- Argument binding: positional, keyword, defaults, unexpected and missing
- Fail-fast argument validation before the implementation runs
- Return validation after the implementation ran (no rollback)
- Decorator form, metadata and describe()
"""

import pytest

from typecontract.contracts.errors import (
    ContractConfigError,
    MissingArgumentError,
    ReturnTypeError,
    TypeMismatchViolation,
    UnexpectedArgumentError,
)
from typecontract.engine.typed_function import (
    MISSING,
    Parameter,
    TypedFunction,
    define_typed_function,
    typed_function,
)


@pytest.fixture
def add() -> TypedFunction:
    def add(x, y):
        """Add two numbers."""
        return x + y

    return define_typed_function({"x": float, "y": float}, float, add)


class TestBinding:
    """Mapping call arguments onto declared parameters."""

    def test_positional_and_keyword(self, add: TypedFunction) -> None:
        """Arguments bind by position then by name."""
        assert add(1, 2) == 3
        assert add(1, y=2.5) == 3.5
        assert add(y=1, x=2) == 3

    def test_too_many_positionals(self, add: TypedFunction) -> None:
        """Extra positionals are rejected."""
        with pytest.raises(UnexpectedArgumentError, match="takes 2 argument"):
            add(1, 2, 3)

    def test_unknown_keyword(self, add: TypedFunction) -> None:
        """Undeclared keywords are rejected."""
        with pytest.raises(UnexpectedArgumentError, match="unexpected argument 'z'"):
            add(1, 2, z=3)

    def test_duplicate_binding(self, add: TypedFunction) -> None:
        """A name bound twice is rejected."""
        with pytest.raises(UnexpectedArgumentError, match="multiple values for argument 'x'"):
            add(1, x=2)

    def test_missing_required(self, add: TypedFunction) -> None:
        """Missing required arguments are named."""
        with pytest.raises(MissingArgumentError, match="Missing required argument: y"):
            add(1)

    def test_defaults_fill_optional(self) -> None:
        """Omitted optional parameters receive their default unvalidated."""
        seen = {}

        def greet(name, greeting):
            seen["greeting"] = greeting
            return f"{greeting}, {name}"

        fn = TypedFunction(
            [Parameter("name", str), Parameter("greeting", str, default=None)],
            str,
            greet,
        )
        assert fn("Ada") == "None, Ada"
        assert seen["greeting"] is None
        assert fn("Ada", greeting="Hi") == "Hi, Ada"

    def test_required_after_optional_rejected(self) -> None:
        """A required parameter cannot follow one with a default."""
        with pytest.raises(ContractConfigError, match="follows a parameter with a default"):
            TypedFunction([Parameter("a", int, default=1), Parameter("b", int)], int, lambda a, b: a)

    def test_duplicate_parameter_names(self) -> None:
        """Parameter names must be unique."""
        with pytest.raises(ContractConfigError, match="Duplicate parameter names: a"):
            TypedFunction([Parameter("a", int), Parameter("a", str)], int, lambda a: a)

    def test_missing_sentinel(self) -> None:
        """MISSING marks required parameters and is falsy."""
        assert Parameter("x").default is MISSING
        assert Parameter("x").required
        assert not MISSING
        assert repr(MISSING) == "MISSING"


class TestValidation:
    """Argument and return checks."""

    def test_bad_argument_stops_before_call(self) -> None:
        """An invalid argument raises before the implementation runs."""
        calls = []

        def record(x):
            calls.append(x)
            return x

        fn = define_typed_function({"x": float}, float, record)
        with pytest.raises(TypeMismatchViolation, match="Argument 'x' must be of type numeric") as exc_info:
            fn("one")
        assert exc_info.value.property_name == "x"
        assert calls == []

    def test_first_bad_argument_wins(self) -> None:
        """Validation is fail-fast in declaration order."""
        fn = define_typed_function({"a": str, "b": str}, None, lambda a, b: None)
        with pytest.raises(TypeMismatchViolation) as exc_info:
            fn(1, 2)
        assert exc_info.value.property_name == "a"

    def test_return_checked_after_side_effects(self) -> None:
        """A bad return raises after the side effect happened."""
        counter = {"calls": 0}

        def bump(n):
            counter["calls"] += 1
            return "not a number"

        fn = define_typed_function({"n": int}, float, bump)
        with pytest.raises(ReturnTypeError, match="Return value 'bump' must be of type numeric") as exc_info:
            fn(1)
        assert counter["calls"] == 1
        assert exc_info.value.value == "not a number"

    def test_return_any(self) -> None:
        """A None return spec accepts any result."""
        fn = define_typed_function({"x": int}, None, lambda x: object())
        assert fn(1) is not None

    def test_union_argument(self) -> None:
        """Union parameter specs accept any member."""
        fn = define_typed_function({"key": [str, int]}, str, lambda key: str(key))
        assert fn("a") == "a"
        assert fn(3) == "3"
        with pytest.raises(TypeMismatchViolation, match="one of the following types"):
            fn(1.5)


class TestDecorator:
    """The typed_function decorator."""

    def test_decorator_wraps(self) -> None:
        """The decorator returns a TypedFunction keeping metadata."""

        @typed_function({"x": float, "y": float}, returns=float)
        def multiply(x, y):
            """Multiply two numbers."""
            return x * y

        assert isinstance(multiply, TypedFunction)
        assert multiply(2, 3) == 6
        assert multiply.__name__ == "multiply"
        assert multiply.__doc__ == "Multiply two numbers."
        assert multiply.name == "multiply"

    def test_keyword_specs(self) -> None:
        """Keyword specs are appended after mapping specs."""

        @typed_function(returns=str, first=str, last=str)
        def full_name(first, last):
            return f"{first} {last}"

        assert [p.name for p in full_name.parameters] == ["first", "last"]
        assert full_name("Ada", "Lovelace") == "Ada Lovelace"

    def test_not_callable(self) -> None:
        """The implementation must be callable."""
        with pytest.raises(ContractConfigError, match="must be callable"):
            TypedFunction({"x": int}, int, 5)  # type: ignore[arg-type]


class TestDescribe:
    """Rendering."""

    def test_describe(self, add: TypedFunction) -> None:
        """describe() lists arguments and return type."""
        assert add.describe() == "Typed function: add\nArguments:\n  x: numeric\n  y: numeric\nReturn type: numeric"

    def test_describe_defaults(self) -> None:
        """Defaults are shown after the spec."""
        fn = TypedFunction([Parameter("n", int, default=1)], int, lambda n: n, name="ident")
        assert "  n: integer = 1" in fn.describe()
        assert fn.describe().startswith("Typed function: ident")
