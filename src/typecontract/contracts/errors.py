"""Exception taxonomy for contract definition, validation and mutation.

Two propagation modes exist:
- Construction paths BATCH: every property/column is checked and all
  problems are reported together (ContractValidationError, TableValidationError).
- Read/write/call paths FAIL FAST: the first failing check raises a
  precise, single-problem exception (TypeMismatchViolation, etc.).

Several classes also inherit a builtin exception so ordinary Python
idioms keep working, e.g. hasattr() on an UndeclaredPropertyError.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any


def format_error_list(header: str, errors: Sequence[str]) -> str:
    """Render a header followed by one indented bullet per error."""
    return "\n  - ".join([header, *errors])


class TypeContractError(Exception):
    """Base class for every error raised by typecontract."""


class ContractConfigError(TypeContractError, ValueError):
    """Raised when a contract, enum, table or function definition is malformed.

    Examples: an extends entry that is not a contract, an empty Union,
    an unknown violation policy, a self-referencing contract.
    """


# =============================================================================
# Property-level violations (fail-fast paths)
# =============================================================================


class PropertyViolation(TypeContractError):
    """Base class for a single property failing its contract.

    Attributes:
        property_name: Name of the offending property (or argument)
    """

    def __init__(self, property_name: str, message: str) -> None:
        self.property_name = property_name
        super().__init__(message)


class MissingPropertyViolation(PropertyViolation):
    """A required property was absent."""

    def __init__(self, property_name: str) -> None:
        super().__init__(property_name, f"Missing required property: {property_name}")


class TypeMismatchViolation(PropertyViolation):
    """A value failed its declared type spec.

    Attributes:
        property_name: Name of the offending property
        value: The rejected value
        errors: Validator messages (first one is the headline)
    """

    def __init__(self, property_name: str, value: Any, errors: Sequence[str]) -> None:
        self.value = value
        self.errors = tuple(errors)
        super().__init__(property_name, "\n".join(self.errors))


class UndeclaredPropertyError(PropertyViolation, AttributeError, KeyError):
    """Read or write of a name the contract does not declare."""

    def __init__(self, property_name: str, contract_name: str) -> None:
        self.contract_name = contract_name
        super().__init__(property_name, f"Property '{property_name}' does not exist on {contract_name}")

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return str(self.args[0])


class ContractValidationError(TypeContractError):
    """Batched failure from instantiating a contract.

    Attributes:
        contract_name: Contract being instantiated
        errors: Every problem found, in declaration order
    """

    def __init__(self, contract_name: str, errors: Sequence[str]) -> None:
        self.contract_name = contract_name
        self.errors = tuple(errors)
        super().__init__(format_error_list(f"Errors occurred during {contract_name} creation:", self.errors))


# =============================================================================
# Enumerations
# =============================================================================


class InvalidEnumValueError(TypeContractError, ValueError):
    """Value outside an enum's allowed set (or more than one value)."""

    def __init__(self, value: Any, allowed: Sequence[Any], message: str | None = None) -> None:
        self.value = value
        self.allowed = tuple(allowed)
        if message is None:
            message = f"Invalid value. Must be one of: {', '.join(str(v) for v in self.allowed)}"
        super().__init__(message)


class InvalidFieldError(TypeContractError, AttributeError):
    """Access to an enum field other than 'value'."""

    def __init__(self, field_name: str) -> None:
        self.field_name = field_name
        super().__init__(f"Invalid field '{field_name}' for enum: only 'value' is accessible")


# =============================================================================
# Typed functions
# =============================================================================


class MissingArgumentError(TypeContractError, TypeError):
    """A required typed-function argument was not supplied."""

    def __init__(self, argument: str, function_name: str) -> None:
        self.argument = argument
        self.function_name = function_name
        super().__init__(f"Missing required argument: {argument} (in call to {function_name})")


class UnexpectedArgumentError(TypeContractError, TypeError):
    """A typed function received an argument it does not declare, or one twice."""


class ReturnTypeError(TypeContractError, TypeError):
    """The implementation returned a value that fails the return spec.

    Raised after the implementation ran; its side effects are not undone.

    Attributes:
        value: The rejected return value
        errors: Validator messages
    """

    def __init__(self, function_name: str, value: Any, errors: Sequence[str]) -> None:
        self.function_name = function_name
        self.value = value
        self.errors = tuple(errors)
        super().__init__(format_error_list(f"Invalid return value from {function_name}:", self.errors))


# =============================================================================
# Typed tables
# =============================================================================


class FrozenColumnsError(TypeContractError):
    """Column added or removed on a table with a frozen column set."""

    def __init__(self, column: str, action: str = "add") -> None:
        self.column = column
        self.action = action
        verb = "Adding new columns" if action == "add" else "Removing columns"
        super().__init__(f"{verb} is not allowed when freeze_column_count is True (column '{column}')")


class ColumnCountMismatchError(TypeContractError, ValueError):
    """Row-wise concatenation of tables with different column counts."""

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"Cannot concatenate tables with different column counts: expected {expected}, got {actual}")


class RowValidationError(TypeContractError):
    """A row callback rejected a row.

    Attributes:
        row_index: Zero-based row position (messages print it 1-based)
        reason: Message returned (or raised) by the callback
    """

    def __init__(self, row_index: int, reason: str) -> None:
        self.row_index = row_index
        self.reason = reason
        super().__init__(f"Row {row_index + 1} failed validation: {reason}")


class TableValidationError(TypeContractError):
    """Batched table failure raised under the 'error' violation policy.

    Attributes:
        errors: Every problem found
    """

    def __init__(self, errors: Sequence[str], header: str = "Validation errors:") -> None:
        self.errors = tuple(errors)
        super().__init__(format_error_list(header, self.errors))


class TableValidationWarning(UserWarning):
    """Emitted under the 'warning' violation policy."""
