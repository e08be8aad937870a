"""Result type for batched validation.

Batched checks (contract instantiation, table construction, table
mutation) collect every problem into a ValidationReport instead of
raising on the first one. The caller then decides what to do: raise,
warn or ignore (see typecontract.engine.policy).
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from typecontract.contracts.errors import format_error_list


@dataclass(frozen=True, slots=True)
class ValidationReport:
    """Immutable collection of validation messages.

    Attributes:
        errors: Messages in the order they were found (empty = valid)
    """

    errors: tuple[str, ...] = ()

    @classmethod
    def of(cls, errors: Iterable[str]) -> ValidationReport:
        return cls(tuple(errors))

    @property
    def ok(self) -> bool:
        """True when no problems were found."""
        return not self.errors

    def __bool__(self) -> bool:
        return self.ok

    def __len__(self) -> int:
        return len(self.errors)

    def __iter__(self) -> Iterator[str]:
        return iter(self.errors)

    def merge(self, other: ValidationReport) -> ValidationReport:
        """Return a report holding this report's errors followed by other's."""
        return ValidationReport(self.errors + other.errors)

    def message(self, header: str = "Validation errors:") -> str:
        """Multi-line rendering: header then one bullet per error."""
        return format_error_list(header, self.errors)
