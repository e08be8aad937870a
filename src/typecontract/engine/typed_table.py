"""Typed tables: pandas DataFrames guarded by per-column specs.

A TableFactory holds the column specs and table options. Calling it
builds a DataFrame, validates it in one batched pass and wraps the
result in a TypedTable. TypedTable owns its frame (it does not subclass
DataFrame) so every write goes through the mutation methods below.

Construction checks, in order:
1. Every declared column exists
2. Column count equals the declared count (freeze_column_count)
3. No missing cells (allow_missing=False)
4. Per-column spec validation; enum columns become pandas Categorical
5. Row callback once per row

Mutations build a candidate frame and re-check only what they touched:
the written column(s), NA policy on those columns, and the row callback
on the affected rows. The violation policy then decides whether the
candidate is committed.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from types import MappingProxyType
from typing import Any

import numpy as np
import pandas as pd

from typecontract.contracts.enums import ViolationPolicy
from typecontract.contracts.errors import (
    ColumnCountMismatchError,
    ContractConfigError,
    FrozenColumnsError,
    RowValidationError,
)
from typecontract.contracts.reports import ValidationReport
from typecontract.contracts.type_spec import TypeSpec, as_type_spec, describe_spec
from typecontract.core.config import TableOptions
from typecontract.core.logging import get_logger
from typecontract.engine.policy import apply_policy
from typecontract.engine.validator import coerce_column

logger = get_logger(__name__)

RowCallback = Callable[[dict[str, Any]], Any]

_CONSTRUCTION_HEADER = "Validation errors:"
_MUTATION_HEADER = "Validation errors after table modification:"


# =============================================================================
# Checks
# =============================================================================


def _missing_columns(frame: pd.DataFrame, specs: Mapping[str, TypeSpec]) -> list[str]:
    return [f"Required column '{name}' is missing" for name in specs if name not in frame.columns]


def _column_count(frame: pd.DataFrame, specs: Mapping[str, TypeSpec], options: TableOptions) -> list[str]:
    if not options.freeze_column_count or len(frame.columns) == len(specs):
        return []
    message = f"Expected {len(specs)} columns, found {len(frame.columns)}"
    extra = [str(name) for name in frame.columns if name not in specs]
    if extra:
        message += f": extra column(s) {', '.join(extra)}"
    return [message]


def _missing_cells(frame: pd.DataFrame, columns: Iterable[str], options: TableOptions) -> list[str]:
    if options.allow_missing:
        return []
    offending = [str(name) for name in columns if name in frame.columns and bool(frame[name].isna().any())]
    if not offending:
        return []
    return [f"Missing values found in column(s): {', '.join(offending)}"]


def _callback_reason(callback: RowCallback, row: dict[str, Any]) -> str | None:
    """Run the row callback. None means accepted, a string explains rejection."""
    try:
        result = callback(row)
    except Exception as e:  # callback failures are reported as row errors
        return f"{type(e).__name__}: {e}"

    if isinstance(result, (bool, np.bool_)):
        return None if result else "row callback returned False"
    if isinstance(result, str):
        return result
    return f"row callback must return True or a message, got {type(result).__name__}"


def _row_errors(frame: pd.DataFrame, callback: RowCallback | None, positions: Sequence[int]) -> list[str]:
    if callback is None or not positions:
        return []
    records = frame.iloc[list(positions)].to_dict("records")
    errors: list[str] = []
    for position, row in zip(positions, records):
        reason = _callback_reason(callback, row)
        if reason is not None:
            errors.append(str(RowValidationError(position, reason)))
    return errors


def check_frame(
    frame: pd.DataFrame,
    specs: Mapping[str, TypeSpec],
    options: TableOptions,
    *,
    columns: Iterable[str] | None = None,
    positions: Sequence[int] | None = None,
) -> tuple[pd.DataFrame, ValidationReport]:
    """Run the table checks on frame.

    Args:
        frame: Frame to check (modified in place when enum columns are coerced)
        specs: Declared column specs
        options: Table options
        columns: Columns whose cells are checked (None = all)
        positions: Row positions passed to the row callback (None = all)

    Returns:
        (frame, report) - enum columns are converted only when they are valid
    """
    touched = list(frame.columns) if columns is None else [c for c in columns if c in frame.columns]
    rows = range(len(frame)) if positions is None else positions

    errors = _missing_columns(frame, specs)
    errors.extend(_column_count(frame, specs, options))
    errors.extend(_missing_cells(frame, touched, options))
    for name in touched:
        if name not in specs:
            continue
        coerced, column_errors = coerce_column(name, frame[name], specs[name])
        if column_errors:
            errors.extend(column_errors)
        else:
            frame[name] = coerced
    errors.extend(_row_errors(frame, options.row_callback, list(rows)))
    return frame, ValidationReport.of(errors)


def _decategorize(frame: pd.DataFrame) -> pd.DataFrame:
    """Return frame with categorical columns as object columns."""
    categorical = [name for name in frame.columns if isinstance(frame[name].dtype, pd.CategoricalDtype)]
    if not categorical:
        return frame
    return frame.astype({name: object for name in categorical})


# =============================================================================
# Factory
# =============================================================================


class TableFactory:
    """Builds TypedTables for one set of column specs."""

    def __init__(
        self,
        column_specs: Mapping[str, TypeSpec],
        options: TableOptions,
        frame_factory: Callable[..., pd.DataFrame] = pd.DataFrame,
    ) -> None:
        self._column_specs = MappingProxyType(dict(column_specs))
        self._options = options
        self._frame_factory = frame_factory

    @property
    def column_specs(self) -> Mapping[str, TypeSpec]:
        return self._column_specs

    @property
    def options(self) -> TableOptions:
        return self._options

    @property
    def frame_factory(self) -> Callable[..., pd.DataFrame]:
        return self._frame_factory

    def _build_frame(self, data: Any, columns: Mapping[str, Any]) -> pd.DataFrame:
        if data is not None and columns:
            raise ContractConfigError("Pass either data or column keyword arguments, not both")
        if isinstance(data, TypedTable):
            data = data.to_frame()
        frame = self._frame_factory(dict(columns) if data is None else data)
        if not isinstance(frame, pd.DataFrame):
            raise ContractConfigError(f"Table frame factory must return a pandas DataFrame, got {type(frame).__name__}")
        return frame

    def validate(self, data: Any = None, **columns: Any) -> ValidationReport:
        """Check data without building a table or applying the violation policy."""
        frame = self._build_frame(data, columns).copy()
        _, report = check_frame(frame, self._column_specs, self._options)
        return report

    def from_frame(self, frame: pd.DataFrame) -> TypedTable:
        """Wrap a copy of an existing DataFrame.

        Raises:
            TableValidationError: Under the error policy when checks fail
        """
        checked, report = check_frame(frame.copy(), self._column_specs, self._options)
        apply_policy(report, self._options.on_violation, header=_CONSTRUCTION_HEADER, stacklevel=4)
        logger.debug("typed_table_created", rows=len(checked), columns=len(checked.columns), errors=len(report))
        return TypedTable(checked, self, report)

    def __call__(self, data: Any = None, **columns: Any) -> TypedTable:
        """Build a typed table from data or from column keyword arguments.

        Args:
            data: Anything the frame factory accepts (dict of columns, records, DataFrame)
            **columns: Column vectors by name

        Returns:
            New TypedTable (possibly holding violations under warning/silent)

        Raises:
            TableValidationError: Under the error policy when checks fail
        """
        return self.from_frame(self._build_frame(data, columns))

    def __repr__(self) -> str:
        columns = ", ".join(f"{name}: {describe_spec(spec)}" for name, spec in self._column_specs.items())
        return f"<TableFactory ({columns})>"


def define_table(
    columns: Mapping[str, Any],
    *,
    frame: Callable[..., pd.DataFrame] = pd.DataFrame,
    freeze_column_count: bool | None = None,
    row_callback: RowCallback | None = None,
    allow_missing: bool | None = None,
    on_violation: ViolationPolicy | str | None = None,
) -> TableFactory:
    """Declare a typed table.

    Args:
        columns: Column name -> type spec (shorthand accepted)
        frame: Base frame constructor
        freeze_column_count: Forbid adding/removing columns (None = settings default)
        row_callback: Called with each row as a dict; returns True or a message
        allow_missing: Allow missing cells (None = settings default)
        on_violation: error, warning (warn) or silent (None = settings default)

    Returns:
        TableFactory building validated tables

    Raises:
        ContractConfigError: If a spec or option is invalid
    """
    if not isinstance(columns, Mapping):
        raise ContractConfigError(f"Table columns must be a mapping, got {type(columns).__name__}")
    if row_callback is not None and not callable(row_callback):
        raise ContractConfigError(f"row_callback must be callable, got {type(row_callback).__name__}")

    specs: dict[str, TypeSpec] = {}
    for name, spec in columns.items():
        try:
            specs[name] = as_type_spec(spec)
        except ContractConfigError as e:
            raise ContractConfigError(f"Invalid validator for column '{name}': {e}") from e

    options = TableOptions.resolve(
        freeze_column_count=freeze_column_count,
        allow_missing=allow_missing,
        on_violation=on_violation,
        row_callback=row_callback,
    )
    return TableFactory(specs, options, frame)


# =============================================================================
# Table
# =============================================================================


class TypedTable:
    """A validated DataFrame with guarded writes.

    Reads return copies; writes go through set_column, set_cell,
    drop_column and append_rows.
    """

    __slots__ = ("_factory", "_frame", "_report")

    def __init__(self, frame: pd.DataFrame, factory: TableFactory, report: ValidationReport | None = None) -> None:
        self._frame = frame
        self._factory = factory
        self._report = report if report is not None else ValidationReport()

    # --- read side ---------------------------------------------------------

    @property
    def factory(self) -> TableFactory:
        return self._factory

    @property
    def column_specs(self) -> Mapping[str, TypeSpec]:
        return self._factory.column_specs

    @property
    def options(self) -> TableOptions:
        return self._factory.options

    @property
    def errors(self) -> ValidationReport:
        """Report from the last construction or committed mutation."""
        return self._report

    @property
    def columns(self) -> list[str]:
        return list(self._frame.columns)

    @property
    def shape(self) -> tuple[int, int]:
        return self._frame.shape

    def __len__(self) -> int:
        return len(self._frame)

    def __contains__(self, column: object) -> bool:
        return column in self._frame.columns

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._frame.columns))

    def __getitem__(self, column: str) -> pd.Series:
        if column not in self._frame.columns:
            raise KeyError(f"Column '{column}' does not exist")
        return self._frame[column].copy()

    def to_frame(self) -> pd.DataFrame:
        return self._frame.copy()

    def rows(self) -> Iterator[dict[str, Any]]:
        """Iterate rows as dicts (the shape passed to row callbacks)."""
        return iter(self._frame.to_dict("records"))

    # --- write side --------------------------------------------------------

    def _guard_add(self, column: str) -> None:
        if column not in self._frame.columns and self.options.freeze_column_count:
            raise FrozenColumnsError(column, "add")

    def _commit(
        self,
        candidate: pd.DataFrame,
        *,
        columns: Iterable[str],
        positions: Sequence[int],
    ) -> None:
        candidate, report = check_frame(
            candidate, self.column_specs, self.options, columns=columns, positions=positions
        )
        apply_policy(report, self.options.on_violation, header=_MUTATION_HEADER, stacklevel=4)
        self._frame = candidate
        self._report = report

    def set_column(self, column: str, values: Any) -> None:
        """Replace (or add, when not frozen) a whole column.

        Raises:
            FrozenColumnsError: Adding a column while the column count is frozen
            TableValidationError: Under the error policy; the table is unchanged
        """
        self._guard_add(column)
        candidate = self._frame.copy()
        candidate[column] = values
        self._commit(candidate, columns=[column], positions=range(len(candidate)))

    def __setitem__(self, column: str, values: Any) -> None:
        self.set_column(column, values)

    def set_cell(self, row: int, column: str, value: Any) -> None:
        """Write one cell at a 0-based row position.

        Raises:
            FrozenColumnsError: Writing to an unknown column while frozen
            IndexError: If row is out of range
            TableValidationError: Under the error policy; the table is unchanged
        """
        self._guard_add(column)
        n = len(self._frame)
        if not -n <= row < n:
            raise IndexError(f"Row {row} is out of range for a table with {n} rows")
        position = row % n

        candidate = self._frame.copy()
        values = list(candidate[column]) if column in candidate.columns else [None] * n
        values[position] = value
        # Rebuilt so pandas re-infers the dtype instead of upcasting in place
        candidate[column] = pd.Series(values, index=candidate.index, name=column)
        self._commit(candidate, columns=[column], positions=[position])

    def drop_column(self, column: str) -> None:
        """Remove a column (only when the column count is not frozen).

        Dropping a declared column is reported as a missing column.

        Raises:
            KeyError: If the column does not exist
            FrozenColumnsError: If the column count is frozen
        """
        if column not in self._frame.columns:
            raise KeyError(f"Column '{column}' does not exist")
        if self.options.freeze_column_count:
            raise FrozenColumnsError(column, "remove")
        candidate = self._frame.drop(columns=[column])
        self._commit(candidate, columns=[], positions=[])

    def append_rows(self, rows: Any) -> None:
        """Append rows (records, a mapping of columns, a DataFrame or a TypedTable).

        The row index is reset to 0..n-1. Appended cells are checked against
        every column spec and the row callback runs on the new rows only.

        Raises:
            FrozenColumnsError: If rows introduce a new column while frozen
            TableValidationError: Under the error policy; the table is unchanged
        """
        incoming = _as_frame(rows)
        for column in incoming.columns:
            self._guard_add(column)
        start = len(self._frame)
        candidate = pd.concat([_decategorize(self._frame), _decategorize(incoming)], ignore_index=True)
        self._commit(candidate, columns=list(candidate.columns), positions=range(start, len(candidate)))

    def concat(self, *others: TypedTable | pd.DataFrame) -> TypedTable:
        """Row-bind others onto a copy of this table. See concat()."""
        return concat(self, *others)

    # --- display -----------------------------------------------------------

    def describe(self) -> str:
        options = self.options
        lines = [
            "Typed data frame with the following properties:",
            f"Number of rows: {len(self._frame)}",
            f"Number of columns: {len(self._frame.columns)}",
            "Column types:",
        ]
        lines.extend(f"  {name}: {describe_spec(spec)}" for name, spec in self.column_specs.items())
        lines.append(f"Freeze columns: {'Yes' if options.freeze_column_count else 'No'}")
        lines.append(f"Allow NA: {'Yes' if options.allow_missing else 'No'}")
        lines.append(f"On violation: {options.on_violation.value}")
        lines.append("")
        lines.append("Data:")
        lines.append(self._frame.to_string())
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.describe()

    def __repr__(self) -> str:
        return f"<TypedTable rows={len(self._frame)} columns={list(self._frame.columns)}>"


def _as_frame(data: Any) -> pd.DataFrame:
    if isinstance(data, TypedTable):
        return data.to_frame()
    if isinstance(data, pd.DataFrame):
        return data
    if isinstance(data, Mapping):
        return pd.DataFrame(dict(data))
    return pd.DataFrame(list(data))


def concat(base: TypedTable, *others: TypedTable | pd.DataFrame) -> TypedTable:
    """Row-bind tables; the base table's specs and options win.

    Args:
        base: Table whose column specs, options and row callback apply
        *others: Tables or DataFrames with the same number of columns

    Returns:
        New TypedTable; base is not modified

    Raises:
        ColumnCountMismatchError: If an operand has a different column count
        TableValidationError: Under the error policy when checks fail
    """
    expected = len(base.columns)
    frames = [_decategorize(base.to_frame())]
    for other in others:
        frame = _as_frame(other)
        if len(frame.columns) != expected:
            raise ColumnCountMismatchError(expected, len(frame.columns))
        frames.append(_decategorize(frame))

    combined = pd.concat(frames, ignore_index=True)
    checked, report = check_frame(
        combined,
        base.column_specs,
        base.options,
        positions=range(len(base), len(combined)),
    )
    apply_policy(report, base.options.on_violation, header=_CONSTRUCTION_HEADER, stacklevel=3)
    logger.debug("typed_table_concatenated", operands=len(others) + 1, rows=len(checked))
    return TypedTable(checked, base.factory, report)
