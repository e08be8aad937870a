"""Tests for ValidationReport."""

import pytest

from typecontract.contracts.reports import ValidationReport


class TestValidationReport:
    """Batched validation results."""

    def test_empty_report_is_ok(self) -> None:
        """No errors means ok and truthy."""
        report = ValidationReport()
        assert report.ok
        assert bool(report) is True
        assert len(report) == 0

    def test_errors_make_report_falsy(self) -> None:
        """Any error makes the report not ok."""
        report = ValidationReport.of(["bad"])
        assert not report.ok
        assert bool(report) is False
        assert list(report) == ["bad"]

    def test_merge_keeps_order(self) -> None:
        """merge() appends the other report's errors."""
        merged = ValidationReport.of(["a"]).merge(ValidationReport.of(["b", "c"]))
        assert merged.errors == ("a", "b", "c")

    def test_message(self) -> None:
        """message() renders a header and bullets."""
        assert ValidationReport.of(["x", "y"]).message("Oops:") == "Oops:\n  - x\n  - y"

    def test_frozen(self) -> None:
        """Reports are immutable."""
        report = ValidationReport()
        with pytest.raises(AttributeError):
            report.errors = ("x",)  # type: ignore[misc]
