"""Violation policy dispatch for batched validation.

Validation code never decides severity itself: it returns a
ValidationReport, and apply_policy() turns that report into an outcome
according to the caller-selected ViolationPolicy.
"""

from __future__ import annotations

import warnings

from typecontract.contracts.enums import ViolationPolicy, parse_violation_policy
from typecontract.contracts.errors import TableValidationError, TableValidationWarning
from typecontract.contracts.reports import ValidationReport
from typecontract.core.logging import get_logger

logger = get_logger(__name__)


def apply_policy(
    report: ValidationReport,
    policy: ViolationPolicy | str,
    *,
    header: str = "Validation errors:",
    stacklevel: int = 3,
) -> ValidationReport:
    """Process a report according to policy.

    Args:
        report: Batched validation result
        policy: error, warning (or warn), silent
        header: First line of the rendered message
        stacklevel: Passed to warnings.warn so the warning points at user code

    Returns:
        The report unchanged (for warning/silent, or when it is empty)

    Raises:
        TableValidationError: Under the error policy when report has errors
    """
    if report.ok:
        return report

    match parse_violation_policy(policy):
        case ViolationPolicy.ERROR:
            logger.debug("violation_raised", errors=len(report))
            raise TableValidationError(report.errors, header=header)
        case ViolationPolicy.WARNING:
            logger.warning("violation_warned", errors=len(report), first_error=report.errors[0])
            warnings.warn(report.message(header), TableValidationWarning, stacklevel=stacklevel)
        case ViolationPolicy.SILENT:
            logger.debug("violation_suppressed", errors=len(report))
    return report
