"""Margin integrity checks.

Quotes below the margin floor are blocked (a save handler must refuse
them); quotes between the floor and the guardrail carry a warning.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from cpq.data.rates import RateTable
from cpq.data.seed import DEFAULT_RATE_TABLE
from cpq.formatting import format_percent
from cpq.models.enums import FlagSeverity, IntegrityStatus
from cpq.models.result import IntegrityFlag

MARGIN_FLOOR_CODE = "MARGIN_FLOOR"
MARGIN_GUARDRAIL_CODE = "MARGIN_GUARDRAIL"


@dataclass(frozen=True)
class IntegrityReport:
    status: IntegrityStatus
    flags: list[IntegrityFlag] = field(default_factory=list)


def status_for_flags(flags: Sequence[IntegrityFlag]) -> IntegrityStatus:
    """Any error blocks; otherwise any warning warns; otherwise passed."""
    severities = {flag.severity for flag in flags}
    if FlagSeverity.ERROR in severities:
        return IntegrityStatus.BLOCKED
    if FlagSeverity.WARNING in severities:
        return IntegrityStatus.WARNING
    return IntegrityStatus.PASSED


def check_integrity(
    gross_margin: float, table: RateTable = DEFAULT_RATE_TABLE
) -> IntegrityReport:
    """Classify a gross margin against the floor and guardrail.

    Both boundaries are strict: a margin exactly at the floor is not
    blocked, and a margin exactly at the guardrail passes.
    """
    flags: list[IntegrityFlag] = []

    if gross_margin < table.margin_floor:
        flags.append(
            IntegrityFlag(
                code=MARGIN_FLOOR_CODE,
                message=(
                    f"Gross margin {format_percent(gross_margin)} is below the "
                    f"margin floor of {format_percent(table.margin_floor, 0)}"
                ),
                severity=FlagSeverity.ERROR,
            )
        )
    elif gross_margin < table.margin_guardrail:
        flags.append(
            IntegrityFlag(
                code=MARGIN_GUARDRAIL_CODE,
                message=(
                    f"Gross margin {format_percent(gross_margin)} is below the "
                    f"guardrail of {format_percent(table.margin_guardrail, 0)}"
                ),
                severity=FlagSeverity.WARNING,
            )
        )

    return IntegrityReport(status=status_for_flags(flags), flags=flags)
