"""Risk premiums. Premiums apply to Architecture line items only."""

from __future__ import annotations

from collections.abc import Iterable

from cpq.data.rates import RateTable
from cpq.data.seed import DEFAULT_RATE_TABLE
from cpq.models.enums import Discipline


def merge_risks(area_risks: Iterable[str], project_risks: Iterable[str]) -> list[str]:
    """Area risks followed by project risks, without repeats."""
    merged: list[str] = []
    for risk in [*area_risks, *project_risks]:
        if risk not in merged:
            merged.append(risk)
    return merged


def calculate_risk_multiplier(
    risks: Iterable[str], table: RateTable = DEFAULT_RATE_TABLE
) -> float:
    """1 plus the sum of premiums for known risk tags; unknown tags add 0."""
    total_premium = 0.0
    for risk in dict.fromkeys(risks):
        total_premium += table.risk_premiums.get(risk, 0.0)
    return 1 + total_premium


def applies_risk_premium(discipline: str) -> bool:
    return discipline == Discipline.ARCH


def apply_risk_premium(
    discipline: str,
    amount: float,
    risks: Iterable[str],
    table: RateTable = DEFAULT_RATE_TABLE,
) -> float:
    """Apply the risk multiplier to ``amount`` for Architecture only.

    Every other discipline gets ``amount`` back unchanged, whatever the
    risk set.
    """
    if not applies_risk_premium(discipline):
        return amount
    return amount * calculate_risk_multiplier(risks, table)
