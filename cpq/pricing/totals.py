"""Subtotals, payment-term premium and margin for a set of line items.

Shared by the orchestrator and the margin-target adjuster so both derive
totals the same way.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from cpq.data.rates import RateTable
from cpq.data.seed import DEFAULT_RATE_TABLE
from cpq.models.enums import LineItemCategory
from cpq.models.result import LineItem, Subtotals
from cpq.pricing.adjustments import apply_payment_term_premium

_SUBTOTAL_FIELDS: dict[LineItemCategory, str] = {
    LineItemCategory.MODELING: "modeling",
    LineItemCategory.TRAVEL: "travel",
    LineItemCategory.SERVICE: "services",
    LineItemCategory.ELEVATION: "elevations",
}


@dataclass(frozen=True)
class QuoteTotals:
    """Derived totals for a quote."""

    subtotals: Subtotals
    total_client_price: float
    total_upteam_cost: float
    grand_total: float
    payment_term_premium: float
    gross_margin: float

    @property
    def gross_margin_percent(self) -> float:
        return self.gross_margin * 100


def compute_subtotals(line_items: Sequence[LineItem]) -> Subtotals:
    """Sum client prices by category, in line-item order."""
    sums = dict.fromkeys(_SUBTOTAL_FIELDS.values(), 0.0)
    for li in line_items:
        sums[_SUBTOTAL_FIELDS[li.category]] += li.client_price
    return Subtotals(**sums)


def compute_gross_margin(grand_total: float, total_upteam_cost: float) -> float:
    """Gross margin on the grand total; defined as 0 when nothing is billed."""
    if grand_total <= 0:
        return 0.0
    return (grand_total - total_upteam_cost) / grand_total


def compute_totals(
    line_items: Sequence[LineItem],
    payment_terms: str,
    table: RateTable = DEFAULT_RATE_TABLE,
) -> QuoteTotals:
    """Subtotal, apply the payment-term premium, and compute margin."""
    subtotals = compute_subtotals(line_items)
    total_client_price = (
        subtotals.modeling + subtotals.travel + subtotals.services + subtotals.elevations
    )
    total_upteam_cost = 0.0
    for li in line_items:
        total_upteam_cost += li.upteam_cost

    grand_total = apply_payment_term_premium(total_client_price, payment_terms, table)

    return QuoteTotals(
        subtotals=subtotals,
        total_client_price=total_client_price,
        total_upteam_cost=total_upteam_cost,
        grand_total=grand_total,
        payment_term_premium=grand_total - total_client_price,
        gross_margin=compute_gross_margin(grand_total, total_upteam_cost),
    )
