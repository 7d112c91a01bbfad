"""Margin-target back-solver.

Rewrites client prices so each adjustable line item earns the target
margin on its vendor cost: ``price = upteam_cost / (1 - target)``. Vendor
costs never change. Travel is a pass-through and zero-cost lines have
nothing to solve against, so both are left as they are.
"""

from __future__ import annotations

import logging
import math

from cpq.data.rates import RateTable
from cpq.data.seed import DEFAULT_RATE_TABLE
from cpq.exceptions import MarginTargetError
from cpq.models.enums import LineItemCategory
from cpq.models.result import LineItem, QuoteResult
from cpq.pricing.integrity import check_integrity
from cpq.pricing.totals import compute_totals

logger = logging.getLogger(__name__)


def validate_margin_target(margin_target: float) -> None:
    """Reject targets the back-solver cannot price.

    Raises:
        MarginTargetError: If the target is not finite or outside [0, 1).
    """
    if not math.isfinite(margin_target) or margin_target < 0 or margin_target >= 1:
        msg = f"margin_target must satisfy 0 <= target < 1, got {margin_target}"
        raise MarginTargetError(msg)


def resolve_margin_target(
    margin_target: float | None, table: RateTable = DEFAULT_RATE_TABLE
) -> float:
    """Apply the rate table's default and allowed band to a requested target.

    ``None`` resolves to ``table.margin_target_default``.

    Raises:
        MarginTargetError: If the target lies outside
            [``margin_target_min``, ``margin_target_max``].
    """
    if margin_target is None:
        return table.margin_target_default
    validate_margin_target(margin_target)
    if not table.margin_target_min <= margin_target <= table.margin_target_max:
        msg = (
            f"margin_target must be between {table.margin_target_min} and "
            f"{table.margin_target_max}, got {margin_target}"
        )
        raise MarginTargetError(msg)
    return margin_target


def _adjust_line_item(li: LineItem, margin_target: float) -> LineItem:
    if li.category is LineItemCategory.TRAVEL or li.upteam_cost <= 0:
        return li
    return li.model_copy(update={"client_price": li.upteam_cost / (1 - margin_target)})


def apply_margin_target(
    result: QuoteResult,
    margin_target: float,
    table: RateTable = DEFAULT_RATE_TABLE,
) -> QuoteResult:
    """Return a new quote repriced to ``margin_target``.

    Subtotals, payment-term premium, margin and integrity flags are all
    recomputed from the adjusted line items. ``result`` is not modified and
    stays available for diagnostics.

    Raises:
        MarginTargetError: If the target is outside [0, 1).
    """
    validate_margin_target(margin_target)

    line_items = [_adjust_line_item(li, margin_target) for li in result.line_items]
    totals = compute_totals(line_items, result.payment_terms, table)
    report = check_integrity(totals.gross_margin, table)

    logger.debug(
        "Margin target %.4f applied: margin %.4f -> %.4f, grand total %.2f -> %.2f",
        margin_target,
        result.gross_margin,
        totals.gross_margin,
        result.grand_total,
        totals.grand_total,
    )

    return result.model_copy(
        update={
            "line_items": line_items,
            "subtotals": totals.subtotals,
            "total_upteam_cost": totals.total_upteam_cost,
            "total_client_price": totals.total_client_price,
            "gross_margin": totals.gross_margin,
            "gross_margin_percent": totals.gross_margin_percent,
            "integrity_status": report.status,
            "integrity_flags": report.flags,
            "payment_term_premium": totals.payment_term_premium,
            "grand_total": totals.grand_total,
            "metadata": result.metadata.model_copy(
                update={"margin_target": margin_target}
            ),
        }
    )
