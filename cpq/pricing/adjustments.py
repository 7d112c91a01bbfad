"""Price adjustments applied after modeling prices are computed."""

from __future__ import annotations

from cpq.data.rates import RateTable
from cpq.data.seed import DEFAULT_RATE_TABLE


def apply_payment_term_premium(
    subtotal: float, payment_terms: str, table: RateTable = DEFAULT_RATE_TABLE
) -> float:
    """Subtotal grossed up by the payment-term premium (0 for unknown terms)."""
    premium, _ = table.payment_term_premium_for(payment_terms)
    return subtotal * (1 + premium)


def apply_scope_discount(
    base_price: float, scope: str, table: RateTable = DEFAULT_RATE_TABLE
) -> float:
    """Discount an already-calculated full-scope price down to ``scope``.

    Used when repricing a finished line for a narrower scope (e.g., a
    proposal revision from full to interior-only).
    """
    discount = table.scope_discounts.get(scope, 0.0)
    return base_price * (1 - discount)


def resolve_scope_portion(scope: str, table: RateTable = DEFAULT_RATE_TABLE) -> float:
    """Portion of the area a scope covers; 1.0 for full or unrecognized scopes."""
    return table.scope_portion_for(scope)
