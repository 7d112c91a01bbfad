"""Tiered pricing for additional elevation drawings."""

from __future__ import annotations

from cpq.data.rates import RateTable
from cpq.data.seed import DEFAULT_RATE_TABLE


def calculate_additional_elevations_price(
    count: int, table: RateTable = DEFAULT_RATE_TABLE
) -> float:
    """Price ``count`` elevations by walking the capacity tiers in order.

    Each tier holds ``max_count - previous max_count`` units at its own rate;
    the final tier is unbounded. With the default table, 15 elevations cost
    10 x $25 + 5 x $20 = $350.
    """
    if count <= 0:
        return 0.0

    total = 0.0
    remaining = count
    previous_max = 0

    for tier in table.elevation_tiers:
        if remaining <= 0:
            break
        if tier.max_count is None:
            capacity = remaining
        else:
            capacity = tier.max_count - previous_max
            previous_max = tier.max_count
        quantity = min(remaining, capacity)
        total += quantity * tier.rate
        remaining -= quantity

    return total
