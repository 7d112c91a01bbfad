"""Per-area modeling price calculation.

Prices one (discipline, area) combination: applies the minimum square
footage floor, then either an explicit per-SF rate or the discipline base
rate times the LOD multiplier, scaled by the scope portion.
"""

from __future__ import annotations

from dataclasses import dataclass

from cpq.data.rates import RateTable
from cpq.data.seed import DEFAULT_RATE_TABLE

# Upper bounds (exclusive) of the reporting size bands
_AREA_TIERS: tuple[tuple[float, str], ...] = (
    (3_000, "0-3k"),
    (5_000, "3k-5k"),
    (10_000, "5k-10k"),
    (25_000, "10k-25k"),
    (50_000, "25k-50k"),
    (75_000, "50k-75k"),
    (100_000, "75k-100k"),
)


@dataclass(frozen=True)
class AreaPricing:
    """Client price, vendor cost and floored square footage for one area."""

    client_price: float
    upteam_cost: float
    effective_sqft: float


def get_area_tier(sqft: float) -> str:
    """Map square footage to its reporting size band (e.g., '10k-25k')."""
    for upper, label in _AREA_TIERS:
        if sqft < upper:
            return label
    return "100k+"


def effective_sqft(sqft: float, table: RateTable = DEFAULT_RATE_TABLE) -> float:
    """Square footage after the minimum floor is applied."""
    return max(sqft, table.min_sqft_floor)


def calculate_area_pricing(
    sqft: float,
    discipline: str,
    lod: str,
    client_rate_per_sqft: float | None = None,
    upteam_rate_per_sqft: float | None = None,
    scope_portion: float = 1.0,
    table: RateTable = DEFAULT_RATE_TABLE,
) -> AreaPricing:
    """Price a single discipline over an area.

    Args:
        sqft: Raw square footage of the area.
        discipline: Discipline code; unknown codes use the generic base rate.
        lod: Level of detail; unknown LODs use a 1.0 multiplier.
        client_rate_per_sqft: Explicit client $/SF. Used only when set and > 0.
        upteam_rate_per_sqft: Explicit vendor $/SF. Used only when set and > 0;
            otherwise cost is the fallback fraction of the client price.
        scope_portion: Fraction of the area covered, in (0, 1].
        table: Rate table to price with.

    Returns:
        AreaPricing with client price, upteam cost, and effective square feet.
    """
    floored = effective_sqft(sqft, table)

    if client_rate_per_sqft is not None and client_rate_per_sqft > 0:
        client_price = floored * client_rate_per_sqft * scope_portion
    else:
        base_rate, _ = table.base_rate_for(discipline)
        lod_multiplier, _ = table.lod_multiplier_for(lod)
        client_price = floored * base_rate * lod_multiplier * scope_portion

    if upteam_rate_per_sqft is not None and upteam_rate_per_sqft > 0:
        upteam_cost = floored * upteam_rate_per_sqft * scope_portion
    else:
        upteam_cost = client_price * table.upteam_multiplier_fallback

    return AreaPricing(
        client_price=client_price,
        upteam_cost=upteam_cost,
        effective_sqft=floored,
    )
