"""Pricers for the specialty building types.

- Landscape (built / natural): per-acre rate by acreage tier and LOD.
- ACT ceilings only: flat $/SF, floor and scope portion apply.
- Matterport (only, or as an add-on): flat $/SF, floor applies, scope
  portion never applies.
"""

from __future__ import annotations

from cpq.data.rates import RateTable
from cpq.data.seed import DEFAULT_RATE_TABLE
from cpq.pricing.area import AreaPricing, effective_sqft


def landscape_acreage_tier_index(
    acres: float, table: RateTable = DEFAULT_RATE_TABLE
) -> int:
    """Index into a landscape rate row: 0 (<5 ac) through 4 (>=100 ac)."""
    index = 0
    for threshold in table.landscape_acreage_breaks:
        if acres >= threshold:
            index += 1
    return index


def calculate_landscape_price(
    building_type: str,
    acres: float,
    lod: str,
    table: RateTable = DEFAULT_RATE_TABLE,
) -> float:
    """Client price for a landscape area; 0 when the rate table has no row."""
    rates = table.landscape_rates_for(building_type, lod)
    if rates is None:
        return 0.0
    return acres * rates[landscape_acreage_tier_index(acres, table)]


def calculate_landscape_area_pricing(
    building_type: str,
    acres: float,
    lod: str,
    table: RateTable = DEFAULT_RATE_TABLE,
) -> AreaPricing:
    """Landscape price and cost. No square-footage floor applies to acres."""
    client_price = calculate_landscape_price(building_type, acres, lod, table)
    return AreaPricing(
        client_price=client_price,
        upteam_cost=client_price * table.upteam_multiplier_fallback,
        effective_sqft=acres,
    )


def calculate_act_area_pricing(
    sqft: float,
    scope_portion: float = 1.0,
    table: RateTable = DEFAULT_RATE_TABLE,
) -> AreaPricing:
    """Above-ceiling-tile scanning at a flat rate per square foot."""
    floored = effective_sqft(sqft, table)
    client_price = floored * table.act_rate_per_sqft * scope_portion
    return AreaPricing(
        client_price=client_price,
        upteam_cost=client_price * table.upteam_multiplier_fallback,
        effective_sqft=floored,
    )


def calculate_matterport_pricing(
    sqft: float, table: RateTable = DEFAULT_RATE_TABLE
) -> AreaPricing:
    """Matterport capture at a flat rate; always priced on the full area."""
    floored = effective_sqft(sqft, table)
    client_price = floored * table.matterport_rate_per_sqft
    return AreaPricing(
        client_price=client_price,
        upteam_cost=client_price * table.upteam_multiplier_fallback,
        effective_sqft=floored,
    )
