"""Travel pricing.

Two mutually exclusive strategies, selected by dispatch location:

- **Standard**: per-mile rate, plus a flat scan-day fee once the distance
  reaches the scan-day threshold.
- **Metro**: flat base fee tiered by total project square footage, plus a
  per-mile charge beyond the metro threshold. Never a scan-day fee.
"""

from __future__ import annotations

from cpq.data.rates import RateTable
from cpq.data.seed import DEFAULT_RATE_TABLE
from cpq.formatting import format_quantity, format_rate
from cpq.models.enums import TravelStrategy
from cpq.models.result import TravelResult

_TIER_LABELS: dict[str, str] = {
    "tierA": "Tier A",
    "tierB": "Tier B",
    "tierC": "Tier C",
}


def is_metro_dispatch(
    dispatch_location: str, table: RateTable = DEFAULT_RATE_TABLE
) -> bool:
    """Exact, case-insensitive match against the metro dispatch location."""
    return dispatch_location.upper() == table.metro_dispatch_location.upper()


def get_metro_travel_tier(
    total_sqft: float, table: RateTable = DEFAULT_RATE_TABLE
) -> str:
    """Metro tier key chosen by project size (not distance)."""
    tiers = table.metro_tiers
    if total_sqft >= tiers.tier_a_min_sqft:
        return "tierA"
    if total_sqft >= tiers.tier_b_min_sqft:
        return "tierB"
    return "tierC"


def calculate_standard_travel(
    distance: float,
    mileage_rate: float | None = None,
    scan_day_fee: float | None = None,
    table: RateTable = DEFAULT_RATE_TABLE,
) -> TravelResult:
    """Per-mile travel with a scan-day fee at or beyond the threshold.

    Args:
        distance: Miles from the dispatch location.
        mileage_rate: Optional $/mile override for this quote.
        scan_day_fee: Optional scan-day fee override for this quote.
        table: Rate table to price with.
    """
    rates = table.travel
    per_mile = mileage_rate if mileage_rate is not None else rates.standard_per_mile
    day_fee = scan_day_fee if scan_day_fee is not None else rates.scan_day_fee

    base_cost = distance * per_mile
    applied_fee = day_fee if distance >= rates.scan_day_fee_threshold_miles else 0.0

    label = f"Travel - {format_quantity(distance)} mi @ {format_rate(per_mile)}/mi"
    if applied_fee > 0:
        label += f" + {format_rate(applied_fee)} scan day fee"

    return TravelResult(
        strategy=TravelStrategy.STANDARD,
        base_cost=base_cost,
        extra_miles_cost=0.0,
        scan_day_fee=applied_fee,
        total_cost=base_cost + applied_fee,
        label=label,
    )


def calculate_metro_travel(
    distance: float,
    total_project_sqft: float,
    table: RateTable = DEFAULT_RATE_TABLE,
) -> TravelResult:
    """Flat tiered base fee plus miles beyond the metro threshold."""
    rates = table.travel
    tier = get_metro_travel_tier(total_project_sqft, table)
    tier_label = _TIER_LABELS[tier]
    base_cost = table.metro_tiers.base_fees[tier]

    extra_miles = max(0.0, distance - rates.metro_threshold_miles)
    extra_miles_cost = extra_miles * rates.metro_per_mile

    location = table.metro_dispatch_location.title()
    label = f"Travel - {location} {tier_label} ({format_rate(base_cost)} base"
    if extra_miles_cost > 0:
        label += (
            f" + {format_quantity(extra_miles)} mi @ "
            f"{format_rate(rates.metro_per_mile)}/mi"
        )
    label += ")"

    return TravelResult(
        strategy=TravelStrategy.METRO,
        base_cost=base_cost,
        extra_miles_cost=extra_miles_cost,
        scan_day_fee=0.0,
        total_cost=base_cost + extra_miles_cost,
        label=label,
        tier=tier_label,
    )


def calculate_travel(
    dispatch_location: str,
    distance: float,
    total_project_sqft: float,
    mileage_rate: float | None = None,
    scan_day_fee: float | None = None,
    table: RateTable = DEFAULT_RATE_TABLE,
) -> TravelResult:
    """Select the travel strategy for a dispatch location and price it.

    The per-quote overrides only affect the standard strategy.
    """
    if is_metro_dispatch(dispatch_location, table):
        return calculate_metro_travel(distance, total_project_sqft, table)
    return calculate_standard_travel(distance, mileage_rate, scan_day_fee, table)
