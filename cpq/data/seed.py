"""Seed rate table for the CPQ engine.

FY26 pricing constants. Admin edits replace this table with a new
snapshot through ``RateTableRepository``; they never mutate it.
"""

from cpq.data.rates import ElevationTier, MetroTiers, RateTable, TravelRates

DEFAULT_RATE_TABLE = RateTable(
    version="FY26.1",
    min_sqft_floor=3000,
    upteam_multiplier_fallback=0.65,
    sqft_per_acre=43560,
    tier_a_threshold=50000,
    act_rate_per_sqft=0.20,
    matterport_rate_per_sqft=0.01,
    margin_floor=0.40,
    margin_guardrail=0.45,
    margin_target_min=0.35,
    margin_target_max=0.60,
    margin_target_default=0.45,
    generic_base_rate=2.50,
    base_rates={
        "arch": 0.25,
        "mepf": 0.30,
        "structure": 0.20,
        "site": 0.15,
    },
    lod_multipliers={
        "200": 1.0,
        "300": 1.3,
        "350": 1.5,
    },
    risk_premiums={
        "occupied": 0.15,
        "hazardous": 0.25,
        "no_power": 0.20,
    },
    scope_portions={
        "full": 1.0,
        "interior": 0.65,
        "exterior": 0.35,
    },
    scope_discounts={
        "full": 0.0,
        "interior": 0.35,
        "exterior": 0.65,
        "mixed": 0.0,
    },
    payment_term_premiums={
        "partner": 0.0,
        "owner": 0.0,
        "net30": 0.05,
        "net60": 0.10,
        "net90": 0.15,
    },
    travel=TravelRates(
        standard_per_mile=3,
        metro_per_mile=4,
        metro_threshold_miles=20,
        scan_day_fee_threshold_miles=75,
        scan_day_fee=300,
    ),
    metro_dispatch_location="BROOKLYN",
    metro_tiers=MetroTiers(
        tier_a_min_sqft=50000,
        tier_b_min_sqft=10000,
        base_fees={"tierA": 0, "tierB": 300, "tierC": 150},
    ),
    dispatch_locations=("TROY", "WOODSTOCK", "BOISE", "BROOKLYN"),
    # Per-acre rates by acreage tier: [<5, 5-20, 20-50, 50-100, 100+]
    landscape_rates={
        # Built landscape
        "14": {
            "200": (875, 625, 375, 250, 160),
            "300": (1000, 750, 500, 375, 220),
            "350": (1250, 1000, 750, 500, 260),
        },
        # Natural landscape
        "15": {
            "200": (625, 375, 250, 200, 140),
            "300": (750, 500, 375, 275, 200),
            "350": (1000, 750, 500, 325, 240),
        },
    },
    landscape_acreage_breaks=(5, 20, 50, 100),
    elevation_tiers=(
        ElevationTier(max_count=10, rate=25),
        ElevationTier(max_count=20, rate=20),
        ElevationTier(max_count=100, rate=15),
        ElevationTier(max_count=300, rate=10),
        ElevationTier(max_count=None, rate=5),
    ),
)
