"""Pricing components used by the quote engine.

Re-exports the pricers for convenient access:
    from cpq.pricing import calculate_area_pricing, apply_risk_premium
"""

from cpq.pricing.adjustments import (
    apply_payment_term_premium,
    apply_scope_discount,
    resolve_scope_portion,
)
from cpq.pricing.area import (
    AreaPricing,
    calculate_area_pricing,
    effective_sqft,
    get_area_tier,
)
from cpq.pricing.elevations import calculate_additional_elevations_price
from cpq.pricing.integrity import IntegrityReport, check_integrity, status_for_flags
from cpq.pricing.margin import apply_margin_target, validate_margin_target
from cpq.pricing.risk import (
    applies_risk_premium,
    apply_risk_premium,
    calculate_risk_multiplier,
    merge_risks,
)
from cpq.pricing.specialty import (
    calculate_act_area_pricing,
    calculate_landscape_area_pricing,
    calculate_landscape_price,
    calculate_matterport_pricing,
    landscape_acreage_tier_index,
)
from cpq.pricing.totals import QuoteTotals, compute_subtotals, compute_totals
from cpq.pricing.travel import (
    calculate_metro_travel,
    calculate_standard_travel,
    calculate_travel,
    get_metro_travel_tier,
    is_metro_dispatch,
)

__all__ = [
    "AreaPricing",
    "IntegrityReport",
    "QuoteTotals",
    "applies_risk_premium",
    "apply_margin_target",
    "apply_payment_term_premium",
    "apply_risk_premium",
    "apply_scope_discount",
    "calculate_act_area_pricing",
    "calculate_additional_elevations_price",
    "calculate_area_pricing",
    "calculate_landscape_area_pricing",
    "calculate_landscape_price",
    "calculate_matterport_pricing",
    "calculate_metro_travel",
    "calculate_risk_multiplier",
    "calculate_standard_travel",
    "calculate_travel",
    "check_integrity",
    "compute_subtotals",
    "compute_totals",
    "effective_sqft",
    "get_area_tier",
    "get_metro_travel_tier",
    "is_metro_dispatch",
    "landscape_acreage_tier_index",
    "merge_risks",
    "resolve_scope_portion",
    "status_for_flags",
    "validate_margin_target",
]
