"""Tests for standard and metro travel pricing."""

from __future__ import annotations

import pytest

from cpq.models.enums import TravelStrategy
from cpq.pricing.travel import (
    calculate_metro_travel,
    calculate_standard_travel,
    calculate_travel,
    get_metro_travel_tier,
    is_metro_dispatch,
)


class TestStandardTravel:
    def test_short_trip_no_scan_day_fee(self) -> None:
        travel = calculate_standard_travel(30)
        assert travel.strategy is TravelStrategy.STANDARD
        assert travel.base_cost == pytest.approx(90.0)
        assert travel.scan_day_fee == 0.0
        assert travel.total_cost == pytest.approx(90.0)
        assert travel.label == "Travel - 30 mi @ $3/mi"

    def test_just_below_threshold(self) -> None:
        assert calculate_standard_travel(74).total_cost == pytest.approx(222.0)

    def test_scan_day_fee_at_threshold(self) -> None:
        travel = calculate_standard_travel(75)
        assert travel.scan_day_fee == 300.0
        assert travel.total_cost == pytest.approx(525.0)
        assert travel.label == "Travel - 75 mi @ $3/mi + $300 scan day fee"

    def test_zero_distance(self) -> None:
        travel = calculate_standard_travel(0)
        assert travel.total_cost == 0.0

    def test_overrides(self) -> None:
        travel = calculate_standard_travel(100, mileage_rate=2.5, scan_day_fee=450)
        assert travel.base_cost == pytest.approx(250.0)
        assert travel.total_cost == pytest.approx(700.0)
        assert travel.label == "Travel - 100 mi @ $2.5/mi + $450 scan day fee"


class TestMetroTravel:
    @pytest.mark.parametrize(
        ("sqft", "tier"),
        [(0, "tierC"), (9_999, "tierC"), (10_000, "tierB"), (49_999, "tierB"), (50_000, "tierA")],
    )
    def test_tier_by_project_size(self, sqft: float, tier: str) -> None:
        assert get_metro_travel_tier(sqft) == tier

    def test_tier_b_with_extra_miles(self) -> None:
        travel = calculate_metro_travel(25, 25_000)
        assert travel.strategy is TravelStrategy.METRO
        assert travel.base_cost == 300.0
        assert travel.extra_miles_cost == pytest.approx(20.0)
        assert travel.total_cost == pytest.approx(320.0)
        assert travel.tier == "Tier B"
        assert travel.label == "Travel - Brooklyn Tier B ($300 base + 5 mi @ $4/mi)"

    def test_within_threshold_has_no_mileage(self) -> None:
        travel = calculate_metro_travel(10, 5_000)
        assert travel.total_cost == pytest.approx(150.0)
        assert travel.label == "Travel - Brooklyn Tier C ($150 base)"

    def test_tier_a_base_fee_is_zero(self) -> None:
        travel = calculate_metro_travel(10, 60_000)
        assert travel.total_cost == 0.0

    def test_never_charges_scan_day_fee(self) -> None:
        travel = calculate_metro_travel(200, 5_000)
        assert travel.scan_day_fee == 0.0
        assert travel.total_cost == pytest.approx(150.0 + 180 * 4.0)


class TestCalculateTravel:
    def test_metro_match_is_case_insensitive(self) -> None:
        assert is_metro_dispatch("brooklyn")
        assert is_metro_dispatch("BROOKLYN")
        assert not is_metro_dispatch("TROY")

    def test_dispatches_to_metro(self) -> None:
        travel = calculate_travel("Brooklyn", 25, 25_000)
        assert travel.strategy is TravelStrategy.METRO

    def test_dispatches_to_standard(self) -> None:
        travel = calculate_travel("WOODSTOCK", 75, 25_000)
        assert travel.strategy is TravelStrategy.STANDARD
        assert travel.total_cost == pytest.approx(525.0)

    def test_overrides_ignored_for_metro(self) -> None:
        travel = calculate_travel("BROOKLYN", 25, 25_000, mileage_rate=10, scan_day_fee=999)
        assert travel.total_cost == pytest.approx(320.0)
