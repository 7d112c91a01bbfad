"""Tests for the QuoteEngine: the end-to-end pricing pipeline."""

from __future__ import annotations

from typing import Any

import pytest

from cpq.data.repository import RateTableRepository
from cpq.data.seed import DEFAULT_RATE_TABLE
from cpq.engine import _AREA_PRICERS, QuoteEngine, resolve_discipline_settings
from cpq.exceptions import InvalidQuoteInputError
from cpq.models.enums import (
    BuildingKind,
    Discipline,
    IntegrityStatus,
    LineItemCategory,
    Lod,
    Scope,
    TravelStrategy,
)
from cpq.models.quote import Area, QuoteInput


@pytest.fixture()
def repo() -> RateTableRepository:
    """Repository holding the seeded rate table."""
    return RateTableRepository(DEFAULT_RATE_TABLE)


@pytest.fixture()
def engine(repo: RateTableRepository) -> QuoteEngine:
    """QuoteEngine wired to the seeded repository."""
    return QuoteEngine(repo)


# ---------------------------------------------------------------------------
# Helper builders
# ---------------------------------------------------------------------------


def _area(**overrides: Any) -> dict[str, Any]:
    area: dict[str, Any] = {
        "id": "area-0",
        "name": "Main Building",
        "buildingType": "1",
        "squareFeet": 10_000,
    }
    area.update(overrides)
    return area


def _quote(*areas: dict[str, Any], **overrides: Any) -> QuoteInput:
    payload: dict[str, Any] = {"areas": list(areas) or [_area()]}
    payload.update(overrides)
    return QuoteInput.model_validate(payload)


# ---------------------------------------------------------------------------
# Standard areas
# ---------------------------------------------------------------------------


class TestStandardAreas:
    def test_single_arch_area(self, engine: QuoteEngine) -> None:
        result = engine.compute_quote(_quote(_area(squareFeet=5_000)))
        assert len(result.line_items) == 1
        li = result.line_items[0]
        assert li.id == "li-0"
        assert li.discipline == "arch"
        assert li.category is LineItemCategory.MODELING
        assert li.client_price == pytest.approx(1_625.0)
        assert li.upteam_cost == pytest.approx(1_056.25)
        assert li.description == (
            "Architecture - Office Building - 5,000 SF (5k-10k) - LoD 300 - Full Scope"
        )

    def test_one_line_per_discipline(self, engine: QuoteEngine) -> None:
        result = engine.compute_quote(_quote(_area(disciplines=["arch", "mepf"])))
        assert [li.discipline for li in result.line_items] == ["arch", "mepf"]
        assert result.subtotals.modeling == pytest.approx(7_150.0)
        assert result.total_upteam_cost == pytest.approx(4_647.5)

    def test_fallback_costs_are_blocked_by_default(self, engine: QuoteEngine) -> None:
        result = engine.compute_quote(_quote())
        assert result.gross_margin == pytest.approx(0.35)
        assert result.integrity_status is IntegrityStatus.BLOCKED
        assert not result.is_persistable

    def test_mixed_scope_splits_into_interior_and_exterior(
        self, engine: QuoteEngine
    ) -> None:
        result = engine.compute_quote(_quote(_area(scope="mixed")))
        assert [li.scope for li in result.line_items] == ["interior", "exterior"]
        prices = [li.client_price for li in result.line_items]
        assert prices == pytest.approx([2_112.5, 1_137.5])
        assert sum(prices) == pytest.approx(3_250.0)

    def test_small_area_is_floored(self, engine: QuoteEngine) -> None:
        result = engine.compute_quote(_quote(_area(squareFeet=1_200, lod="200")))
        li = result.line_items[0]
        assert li.sqft == 1_200
        assert li.effective_sqft == 3_000
        assert li.client_price == pytest.approx(750.0)

    def test_discipline_override(self, engine: QuoteEngine) -> None:
        area = _area(
            disciplines=["arch", "structure"],
            disciplineLods={"structure": {"lod": "200", "scope": "exterior"}},
        )
        result = engine.compute_quote(_quote(area))
        arch, structure = result.line_items
        assert arch.lod == "300"
        assert arch.scope == "full"
        assert structure.lod == "200"
        assert structure.scope == "exterior"
        assert structure.client_price == pytest.approx(10_000 * 0.20 * 0.35)


class TestRisk:
    def test_risk_raises_arch_price_only(self, engine: QuoteEngine) -> None:
        area = _area(disciplines=["arch", "mepf"], risks=["occupied", "hazardous"])
        result = engine.compute_quote(_quote(area))
        arch, mepf = result.line_items
        assert arch.client_price == pytest.approx(3_250.0 * 1.4)
        assert arch.risk_multiplier == pytest.approx(1.4)
        assert arch.upteam_cost == pytest.approx(2_112.5)
        assert mepf.client_price == pytest.approx(3_900.0)
        assert mepf.risk_multiplier == 1.0

    def test_project_risks_merge_with_area_risks(self, engine: QuoteEngine) -> None:
        result = engine.compute_quote(
            _quote(_area(risks=["occupied"]), risks=["occupied", "no_power"])
        )
        assert result.line_items[0].risk_multiplier == pytest.approx(1.35)

    def test_risk_premium_can_lift_margin_into_warning(self, engine: QuoteEngine) -> None:
        result = engine.compute_quote(_quote(_area(risks=["occupied"])))
        assert result.gross_margin == pytest.approx(1_625.0 / 3_737.5)
        assert result.integrity_status is IntegrityStatus.WARNING
        assert result.integrity_flags[0].code == "MARGIN_GUARDRAIL"

    def test_unknown_risk_recorded_as_assumption(self, engine: QuoteEngine) -> None:
        result = engine.compute_quote(_quote(_area(risks=["flooded"])))
        assert result.line_items[0].risk_multiplier == 1.0
        assert [a.parameter for a in result.assumptions] == ["risk:flooded"]


class TestSpecialtyAreas:
    def test_landscape_priced_per_acre(self, engine: QuoteEngine) -> None:
        result = engine.compute_quote(_quote(_area(buildingType="14", squareFeet=5)))
        li = result.line_items[0]
        assert li.discipline == "landscape"
        assert li.effective_sqft == 5
        assert li.client_price == pytest.approx(3_750.0)
        assert result.total_project_sqft == pytest.approx(5 * 43_560)
        assert result.is_tier_a

    def test_landscape_ignores_disciplines(self, engine: QuoteEngine) -> None:
        area = _area(buildingType="15", squareFeet=2, disciplines=["arch", "mepf", "site"])
        result = engine.compute_quote(_quote(area))
        assert len(result.line_items) == 1

    def test_missing_landscape_rates_priced_at_zero(self, repo: RateTableRepository) -> None:
        table = DEFAULT_RATE_TABLE.with_updates(
            landscape_rates={"14": DEFAULT_RATE_TABLE.landscape_rates["14"]}
        )
        repo.swap(table)
        result = QuoteEngine(repo).compute_quote(
            _quote(_area(buildingType="15", squareFeet=10))
        )
        assert result.line_items[0].client_price == 0.0
        assert result.assumptions[0].parameter == "landscape_rate:15:300"

    def test_act_area(self, engine: QuoteEngine) -> None:
        result = engine.compute_quote(_quote(_area(buildingType="16", squareFeet=5_000)))
        li = result.line_items[0]
        assert li.discipline == "act"
        assert li.category is LineItemCategory.SERVICE
        assert li.client_price == pytest.approx(1_000.0)
        assert li.upteam_cost == pytest.approx(650.0)
        assert result.subtotals.services == pytest.approx(1_000.0)

    def test_act_mixed_scope_priced_as_full(self, engine: QuoteEngine) -> None:
        area = _area(buildingType="16", squareFeet=5_000, scope="mixed")
        li = engine.compute_quote(_quote(area)).line_items[0]
        assert li.scope == "full"
        assert li.client_price == pytest.approx(1_000.0)

    def test_act_interior_scope(self, engine: QuoteEngine) -> None:
        area = _area(buildingType="16", squareFeet=10_000, scope="interior")
        li = engine.compute_quote(_quote(area)).line_items[0]
        assert li.client_price == pytest.approx(1_300.0)

    def test_matterport_only(self, engine: QuoteEngine) -> None:
        area = _area(buildingType="17", squareFeet=20_000, includeMatterport=True)
        result = engine.compute_quote(_quote(area))
        assert len(result.line_items) == 1
        assert result.line_items[0].discipline == "matterport"
        assert result.line_items[0].client_price == pytest.approx(200.0)

    def test_every_building_kind_has_a_pricer(self) -> None:
        assert set(_AREA_PRICERS) == set(BuildingKind)


class TestAddOns:
    def test_additional_elevations(self, engine: QuoteEngine) -> None:
        result = engine.compute_quote(_quote(_area(additionalElevations=25)))
        elevation = result.line_items[-1]
        assert elevation.category is LineItemCategory.ELEVATION
        assert elevation.client_price == pytest.approx(525.0)
        assert elevation.upteam_cost == pytest.approx(341.25)
        assert result.subtotals.elevations == pytest.approx(525.0)

    def test_matterport_add_on(self, engine: QuoteEngine) -> None:
        result = engine.compute_quote(
            _quote(_area(squareFeet=20_000, includeMatterport=True))
        )
        assert [li.discipline for li in result.line_items] == ["arch", "matterport"]
        assert result.subtotals.services == pytest.approx(200.0)

    def test_add_ons_follow_specialty_areas(self, engine: QuoteEngine) -> None:
        area = _area(buildingType="14", squareFeet=5, additionalElevations=2)
        result = engine.compute_quote(_quote(area))
        assert [li.discipline for li in result.line_items] == ["landscape", "elevations"]


class TestTravel:
    def test_no_travel_line_for_zero_distance(self, engine: QuoteEngine) -> None:
        result = engine.compute_quote(_quote())
        assert all(li.category is not LineItemCategory.TRAVEL for li in result.line_items)
        assert result.travel.total_cost == 0.0

    def test_standard_travel_line(self, engine: QuoteEngine) -> None:
        result = engine.compute_quote(_quote(dispatchLocation="TROY", distance=75))
        travel = result.line_items[-1]
        assert travel.category is LineItemCategory.TRAVEL
        assert travel.client_price == pytest.approx(525.0)
        assert travel.upteam_cost == pytest.approx(525.0)
        assert travel.description == "Travel - 75 mi @ $3/mi + $300 scan day fee"
        assert result.subtotals.travel == pytest.approx(525.0)

    def test_metro_travel_uses_project_size(self, engine: QuoteEngine) -> None:
        result = engine.compute_quote(
            _quote(_area(squareFeet=25_000), dispatchLocation="BROOKLYN", distance=25)
        )
        assert result.travel.strategy is TravelStrategy.METRO
        assert result.travel.tier == "Tier B"
        assert result.subtotals.travel == pytest.approx(320.0)

    def test_travel_priced_once_for_many_areas(self, engine: QuoteEngine) -> None:
        result = engine.compute_quote(
            _quote(_area(), _area(id="area-1", name="Annex"), distance=30)
        )
        travel = [li for li in result.line_items if li.category is LineItemCategory.TRAVEL]
        assert len(travel) == 1

    def test_mileage_override(self, engine: QuoteEngine) -> None:
        result = engine.compute_quote(_quote(distance=10, mileageRate=5))
        assert result.subtotals.travel == pytest.approx(50.0)


class TestTotals:
    def test_payment_term_premium(self, engine: QuoteEngine) -> None:
        result = engine.compute_quote(
            _quote(_area(squareFeet=5_000, risks=["occupied"]), paymentTerms="net30")
        )
        assert result.total_client_price == pytest.approx(1_868.75)
        assert result.grand_total == pytest.approx(1_868.75 * 1.05)
        assert result.payment_term_premium == pytest.approx(1_868.75 * 0.05)
        assert result.gross_margin == pytest.approx(
            (result.grand_total - 1_056.25) / result.grand_total
        )
        assert result.integrity_status is IntegrityStatus.PASSED

    def test_unknown_payment_terms_recorded(self, engine: QuoteEngine) -> None:
        result = engine.compute_quote(_quote(paymentTerms="net45"))
        assert result.payment_term_premium == pytest.approx(0.0)
        assert result.assumptions[0].parameter == "payment_terms"

    def test_unknown_dispatch_location_recorded(self, engine: QuoteEngine) -> None:
        result = engine.compute_quote(_quote(dispatchLocation="Albany", distance=40))
        assert result.travel.strategy.value == "standard"
        assert [a.parameter for a in result.assumptions] == ["dispatch_location"]
        assert "Albany" in result.assumptions[0].reasoning

    @pytest.mark.parametrize("location", ["TROY", "boise", "Brooklyn"])
    def test_known_dispatch_location_not_recorded(
        self, engine: QuoteEngine, location: str
    ) -> None:
        result = engine.compute_quote(_quote(dispatchLocation=location, distance=40))
        assert result.assumptions == []

    def test_tier_a_is_informational(self, engine: QuoteEngine) -> None:
        small = engine.compute_quote(_quote(_area(squareFeet=49_999)))
        large = engine.compute_quote(_quote(_area(squareFeet=50_000)))
        assert not small.is_tier_a
        assert large.is_tier_a
        assert large.line_items[0].client_price == pytest.approx(50_000 * 0.25 * 1.3)

    def test_subtotals_add_up(self, engine: QuoteEngine) -> None:
        result = engine.compute_quote(
            _quote(
                _area(disciplines=["arch", "mepf"], additionalElevations=3),
                _area(id="area-1", name="Ceilings", buildingType="16", squareFeet=4_000),
                distance=40,
            )
        )
        assert result.total_client_price == pytest.approx(result.subtotals.total)
        assert result.total_upteam_cost == pytest.approx(
            sum(li.upteam_cost for li in result.line_items)
        )

    def test_metadata(self, engine: QuoteEngine) -> None:
        result = engine.compute_quote(_quote())
        assert result.metadata.engine_version == "0.1.0"
        assert result.metadata.rate_table_version == DEFAULT_RATE_TABLE.version

    def test_deterministic(self, engine: QuoteEngine) -> None:
        quote_input = _quote(_area(risks=["occupied", "no_power"]), distance=80)
        first = engine.compute_quote(quote_input)
        second = engine.compute_quote(quote_input)
        assert first.model_dump(exclude={"metadata"}) == second.model_dump(
            exclude={"metadata"}
        )


class TestRateTableSwap:
    def test_swap_changes_later_quotes(
        self, engine: QuoteEngine, repo: RateTableRepository
    ) -> None:
        before = engine.compute_quote(_quote(_area(squareFeet=5_000)))
        repo.swap(
            DEFAULT_RATE_TABLE.with_updates(version="FY26.2", base_rates={"arch": 0.50})
        )
        after = engine.compute_quote(_quote(_area(squareFeet=5_000)))
        assert before.line_items[0].client_price == pytest.approx(1_625.0)
        assert after.line_items[0].client_price == pytest.approx(3_250.0)
        assert after.metadata.rate_table_version == "FY26.2"

    def test_missing_base_rate_falls_back(self, repo: RateTableRepository) -> None:
        repo.swap(DEFAULT_RATE_TABLE.with_updates(base_rates={}))
        result = QuoteEngine(repo).compute_quote(_quote())
        assert result.line_items[0].client_price == pytest.approx(10_000 * 2.50 * 1.3)
        assert result.assumptions[0].parameter == "base_rate:arch"


class TestComputeQuoteFromDict:
    def test_valid_payload(self, engine: QuoteEngine) -> None:
        result = engine.compute_quote_from_dict({"areas": [_area()]})
        assert result.grand_total == pytest.approx(3_250.0)

    @pytest.mark.parametrize(
        "payload",
        [
            {"areas": []},
            {"areas": [_area(buildingType="99")]},
            {"areas": [_area(squareFeet=-1)]},
            {"areas": [_area(disciplines=["plumbing"])]},
            {"areas": [_area(lod="400")]},
            {"areas": [_area()], "marginTarget": 1.0},
        ],
    )
    def test_invalid_payload(self, engine: QuoteEngine, payload: dict[str, Any]) -> None:
        with pytest.raises(InvalidQuoteInputError):
            engine.compute_quote_from_dict(payload)


class TestResolveDisciplineSettings:
    def test_defaults(self) -> None:
        area = Area.model_validate(_area())
        assert resolve_discipline_settings(area, Discipline.ARCH) == (Lod.LOD_300, Scope.FULL)

    def test_partial_override(self) -> None:
        area = Area.model_validate(
            _area(lod="350", scope="interior", disciplineLods={"mepf": {"lod": "200"}})
        )
        assert resolve_discipline_settings(area, Discipline.MEPF) == (
            Lod.LOD_200,
            Scope.INTERIOR,
        )
        assert resolve_discipline_settings(area, Discipline.ARCH) == (
            Lod.LOD_350,
            Scope.INTERIOR,
        )
