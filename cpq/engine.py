"""Core quote engine for the CPQ library.

The QuoteEngine turns a QuoteInput into a fully priced QuoteResult:

1. **Project size**: Sum area square footage, converting landscape acres
   to a square-foot equivalent (used only for Tier A and metro travel).
2. **Tier A flag**: Informational; never changes pricing.
3. **Per-area dispatch**: Each area goes to exactly one pricer by building
   kind (standard, landscape, ACT, Matterport). Standard areas produce one
   line per discipline, or two (interior + exterior) for mixed scope.
   Elevation and Matterport add-on lines follow regardless of type.
4. **Travel**: Priced once for the whole quote.
5. **Totals**: Category subtotals, payment-term premium, gross margin.
6. **Integrity**: Passed / warning / blocked verdict from the margin.
7. **Margin target**: Optional back-solve of client prices to a target.

Every documented fallback (generic base rate, unknown LOD, missing
landscape rates, unknown payment terms or risk tags) is recorded as an
Assumption on the result so quotes stay auditable.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from pydantic import ValidationError

from cpq.data.rates import RateTable
from cpq.data.repository import RateTableRepository
from cpq.exceptions import InvalidQuoteInputError
from cpq.formatting import format_quantity
from cpq.models.enums import (
    BuildingKind,
    BuildingType,
    Discipline,
    LineItemCategory,
    Lod,
    Scope,
)
from cpq.models.quote import Area, QuoteInput
from cpq.models.result import (
    Assumption,
    LineItem,
    QuoteMetadata,
    QuoteResult,
    TravelResult,
)
from cpq.pricing.area import calculate_area_pricing, get_area_tier
from cpq.pricing.elevations import calculate_additional_elevations_price
from cpq.pricing.integrity import check_integrity
from cpq.pricing.margin import apply_margin_target
from cpq.pricing.risk import (
    applies_risk_premium,
    apply_risk_premium,
    calculate_risk_multiplier,
    merge_risks,
)
from cpq.pricing.specialty import (
    calculate_act_area_pricing,
    calculate_landscape_area_pricing,
    calculate_matterport_pricing,
)
from cpq.pricing.totals import compute_totals
from cpq.pricing.travel import calculate_travel

logger = logging.getLogger(__name__)

ENGINE_VERSION = "0.1.0"

# Mixed scope is priced as these two portions, in this order
_MIXED_SCOPE_PARTS: tuple[Scope, Scope] = (Scope.INTERIOR, Scope.EXTERIOR)


def resolve_discipline_settings(area: Area, discipline: Discipline) -> tuple[Lod, Scope]:
    """Effective LOD and scope for one discipline of an area.

    A per-discipline override wins; otherwise the area's own setting
    (which defaults to LOD 300 / full scope) applies.
    """
    override = area.discipline_overrides.get(discipline)
    lod = override.lod if override is not None and override.lod is not None else area.lod
    scope = (
        override.scope if override is not None and override.scope is not None else area.scope
    )
    return lod, scope


def _scope_label(scope: str) -> str:
    return f"{scope.title()} Scope"


class _QuoteBuilder:
    """Accumulates line items and assumptions for a single computation."""

    def __init__(self, table: RateTable, quote_input: QuoteInput) -> None:
        self.table = table
        self.quote_input = quote_input
        self.line_items: list[LineItem] = []
        self.assumptions: list[Assumption] = []

    # -- bookkeeping ---------------------------------------------------

    def add_line_item(self, **fields: Any) -> None:
        self.line_items.append(LineItem(id=f"li-{len(self.line_items)}", **fields))

    def assume(self, parameter: str, assumed_value: str, reasoning: str) -> None:
        if any(a.parameter == parameter for a in self.assumptions):
            return
        logger.warning("Pricing fallback for %s: %s", parameter, reasoning)
        self.assumptions.append(
            Assumption(
                parameter=parameter,
                assumed_value=assumed_value,
                reasoning=reasoning,
            )
        )

    # -- per-kind area pricers -----------------------------------------

    def add_standard_area(self, area: Area, risks: list[str]) -> None:
        for discipline in area.disciplines:
            lod, scope = resolve_discipline_settings(area, discipline)
            self._check_modeling_rates(discipline, lod)

            if scope is Scope.MIXED:
                for part in _MIXED_SCOPE_PARTS:
                    self._add_modeling_line(area, discipline, lod, part, risks)
            else:
                self._add_modeling_line(area, discipline, lod, scope, risks)

    def add_landscape_area(self, area: Area, risks: list[str]) -> None:
        table = self.table
        if table.landscape_rates_for(area.building_type, area.lod) is None:
            self.assume(
                parameter=f"landscape_rate:{area.building_type}:{area.lod}",
                assumed_value="0",
                reasoning=(
                    f"No landscape rates for building type {area.building_type} "
                    f"at LoD {area.lod}; area priced at $0"
                ),
            )
        pricing = calculate_landscape_area_pricing(
            area.building_type, area.square_feet, area.lod, table
        )
        self.add_line_item(
            area_id=area.id,
            area_name=area.name,
            discipline="landscape",
            building_type=area.building_type.value,
            sqft=area.square_feet,
            effective_sqft=pricing.effective_sqft,
            lod=area.lod.value,
            scope=Scope.FULL.value,
            client_price=pricing.client_price,
            upteam_cost=pricing.upteam_cost,
            category=LineItemCategory.MODELING,
            description=(
                f"Landscape - {area.building_type.display_name} - "
                f"{format_quantity(area.square_feet)} ac - LoD {area.lod}"
            ),
        )

    def add_act_area(self, area: Area, risks: list[str]) -> None:
        portion = self.table.scope_portion_for(area.scope)
        # Mixed has no portion of its own and prices as the full area
        scope = Scope.FULL if area.scope is Scope.MIXED else area.scope
        pricing = calculate_act_area_pricing(area.square_feet, portion, self.table)
        self.add_line_item(
            area_id=area.id,
            area_name=area.name,
            discipline="act",
            building_type=area.building_type.value,
            sqft=area.square_feet,
            effective_sqft=pricing.effective_sqft,
            lod=area.lod.value,
            scope=scope.value,
            client_price=pricing.client_price,
            upteam_cost=pricing.upteam_cost,
            category=LineItemCategory.SERVICE,
            description=(
                f"ACT Ceilings - {format_quantity(area.square_feet)} SF - "
                f"{_scope_label(scope)}"
            ),
        )

    def add_matterport_area(self, area: Area, risks: list[str]) -> None:
        self._add_matterport_line(area, lod=area.lod.value)

    # -- add-ons ---------------------------------------------------------

    def add_area_add_ons(self, area: Area) -> None:
        if area.additional_elevations > 0:
            price = calculate_additional_elevations_price(
                area.additional_elevations, self.table
            )
            self.add_line_item(
                area_id=area.id,
                area_name=area.name,
                discipline="elevations",
                building_type=area.building_type.value,
                sqft=0.0,
                effective_sqft=0.0,
                lod="",
                scope="",
                client_price=price,
                upteam_cost=price * self.table.upteam_multiplier_fallback,
                category=LineItemCategory.ELEVATION,
                description=f"Additional Elevations - {area.additional_elevations}",
            )

        if area.include_matterport and area.building_type is not BuildingType.MATTERPORT_ONLY:
            self._add_matterport_line(area, lod="")

    def add_travel(self, total_project_sqft: float) -> TravelResult:
        quote_input = self.quote_input
        known = {loc.upper() for loc in self.table.dispatch_locations}
        if known and quote_input.dispatch_location.upper() not in known:
            self.assume(
                parameter="dispatch_location",
                assumed_value="standard",
                reasoning=(
                    f"Unknown dispatch location '{quote_input.dispatch_location}'; "
                    "priced with standard travel"
                ),
            )
        travel = calculate_travel(
            quote_input.dispatch_location,
            quote_input.distance,
            total_project_sqft,
            mileage_rate=quote_input.mileage_rate,
            scan_day_fee=quote_input.scan_day_fee,
            table=self.table,
        )
        if travel.total_cost > 0:
            # Travel is a pass-through: cost equals price
            self.add_line_item(
                area_id="travel",
                area_name="Travel",
                discipline="travel",
                building_type="",
                sqft=0.0,
                effective_sqft=0.0,
                lod="",
                scope="",
                client_price=travel.total_cost,
                upteam_cost=travel.total_cost,
                category=LineItemCategory.TRAVEL,
                description=travel.label,
            )
        return travel

    # -- helpers -----------------------------------------------------------

    def _check_modeling_rates(self, discipline: Discipline, lod: Lod) -> None:
        _, base_fallback = self.table.base_rate_for(discipline)
        if base_fallback:
            self.assume(
                parameter=f"base_rate:{discipline}",
                assumed_value=str(self.table.generic_base_rate),
                reasoning=f"No base rate for discipline '{discipline}'; used the generic rate",
            )
        _, lod_fallback = self.table.lod_multiplier_for(lod)
        if lod_fallback:
            self.assume(
                parameter=f"lod_multiplier:{lod}",
                assumed_value="1.0",
                reasoning=f"No multiplier for LoD {lod}; used 1.0",
            )

    def _add_modeling_line(
        self,
        area: Area,
        discipline: Discipline,
        lod: Lod,
        scope: Scope,
        risks: list[str],
    ) -> None:
        pricing = calculate_area_pricing(
            sqft=area.square_feet,
            discipline=discipline,
            lod=lod,
            scope_portion=self.table.scope_portion_for(scope),
            table=self.table,
        )
        risk_multiplier = (
            calculate_risk_multiplier(risks, self.table)
            if applies_risk_premium(discipline)
            else 1.0
        )
        self.add_line_item(
            area_id=area.id,
            area_name=area.name,
            discipline=discipline.value,
            building_type=area.building_type.value,
            sqft=area.square_feet,
            effective_sqft=pricing.effective_sqft,
            lod=lod.value,
            scope=scope.value,
            client_price=apply_risk_premium(discipline, pricing.client_price, risks, self.table),
            upteam_cost=pricing.upteam_cost,
            risk_multiplier=risk_multiplier,
            category=LineItemCategory.MODELING,
            description=(
                f"{discipline.display_name} - {area.building_type.display_name} - "
                f"{format_quantity(area.square_feet)} SF ({get_area_tier(area.square_feet)})"
                f" - LoD {lod} - {_scope_label(scope)}"
            ),
        )

    def _add_matterport_line(self, area: Area, lod: str) -> None:
        pricing = calculate_matterport_pricing(area.square_feet, self.table)
        self.add_line_item(
            area_id=area.id,
            area_name=area.name,
            discipline="matterport",
            building_type=area.building_type.value,
            sqft=area.square_feet,
            effective_sqft=pricing.effective_sqft,
            lod=lod,
            scope=Scope.FULL.value,
            client_price=pricing.client_price,
            upteam_cost=pricing.upteam_cost,
            category=LineItemCategory.SERVICE,
            description=f"Matterport - {format_quantity(area.square_feet)} SF",
        )


# Exhaustive over BuildingKind; a kind without a pricer is a KeyError.
_AREA_PRICERS: dict[BuildingKind, Callable[[_QuoteBuilder, Area, list[str]], None]] = {
    BuildingKind.STANDARD: _QuoteBuilder.add_standard_area,
    BuildingKind.LANDSCAPE: _QuoteBuilder.add_landscape_area,
    BuildingKind.ACT: _QuoteBuilder.add_act_area,
    BuildingKind.MATTERPORT: _QuoteBuilder.add_matterport_area,
}


class QuoteEngine:
    """Deterministic configure-price-quote engine.

    Args:
        rates: Either a fixed RateTable or a RateTableRepository whose
            snapshot can be swapped at runtime. Each computation reads the
            snapshot once and uses it throughout.

    Example::

        from cpq.data.seed import DEFAULT_RATE_TABLE

        engine = QuoteEngine(DEFAULT_RATE_TABLE)
        result = engine.compute_quote(quote_input)
    """

    def __init__(self, rates: RateTable | RateTableRepository) -> None:
        if isinstance(rates, RateTable):
            rates = RateTableRepository(rates)
        self._repository = rates

    @property
    def repository(self) -> RateTableRepository:
        return self._repository

    @property
    def rate_table(self) -> RateTable:
        """The active rate table snapshot."""
        return self._repository.current()

    def compute_quote(self, quote_input: QuoteInput) -> QuoteResult:
        """Price a quote and apply its margin target, if any.

        Returns:
            The priced QuoteResult. When ``quote_input.margin_target`` is
            set and positive, the result has been repriced to that target.
            The target is already range-checked by ``QuoteInput``; use
            :meth:`compute_quote_from_dict` to get ``InvalidQuoteInputError``
            for raw payloads instead of a pydantic ``ValidationError``.
        """
        table = self._repository.current()
        result = self._price(quote_input, table)
        if quote_input.margin_target:
            return apply_margin_target(result, quote_input.margin_target, table)
        return result

    def price_quote(self, quote_input: QuoteInput) -> QuoteResult:
        """Price a quote without applying its margin target."""
        return self._price(quote_input, self._repository.current())

    def compute_quote_from_dict(self, payload: Mapping[str, Any]) -> QuoteResult:
        """Validate a raw payload (form post, LLM extraction) and price it.

        Raises:
            InvalidQuoteInputError: If the payload is not a valid QuoteInput.
        """
        try:
            quote_input = QuoteInput.model_validate(payload)
        except ValidationError as exc:
            msg = f"Invalid quote input: {exc.error_count()} validation error(s)"
            raise InvalidQuoteInputError(msg) from exc
        return self.compute_quote(quote_input)

    def _price(self, quote_input: QuoteInput, table: RateTable) -> QuoteResult:
        builder = _QuoteBuilder(table, quote_input)

        # 1-2. Project size and Tier A (informational)
        total_project_sqft = 0.0
        for area in quote_input.areas:
            total_project_sqft += area.square_feet_equivalent(table.sqft_per_acre)
        is_tier_a = total_project_sqft >= table.tier_a_threshold

        self._record_unknown_risks(builder, quote_input)

        # 3. Per-area dispatch
        for area in quote_input.areas:
            risks = merge_risks(area.risks, quote_input.risks)
            kind = area.building_type.kind
            logger.debug(
                "Pricing area %s (%s, type %s, %s)",
                area.id,
                area.name,
                area.building_type.value,
                kind.value,
            )
            _AREA_PRICERS[kind](builder, area, risks)
            builder.add_area_add_ons(area)

        # 4. Travel
        travel = builder.add_travel(total_project_sqft)

        # 5-7. Totals, premium, margin
        _, unknown_terms = table.payment_term_premium_for(quote_input.payment_terms)
        if unknown_terms:
            builder.assume(
                parameter="payment_terms",
                assumed_value="0",
                reasoning=(
                    f"Unknown payment terms '{quote_input.payment_terms}'; "
                    "no premium applied"
                ),
            )
        totals = compute_totals(builder.line_items, quote_input.payment_terms, table)

        # 8. Integrity
        report = check_integrity(totals.gross_margin, table)

        logger.info(
            "Quote priced: %d line items, grand total %.2f, margin %.4f, %s",
            len(builder.line_items),
            totals.grand_total,
            totals.gross_margin,
            report.status.value,
        )

        return QuoteResult(
            line_items=builder.line_items,
            travel=travel,
            subtotals=totals.subtotals,
            total_upteam_cost=totals.total_upteam_cost,
            total_client_price=totals.total_client_price,
            gross_margin=totals.gross_margin,
            gross_margin_percent=totals.gross_margin_percent,
            integrity_status=report.status,
            integrity_flags=report.flags,
            payment_term_premium=totals.payment_term_premium,
            payment_terms=quote_input.payment_terms,
            grand_total=totals.grand_total,
            is_tier_a=is_tier_a,
            total_project_sqft=total_project_sqft,
            assumptions=builder.assumptions,
            metadata=QuoteMetadata(
                engine_version=ENGINE_VERSION,
                rate_table_version=table.version,
            ),
        )

    @staticmethod
    def _record_unknown_risks(builder: _QuoteBuilder, quote_input: QuoteInput) -> None:
        """Document risk tags that carry no premium in the rate table."""
        tags = [*quote_input.risks]
        for area in quote_input.areas:
            tags.extend(area.risks)
        for tag in dict.fromkeys(tags):
            if not builder.table.is_known_risk(tag):
                builder.assume(
                    parameter=f"risk:{tag}",
                    assumed_value="0",
                    reasoning=f"Unknown risk tag '{tag}' carries no premium",
                )
