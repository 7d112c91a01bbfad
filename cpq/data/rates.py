"""Schema for the pricing rate table.

A ``RateTable`` is an immutable snapshot of every constant the engine
prices with. Lookup helpers return the value together with a flag telling
the caller whether a documented fallback was used, so the engine can record
the fallback as an assumption on the quote.

Mapping fields are stored as read-only proxies. Derive edited tables with
:meth:`RateTable.with_updates`, which revalidates and copies every
container.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)

LandscapeRow = tuple[float, float, float, float, float]


def _freeze(value: Any) -> Any:
    """Wrap mappings (recursively) in read-only proxies."""
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    return value


_MAPPING_FIELDS = (
    "base_rates",
    "lod_multipliers",
    "risk_premiums",
    "scope_portions",
    "scope_discounts",
    "payment_term_premiums",
    "landscape_rates",
)


class ElevationTier(BaseModel):
    """One capacity tier of additional-elevation pricing.

    ``max_count`` is the cumulative count the tier reaches; ``None`` marks
    the unbounded final tier.
    """

    model_config = ConfigDict(frozen=True)

    max_count: int | None
    rate: float = Field(ge=0)


class TravelRates(BaseModel):
    """Mileage rates and thresholds for both travel strategies."""

    model_config = ConfigDict(frozen=True)

    standard_per_mile: float = Field(ge=0)
    metro_per_mile: float = Field(ge=0)
    metro_threshold_miles: float = Field(ge=0)
    scan_day_fee_threshold_miles: float = Field(ge=0)
    scan_day_fee: float = Field(ge=0)


class MetroTiers(BaseModel):
    """Flat base fees for metro dispatch, tiered by project square footage."""

    model_config = ConfigDict(frozen=True)

    tier_a_min_sqft: float = Field(ge=0)
    tier_b_min_sqft: float = Field(ge=0)
    base_fees: Mapping[str, float]

    @field_validator("base_fees")
    @classmethod
    def freeze_base_fees(cls, v: Mapping[str, float]) -> Mapping[str, float]:
        return _freeze(v)

    @field_serializer("base_fees")
    def serialize_base_fees(self, v: Mapping[str, float]) -> dict[str, float]:
        return _thaw(v)

    @model_validator(mode="after")
    def tiers_are_ordered(self) -> MetroTiers:
        if self.tier_b_min_sqft > self.tier_a_min_sqft:
            msg = (
                f"tier_b_min_sqft ({self.tier_b_min_sqft}) must not exceed "
                f"tier_a_min_sqft ({self.tier_a_min_sqft})"
            )
            raise ValueError(msg)
        missing = {"tierA", "tierB", "tierC"} - set(self.base_fees)
        if missing:
            msg = f"Metro base fees missing tiers: {sorted(missing)}"
            raise ValueError(msg)
        return self


class RateTable(BaseModel):
    """Immutable pricing configuration injected into the quote engine."""

    model_config = ConfigDict(frozen=True)

    version: str

    # Floors and ratios
    min_sqft_floor: float = Field(ge=0)
    upteam_multiplier_fallback: float = Field(gt=0, lt=1)
    sqft_per_acre: float = Field(gt=0)
    tier_a_threshold: float = Field(ge=0)

    # Flat specialty rates ($/SF)
    act_rate_per_sqft: float = Field(ge=0)
    matterport_rate_per_sqft: float = Field(ge=0)

    # Margin thresholds
    margin_floor: float
    margin_guardrail: float
    margin_target_min: float
    margin_target_max: float
    margin_target_default: float

    # Modeling rates
    generic_base_rate: float = Field(ge=0)
    base_rates: Mapping[str, float]
    lod_multipliers: Mapping[str, float]
    risk_premiums: Mapping[str, float]
    scope_portions: Mapping[str, float]
    scope_discounts: Mapping[str, float]
    payment_term_premiums: Mapping[str, float]

    # Travel
    travel: TravelRates
    metro_dispatch_location: str
    metro_tiers: MetroTiers
    dispatch_locations: tuple[str, ...] = ()

    # Specialty tables
    landscape_rates: Mapping[str, Mapping[str, LandscapeRow]]
    landscape_acreage_breaks: tuple[float, float, float, float]
    elevation_tiers: tuple[ElevationTier, ...]

    @field_validator("scope_portions")
    @classmethod
    def portions_in_unit_interval(cls, v: Mapping[str, float]) -> Mapping[str, float]:
        for scope, portion in v.items():
            if not 0 < portion <= 1:
                msg = f"Scope portion for '{scope}' must be in (0, 1], got {portion}"
                raise ValueError(msg)
        return v

    @field_validator(*_MAPPING_FIELDS)
    @classmethod
    def freeze_mappings(cls, v: Mapping[str, Any]) -> Mapping[str, Any]:
        return _freeze(v)

    @field_serializer(*_MAPPING_FIELDS)
    def serialize_mappings(self, v: Mapping[str, Any]) -> dict[str, Any]:
        return _thaw(v)

    @field_validator("landscape_acreage_breaks")
    @classmethod
    def breaks_increasing(
        cls, v: tuple[float, float, float, float]
    ) -> tuple[float, float, float, float]:
        if list(v) != sorted(set(v)):
            msg = f"Landscape acreage breaks must be strictly increasing, got {v}"
            raise ValueError(msg)
        return v

    @field_validator("elevation_tiers")
    @classmethod
    def tiers_increasing_and_unbounded(
        cls, v: tuple[ElevationTier, ...]
    ) -> tuple[ElevationTier, ...]:
        if not v:
            msg = "At least one elevation tier is required"
            raise ValueError(msg)
        if v[-1].max_count is not None:
            msg = "The final elevation tier must be unbounded (max_count=None)"
            raise ValueError(msg)
        previous = 0
        for tier in v[:-1]:
            if tier.max_count is None or tier.max_count <= previous:
                msg = "Elevation tier maxima must be strictly increasing"
                raise ValueError(msg)
            previous = tier.max_count
        return v

    @model_validator(mode="after")
    def margin_thresholds_ordered(self) -> RateTable:
        if not 0 <= self.margin_floor <= self.margin_guardrail < 1:
            msg = (
                "Must satisfy 0 <= margin_floor <= margin_guardrail < 1, "
                f"got {self.margin_floor} / {self.margin_guardrail}"
            )
            raise ValueError(msg)
        if not (
            0 <= self.margin_target_min
            <= self.margin_target_default
            <= self.margin_target_max
            < 1
        ):
            msg = (
                "Must satisfy min <= default <= max < 1 for margin targets, got "
                f"{self.margin_target_min} / {self.margin_target_default} / "
                f"{self.margin_target_max}"
            )
            raise ValueError(msg)
        return self

    def with_updates(self, **changes: Any) -> RateTable:
        """Derive a new, fully validated snapshot with ``changes`` applied.

        The result shares no mutable state with this table.

        Raises:
            ValidationError: If the updated table is invalid.
        """
        return RateTable.model_validate({**self.model_dump(), **changes})

    # ------------------------------------------------------------------
    # Lookups with documented fallbacks
    # ------------------------------------------------------------------

    def base_rate_for(self, discipline: str) -> tuple[float, bool]:
        """Base $/SF for a discipline; falls back to the generic rate."""
        rate = self.base_rates.get(discipline)
        if rate:
            return rate, False
        return self.generic_base_rate, True

    def lod_multiplier_for(self, lod: str) -> tuple[float, bool]:
        """LOD multiplier; falls back to 1.0 for unknown LODs."""
        multiplier = self.lod_multipliers.get(lod)
        if multiplier:
            return multiplier, False
        return 1.0, True

    def scope_portion_for(self, scope: str) -> float:
        """Fraction of the area a scope covers; 1.0 for full or unrecognized scopes."""
        return self.scope_portions.get(scope) or 1.0

    def payment_term_premium_for(self, payment_terms: str) -> tuple[float, bool]:
        """Premium rate for payment terms; 0 for unknown terms."""
        if payment_terms in self.payment_term_premiums:
            return self.payment_term_premiums[payment_terms], False
        return 0.0, True

    def landscape_rates_for(
        self, building_type: str, lod: str
    ) -> tuple[float, float, float, float, float] | None:
        """Per-acre rate row for a landscape type and LOD, or None if missing."""
        return self.landscape_rates.get(building_type, {}).get(lod)

    def is_known_risk(self, risk: str) -> bool:
        return risk in self.risk_premiums

