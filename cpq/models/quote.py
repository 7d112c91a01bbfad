"""Quote input models for the CPQ engine.

A ``QuoteInput`` is what the scoping form (or the LLM extraction layer)
hands to the engine. Field aliases accept the camelCase JSON produced by
the web client; snake_case names work as well.
"""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field, field_validator

from cpq.models.enums import BuildingType, Discipline, Lod, Scope

_INPUT_CONFIG = ConfigDict(populate_by_name=True, frozen=True)


def _dedupe_tags(values: list[str]) -> list[str]:
    """Normalize free-form tags to lowercase and drop repeats, keeping order."""
    seen: list[str] = []
    for value in values:
        tag = value.strip().lower()
        if tag and tag not in seen:
            seen.append(tag)
    return seen


class DisciplineOverride(BaseModel):
    """Per-discipline LOD/scope override for an area."""

    model_config = _INPUT_CONFIG

    lod: Lod | None = None
    scope: Scope | None = None


class Area(BaseModel):
    """One region of a building to be scanned and modeled.

    For landscape building types ``square_feet`` holds **acres**, not
    square feet. Discipline settings are ignored for specialty types.
    """

    model_config = _INPUT_CONFIG

    id: str
    name: str
    building_type: BuildingType = Field(alias="buildingType")
    square_feet: float = Field(alias="squareFeet", ge=0)
    disciplines: list[Discipline] = Field(default_factory=lambda: [Discipline.ARCH])
    lod: Lod = Lod.LOD_300
    scope: Scope = Scope.FULL
    discipline_overrides: dict[Discipline, DisciplineOverride] = Field(
        default_factory=dict, alias="disciplineLods"
    )
    risks: list[str] = Field(default_factory=list)
    additional_elevations: int = Field(default=0, ge=0, alias="additionalElevations")
    include_matterport: bool = Field(default=False, alias="includeMatterport")

    @field_validator("square_feet")
    @classmethod
    def square_feet_must_be_finite(cls, v: float) -> float:
        if not math.isfinite(v):
            msg = "square_feet must be a finite number"
            raise ValueError(msg)
        return v

    @field_validator("disciplines")
    @classmethod
    def dedupe_disciplines(cls, v: list[Discipline]) -> list[Discipline]:
        return list(dict.fromkeys(v))

    @field_validator("risks")
    @classmethod
    def normalize_risks(cls, v: list[str]) -> list[str]:
        return _dedupe_tags(v)

    def square_feet_equivalent(self, sqft_per_acre: float) -> float:
        """Project-size contribution of this area, converting acres for landscapes."""
        if self.building_type.is_landscape:
            return self.square_feet * sqft_per_acre
        return self.square_feet


class QuoteInput(BaseModel):
    """Complete structured description of a project to be quoted."""

    model_config = _INPUT_CONFIG

    areas: list[Area] = Field(min_length=1)
    dispatch_location: str = Field(default="WOODSTOCK", alias="dispatchLocation")
    distance: float = Field(default=0.0, ge=0)
    payment_terms: str = Field(default="partner", alias="paymentTerms")
    risks: list[str] = Field(default_factory=list)
    margin_target: float | None = Field(default=None, alias="marginTarget")
    mileage_rate: float | None = Field(default=None, gt=0, alias="mileageRate")
    scan_day_fee: float | None = Field(default=None, ge=0, alias="scanDayFee")

    @field_validator("distance")
    @classmethod
    def distance_must_be_finite(cls, v: float) -> float:
        if not math.isfinite(v):
            msg = "distance must be a finite number"
            raise ValueError(msg)
        return v

    @field_validator("payment_terms")
    @classmethod
    def normalize_payment_terms(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("risks")
    @classmethod
    def normalize_risks(cls, v: list[str]) -> list[str]:
        return _dedupe_tags(v)

    @field_validator("margin_target")
    @classmethod
    def margin_target_below_one(cls, v: float | None) -> float | None:
        if v is None:
            return v
        if not math.isfinite(v) or v < 0 or v >= 1:
            msg = f"margin_target must satisfy 0 <= target < 1, got {v}"
            raise ValueError(msg)
        return v
