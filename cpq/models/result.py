"""Quote output models for the CPQ engine."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from cpq.models.enums import (
    FlagSeverity,
    IntegrityStatus,
    LineItemCategory,
    TravelStrategy,
)

_RESULT_CONFIG = ConfigDict(frozen=True)


class LineItem(BaseModel):
    """One priced unit of work.

    ``discipline`` is a modeling discipline for standard areas, or one of
    ``landscape``, ``act``, ``matterport``, ``elevations`` and ``travel``
    for the other line kinds.
    """

    model_config = _RESULT_CONFIG

    id: str
    area_id: str
    area_name: str
    discipline: str
    building_type: str
    sqft: float
    effective_sqft: float
    lod: str
    scope: str
    client_price: float
    upteam_cost: float
    risk_multiplier: float = 1.0
    category: LineItemCategory
    description: str = ""

    @property
    def margin(self) -> float:
        """Gross margin of this item alone (0 when unpriced)."""
        if self.client_price <= 0:
            return 0.0
        return (self.client_price - self.upteam_cost) / self.client_price


class TravelResult(BaseModel):
    """Travel cost for the whole quote."""

    model_config = _RESULT_CONFIG

    strategy: TravelStrategy
    base_cost: float
    extra_miles_cost: float = 0.0
    scan_day_fee: float = 0.0
    total_cost: float
    label: str
    tier: str | None = None


class Subtotals(BaseModel):
    """Client price summed by line-item category."""

    model_config = _RESULT_CONFIG

    modeling: float = 0.0
    travel: float = 0.0
    services: float = 0.0
    elevations: float = 0.0

    @property
    def total(self) -> float:
        return self.modeling + self.travel + self.services + self.elevations


class IntegrityFlag(BaseModel):
    """A structured finding from the integrity check."""

    model_config = _RESULT_CONFIG

    code: str
    message: str
    severity: FlagSeverity


class Assumption(BaseModel):
    """A documented fallback used while pricing."""

    model_config = _RESULT_CONFIG

    parameter: str
    assumed_value: str
    reasoning: str


class QuoteMetadata(BaseModel):
    """Metadata about the pricing run."""

    model_config = _RESULT_CONFIG

    engine_version: str
    rate_table_version: str
    margin_target: float | None = None
    generated_at: datetime = Field(default_factory=datetime.now)


class QuoteResult(BaseModel):
    """Complete priced quote produced by the engine.

    Invariants: ``grand_total == total_client_price * (1 + premium rate)``
    and ``gross_margin == (grand_total - total_upteam_cost) / grand_total``
    whenever ``grand_total > 0`` (0 otherwise).
    """

    model_config = _RESULT_CONFIG

    line_items: list[LineItem]
    travel: TravelResult
    subtotals: Subtotals
    total_upteam_cost: float
    total_client_price: float
    gross_margin: float
    gross_margin_percent: float
    integrity_status: IntegrityStatus
    integrity_flags: list[IntegrityFlag] = Field(default_factory=list)
    payment_term_premium: float
    payment_terms: str
    grand_total: float
    is_tier_a: bool
    total_project_sqft: float
    assumptions: list[Assumption] = Field(default_factory=list)
    metadata: QuoteMetadata

    @property
    def is_persistable(self) -> bool:
        """Whether a save handler may store this quote (blocked quotes may not)."""
        return self.integrity_status is not IntegrityStatus.BLOCKED

    def client_line_items(self) -> list[LineItem]:
        """Priced, client-facing line items for proposal documents."""
        return [li for li in self.line_items if li.client_price > 0]

    def to_summary_dict(self) -> dict[str, Any]:
        """Produce a flat summary dict for frontend consumption.

        Returns a dict with formatted strings for direct display in the
        quote totals bar.
        """
        from cpq.formatting import format_currency, format_percent

        return {
            "num_line_items": len(self.line_items),
            "modeling_formatted": format_currency(self.subtotals.modeling),
            "services_formatted": format_currency(self.subtotals.services),
            "elevations_formatted": format_currency(self.subtotals.elevations),
            "travel_formatted": format_currency(self.subtotals.travel),
            "travel_label": self.travel.label,
            "total_client_price_formatted": format_currency(self.total_client_price),
            "payment_term_premium_formatted": format_currency(self.payment_term_premium),
            "grand_total_formatted": format_currency(self.grand_total),
            "total_upteam_cost_formatted": format_currency(self.total_upteam_cost),
            "gross_margin_formatted": format_percent(self.gross_margin),
            "integrity_status": self.integrity_status.value,
            "integrity_messages": [f.message for f in self.integrity_flags],
            "is_tier_a": self.is_tier_a,
            "num_assumptions": len(self.assumptions),
        }

    def to_export_dict(self) -> dict[str, Any]:
        """Produce a detailed dict for proposal PDF export.

        Only client-facing fields are included; vendor costs and margins
        stay internal.
        """
        return {
            "line_items": [
                {
                    "id": li.id,
                    "area_name": li.area_name,
                    "description": li.description,
                    "category": li.category.value,
                    "sqft": li.sqft,
                    "lod": li.lod,
                    "scope": li.scope,
                    "client_price": li.client_price,
                }
                for li in self.client_line_items()
            ],
            "subtotals": self.subtotals.model_dump(),
            "travel_label": self.travel.label,
            "total_client_price": self.total_client_price,
            "payment_terms": self.payment_terms,
            "payment_term_premium": self.payment_term_premium,
            "grand_total": self.grand_total,
            "rate_table_version": self.metadata.rate_table_version,
            "generated_at": self.metadata.generated_at.isoformat(),
        }
