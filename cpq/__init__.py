"""Scan2Plan configure-price-quote engine.

Usage::

    from cpq import create_default_engine, QuoteInput

    engine = create_default_engine()
    result = engine.compute_quote(QuoteInput.model_validate(payload))
"""

from cpq.data.rates import RateTable
from cpq.data.repository import RateTableRepository
from cpq.data.seed import DEFAULT_RATE_TABLE
from cpq.engine import QuoteEngine, resolve_discipline_settings
from cpq.exceptions import (
    CpqError,
    InvalidQuoteInputError,
    MarginTargetError,
    RateTableError,
)
from cpq.factory import create_default_engine, create_engine_from_file
from cpq.models.enums import (
    BuildingKind,
    BuildingType,
    Discipline,
    IntegrityStatus,
    LineItemCategory,
    Lod,
    PaymentTerms,
    RiskTag,
    Scope,
)
from cpq.models.quote import Area, DisciplineOverride, QuoteInput
from cpq.models.result import (
    Assumption,
    IntegrityFlag,
    LineItem,
    QuoteResult,
    Subtotals,
    TravelResult,
)
from cpq.pricing.margin import apply_margin_target

__all__ = [
    "DEFAULT_RATE_TABLE",
    "Area",
    "Assumption",
    "BuildingKind",
    "BuildingType",
    "CpqError",
    "Discipline",
    "DisciplineOverride",
    "IntegrityFlag",
    "IntegrityStatus",
    "InvalidQuoteInputError",
    "LineItem",
    "LineItemCategory",
    "Lod",
    "MarginTargetError",
    "PaymentTerms",
    "QuoteEngine",
    "QuoteInput",
    "QuoteResult",
    "RateTable",
    "RateTableError",
    "RateTableRepository",
    "RiskTag",
    "Scope",
    "Subtotals",
    "TravelResult",
    "apply_margin_target",
    "create_default_engine",
    "create_engine_from_file",
    "resolve_discipline_settings",
]
