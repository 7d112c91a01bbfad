"""Domain models for the CPQ engine."""

from cpq.models.enums import (
    BuildingKind,
    BuildingType,
    Discipline,
    FlagSeverity,
    IntegrityStatus,
    LineItemCategory,
    Lod,
    PaymentTerms,
    RiskTag,
    Scope,
    TravelStrategy,
)
from cpq.models.quote import Area, DisciplineOverride, QuoteInput
from cpq.models.result import (
    Assumption,
    IntegrityFlag,
    LineItem,
    QuoteMetadata,
    QuoteResult,
    Subtotals,
    TravelResult,
)

__all__ = [
    "Area",
    "Assumption",
    "BuildingKind",
    "BuildingType",
    "Discipline",
    "DisciplineOverride",
    "FlagSeverity",
    "IntegrityFlag",
    "IntegrityStatus",
    "LineItem",
    "LineItemCategory",
    "Lod",
    "PaymentTerms",
    "QuoteInput",
    "QuoteMetadata",
    "QuoteResult",
    "RiskTag",
    "Scope",
    "Subtotals",
    "TravelResult",
    "TravelStrategy",
]
