"""Enums for the CPQ domain models.

These enums represent the scoping-form vocabulary (building types,
disciplines, levels of detail, scopes) mapped to the pricing engine.
"""

from enum import StrEnum


class BuildingKind(StrEnum):
    """Pricing branch a building type is dispatched to."""

    STANDARD = "standard"
    LANDSCAPE = "landscape"
    ACT = "act"
    MATTERPORT = "matterport"


class BuildingType(StrEnum):
    """Building types from the scoping form, keyed by their form ID."""

    OFFICE = "1"
    EDUCATIONAL = "2"
    HEALTHCARE = "3"
    INDUSTRIAL = "4"
    RESIDENTIAL_MULTI_FAMILY = "5"
    RESIDENTIAL_SINGLE_FAMILY = "6"
    RETAIL = "7"
    HOSPITALITY = "8"
    MIXED_USE = "9"
    WAREHOUSE = "10"
    RELIGIOUS = "11"
    GOVERNMENT = "12"
    PARKING_STRUCTURE = "13"
    BUILT_LANDSCAPE = "14"
    NATURAL_LANDSCAPE = "15"
    ACT_CEILINGS_ONLY = "16"
    MATTERPORT_ONLY = "17"

    @property
    def kind(self) -> BuildingKind:
        return _SPECIALTY_KINDS.get(self, BuildingKind.STANDARD)

    @property
    def is_landscape(self) -> bool:
        """Landscape types measure ``square_feet`` in acres."""
        return self.kind is BuildingKind.LANDSCAPE

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_SPECIALTY_KINDS: dict[BuildingType, BuildingKind] = {
    BuildingType.BUILT_LANDSCAPE: BuildingKind.LANDSCAPE,
    BuildingType.NATURAL_LANDSCAPE: BuildingKind.LANDSCAPE,
    BuildingType.ACT_CEILINGS_ONLY: BuildingKind.ACT,
    BuildingType.MATTERPORT_ONLY: BuildingKind.MATTERPORT,
}

_DISPLAY_NAMES: dict[BuildingType, str] = {
    BuildingType.OFFICE: "Office Building",
    BuildingType.EDUCATIONAL: "Educational",
    BuildingType.HEALTHCARE: "Healthcare",
    BuildingType.INDUSTRIAL: "Industrial",
    BuildingType.RESIDENTIAL_MULTI_FAMILY: "Residential Multi-Family",
    BuildingType.RESIDENTIAL_SINGLE_FAMILY: "Residential Single-Family",
    BuildingType.RETAIL: "Retail",
    BuildingType.HOSPITALITY: "Hospitality",
    BuildingType.MIXED_USE: "Mixed-Use",
    BuildingType.WAREHOUSE: "Warehouse",
    BuildingType.RELIGIOUS: "Religious",
    BuildingType.GOVERNMENT: "Government",
    BuildingType.PARKING_STRUCTURE: "Parking Structure",
    BuildingType.BUILT_LANDSCAPE: "Built Landscape",
    BuildingType.NATURAL_LANDSCAPE: "Natural Landscape",
    BuildingType.ACT_CEILINGS_ONLY: "ACT Ceilings Only",
    BuildingType.MATTERPORT_ONLY: "Matterport Only",
}


class Discipline(StrEnum):
    """Modeling disciplines that can be scoped per area."""

    ARCH = "arch"
    MEPF = "mepf"
    STRUCTURE = "structure"
    SITE = "site"

    @property
    def display_name(self) -> str:
        return _DISCIPLINE_NAMES[self]


_DISCIPLINE_NAMES: dict[Discipline, str] = {
    Discipline.ARCH: "Architecture",
    Discipline.MEPF: "MEPF",
    Discipline.STRUCTURE: "Structure",
    Discipline.SITE: "Site",
}


class Lod(StrEnum):
    """Level of detail grades."""

    LOD_200 = "200"
    LOD_300 = "300"
    LOD_350 = "350"


class Scope(StrEnum):
    """Portion of the building a deliverable covers."""

    FULL = "full"
    INTERIOR = "interior"
    EXTERIOR = "exterior"
    MIXED = "mixed"


class RiskTag(StrEnum):
    """Site risk factors with a known premium."""

    OCCUPIED = "occupied"
    HAZARDOUS = "hazardous"
    NO_POWER = "no_power"


class PaymentTerms(StrEnum):
    """Payment terms offered on proposals."""

    PARTNER = "partner"
    OWNER = "owner"
    NET30 = "net30"
    NET60 = "net60"
    NET90 = "net90"


class LineItemCategory(StrEnum):
    """Category a line item's client price is subtotaled under."""

    MODELING = "modeling"
    SERVICE = "service"
    ELEVATION = "elevation"
    TRAVEL = "travel"


class TravelStrategy(StrEnum):
    """Travel pricing strategy selected by dispatch location."""

    STANDARD = "standard"
    METRO = "metro"


class IntegrityStatus(StrEnum):
    """Margin health verdict for a quote."""

    PASSED = "passed"
    WARNING = "warning"
    BLOCKED = "blocked"


class FlagSeverity(StrEnum):
    """Severity of an integrity flag."""

    ERROR = "error"
    WARNING = "warning"
