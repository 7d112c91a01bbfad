"""Rate data layer for the CPQ engine."""

from cpq.data.rates import ElevationTier, MetroTiers, RateTable, TravelRates
from cpq.data.repository import RateTableRepository
from cpq.data.seed import DEFAULT_RATE_TABLE

__all__ = [
    "DEFAULT_RATE_TABLE",
    "ElevationTier",
    "MetroTiers",
    "RateTable",
    "RateTableRepository",
    "TravelRates",
]
