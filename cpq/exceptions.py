"""Custom exception hierarchy for the CPQ engine."""

from __future__ import annotations


class CpqError(Exception):
    """Base exception for all CPQ errors."""


class InvalidQuoteInputError(CpqError):
    """Raised when a quote input fails structural validation."""


class MarginTargetError(InvalidQuoteInputError):
    """Raised when a margin target cannot be solved for (outside [0, 1))."""


class RateTableError(CpqError):
    """Raised when a rate table cannot be loaded or validated."""
