"""Formatting helpers for quote output.

Provides human-readable formatting for currency amounts, per-unit rates,
quantities and margins, matching how figures appear on proposals
(e.g., '$12,438' instead of '$12,437.8934').
"""

from __future__ import annotations


def format_currency(amount: float) -> str:
    """Format a currency amount as a human-readable string.

    - Amounts >= $10,000: no cents, with comma separators (e.g., '$1,234,567')
    - Amounts < $10,000: with cents (e.g., '$9,876.54')
    """
    if amount >= 10_000:
        return f"${amount:,.0f}"
    return f"${amount:,.2f}"


def format_quantity(value: float) -> str:
    """Format a quantity without a trailing '.0' (e.g., '30', '12.5', '10,000')."""
    if float(value).is_integer():
        return f"{value:,.0f}"
    return f"{value:,.2f}".rstrip("0").rstrip(".")


def format_rate(rate: float) -> str:
    """Format a unit rate as dollars without padding (e.g., '$3', '$0.25')."""
    return f"${format_quantity(rate)}"


def format_percent(fraction: float, digits: int = 1) -> str:
    """Format a fraction as a percentage (e.g., 0.4523 -> '45.2%')."""
    return f"{fraction * 100:.{digits}f}%"
