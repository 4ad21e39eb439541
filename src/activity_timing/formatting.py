"""Number formatting shared by every report format."""

from __future__ import annotations


def format_ms(value: float) -> str:
    """Format a duration in milliseconds with one decimal place."""
    return f"{value:,.1f}"


def format_avg(value: float) -> str:
    """Format an average duration in milliseconds with three decimal places."""
    return f"{value:,.3f}"
