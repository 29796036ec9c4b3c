"""Number and date formatting shared by tooltips, legend text, and axes."""

import math
from datetime import datetime

_MINUS = "−"  # Typographic minus, as used on axis labels


def format_number(value: float, digits: int = 1) -> str:
    """Fixed-point with a typographic minus: -2.5 → "−2.5"."""
    text = f"{value:.{digits}f}"
    if text.startswith("-") and float(text) != 0:
        return _MINUS + text[1:]
    return text.lstrip("-")


def format_tick(value: float, step: float) -> str:
    """Tick label with just enough decimals to tell adjacent ticks apart."""
    digits = 0
    if step > 0 and math.isfinite(step):
        digits = max(0, -math.floor(math.log10(step)))
    return format_number(value, digits)


def format_tooltip_date(date: datetime) -> str:
    """"Wednesday, January 15, 2020" — no zero-padded day."""
    return f"{date:%A, %B} {date.day}, {date.year}"


def format_legend_date(date: datetime) -> str:
    return date.strftime("%b %d")


def format_month(date: datetime) -> str:
    return date.strftime("%b")
