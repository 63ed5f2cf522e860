"""
Expiry date handling for basket entries.

A basket entry carries an expiry month and year as two-digit strings taken
from fixed choice lists. The expiry token ("MM/YY") is derived from them on
BasketEntry itself; this module only moves values onto the entry and offers
the choice lists and the label display format.
"""

from __future__ import annotations

import calendar
from typing import List, Dict, TYPE_CHECKING

if TYPE_CHECKING:
    from models.basket import BasketEntry


# Two-digit years offered to the operator: 26..50 (2026..2050)
FIRST_YEAR = 26
YEAR_SPAN = 25

MONTH_CHOICES: List[Dict[str, str]] = [
    {"value": f"{m:02d}", "label": f"{m:02d} - {calendar.month_name[m]}"}
    for m in range(1, 13)
]

YEAR_CHOICES: List[Dict[str, str]] = [
    {"value": str(y), "label": f"20{y}"}
    for y in range(FIRST_YEAR, FIRST_YEAR + YEAR_SPAN)
]


def set_month(entry: "BasketEntry", month: str) -> "BasketEntry":
    """
    Set the expiry month on an entry.

    An empty value un-sets the month, which also clears the expiry date.
    Calendar validity is not checked here.
    """
    entry.expiry_month = (month or "").strip()
    return entry


def set_year(entry: "BasketEntry", year: str) -> "BasketEntry":
    """Set the expiry year on an entry. Empty un-sets it."""
    entry.expiry_year = (year or "").strip()
    return entry


def format_expiry(month: str, year: str) -> str:
    """Build the expiry token, or "" unless both parts are present."""
    return f"{month}/{year}" if month and year else ""


def split_expiry(expiry_date: str) -> tuple:
    """Split an "MM/YY" token back into (month, year); missing parts are ""."""
    if not expiry_date:
        return "", ""
    month, _, year = expiry_date.partition("/")
    return month, year


def display_expiry(expiry_date: str) -> str:
    """
    Format an expiry token for the printed label.

    Example:
        >>> display_expiry("01/26")
        '01/2026'
    """
    if expiry_date and "/" in expiry_date:
        month, year = split_expiry(expiry_date)
        return f"{month}/20{year}"
    return expiry_date
