"""Formatting utilities for currency and date display."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Union

from . import config


def format_currency(amount: Union[Decimal, float, int], symbol: Optional[str] = None) -> str:
    """Format a currency amount with thousands separators and two decimals.

    Example:
        >>> format_currency(Decimal("1234.5"), symbol="฿")
        '฿1,234.50'
        >>> format_currency(-5, symbol="฿")
        '-฿5.00'
    """
    symbol = config.CURRENCY_SYMBOL if symbol is None else symbol
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


def format_display_date(value: Optional[date]) -> str:
    """Render a date as ``dd/mm/yyyy`` (empty for missing dates)."""
    return value.strftime("%d/%m/%Y") if value else ""


def format_day_label(label: str) -> str:
    """Turn a ``YYYY-MM-DD`` chart label into ``dd / mm / yyyy``."""
    year, month, day = label.split("-")
    return f"{day} / {month} / {year}"
