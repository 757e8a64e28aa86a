"""Formatting utilities for amounts shown to planners."""

from __future__ import annotations

from typing import Union


def format_currency(amount: Union[float, int], symbol: str = '$') -> str:
    """Format an amount with thousands separators and two decimals.

    Args:
        amount: The amount to format
        symbol: Currency symbol placed before the number (empty for none)

    Returns:
        Formatted string, with the minus sign ahead of the symbol

    Example:
        >>> format_currency(1234.5)
        '$1,234.50'
        >>> format_currency(-0.5, symbol='')
        '-0.50'
    """
    value = float(amount or 0)
    sign = '-' if value < 0 else ''
    return f"{sign}{symbol}{abs(value):,.2f}"
