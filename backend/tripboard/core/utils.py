"""
Utility functions for the application.
"""
from typing import Any, Dict, Optional
from datetime import date
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation


def format_date_short(value: Optional[date]) -> str:
    """Format a date as 'Mar 5, 2025'. Independent of locale and clock."""
    if value is None:
        return "-"
    return f"{value:%b} {value.day}, {value.year}"


def format_amount(amount: Decimal) -> str:
    """Format an amount with two decimals."""
    return f"{Decimal(amount):.2f}"


def to_decimal(value: Any) -> Optional[Decimal]:
    """Coerce a number-like value to Decimal, or None when it is not numeric."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return None
    if not result.is_finite():
        return None
    return result


def percent(part: Decimal, whole: Decimal) -> int:
    """
    Whole-number percentage of part in whole, rounded half up.
    Returns 0 when whole is zero.
    """
    if not whole:
        return 0
    ratio = Decimal(part) * 100 / Decimal(whole)
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_error(message: str, details: Any = None) -> Dict[str, Any]:
    """Format error response."""
    response = {"error": message}
    if details:
        response["details"] = details
    return response
