# debtplan/utils.py
import math
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional

from dateutil.relativedelta import relativedelta

from .config import get_settings

CENT = Decimal("0.01")


def round_money(x: float) -> float:
    """Round to the cent, halves away from zero (1.005 -> 1.01, -1.005 -> -1.01)."""
    return float(Decimal(repr(float(x))).quantize(CENT, rounding=ROUND_HALF_UP))


def add_months(start: date, months: int) -> date:
    # relativedelta clamps to the last day of shorter months (Jan 31 + 1 -> Feb 28/29)
    return start + relativedelta(months=months)


def money(x: float, symbol: Optional[str] = None) -> str:
    if symbol is None:
        symbol = get_settings().currency_symbol
    try:
        whole = Decimal(repr(float(x))).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    except (TypeError, ValueError, InvalidOperation):
        return f"{symbol}{x}"
    sign = "-" if whole < 0 else ""
    return f"{sign}{symbol}{abs(whole):,.0f}"


def format_percent(rate: float) -> str:
    return f"{rate * 100:.2f}%"


def format_payoff_date(value: date) -> str:
    return value.strftime("%B %Y")


def format_months(months: float) -> str:
    if math.isinf(months):
        return "never"
    months = int(months)
    return f"{months} months ({months / 12:.1f} years)"
