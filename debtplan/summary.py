# debtplan/summary.py
from typing import Iterable, List, Optional

import pandas as pd

from .optimization import MAX_PAYOFF_MONTHS, calculate_months_to_payoff, sort_debts_by_strategy
from .schemas import Debt, DebtMetrics, PayoffStrategy
from .utils import format_months, format_percent, money, round_money

HIGH_RATE_THRESHOLD = 0.20
MEDIUM_RATE_THRESHOLD = 0.10

DEBT_TABLE_COLUMNS = ["Debt", "Balance", "APR (%)", "Min Payment", "Est. Monthly Interest", "Rate Band"]


def active_debts(debts: Iterable[Debt]) -> List[Debt]:
    return [d for d in debts if not d.is_paid_off]


def calculate_minimum_monthly_total(debts: Iterable[Debt]) -> float:
    """Sum of minimum payments across the debts that are still open."""
    return round_money(sum(d.minimum_payment for d in active_debts(debts)))


def rate_band(rate: float) -> str:
    if rate >= HIGH_RATE_THRESHOLD:
        return "HIGH"
    if rate >= MEDIUM_RATE_THRESHOLD:
        return "MEDIUM"
    return "LOW"


def calculate_debt_metrics(debts: Iterable[Debt]) -> DebtMetrics:
    ds = active_debts(debts)
    if not ds:
        return DebtMetrics(
            debt_count=0,
            total_balance=0.0,
            total_minimum_payments=0.0,
            weighted_average_rate=0.0,
            monthly_interest_cost=0.0,
            yearly_interest_cost=0.0,
        )

    total_bal = sum(d.balance for d in ds)
    w_apr = 0.0
    if total_bal > 0:
        w_apr = sum(d.interest_rate * d.balance for d in ds) / total_bal
    monthly_interest = sum(d.balance * d.interest_rate / 12.0 for d in ds)
    total_minimums = calculate_minimum_monthly_total(ds)
    # paying only the minimums, treated as one loan at the weighted rate
    min_payment_months = min(calculate_months_to_payoff(total_bal, w_apr, total_minimums), MAX_PAYOFF_MONTHS)

    return DebtMetrics(
        debt_count=len(ds),
        total_balance=round_money(total_bal),
        total_minimum_payments=total_minimums,
        weighted_average_rate=w_apr,
        monthly_interest_cost=round_money(monthly_interest),
        yearly_interest_cost=round_money(monthly_interest * 12),
        min_payment_months=min_payment_months,
        highest_rate_debt=sort_debts_by_strategy(ds, PayoffStrategy.AVALANCHE)[0],
        lowest_balance_debt=sort_debts_by_strategy(ds, PayoffStrategy.SNOWBALL)[0],
        largest_debt=sorted(ds, key=lambda d: -d.balance)[0],
        high_rate_debts=[d for d in ds if rate_band(d.interest_rate) == "HIGH"],
        medium_rate_debts=[d for d in ds if rate_band(d.interest_rate) == "MEDIUM"],
        low_rate_debts=[d for d in ds if rate_band(d.interest_rate) == "LOW"],
    )


def pretty_debts_table(debts: Iterable[Debt]) -> pd.DataFrame:
    rows = []
    for d in active_debts(debts):
        rows.append({
            "Debt": d.name,
            "Balance": float(d.balance),
            "APR (%)": float(d.interest_rate) * 100.0,
            "Min Payment": float(d.minimum_payment),
            "Est. Monthly Interest": round_money(d.balance * d.interest_rate / 12.0),
            "Rate Band": rate_band(d.interest_rate),
        })
    if not rows:
        return pd.DataFrame(columns=DEBT_TABLE_COLUMNS)
    return pd.DataFrame(rows, columns=DEBT_TABLE_COLUMNS)


def summarize_debts(debts: Iterable[Debt], extra_monthly_payment: Optional[float] = None) -> str:
    metrics = calculate_debt_metrics(debts)
    if not metrics.debt_count:
        return "No active debts."
    lines = [
        f"Total debt: {money(metrics.total_balance)} across {metrics.debt_count} "
        f"account{'s' if metrics.debt_count > 1 else ''}",
        f"Weighted APR: {format_percent(metrics.weighted_average_rate)}",
        f"Total minimums: {money(metrics.total_minimum_payments)}/month",
        f"Interest cost: {money(metrics.monthly_interest_cost)}/month "
        f"({money(metrics.yearly_interest_cost)}/year)",
        f"Paying minimums only: {format_months(metrics.min_payment_months)}",
    ]
    if metrics.high_rate_debts:
        n = len(metrics.high_rate_debts)
        lines.append(f"High-interest debts (20%+ APR): {n}")
    if extra_monthly_payment is not None:
        lines.append(f"Extra payment: {money(extra_monthly_payment)}/month")
    return "\n".join(lines)
