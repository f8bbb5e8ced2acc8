# debtplan/plan_utils.py
from typing import List

import pandas as pd

from .schemas import DebtComparison, DebtPayoffPlan
from .utils import round_money

SCHEDULE_COLUMNS = [
    "month", "date", "debt_id", "debt", "payment", "principal", "interest", "remaining_balance",
]


def plan_to_dataframe(plan: DebtPayoffPlan) -> pd.DataFrame:
    """One row per debt per simulated month, debts in strategy order."""
    rows = []
    for s in plan.debts:
        for p in s.monthly_payments:
            rows.append({
                "month": p.month,
                "date": p.date,
                "debt_id": s.debt_id,
                "debt": s.debt_name,
                "payment": p.payment,
                "principal": p.principal,
                "interest": p.interest,
                "remaining_balance": p.remaining_balance,
            })
    if not rows:
        return pd.DataFrame(columns=SCHEDULE_COLUMNS)
    return pd.DataFrame(rows, columns=SCHEDULE_COLUMNS)


def simulate_total_balance_series(plan: DebtPayoffPlan) -> List[float]:
    """Total remaining balance after each month, all debts combined."""
    columns = [
        pd.Series(
            [p.remaining_balance for p in s.monthly_payments],
            index=[p.month for p in s.monthly_payments],
        )
        for s in plan.debts
        if s.monthly_payments
    ]
    if not columns:
        return []
    # a debt that is already paid off carries its last (zero) balance forward
    wide = pd.concat(columns, axis=1, ignore_index=True).sort_index()
    totals = wide.ffill().fillna(0.0).sum(axis=1)
    return [round_money(x) for x in totals.tolist()]


def schedule_summary_frame(plan: DebtPayoffPlan) -> pd.DataFrame:
    rows = [{
        "debt_id": s.debt_id,
        "debt": s.debt_name,
        "order": i + 1,
        "months_to_payoff": s.months_to_payoff,
        "payoff_date": s.payoff_date,
        "total_interest_paid": s.total_interest_paid,
        "total_amount_paid": s.total_amount_paid,
    } for i, s in enumerate(plan.debts)]
    return pd.DataFrame(rows, columns=[
        "debt_id", "debt", "order", "months_to_payoff", "payoff_date",
        "total_interest_paid", "total_amount_paid",
    ])


def comparison_to_dataframe(comparison: DebtComparison) -> pd.DataFrame:
    rows = []
    for plan in (comparison.snowball, comparison.avalanche):
        rows.append({
            "strategy": plan.strategy.value,
            "total_debt": plan.total_debt,
            "total_interest": plan.total_interest,
            "months_to_debt_free": plan.months_to_debt_free,
            "debt_free_date": plan.debt_free_date,
            "first_target": plan.debts[0].debt_name if plan.debts else None,
        })
    return pd.DataFrame(rows).set_index("strategy")
