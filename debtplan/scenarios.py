# debtplan/scenarios.py
from datetime import date
from typing import Iterable, List, Optional, Union

from .optimization import calculate_debt_payoff_plan
from .schemas import Debt, DebtComparison, DebtPayoffPlan, ExtraPaymentImpact, PayoffStrategy
from .utils import round_money


def compare_strategies(
    debts: Iterable[Debt],
    extra_monthly_payment: float = 0.0,
    start_date: Optional[date] = None,
) -> DebtComparison:
    debts = list(debts)
    start_date = start_date or date.today()
    snow = calculate_debt_payoff_plan(debts, extra_monthly_payment, PayoffStrategy.SNOWBALL, start_date)
    aval = calculate_debt_payoff_plan(debts, extra_monthly_payment, PayoffStrategy.AVALANCHE, start_date)
    return DebtComparison(
        snowball=snow,
        avalanche=aval,
        interest_saved=round_money(snow.total_interest - aval.total_interest),
        time_difference=snow.months_to_debt_free - aval.months_to_debt_free,
    )


def best_plan(comparison: DebtComparison) -> DebtPayoffPlan:
    # pick by total interest, then months to debt free; ties go to avalanche
    candidates: List[DebtPayoffPlan] = [comparison.avalanche, comparison.snowball]
    return min(candidates, key=lambda p: (p.total_interest, p.months_to_debt_free))


def calculate_extra_payment_impact(
    debts: Iterable[Debt],
    current_extra: float,
    new_extra: float,
    strategy: Union[PayoffStrategy, str] = PayoffStrategy.AVALANCHE,
    start_date: Optional[date] = None,
) -> ExtraPaymentImpact:
    """What-if: the same debts and strategy at two extra-payment levels."""
    debts = list(debts)
    start_date = start_date or date.today()
    current = calculate_debt_payoff_plan(debts, current_extra, strategy, start_date)
    new = calculate_debt_payoff_plan(debts, new_extra, strategy, start_date)
    return ExtraPaymentImpact(
        current_plan=current,
        new_plan=new,
        months_saved=current.months_to_debt_free - new.months_to_debt_free,
        interest_saved=round_money(current.total_interest - new.total_interest),
    )
