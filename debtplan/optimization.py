# debtplan/optimization.py
import logging
import math
from datetime import date
from typing import Callable, Dict, Iterable, List, Optional, Union

from .schemas import (
    Debt,
    DebtPayoffPlan,
    DebtPayoffSchedule,
    MonthlyPayment,
    PayoffStrategy,
)
from .utils import add_months, round_money

logger = logging.getLogger(__name__)

MAX_PAYOFF_MONTHS = 600  # 50 years
PAID_OFF_THRESHOLD = 0.01


def _monthly_rate(apr: float) -> float:
    return max(0.0, apr) / 12.0


def _active(debts: Iterable[Debt]) -> List[Debt]:
    return [d for d in debts if not d.is_paid_off]


def simulate_debt_schedule(
    debt: Debt,
    monthly_payment: float,
    start_month: int = 0,
    start_date: Optional[date] = None,
) -> DebtPayoffSchedule:
    """
    Amortize one debt at a fixed monthly payment until the balance is gone.

    The last installment is capped at balance + interest. A payment that does
    not exceed the monthly interest never converges; the loop still stops
    after MAX_PAYOFF_MONTHS.
    """
    start_date = start_date or date.today()
    r = _monthly_rate(debt.interest_rate)
    bal = float(debt.balance)
    payments: List[MonthlyPayment] = []
    total_interest = 0.0
    total_paid = 0.0
    month = start_month

    while bal > PAID_OFF_THRESHOLD and month - start_month < MAX_PAYOFF_MONTHS:
        interest = bal * r
        pay = min(monthly_payment, bal + interest)
        principal = pay - interest
        bal = max(0.0, bal - principal)
        total_interest += interest
        total_paid += pay
        payments.append(MonthlyPayment(
            month=month,
            date=add_months(start_date, month),
            payment=round_money(pay),
            principal=round_money(principal),
            interest=round_money(interest),
            remaining_balance=round_money(bal),
        ))
        month += 1

    if bal > PAID_OFF_THRESHOLD:
        logger.warning(
            "Debt %r not paid off after %d months at %.2f/month (balance left %.2f)",
            debt.name, MAX_PAYOFF_MONTHS, monthly_payment, bal,
        )

    months = month - start_month
    payoff_date = add_months(start_date, start_month + max(months - 1, 0))
    return DebtPayoffSchedule(
        debt_id=debt.id,
        debt_name=debt.name,
        payoff_date=payoff_date,
        months_to_payoff=months,
        total_interest_paid=round_money(total_interest),
        total_amount_paid=round_money(total_paid),
        monthly_payments=payments,
    )


_STRATEGY_KEYS: Dict[PayoffStrategy, Callable[[Debt], float]] = {
    PayoffStrategy.SNOWBALL: lambda d: d.balance,
    PayoffStrategy.AVALANCHE: lambda d: -d.interest_rate,
    PayoffStrategy.CUSTOM: lambda d: d.priority or 0,
}


def sort_debts_by_strategy(debts: Iterable[Debt], strategy: Union[PayoffStrategy, str]) -> List[Debt]:
    # sorted() is stable: equal keys keep their input order
    key = _STRATEGY_KEYS[PayoffStrategy.parse(strategy)]
    return sorted(debts, key=key)


def calculate_debt_payoff_plan(
    debts: Iterable[Debt],
    extra_monthly_payment: float = 0.0,
    strategy: Union[PayoffStrategy, str] = PayoffStrategy.AVALANCHE,
    start_date: Optional[date] = None,
) -> DebtPayoffPlan:
    """
    Build the cascade plan for the active (not paid off) debts.

    Debts are taken in strategy order. Each one is simulated on its own from
    month 0 at its minimum plus the current pool; afterwards its minimum joins
    the pool for every later debt. The later debts therefore get the rolled-over
    minimums from the first month, not from the month the earlier debt clears.
    """
    strategy = PayoffStrategy.parse(strategy)
    start_date = start_date or date.today()
    active = _active(debts)

    if not active:
        return DebtPayoffPlan(
            strategy=strategy,
            debts=[],
            total_debt=0.0,
            total_interest=0.0,
            debt_free_date=start_date,
            months_to_debt_free=0,
            extra_monthly_payment=extra_monthly_payment,
        )

    schedules: List[DebtPayoffSchedule] = []
    pool = extra_monthly_payment
    for d in sort_debts_by_strategy(active, strategy):
        schedules.append(simulate_debt_schedule(d, d.minimum_payment + pool, 0, start_date))
        pool += d.minimum_payment

    months_to_debt_free = max(s.months_to_payoff for s in schedules)
    plan = DebtPayoffPlan(
        strategy=strategy,
        debts=schedules,
        total_debt=round_money(sum(d.balance for d in active)),
        total_interest=round_money(sum(s.total_interest_paid for s in schedules)),
        debt_free_date=add_months(start_date, months_to_debt_free),
        months_to_debt_free=months_to_debt_free,
        extra_monthly_payment=extra_monthly_payment,
    )
    logger.debug(
        "%s plan: %d debts, %d months, interest %.2f",
        strategy.value, len(schedules), plan.months_to_debt_free, plan.total_interest,
    )
    return plan


def calculate_months_to_payoff(balance: float, annual_rate: float, monthly_payment: float) -> Union[int, float]:
    """
    Closed-form months to pay off ``balance`` at a fixed payment.

    n = -ln(1 - r*B/M) / ln(1 + r), rounded up. Returns ``math.inf`` when the
    payment never covers the interest; display code clamps to MAX_PAYOFF_MONTHS.
    """
    if balance <= 0:
        return 0
    if monthly_payment <= 0:
        return math.inf
    r = _monthly_rate(annual_rate)
    if monthly_payment <= balance * r:
        return math.inf
    if r == 0:
        return math.ceil(balance / monthly_payment)
    months = -math.log(1 - (r * balance) / monthly_payment) / math.log(1 + r)
    return math.ceil(months)
