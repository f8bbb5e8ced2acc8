#tests/test_optimization.py
import math
from datetime import date

import pytest

from debtplan.optimization import (
    MAX_PAYOFF_MONTHS,
    calculate_debt_payoff_plan,
    calculate_months_to_payoff,
    simulate_debt_schedule,
    sort_debts_by_strategy,
)
from debtplan.schemas import Debt, PayoffStrategy

START = date(2025, 1, 15)


def sample_debts():
    return [
        Debt(id="a", name="Card A", balance=3000, interest_rate=0.24, minimum_payment=80),
        Debt(id="b", name="Loan B", balance=500, interest_rate=0.06, minimum_payment=50),
    ]


def names(debts):
    return [d.name for d in debts]


# ---------- AmortizationSimulator ----------

def test_single_debt_exact_schedule():
    debt = Debt(id="c", name="Card", balance=1200, interest_rate=0.12, minimum_payment=200)
    s = simulate_debt_schedule(debt, 200, start_date=START)
    assert s.months_to_payoff == 7
    assert abs(s.total_interest_paid - 43.86) <= 0.01
    assert len(s.monthly_payments) == 7
    assert s.monthly_payments[-1].payment < 200
    assert s.monthly_payments[-1].remaining_balance == 0.0

    first = s.monthly_payments[0]
    assert first.month == 0
    assert first.date == START
    assert first.interest == 12.0
    assert first.principal == 188.0
    assert first.remaining_balance == 1012.0

    assert s.payoff_date == date(2025, 7, 15)
    assert abs(s.total_amount_paid - (1200 + s.total_interest_paid)) <= 0.01


def test_payment_equal_to_interest_stops_at_ceiling():
    debt = Debt(id="x", name="Stuck", balance=1000, interest_rate=0.24, minimum_payment=20)
    s = simulate_debt_schedule(debt, 20, start_date=START)
    assert s.months_to_payoff == MAX_PAYOFF_MONTHS
    assert len(s.monthly_payments) == MAX_PAYOFF_MONTHS
    assert s.monthly_payments[-1].remaining_balance > 999


def test_payment_below_interest_also_terminates():
    debt = Debt(id="x", name="Growing", balance=1000, interest_rate=0.24, minimum_payment=10)
    s = simulate_debt_schedule(debt, 10, start_date=START)
    assert s.months_to_payoff == MAX_PAYOFF_MONTHS
    assert s.monthly_payments[-1].remaining_balance > 1000


def test_zero_balance_returns_empty_schedule():
    debt = Debt(id="z", name="Done", balance=0, interest_rate=0.2, minimum_payment=25)
    s = simulate_debt_schedule(debt, 25, start_date=START)
    assert s.months_to_payoff == 0
    assert s.total_interest_paid == 0.0
    assert s.total_amount_paid == 0.0
    assert s.monthly_payments == []
    assert s.payoff_date == START


def test_start_month_offsets_dates_and_indices():
    debt = Debt(id="c", name="Card", balance=1200, interest_rate=0.12, minimum_payment=200)
    s = simulate_debt_schedule(debt, 200, start_month=3, start_date=START)
    assert s.months_to_payoff == 7
    assert s.monthly_payments[0].month == 3
    assert s.monthly_payments[0].date == date(2025, 4, 15)


# ---------- StrategySorter ----------

def test_snowball_and_avalanche_orders_differ():
    debts = sample_debts()
    assert names(sort_debts_by_strategy(debts, PayoffStrategy.SNOWBALL)) == ["Loan B", "Card A"]
    assert names(sort_debts_by_strategy(debts, PayoffStrategy.AVALANCHE)) == ["Card A", "Loan B"]


def test_sort_is_stable_for_equal_keys():
    debts = [
        Debt(id="1", name="first", balance=1000, interest_rate=0.18, minimum_payment=25),
        Debt(id="2", name="second", balance=1000, interest_rate=0.18, minimum_payment=25),
        Debt(id="3", name="third", balance=500, interest_rate=0.18, minimum_payment=25),
    ]
    assert names(sort_debts_by_strategy(debts, "SNOWBALL")) == ["third", "first", "second"]
    assert names(sort_debts_by_strategy(debts, "AVALANCHE")) == ["first", "second", "third"]
    assert names(sort_debts_by_strategy(debts, "CUSTOM")) == ["first", "second", "third"]


def test_custom_orders_by_priority():
    debts = [
        Debt(id="1", name="later", balance=100, interest_rate=0.3, minimum_payment=25, priority=2),
        Debt(id="2", name="default", balance=900, interest_rate=0.1, minimum_payment=25),
        Debt(id="3", name="first", balance=500, interest_rate=0.2, minimum_payment=25, priority=-1),
    ]
    assert names(sort_debts_by_strategy(debts, PayoffStrategy.CUSTOM)) == ["first", "default", "later"]


def test_unknown_strategy_is_rejected():
    with pytest.raises(ValueError):
        sort_debts_by_strategy(sample_debts(), "fastest")


# ---------- Cascade + aggregate ----------

def test_empty_input_returns_zero_plan():
    plan = calculate_debt_payoff_plan([], 0, "AVALANCHE", start_date=START)
    assert plan.total_debt == 0
    assert plan.total_interest == 0
    assert plan.months_to_debt_free == 0
    assert plan.debts == []
    assert plan.debt_free_date == START
    assert plan.strategy is PayoffStrategy.AVALANCHE


def test_paid_off_debts_are_excluded():
    debts = sample_debts() + [
        Debt(id="p", name="Old Card", balance=900, interest_rate=0.3, minimum_payment=40, is_paid_off=True)
    ]
    plan = calculate_debt_payoff_plan(debts, 0, PayoffStrategy.SNOWBALL, start_date=START)
    assert [s.debt_name for s in plan.debts] == ["Loan B", "Card A"]
    assert plan.total_debt == 3500


def test_only_paid_off_debts_gives_zero_plan():
    debts = [Debt(id="p", name="Old", balance=900, interest_rate=0.3, minimum_payment=40, is_paid_off=True)]
    plan = calculate_debt_payoff_plan(debts, 100, start_date=START)
    assert plan.debts == []
    assert plan.extra_monthly_payment == 100


def test_freed_minimums_roll_into_later_debts_from_month_zero():
    plan = calculate_debt_payoff_plan(sample_debts(), 100, PayoffStrategy.SNOWBALL, start_date=START)
    b, a = plan.debts
    # B gets its minimum plus the extra, A gets its minimum plus extra plus B's minimum
    assert b.monthly_payments[0].payment == 150.0
    assert a.monthly_payments[0].payment == 230.0
    assert a.monthly_payments[0].month == 0


def test_plan_totals():
    plan = calculate_debt_payoff_plan(sample_debts(), 50, PayoffStrategy.AVALANCHE, start_date=START)
    assert plan.months_to_debt_free == max(s.months_to_payoff for s in plan.debts)
    assert plan.total_interest == pytest.approx(sum(s.total_interest_paid for s in plan.debts), abs=0.01)
    assert plan.total_debt == 3500
    assert plan.extra_monthly_payment == 50
    n = plan.months_to_debt_free
    assert plan.debt_free_date == date(2025 + n // 12, n % 12 + 1, 15)


def test_single_debt_plan_matches_simulation():
    debt = Debt(id="c", name="Card", balance=1200, interest_rate=0.12, minimum_payment=200)
    plan = calculate_debt_payoff_plan([debt], 0, PayoffStrategy.AVALANCHE, start_date=START)
    assert plan.months_to_debt_free == 7
    assert abs(plan.total_interest - 43.86) <= 0.01
    assert plan.debt_free_date == date(2025, 8, 15)


def test_plan_is_idempotent():
    debts = sample_debts()
    first = calculate_debt_payoff_plan(debts, 75, PayoffStrategy.SNOWBALL, start_date=START)
    second = calculate_debt_payoff_plan(debts, 75, PayoffStrategy.SNOWBALL, start_date=START)
    assert first == second
    assert first.model_dump() == second.model_dump()


def test_money_values_are_rounded_to_cents():
    plan = calculate_debt_payoff_plan(sample_debts(), 33.33, PayoffStrategy.AVALANCHE, start_date=START)
    for s in plan.debts:
        for p in s.monthly_payments:
            for value in (p.payment, p.principal, p.interest, p.remaining_balance):
                assert round(value, 2) == value


# ---------- ClosedFormEstimator ----------

@pytest.mark.parametrize("balance,rate,payment", [
    (1200, 0.12, 200),
    (5000, 0.1999, 150),
    (10000, 0.24, 250),
    (2500, 0.0, 100),
    (800, 0.29, 35),
])
def test_closed_form_agrees_with_simulation(balance, rate, payment):
    debt = Debt(id="d", name="Debt", balance=balance, interest_rate=rate, minimum_payment=payment)
    simulated = simulate_debt_schedule(debt, payment, start_date=START).months_to_payoff
    estimated = calculate_months_to_payoff(balance, rate, payment)
    assert abs(estimated - simulated) <= 1


def test_closed_form_known_values():
    assert calculate_months_to_payoff(1200, 0.12, 200) == 7
    assert calculate_months_to_payoff(2500, 0.0, 100) == 25
    assert calculate_months_to_payoff(2550, 0.0, 100) == 26
    assert calculate_months_to_payoff(0, 0.2, 100) == 0


def test_closed_form_never_pays_off():
    assert math.isinf(calculate_months_to_payoff(1000, 0.24, 20))
    assert math.isinf(calculate_months_to_payoff(1000, 0.24, 5))
    assert math.isinf(calculate_months_to_payoff(1000, 0.12, 0))
