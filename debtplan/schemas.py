# debtplan/schemas.py
import datetime as dt
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class PayoffStrategy(str, Enum):
    SNOWBALL = "SNOWBALL"      # smallest balance first
    AVALANCHE = "AVALANCHE"    # highest interest rate first
    CUSTOM = "CUSTOM"          # user priority, ascending

    @classmethod
    def parse(cls, value: Any) -> "PayoffStrategy":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(f"Unknown payoff strategy: {value!r}") from None


class _Record(BaseModel):
    # Immutable value objects; camelCase aliases match the dashboard's JSON.
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class Debt(_Record):
    """
    A debt as supplied by the caller's record store.

    Accepts the dashboard's camelCase keys (``interestRate``, ``minimumPayment``)
    as well as the short names ``apr`` and ``min_payment``. ``interest_rate`` is
    an annual decimal fraction (0.1999 == 19.99%). When ``id`` is missing the
    name is used.
    """
    id: str
    name: str
    balance: float = Field(ge=0.0)
    interest_rate: float = Field(default=0.0, ge=0.0)
    minimum_payment: float = Field(default=0.0, ge=0.0)
    priority: int = 0
    is_paid_off: bool = False
    original_balance: Optional[float] = None

    @model_validator(mode="before")
    @classmethod
    def normalize_keys(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if "apr" in data and "interest_rate" not in data and "interestRate" not in data:
            data["interest_rate"] = data.pop("apr")
        if "min_payment" in data and "minimum_payment" not in data and "minimumPayment" not in data:
            data["minimum_payment"] = data.pop("min_payment")
        if data.get("id") is None and data.get("name") is not None:
            data["id"] = data["name"]
        if data.get("id") is not None:
            data["id"] = str(data["id"])
        if data.get("priority") is None:
            data.pop("priority", None)
        return data


class MonthlyPayment(_Record):
    month: int
    date: dt.date
    payment: float
    principal: float
    interest: float
    remaining_balance: float


class DebtPayoffSchedule(_Record):
    debt_id: str
    debt_name: str
    payoff_date: dt.date
    months_to_payoff: int
    total_interest_paid: float
    total_amount_paid: float
    monthly_payments: List[MonthlyPayment]


class DebtPayoffPlan(_Record):
    strategy: PayoffStrategy
    debts: List[DebtPayoffSchedule]
    total_debt: float
    total_interest: float
    debt_free_date: dt.date
    months_to_debt_free: int
    extra_monthly_payment: float


class DebtComparison(_Record):
    snowball: DebtPayoffPlan
    avalanche: DebtPayoffPlan
    interest_saved: float   # > 0 means avalanche is cheaper
    time_difference: int    # > 0 means avalanche finishes sooner


class ExtraPaymentImpact(_Record):
    current_plan: DebtPayoffPlan
    new_plan: DebtPayoffPlan
    months_saved: int
    interest_saved: float


class DebtMetrics(_Record):
    debt_count: int
    total_balance: float
    total_minimum_payments: float
    weighted_average_rate: float
    monthly_interest_cost: float
    yearly_interest_cost: float
    min_payment_months: int = 0
    highest_rate_debt: Optional[Debt] = None
    lowest_balance_debt: Optional[Debt] = None
    largest_debt: Optional[Debt] = None
    high_rate_debts: List[Debt] = []
    medium_rate_debts: List[Debt] = []
    low_rate_debts: List[Debt] = []
