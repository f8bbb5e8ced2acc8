import logging
import math
import time
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ValidationError

from debtplan.config import get_settings
from debtplan.logging_config import configure_logging
from debtplan.optimization import (
    MAX_PAYOFF_MONTHS,
    calculate_debt_payoff_plan,
    calculate_months_to_payoff,
)
from debtplan.plan_utils import simulate_total_balance_series
from debtplan.scenarios import best_plan, calculate_extra_payment_impact, compare_strategies
from debtplan.schemas import Debt, PayoffStrategy
from debtplan.summary import calculate_debt_metrics
from debtplan.utils import format_months, format_payoff_date, format_percent, money

load_dotenv()
settings = get_settings()
configure_logging(settings)
logger = logging.getLogger("debtplan.app")

# ======================================
# App + CORS
# ======================================
app = FastAPI(
    title="Debt Payoff Planner",
    description="Snowball / Avalanche payoff schedules, strategy comparison and what-if analysis",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ======================================
# Models
# ======================================
class DebtsRequest(BaseModel):
    debts: List[Dict[str, Any]]

class PlanRequest(BaseModel):
    debts: List[Dict[str, Any]]
    extra_monthly_payment: float = 0.0
    strategy: Optional[str] = None
    start_date: Optional[date] = None

class CompareRequest(BaseModel):
    debts: List[Dict[str, Any]]
    extra_monthly_payment: float = 0.0
    start_date: Optional[date] = None

class WhatIfRequest(BaseModel):
    debts: List[Dict[str, Any]]
    current_extra: float = 0.0
    new_extra: float
    strategy: Optional[str] = None
    start_date: Optional[date] = None

class EstimateRequest(BaseModel):
    balance: float
    interest_rate: float
    monthly_payment: float


# ======================================
# Helpers
# ======================================
def parse_debts_json(debts_data: List[Dict[str, Any]]) -> Tuple[List[Debt], Optional[str]]:
    debts: List[Debt] = []
    for i, d in enumerate(debts_data):
        for k in ("name", "balance"):
            if k not in d:
                return [], f"Debt {i+1} missing field: {k}"
        try:
            debts.append(Debt.model_validate(d))
        except ValidationError as e:
            return [], f"Debt {i+1} is invalid: {e.errors()[0]['msg']}"
    return debts, None


def require_debts(debts_data: List[Dict[str, Any]]) -> List[Debt]:
    debts, error = parse_debts_json(debts_data)
    if error:
        raise HTTPException(status_code=400, detail=error)
    return debts


def resolve_strategy(value: Optional[str]) -> PayoffStrategy:
    try:
        return PayoffStrategy.parse(value or settings.default_strategy)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def plan_summary(plan) -> Dict[str, Any]:
    return {
        "strategy": plan.strategy.value,
        "months_to_debt_free": plan.months_to_debt_free,
        "total_interest": plan.total_interest,
        "debt_free_date": plan.debt_free_date.isoformat(),
        "formatted": {
            "months_to_debt_free": format_months(plan.months_to_debt_free),
            "total_interest": money(plan.total_interest),
            "debt_free_date": format_payoff_date(plan.debt_free_date),
        },
    }


# ======================================
# Routes
# ======================================
@app.get("/api/health")
async def health_check():
    return {"status": "healthy", "message": "Debt payoff planner API is running!", "timestamp": time.time()}

@app.post("/api/debts/summary")
async def debts_summary(request: DebtsRequest):
    debts = require_debts(request.debts)
    metrics = calculate_debt_metrics(debts)
    return {
        "success": True,
        "metrics": metrics.model_dump(mode="json", by_alias=True),
        "formatted": {
            "total_balance": money(metrics.total_balance),
            "total_minimum_payments": money(metrics.total_minimum_payments),
            "weighted_average_rate": format_percent(metrics.weighted_average_rate),
            "monthly_interest_cost": money(metrics.monthly_interest_cost),
            "yearly_interest_cost": money(metrics.yearly_interest_cost),
            "min_payment_months": format_months(metrics.min_payment_months),
        },
    }

@app.post("/api/plans/generate")
async def generate_payoff_plan(request: PlanRequest):
    debts = require_debts(request.debts)
    strategy = resolve_strategy(request.strategy)
    plan = calculate_debt_payoff_plan(debts, request.extra_monthly_payment, strategy, request.start_date)
    logger.info("Generated %s plan for %d debts", strategy.value, len(plan.debts))
    return {
        "success": True,
        "plan": plan.model_dump(mode="json", by_alias=True),
        "balance_series": simulate_total_balance_series(plan),
        "summary": plan_summary(plan),
    }

@app.post("/api/plans/compare")
async def compare_payoff_strategies(request: CompareRequest):
    debts = require_debts(request.debts)
    comparison = compare_strategies(debts, request.extra_monthly_payment, request.start_date)
    best = best_plan(comparison)
    return {
        "success": True,
        "comparison": comparison.model_dump(mode="json", by_alias=True),
        "recommended_strategy": best.strategy.value,
        "snowball": plan_summary(comparison.snowball),
        "avalanche": plan_summary(comparison.avalanche),
        "formatted": {
            "interest_saved": money(abs(comparison.interest_saved))
            + (" saved with Avalanche" if comparison.interest_saved > 0 else
               " saved with Snowball" if comparison.interest_saved < 0 else " difference"),
            "time_difference": f"{comparison.time_difference:+} months",
        },
    }

@app.post("/api/scenarios/whatif")
async def whatif_analysis(request: WhatIfRequest):
    debts = require_debts(request.debts)
    strategy = resolve_strategy(request.strategy)
    impact = calculate_extra_payment_impact(
        debts, request.current_extra, request.new_extra, strategy, request.start_date
    )
    return {
        "success": True,
        "strategy": strategy.value,
        "base": plan_summary(impact.current_plan),
        "scenario": plan_summary(impact.new_plan),
        "savings": {
            "months_saved": impact.months_saved,
            "interest_saved": impact.interest_saved,
        },
        "formatted": {
            "months_saved": f"{impact.months_saved:+} months",
            "interest_saved": money(abs(impact.interest_saved)) + (" saved" if impact.interest_saved >= 0 else " more"),
        },
    }

@app.post("/api/estimate/months")
async def estimate_months(request: EstimateRequest):
    months = calculate_months_to_payoff(request.balance, request.interest_rate, request.monthly_payment)
    finite = not math.isinf(months)
    return {
        "success": True,
        "months": int(months) if finite else None,
        "display_months": min(int(months), MAX_PAYOFF_MONTHS) if finite else MAX_PAYOFF_MONTHS,
        "pays_off": finite,
        "formatted": format_months(months),
    }
