"""
reports.py
Dashboard metrics, monthly summaries and CSV exports.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

import pandas as pd

import config
import dues
import utils
from models import Expense, Income, IncomeCategory

INCOME_COLUMNS = ["id", "date", "description", "amount", "category", "client", "project_cost", "due", "dues_status"]
EXPENSE_COLUMNS = ["id", "date", "description", "amount", "category"]


@dataclass(frozen=True)
class DashboardMetrics:
    income_this_month: float
    expenses_this_month: float
    net_savings: float
    income_change_pct: float
    daily_income_this_month: float
    total_dues: float
    potential_loss: float


def _total(records, start: datetime, end: datetime | None = None) -> float:
    total = 0.0
    for r in records:
        if not isinstance(r.date, datetime):
            continue
        when = utils.to_utc(r.date)
        if when < start:
            continue
        if end is not None and when >= end:
            continue
        total += float(r.amount)
    return total


def income_change_pct(current: float, previous: float) -> float:
    if previous > 0:
        return (current - previous) / previous * 100
    return 100.0 if current > 0 else 0.0


def dashboard_metrics(incomes: list[Income], expenses: list[Expense], categories: list[IncomeCategory],
                      now: datetime, stale_days: int = config.STALE_DUES_DAYS) -> DashboardMetrics:
    this_month = utils.month_start(now)
    last_month = utils.previous_month_start(now)

    income_now = _total(incomes, this_month)
    income_prev = _total(incomes, last_month, this_month)
    expenses_now = _total(expenses, this_month)

    daily_ids = {c.id for c in categories if c.is_daily_fixed_income}
    daily_now = _total([i for i in incomes if i.category_id in daily_ids], this_month)

    tracked = dues.project_tracking_incomes(incomes, categories)
    return DashboardMetrics(
        income_this_month=income_now,
        expenses_this_month=expenses_now,
        net_savings=income_now - expenses_now,
        income_change_pct=income_change_pct(income_now, income_prev),
        daily_income_this_month=daily_now,
        total_dues=dues.aggregate_dues(tracked).total_dues,
        potential_loss=dues.compute_potential_loss(tracked, now, stale_days),
    )


def incomes_frame(incomes: list[Income], categories: list[IncomeCategory]) -> pd.DataFrame:
    names = {c.id: c.name for c in categories}
    rows = []
    for i in incomes:
        status = dues.classify_income(i)
        rows.append(
            {
                "id": i.id,
                "date": utils.format_ts(i.date),
                "description": i.description,
                "amount": i.amount,
                "category": names.get(i.category_id, i.category_id),
                "client": i.freelance.client_name if i.freelance else None,
                "project_cost": i.freelance.project_cost if i.freelance else None,
                "due": dues.outstanding_due(i) if i.freelance else None,
                "dues_status": status.value if status else None,
            }
        )
    if not rows:
        return pd.DataFrame(columns=INCOME_COLUMNS)
    return pd.DataFrame(rows, columns=INCOME_COLUMNS)


def expenses_frame(expenses: list[Expense], names: dict) -> pd.DataFrame:
    rows = [
        {
            "id": e.id,
            "date": utils.format_ts(e.date),
            "description": e.description,
            "amount": e.amount,
            "category": names.get(e.category_id, e.category_id),
        }
        for e in expenses
    ]
    if not rows:
        return pd.DataFrame(columns=EXPENSE_COLUMNS)
    return pd.DataFrame(rows, columns=EXPENSE_COLUMNS)


def monthly_summary(incomes: list[Income], expenses: list[Expense]) -> pd.DataFrame:
    """Income, expenses and net per YYYY-MM, newest month first. Undated records are left out."""
    incomes = [i for i in incomes if isinstance(i.date, datetime)]
    expenses = [e for e in expenses if isinstance(e.date, datetime)]
    frames = []
    if incomes:
        frames.append(pd.DataFrame({
            "month": [utils.to_utc(i.date).strftime("%Y-%m") for i in incomes],
            "income": [float(i.amount) for i in incomes],
            "expenses": 0.0,
        }))
    if expenses:
        frames.append(pd.DataFrame({
            "month": [utils.to_utc(e.date).strftime("%Y-%m") for e in expenses],
            "income": 0.0,
            "expenses": [float(e.amount) for e in expenses],
        }))
    if not frames:
        return pd.DataFrame(columns=["month", "income", "expenses", "net"])

    df = pd.concat(frames, ignore_index=True).groupby("month", as_index=False)[["income", "expenses"]].sum()
    df["net"] = df["income"] - df["expenses"]
    return df.sort_values("month", ascending=False).reset_index(drop=True)


def to_csv_bytes(df: pd.DataFrame) -> bytes:
    return df.to_csv(index=False).encode("utf-8")
