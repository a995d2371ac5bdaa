"""Tests for dashboard metrics and tabular summaries."""

from datetime import datetime, timezone

import pytest

import reports
from models import Expense, FreelanceDetails, Income, IncomeCategory

CATEGORIES = [
    IncomeCategory(id="1", name="Freelance", has_project_tracking=True),
    IncomeCategory(id="2", name="Stall", is_daily_fixed_income=True, daily_fixed_amount=50),
    IncomeCategory(id="3", name="Salary"),
]


def ts(y, m, d):
    return datetime(y, m, d, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def incomes():
    return [
        Income(id=1, description="Salary", amount=2000, date=ts(2024, 5, 1), category_id="3"),
        Income(id=2, description="Stall", amount=50, date=ts(2024, 5, 10), category_id="2"),
        Income(id=3, description="Salary", amount=1000, date=ts(2024, 4, 1), category_id="3"),
        Income(id=4, description="App", amount=600, date=ts(2024, 3, 1), category_id="1", client_id=1,
               freelance=FreelanceDetails(client_name="Acme", project_cost=1000)),
        Income(id=5, description="Logo", amount=100, date=ts(2024, 5, 5), category_id="1",
               freelance=FreelanceDetails(client_name="Globex", project_cost=300)),
    ]


@pytest.fixture
def expenses():
    return [
        Expense(id=1, description="Rent", amount=800, date=ts(2024, 5, 2), category_id="rent"),
        Expense(id=2, description="Food", amount=200, date=ts(2024, 4, 20), category_id="food"),
    ]


def test_dashboard_metrics(incomes, expenses, now):
    m = reports.dashboard_metrics(incomes, expenses, CATEGORIES, now)
    assert m.income_this_month == 2150
    assert m.expenses_this_month == 800
    assert m.net_savings == 1350
    assert m.income_change_pct == pytest.approx(115.0)
    assert m.daily_income_this_month == 50
    assert m.total_dues == 600
    # only the March project is older than 30 days
    assert m.potential_loss == 400


@pytest.mark.parametrize("current,previous,expected", [(150, 100, 50.0), (10, 0, 100.0), (0, 0, 0.0)])
def test_income_change_pct(current, previous, expected):
    assert reports.income_change_pct(current, previous) == pytest.approx(expected)


def test_monthly_summary(incomes, expenses):
    df = reports.monthly_summary(incomes, expenses)
    assert list(df["month"]) == ["2024-05", "2024-04", "2024-03"]
    may = df.iloc[0]
    assert may["income"] == 2150
    assert may["expenses"] == 800
    assert may["net"] == 1350


def test_empty_frames():
    assert reports.monthly_summary([], []).empty
    assert list(reports.incomes_frame([], CATEGORIES).columns) == reports.INCOME_COLUMNS
    assert reports.expenses_frame([], {}).empty


def test_incomes_frame_and_csv(incomes):
    df = reports.incomes_frame(incomes, CATEGORIES)
    app_row = df[df["id"] == 4].iloc[0]
    assert app_row["category"] == "Freelance"
    assert app_row["due"] == 400
    assert app_row["dues_status"] == "due_outstanding"
    csv = reports.to_csv_bytes(df).decode("utf-8")
    assert csv.splitlines()[0] == ",".join(reports.INCOME_COLUMNS)


def test_monthly_summary_skips_undated_records(incomes, expenses):
    undated_income = Income(id=9, description="Tip", amount=20, date=None, category_id="3")
    naive_expense = Expense(id=9, description="Bus", amount=5, date=datetime(2024, 4, 3, 8, 0),
                            category_id="transport")
    undated_expense = Expense(id=10, description="Misc", amount=7, date=None, category_id="other")
    df = reports.monthly_summary(incomes + [undated_income], expenses + [naive_expense, undated_expense])
    assert list(df["month"]) == ["2024-05", "2024-04", "2024-03"]
    april = df.iloc[1]
    assert april["income"] == 1000
    assert april["expenses"] == 205


def test_dashboard_metrics_ignore_undated_records(incomes, expenses, now):
    undated = Income(id=9, description="Tip", amount=20, date=None, category_id="3")
    naive = Income(id=10, description="Bonus", amount=30, date=datetime(2024, 5, 3, 9, 0), category_id="3")
    m = reports.dashboard_metrics(incomes + [undated, naive], expenses, CATEGORIES, now)
    assert m.income_this_month == 2180
