"""
utils.py
Timestamps, date arithmetic, form validation, default categories.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta, timezone

from models import (
    DEFAULT_EXPENSE_CATEGORIES,
    DEFAULT_INCOME_CATEGORIES,
    ExpenseCategory,
    IncomeCategory,
)

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_utc(value: datetime) -> datetime:
    # Naive timestamps are stored as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_ts(value) -> datetime | None:
    """
    Parse an ISO timestamp (or date) stored in SQLite. Returns None for empty/invalid values.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return to_utc(value)
    if isinstance(value, date):
        return datetime.combine(value, time(), tzinfo=timezone.utc)
    try:
        return to_utc(datetime.fromisoformat(str(value)))
    except ValueError:
        return None


def format_ts(value: datetime | None) -> str | None:
    if value is None:
        return None
    return to_utc(value).isoformat(timespec="seconds")


def day_to_ts(d: date) -> datetime:
    """Noon UTC on the given day (dates picked in the UI)."""
    return datetime.combine(d, time(12, 0), tzinfo=timezone.utc)


def add_days(start: datetime, days: int) -> datetime:
    return start + timedelta(days=days)


def add_months(start: datetime, months: int) -> datetime:
    """
    Add months while keeping day in valid range (e.g., Jan 31 + 1 month => Feb 28/29).
    """
    y = start.year + (start.month - 1 + months) // 12
    m = (start.month - 1 + months) % 12 + 1
    # last day of target month
    if m == 12:
        next_month = date(y + 1, 1, 1)
    else:
        next_month = date(y, m + 1, 1)
    last_day = next_month - timedelta(days=1)
    day = min(start.day, last_day.day)
    return start.replace(year=y, month=m, day=day)


def add_years(start: datetime, years: int) -> datetime:
    return add_months(start, 12 * years)


def month_start(now: datetime) -> datetime:
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def previous_month_start(now: datetime) -> datetime:
    return add_months(month_start(now), -1)


def _is_number(value) -> bool:
    try:
        float(value)
    except (TypeError, ValueError):
        return False
    return True


def validate_display_name(display_name: str) -> list[str]:
    name = display_name.strip()
    if len(name) < 2:
        return ["Display name must be at least 2 characters."]
    if len(name) > 50:
        return ["Display name must be at most 50 characters."]
    return []


def validate_signup_inputs(display_name: str, email: str, password: str) -> list[str]:
    errors = validate_display_name(display_name)
    if not EMAIL_RE.match(email.strip()):
        errors.append("Invalid email address.")
    if len(password) < 6:
        errors.append("Password must be at least 6 characters.")
    return errors


def validate_amount(amount, label: str = "Amount") -> list[str]:
    if not _is_number(amount):
        return [f"{label} must be numeric."]
    if float(amount) <= 0:
        return [f"{label} must be > 0."]
    return []


def validate_income_inputs(description: str, amount, category_id, project_cost=None, client_name: str = "") -> list[str]:
    errors: list[str] = []
    if not description.strip():
        errors.append("Description is required.")
    errors.extend(validate_amount(amount))
    if not category_id:
        errors.append("Category is required.")
    if project_cost not in (None, ""):
        if not _is_number(project_cost) or float(project_cost) <= 0:
            errors.append("Project cost must be a positive number.")
        elif _is_number(amount) and float(amount) > float(project_cost):
            errors.append("Amount paid cannot exceed the project cost.")
        if not client_name.strip():
            errors.append("Client is required for project-tracked incomes.")
    return errors


def validate_expense_inputs(description: str, amount, category_id) -> list[str]:
    errors: list[str] = []
    if not description.strip():
        errors.append("Description is required.")
    errors.extend(validate_amount(amount))
    if not category_id:
        errors.append("Category is required.")
    return errors


def validate_category_inputs(name: str, has_project_tracking: bool = False,
                             is_daily_fixed_income: bool = False, daily_fixed_amount=None) -> list[str]:
    errors: list[str] = []
    if not name.strip():
        errors.append("Category name is required.")
    if has_project_tracking and is_daily_fixed_income:
        errors.append("Project tracking cannot be combined with daily fixed income.")
    if is_daily_fixed_income and (not _is_number(daily_fixed_amount) or float(daily_fixed_amount) <= 0):
        errors.append("Daily fixed amount must be a positive number.")
    return errors


def validate_goal_inputs(name: str, target_amount, current_amount) -> list[str]:
    errors: list[str] = []
    if not name.strip():
        errors.append("Goal name is required.")
    errors.extend(validate_amount(target_amount, "Target amount"))
    if not _is_number(current_amount) or float(current_amount) < 0:
        errors.append("Current amount must be zero or more.")
    return errors


def validate_client_inputs(name: str) -> list[str]:
    if len(name.strip()) < 2:
        return ["Client name must be at least 2 characters."]
    return []


def with_default_income_categories(user_categories: list[IncomeCategory]) -> list[IncomeCategory]:
    # User categories shadow defaults of the same name
    taken = {c.name.lower() for c in user_categories}
    defaults = [c for c in DEFAULT_INCOME_CATEGORIES if c.name.lower() not in taken]
    return sorted(defaults + list(user_categories), key=lambda c: c.name.lower())


def with_default_expense_categories(user_categories: list[ExpenseCategory]) -> list[ExpenseCategory]:
    taken = {c.name.lower() for c in user_categories}
    defaults = [c for c in DEFAULT_EXPENSE_CATEGORIES if c.name.lower() not in taken]
    return sorted(defaults + list(user_categories), key=lambda c: c.name.lower())
