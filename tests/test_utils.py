"""Tests for date helpers and form validation."""

from datetime import date, datetime, timezone

import utils
from models import IncomeCategory


class TestDates:

    def test_add_months_clamps(self):
        start = datetime(2023, 1, 31, tzinfo=timezone.utc)
        assert utils.add_months(start, 1) == datetime(2023, 2, 28, tzinfo=timezone.utc)

    def test_add_months_across_year(self):
        start = datetime(2023, 11, 15, tzinfo=timezone.utc)
        assert utils.add_months(start, 3) == datetime(2024, 2, 15, tzinfo=timezone.utc)

    def test_add_months_backwards(self):
        start = datetime(2024, 1, 10, tzinfo=timezone.utc)
        assert utils.add_months(start, -1) == datetime(2023, 12, 10, tzinfo=timezone.utc)

    def test_add_years_leap_day(self):
        start = datetime(2024, 2, 29, tzinfo=timezone.utc)
        assert utils.add_years(start, 1) == datetime(2025, 2, 28, tzinfo=timezone.utc)

    def test_parse_ts(self):
        assert utils.parse_ts("2024-05-01T10:00:00+00:00") == datetime(2024, 5, 1, 10, tzinfo=timezone.utc)
        assert utils.parse_ts("2024-05-01T10:00:00") == datetime(2024, 5, 1, 10, tzinfo=timezone.utc)
        assert utils.parse_ts(date(2024, 5, 1)) == datetime(2024, 5, 1, tzinfo=timezone.utc)
        assert utils.parse_ts("") is None
        assert utils.parse_ts("not a date") is None

    def test_format_ts(self):
        assert utils.format_ts(datetime(2024, 5, 1, 10, tzinfo=timezone.utc)) == "2024-05-01T10:00:00+00:00"
        assert utils.format_ts(None) is None

    def test_month_starts(self, now):
        assert utils.month_start(now) == datetime(2024, 5, 1, tzinfo=timezone.utc)
        assert utils.previous_month_start(now) == datetime(2024, 4, 1, tzinfo=timezone.utc)


class TestValidation:

    def test_signup(self):
        assert utils.validate_signup_inputs("Al", "al@example.com", "secret") == []
        errors = utils.validate_signup_inputs("A", "nope", "123")
        assert len(errors) == 3

    def test_display_name(self):
        assert utils.validate_display_name("  Al ") == []
        assert utils.validate_display_name(" A ") == ["Display name must be at least 2 characters."]
        assert utils.validate_display_name("x" * 51) == ["Display name must be at most 50 characters."]

    def test_income_ok(self):
        assert utils.validate_income_inputs("Logo", "100", "1") == []

    def test_income_paid_over_cost(self):
        errors = utils.validate_income_inputs("Logo", "600", "1", project_cost="500", client_name="Acme")
        assert errors == ["Amount paid cannot exceed the project cost."]

    def test_income_project_needs_client(self):
        errors = utils.validate_income_inputs("Logo", "100", "1", project_cost="500")
        assert "Client is required for project-tracked incomes." in errors

    def test_amount_not_numeric(self):
        assert utils.validate_expense_inputs("Lunch", "abc", "food") == ["Amount must be numeric."]

    def test_category_flags_exclusive(self):
        errors = utils.validate_category_inputs("Gigs", has_project_tracking=True, is_daily_fixed_income=True,
                                                daily_fixed_amount="50")
        assert errors == ["Project tracking cannot be combined with daily fixed income."]

    def test_daily_fixed_needs_amount(self):
        errors = utils.validate_category_inputs("Stall", is_daily_fixed_income=True, daily_fixed_amount="0")
        assert errors == ["Daily fixed amount must be a positive number."]

    def test_goal(self):
        assert utils.validate_goal_inputs("Car", "5000", "0") == []
        assert utils.validate_goal_inputs("Car", "5000", "-1") == ["Current amount must be zero or more."]


def test_user_categories_shadow_defaults():
    mine = [IncomeCategory(id="7", name="salary", has_project_tracking=False)]
    merged = utils.with_default_income_categories(mine)
    names = [c.name for c in merged]
    assert "Salary" not in names
    assert "salary" in names
    assert names == sorted(names, key=str.lower)
