"""
store.py
Row <-> record mapping and per-user CRUD on top of db.py.
"""

from __future__ import annotations

import logging
import sqlite3

import db
from models import (
    BudgetGoal,
    Client,
    Expense,
    ExpenseCategory,
    FreelanceDetails,
    Income,
    IncomeCategory,
    PlanType,
    SubscriptionStatus,
    UserProfile,
)
from utils import format_ts, parse_ts

logger = logging.getLogger(__name__)


# ---------- Profiles ----------

def row_to_profile(row: sqlite3.Row) -> UserProfile:
    requested = row["requested_plan_type"]
    return UserProfile(
        uid=row["uid"],
        email=row["email"],
        display_name=row["display_name"],
        created_at=parse_ts(row["created_at"]),
        subscription_status=SubscriptionStatus.parse(row["subscription_status"]),
        plan_type=PlanType.parse(row["plan_type"]),
        requested_plan_type=PlanType.parse(requested) if requested else None,
        trial_end_date=parse_ts(row["trial_end_date"]),
        subscription_end_date=parse_ts(row["subscription_end_date"]),
        subscribed_at=parse_ts(row["subscribed_at"]),
        is_admin=bool(row["is_admin"]),
    )


def _enum_value(value) -> str | None:
    if value is None:
        return None
    return getattr(value, "value", value)


def create_profile(profile: UserProfile, password_hash: str) -> None:
    db.execute(
        """
        INSERT INTO users(uid, email, display_name, password_hash, created_at, subscription_status, plan_type,
            requested_plan_type, trial_end_date, subscription_end_date, subscribed_at, is_admin)
        VALUES(?,?,?,?,?,?,?,?,?,?,?,?)
        """,
        (
            profile.uid,
            profile.email,
            profile.display_name,
            password_hash,
            format_ts(profile.created_at),
            _enum_value(profile.subscription_status),
            _enum_value(profile.plan_type),
            _enum_value(profile.requested_plan_type),
            format_ts(profile.trial_end_date),
            format_ts(profile.subscription_end_date),
            format_ts(profile.subscribed_at),
            int(profile.is_admin),
        ),
    )
    logger.info("Created profile %s (%s)", profile.uid, profile.email)


def save_profile(profile: UserProfile) -> None:
    """Write the subscription fields of a profile (last write wins)."""
    requested = _enum_value(profile.requested_plan_type)
    if requested == PlanType.NONE.value:
        requested = None
    db.execute(
        """
        UPDATE users SET display_name=?, subscription_status=?, plan_type=?, requested_plan_type=?,
            trial_end_date=?, subscription_end_date=?, subscribed_at=?, is_admin=?
        WHERE uid=?
        """,
        (
            profile.display_name,
            _enum_value(profile.subscription_status),
            _enum_value(profile.plan_type),
            requested,
            format_ts(profile.trial_end_date),
            format_ts(profile.subscription_end_date),
            format_ts(profile.subscribed_at),
            int(profile.is_admin),
            profile.uid,
        ),
    )
    logger.info("Saved profile %s: status=%s", profile.uid, _enum_value(profile.subscription_status))


def get_profile(uid: str) -> UserProfile | None:
    row = db.fetch_one("SELECT * FROM users WHERE uid = ?", (uid,))
    return row_to_profile(row) if row else None


def get_profile_by_email(email: str) -> UserProfile | None:
    row = db.fetch_one("SELECT * FROM users WHERE lower(email) = lower(?)", (email.strip(),))
    return row_to_profile(row) if row else None


def get_password_hash(email: str) -> str | None:
    row = db.fetch_one("SELECT password_hash FROM users WHERE lower(email) = lower(?)", (email.strip(),))
    return row["password_hash"] if row else None


def set_password_hash(uid: str, password_hash: str) -> None:
    db.execute("UPDATE users SET password_hash = ? WHERE uid = ?", (password_hash, uid))


def list_profiles() -> list[UserProfile]:
    rows = db.fetch_all("SELECT * FROM users ORDER BY created_at DESC")
    return [row_to_profile(r) for r in rows]


def list_pending_requests() -> list[UserProfile]:
    rows = db.fetch_all(
        "SELECT * FROM users WHERE subscription_status = 'pending_confirmation' ORDER BY created_at DESC"
    )
    return [row_to_profile(r) for r in rows]


def delete_profile(uid: str) -> None:
    # Owned rows go with it (ON DELETE CASCADE)
    db.execute("DELETE FROM users WHERE uid = ?", (uid,))
    logger.info("Removed profile %s", uid)


# ---------- Clients ----------

def row_to_client(row: sqlite3.Row) -> Client:
    return Client(id=row["id"], name=row["name"], number=row["number"], address=row["address"], user_id=row["user_id"])


def add_client(user_id: str, name: str, number: str | None = None, address: str | None = None) -> int:
    return db.execute(
        "INSERT INTO clients(user_id, name, number, address) VALUES(?,?,?,?)",
        (user_id, name.strip(), number, address),
    )


def update_client(client: Client) -> None:
    db.execute(
        "UPDATE clients SET name=?, number=?, address=? WHERE id=? AND user_id=?",
        (client.name.strip(), client.number, client.address, client.id, client.user_id),
    )


def delete_client(user_id: str, client_id: int) -> None:
    db.execute("DELETE FROM clients WHERE id = ? AND user_id = ?", (client_id, user_id))


def list_clients(user_id: str) -> list[Client]:
    rows = db.fetch_all("SELECT * FROM clients WHERE user_id = ? ORDER BY name ASC", (user_id,))
    return [row_to_client(r) for r in rows]


def find_client_by_name(user_id: str, name: str) -> Client | None:
    row = db.fetch_one(
        "SELECT * FROM clients WHERE user_id = ? AND lower(name) = lower(?)", (user_id, name.strip())
    )
    return row_to_client(row) if row else None


# ---------- Income categories ----------

def row_to_income_category(row: sqlite3.Row) -> IncomeCategory:
    return IncomeCategory(
        id=str(row["id"]),
        name=row["name"],
        description=row["description"],
        user_id=row["user_id"],
        has_project_tracking=bool(row["has_project_tracking"]),
        is_daily_fixed_income=bool(row["is_daily_fixed_income"]),
        daily_fixed_amount=row["daily_fixed_amount"],
    )


def add_income_category(user_id: str, name: str, description: str | None = None, has_project_tracking: bool = False,
                        is_daily_fixed_income: bool = False, daily_fixed_amount: float | None = None) -> str:
    new_id = db.execute(
        """
        INSERT INTO income_categories(user_id, name, description, has_project_tracking, is_daily_fixed_income,
            daily_fixed_amount)
        VALUES(?,?,?,?,?,?)
        """,
        (
            user_id,
            name.strip(),
            description,
            int(has_project_tracking),
            int(is_daily_fixed_income),
            daily_fixed_amount if is_daily_fixed_income else None,
        ),
    )
    return str(new_id)


def delete_income_category(user_id: str, category_id: str) -> None:
    db.execute("DELETE FROM income_categories WHERE id = ? AND user_id = ?", (category_id, user_id))


def list_income_categories(user_id: str) -> list[IncomeCategory]:
    rows = db.fetch_all("SELECT * FROM income_categories WHERE user_id = ? ORDER BY name ASC", (user_id,))
    return [row_to_income_category(r) for r in rows]


# ---------- Incomes ----------

def row_to_income(row: sqlite3.Row) -> Income:
    freelance = None
    if row["project_cost"] is not None:
        freelance = FreelanceDetails(
            client_name=row["client_name"] or "",
            project_cost=row["project_cost"],
            client_number=row["client_number"],
            client_address=row["client_address"],
            number_of_workers=row["number_of_workers"],
            dues_cleared_at=parse_ts(row["dues_cleared_at"]),
        )
    return Income(
        id=row["id"],
        description=row["description"],
        amount=row["amount"],
        date=parse_ts(row["date"]),
        category_id=row["category_id"],
        user_id=row["user_id"],
        client_id=row["client_id"],
        freelance=freelance,
    )


def _income_params(income: Income) -> tuple:
    f = income.freelance
    return (
        income.description.strip(),
        float(income.amount),
        format_ts(income.date),
        str(income.category_id),
        income.client_id,
        f.client_name if f else None,
        f.client_number if f else None,
        f.client_address if f else None,
        float(f.project_cost) if f else None,
        f.number_of_workers if f else None,
        format_ts(f.dues_cleared_at) if f else None,
    )


def add_income(income: Income) -> int:
    return db.execute(
        """
        INSERT INTO incomes(description, amount, date, category_id, client_id, client_name, client_number,
            client_address, project_cost, number_of_workers, dues_cleared_at, user_id)
        VALUES(?,?,?,?,?,?,?,?,?,?,?,?)
        """,
        _income_params(income) + (income.user_id,),
    )


def update_income(income: Income) -> None:
    db.execute(
        """
        UPDATE incomes SET description=?, amount=?, date=?, category_id=?, client_id=?, client_name=?,
            client_number=?, client_address=?, project_cost=?, number_of_workers=?, dues_cleared_at=?
        WHERE id=? AND user_id=?
        """,
        _income_params(income) + (income.id, income.user_id),
    )


def delete_income(user_id: str, income_id: int) -> None:
    db.execute("DELETE FROM incomes WHERE id = ? AND user_id = ?", (income_id, user_id))


def get_income(user_id: str, income_id: int) -> Income | None:
    row = db.fetch_one("SELECT * FROM incomes WHERE id = ? AND user_id = ?", (income_id, user_id))
    return row_to_income(row) if row else None


def list_incomes(user_id: str) -> list[Income]:
    rows = db.fetch_all("SELECT * FROM incomes WHERE user_id = ? ORDER BY date DESC, id DESC", (user_id,))
    return [row_to_income(r) for r in rows]


# ---------- Expense categories / expenses ----------

def row_to_expense_category(row: sqlite3.Row) -> ExpenseCategory:
    return ExpenseCategory(id=str(row["id"]), name=row["name"], description=row["description"], user_id=row["user_id"])


def add_expense_category(user_id: str, name: str, description: str | None = None) -> str:
    new_id = db.execute(
        "INSERT INTO expense_categories(user_id, name, description) VALUES(?,?,?)",
        (user_id, name.strip(), description),
    )
    return str(new_id)


def update_expense_category(category: ExpenseCategory) -> None:
    db.execute(
        "UPDATE expense_categories SET name=?, description=? WHERE id=? AND user_id=?",
        (category.name.strip(), category.description, category.id, category.user_id),
    )


def delete_expense_category(user_id: str, category_id: str) -> None:
    db.execute("DELETE FROM expense_categories WHERE id = ? AND user_id = ?", (category_id, user_id))


def list_expense_categories(user_id: str) -> list[ExpenseCategory]:
    rows = db.fetch_all("SELECT * FROM expense_categories WHERE user_id = ? ORDER BY name ASC", (user_id,))
    return [row_to_expense_category(r) for r in rows]


def row_to_expense(row: sqlite3.Row) -> Expense:
    return Expense(
        id=row["id"],
        description=row["description"],
        amount=row["amount"],
        date=parse_ts(row["date"]),
        category_id=row["category_id"],
        user_id=row["user_id"],
    )


def add_expense(expense: Expense) -> int:
    return db.execute(
        "INSERT INTO expenses(user_id, description, amount, date, category_id) VALUES(?,?,?,?,?)",
        (expense.user_id, expense.description.strip(), float(expense.amount), format_ts(expense.date),
         str(expense.category_id)),
    )


def update_expense(expense: Expense) -> None:
    db.execute(
        "UPDATE expenses SET description=?, amount=?, date=?, category_id=? WHERE id=? AND user_id=?",
        (expense.description.strip(), float(expense.amount), format_ts(expense.date), str(expense.category_id),
         expense.id, expense.user_id),
    )


def delete_expense(user_id: str, expense_id: int) -> None:
    db.execute("DELETE FROM expenses WHERE id = ? AND user_id = ?", (expense_id, user_id))


def list_expenses(user_id: str) -> list[Expense]:
    rows = db.fetch_all("SELECT * FROM expenses WHERE user_id = ? ORDER BY date DESC, id DESC", (user_id,))
    return [row_to_expense(r) for r in rows]


# ---------- Budget goals ----------

def row_to_goal(row: sqlite3.Row) -> BudgetGoal:
    return BudgetGoal(
        id=row["id"],
        name=row["name"],
        target_amount=row["target_amount"],
        current_amount=row["current_amount"],
        description=row["description"],
        user_id=row["user_id"],
    )


def add_goal(goal: BudgetGoal) -> int:
    return db.execute(
        "INSERT INTO budget_goals(user_id, name, target_amount, current_amount, description) VALUES(?,?,?,?,?)",
        (goal.user_id, goal.name.strip(), float(goal.target_amount), float(goal.current_amount), goal.description),
    )


def update_goal(goal: BudgetGoal) -> None:
    db.execute(
        "UPDATE budget_goals SET name=?, target_amount=?, current_amount=?, description=? WHERE id=? AND user_id=?",
        (goal.name.strip(), float(goal.target_amount), float(goal.current_amount), goal.description,
         goal.id, goal.user_id),
    )


def delete_goal(user_id: str, goal_id: int) -> None:
    db.execute("DELETE FROM budget_goals WHERE id = ? AND user_id = ?", (goal_id, user_id))


def list_goals(user_id: str) -> list[BudgetGoal]:
    rows = db.fetch_all("SELECT * FROM budget_goals WHERE user_id = ? ORDER BY name ASC", (user_id,))
    return [row_to_goal(r) for r in rows]
