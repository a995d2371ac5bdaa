"""
models.py
Domain records (frozen dataclasses), status enums and plan constants.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

# Plan durations in months (used for subscription_end_date calculation)
PLAN_MONTHS = {
    "monthly": 1,
    "yearly": 12,
}

PLAN_PRICES = {
    "monthly": 199.0,
    "yearly": 1999.0,
}


class SubscriptionStatus(str, Enum):
    TRIAL = "trial"
    ACTIVE = "active"
    EXPIRED = "expired"
    CANCELLED = "cancelled"
    NONE = "none"
    PENDING_CONFIRMATION = "pending_confirmation"

    @classmethod
    def parse(cls, value) -> "SubscriptionStatus":
        # Unknown or missing values are treated as "no subscription"
        try:
            return cls(value)
        except ValueError:
            return cls.NONE


class PlanType(str, Enum):
    MONTHLY = "monthly"
    YEARLY = "yearly"
    NONE = "none"

    @classmethod
    def parse(cls, value) -> "PlanType":
        try:
            return cls(value)
        except ValueError:
            return cls.NONE


class EntitlementState(str, Enum):
    ACTIVE = "active"
    TRIAL_ACTIVE = "trial_active"
    TRIAL_EXPIRED = "trial_expired"
    SUBSCRIPTION_EXPIRED = "subscription_expired"
    PENDING = "pending"
    NONE = "none"


class DuesStatus(str, Enum):
    PAID_IN_FULL = "paid_in_full"
    DUE_OUTSTANDING = "due_outstanding"
    DUE_CLEARED = "due_cleared"


@dataclass(frozen=True)
class UserProfile:
    uid: str
    email: str
    display_name: str | None = None
    created_at: datetime | None = None
    subscription_status: SubscriptionStatus = SubscriptionStatus.NONE
    plan_type: PlanType = PlanType.NONE
    requested_plan_type: PlanType | None = None  # plan awaiting admin approval
    trial_end_date: datetime | None = None
    subscription_end_date: datetime | None = None
    subscribed_at: datetime | None = None
    is_admin: bool = False

    @property
    def label(self) -> str:
        return self.display_name or self.email


@dataclass(frozen=True)
class Entitlement:
    state: EntitlementState
    can_write: bool


@dataclass(frozen=True)
class FreelanceDetails:
    client_name: str
    project_cost: float  # total agreed amount
    client_number: str | None = None
    client_address: str | None = None
    number_of_workers: int | None = None
    dues_cleared_at: datetime | None = None


@dataclass(frozen=True)
class Income:
    id: int | None
    description: str
    amount: float  # paid to date
    date: datetime
    category_id: str
    user_id: str | None = None
    client_id: int | None = None
    freelance: FreelanceDetails | None = None  # None => plain, non-project income


@dataclass(frozen=True)
class DuesSummary:
    total_paid: float = 0.0
    total_dues: float = 0.0


@dataclass(frozen=True)
class Client:
    id: int | None
    name: str
    number: str | None = None
    address: str | None = None
    user_id: str | None = None


@dataclass(frozen=True)
class ClientFinancialSummary:
    client: Client
    total_paid: float
    total_dues: float


@dataclass(frozen=True)
class IncomeCategory:
    id: str | None
    name: str
    description: str | None = None
    user_id: str | None = None
    has_project_tracking: bool = False
    is_daily_fixed_income: bool = False
    daily_fixed_amount: float | None = None
    is_default: bool = False


@dataclass(frozen=True)
class ExpenseCategory:
    id: str | None
    name: str
    description: str | None = None
    user_id: str | None = None
    is_default: bool = False


@dataclass(frozen=True)
class Expense:
    id: int | None
    description: str
    amount: float
    date: datetime
    category_id: str
    user_id: str | None = None


@dataclass(frozen=True)
class BudgetGoal:
    id: int | None
    name: str
    target_amount: float
    current_amount: float = 0.0
    description: str | None = None
    user_id: str | None = None

    @property
    def progress(self) -> float:
        if self.target_amount <= 0:
            return 0.0
        return min(1.0, self.current_amount / self.target_amount)


DEFAULT_INCOME_CATEGORIES = [
    IncomeCategory(id="default-income-salary", name="Salary", is_default=True),
    IncomeCategory(id="default-income-freelance", name="Freelance/Projects", is_default=True),
    IncomeCategory(id="default-income-investments", name="Investments", is_default=True),
    IncomeCategory(id="default-income-gifts", name="Gifts Received", is_default=True),
    IncomeCategory(id="default-income-other", name="Other Income", is_default=True),
]

DEFAULT_EXPENSE_CATEGORIES = [
    ExpenseCategory(id="default-expense-food", name="Food & Groceries", is_default=True),
    ExpenseCategory(id="default-expense-transport", name="Transportation", is_default=True),
    ExpenseCategory(id="default-expense-housing", name="Housing (Rent/Mortgage)", is_default=True),
    ExpenseCategory(id="default-expense-utilities", name="Utilities (Bills)", is_default=True),
    ExpenseCategory(id="default-expense-health", name="Healthcare & Medical", is_default=True),
    ExpenseCategory(id="default-expense-entertainment", name="Entertainment & Leisure", is_default=True),
    ExpenseCategory(id="default-expense-shopping", name="Shopping (General)", is_default=True),
    ExpenseCategory(id="default-expense-education", name="Education", is_default=True),
    ExpenseCategory(id="default-expense-personal", name="Personal Care", is_default=True),
    ExpenseCategory(id="default-expense-other", name="Other Expenses", is_default=True),
]
