"""
dues.py
Freelance project dues: per-income classification and paid/due totals.

Only incomes carrying FreelanceDetails take part. Anything malformed is left out
of the totals instead of raising, so summaries still render with partial data.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Iterable

import config
import utils
from models import (
    Client,
    ClientFinancialSummary,
    DuesStatus,
    DuesSummary,
    Income,
    IncomeCategory,
)


def _amounts(income: Income) -> tuple[float, float] | None:
    """(paid, project_cost) or None when the income isn't a usable project record."""
    details = getattr(income, "freelance", None)
    if details is None:
        return None
    try:
        return float(income.amount), float(details.project_cost)
    except (TypeError, ValueError):
        return None


def classify_income(income: Income, now: datetime | None = None) -> DuesStatus | None:
    """
    DUE_CLEARED once dues_cleared_at is recorded, whatever the amounts say.
    DUE_OUTSTANDING while project_cost - amount > 0, PAID_IN_FULL otherwise.
    None for plain (non-project) incomes.
    """
    amounts = _amounts(income)
    if amounts is None:
        return None
    if income.freelance.dues_cleared_at is not None:
        return DuesStatus.DUE_CLEARED
    paid, cost = amounts
    if cost - paid > 0:
        return DuesStatus.DUE_OUTSTANDING
    return DuesStatus.PAID_IN_FULL


def outstanding_due(income: Income) -> float:
    if classify_income(income) is not DuesStatus.DUE_OUTSTANDING:
        return 0.0
    paid, cost = _amounts(income)
    return max(0.0, cost - paid)


def aggregate_dues(incomes: Iterable[Income], client_id: int | None = None) -> DuesSummary:
    """Totals over project incomes, optionally only those linked to client_id."""
    total_paid = 0.0
    total_dues = 0.0
    for income in incomes:
        amounts = _amounts(income)
        if amounts is None:
            continue
        if client_id is not None and income.client_id != client_id:
            continue
        total_paid += amounts[0]
        total_dues += outstanding_due(income)
    return DuesSummary(total_paid=total_paid, total_dues=total_dues)


def compute_potential_loss(incomes: Iterable[Income], now: datetime,
                           stale_days: int = config.STALE_DUES_DAYS) -> float:
    """Outstanding dues on incomes dated strictly before now - stale_days."""
    cutoff = now - timedelta(days=stale_days)
    loss = 0.0
    for income in incomes:
        due = outstanding_due(income)
        if due <= 0:
            continue
        try:
            stale = income.date < cutoff
        except TypeError:
            continue
        if stale:
            loss += due
    return loss


def clear_dues(income: Income, now: datetime) -> Income:
    """
    Mark the remaining dues as settled: amount becomes the project cost and
    dues_cleared_at is stamped. Returns the input unchanged when there is nothing to clear.
    """
    if classify_income(income) is not DuesStatus.DUE_OUTSTANDING:
        return income
    details = replace(income.freelance, dues_cleared_at=now)
    return replace(income, amount=float(details.project_cost), freelance=details)


def project_tracking_incomes(incomes: Iterable[Income], categories: Iterable[IncomeCategory]) -> list[Income]:
    tracked = {c.id for c in categories if c.has_project_tracking}
    return [i for i in incomes if i.category_id in tracked and i.freelance is not None]


def split_projects(incomes: Iterable[Income]) -> tuple[list[Income], list[Income]]:
    """
    Freelance report: (projects with dues, cleared or fully paid projects).
    Settled projects are newest first by clearing date, falling back to the income date.
    """
    with_dues: list[Income] = []
    settled: list[Income] = []
    for income in incomes:
        status = classify_income(income)
        if status is DuesStatus.DUE_OUTSTANDING:
            with_dues.append(income)
        elif status is not None:
            settled.append(income)

    settled.sort(key=_settled_key, reverse=True)
    return with_dues, settled


_UNDATED = datetime.min.replace(tzinfo=timezone.utc)


def _settled_key(income: Income) -> datetime:
    # undated records sort last; naive timestamps are read as UTC
    value = income.freelance.dues_cleared_at or income.date
    if not isinstance(value, datetime):
        return _UNDATED
    return utils.to_utc(value)


def client_summaries(clients: Iterable[Client], incomes: Iterable[Income]) -> list[ClientFinancialSummary]:
    incomes = list(incomes)
    out = []
    for client in clients:
        # an unsaved client owns no incomes
        if client.id is None:
            summary = DuesSummary(total_paid=0.0, total_dues=0.0)
        else:
            summary = aggregate_dues(incomes, client_id=client.id)
        out.append(ClientFinancialSummary(client=client, total_paid=summary.total_paid, total_dues=summary.total_dues))
    return out
