"""
entitlement.py
Subscription entitlement: what a profile snapshot is allowed to do at a given moment.

All functions are pure. `now` is always passed in; nothing here reads the clock.
"""

from __future__ import annotations

from datetime import datetime

import config
from models import Entitlement, EntitlementState, PlanType, SubscriptionStatus, UserProfile

WRITE_STATES = (EntitlementState.ACTIVE, EntitlementState.TRIAL_ACTIVE)


def _in_future(end: datetime | None, now: datetime) -> bool:
    # Missing end date never grants access; equal to now counts as expired
    if end is None:
        return False
    try:
        return end > now
    except TypeError:
        return False


def evaluate_entitlement(profile: UserProfile, now: datetime) -> Entitlement:
    status = SubscriptionStatus.parse(profile.subscription_status)

    if status is SubscriptionStatus.PENDING_CONFIRMATION and profile.requested_plan_type not in (None, PlanType.NONE):
        # A pending request grants nothing on its own; a trial or paid period still running does
        still_running = _in_future(profile.trial_end_date, now) or _in_future(profile.subscription_end_date, now)
        return Entitlement(EntitlementState.PENDING, still_running)

    if status is SubscriptionStatus.ACTIVE:
        if _in_future(profile.subscription_end_date, now):
            return Entitlement(EntitlementState.ACTIVE, True)
        return Entitlement(EntitlementState.SUBSCRIPTION_EXPIRED, False)

    if status is SubscriptionStatus.TRIAL:
        if _in_future(profile.trial_end_date, now):
            return Entitlement(EntitlementState.TRIAL_ACTIVE, True)
        return Entitlement(EntitlementState.TRIAL_EXPIRED, False)

    if status in (SubscriptionStatus.EXPIRED, SubscriptionStatus.CANCELLED):
        return Entitlement(EntitlementState.SUBSCRIPTION_EXPIRED, False)

    return Entitlement(EntitlementState.NONE, False)


def has_write_access(profile: UserProfile | None, now: datetime) -> bool:
    if profile is None:
        return False
    return evaluate_entitlement(profile, now).can_write


def is_trial_limit_reached(count: int, limit: int = config.TRIAL_ITEM_LIMIT) -> bool:
    return count >= limit


def can_add_limited_item(entitlement: Entitlement, count: int, limit: int = config.TRIAL_ITEM_LIMIT) -> bool:
    """
    Goals and expense categories are capped while on an active trial.
    Paid plans are not capped; no write access means no adding at all.
    """
    if not entitlement.can_write:
        return False
    if entitlement.state is EntitlementState.TRIAL_ACTIVE:
        return not is_trial_limit_reached(count, limit)
    return True


def describe_status(profile: UserProfile | None, now: datetime) -> str:
    if profile is None:
        return "Loading status..."

    status = SubscriptionStatus.parse(profile.subscription_status)
    if status is SubscriptionStatus.PENDING_CONFIRMATION and profile.requested_plan_type not in (None, PlanType.NONE):
        return f"Your {PlanType.parse(profile.requested_plan_type).value} plan request is pending admin approval."

    if status is SubscriptionStatus.TRIAL:
        end = profile.trial_end_date
        if end is None:
            return "You are on a trial, ending on N/A."
        if not _in_future(end, now):
            return f"Your trial ended on {end:%B %d, %Y}. Please subscribe."
        return f"You are on a trial, ending on {end:%B %d, %Y}."

    if status is SubscriptionStatus.ACTIVE and PlanType.parse(profile.plan_type) is not PlanType.NONE and profile.subscription_end_date:
        end = profile.subscription_end_date
        plan = PlanType.parse(profile.plan_type).value
        if not _in_future(end, now):
            return f"Your {plan} subscription expired on {end:%B %d, %Y}. Please renew."
        return f"Active {plan} plan. Renews on {end:%B %d, %Y}."

    if status in (SubscriptionStatus.EXPIRED, SubscriptionStatus.CANCELLED):
        return f"Your subscription is {status.value}."

    return "No active subscription or pending request."
