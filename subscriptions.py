"""
subscriptions.py
Trial / subscription lifecycle transitions.

Each function takes a profile snapshot and returns the updated profile; saving it is up to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime

import config
import utils
from models import PLAN_MONTHS, PlanType, SubscriptionStatus, UserProfile

logger = logging.getLogger(__name__)


class SubscriptionError(ValueError):
    pass


def _plan(value) -> PlanType:
    plan = PlanType.parse(value)
    if plan is PlanType.NONE:
        raise SubscriptionError(f"Unknown plan type: {value!r}")
    return plan


def plan_end_date(plan, start: datetime) -> datetime:
    return utils.add_months(start, PLAN_MONTHS[_plan(plan).value])


def new_trial_profile(uid: str, email: str, display_name: str | None, now: datetime,
                      is_admin: bool = False) -> UserProfile:
    """Profile created at signup: a fresh trial of TRIAL_DAYS days."""
    return UserProfile(
        uid=uid,
        email=email,
        display_name=display_name,
        created_at=now,
        subscription_status=SubscriptionStatus.TRIAL,
        plan_type=PlanType.NONE,
        trial_end_date=utils.add_days(now, config.TRIAL_DAYS),
        is_admin=is_admin,
    )


def start_trial(profile: UserProfile, now: datetime) -> UserProfile:
    logger.info("Starting %s-day trial for %s", config.TRIAL_DAYS, profile.uid)
    return replace(
        profile,
        subscription_status=SubscriptionStatus.TRIAL,
        plan_type=PlanType.NONE,
        trial_end_date=utils.add_days(now, config.TRIAL_DAYS),
        subscription_end_date=None,
        subscribed_at=None,
        requested_plan_type=None,
    )


def request_plan(profile: UserProfile, plan) -> UserProfile:
    """
    User asks for a plan. Status goes to pending_confirmation until an admin approves;
    the trial end date is kept, subscription dates are cleared.
    """
    plan = _plan(plan)
    if (SubscriptionStatus.parse(profile.subscription_status) is SubscriptionStatus.PENDING_CONFIRMATION
            and PlanType.parse(profile.requested_plan_type) is plan):
        logger.warning("Duplicate %s request from %s", plan.value, profile.uid)
        raise SubscriptionError(f"A {plan.value} plan request is already pending.")

    logger.info("%s requested the %s plan", profile.uid, plan.value)
    return replace(
        profile,
        subscription_status=SubscriptionStatus.PENDING_CONFIRMATION,
        requested_plan_type=plan,
        plan_type=PlanType.NONE,
        subscribed_at=None,
        subscription_end_date=None,
    )


def activate_plan(profile: UserProfile, plan, now: datetime) -> UserProfile:
    plan = _plan(plan)
    end = plan_end_date(plan, now)
    logger.info("Activating %s plan for %s until %s", plan.value, profile.uid, end.isoformat())
    return replace(
        profile,
        subscription_status=SubscriptionStatus.ACTIVE,
        plan_type=plan,
        subscribed_at=now,
        subscription_end_date=end,
        trial_end_date=None,
        requested_plan_type=None,
    )


def approve_request(profile: UserProfile, now: datetime) -> UserProfile:
    if PlanType.parse(profile.requested_plan_type) is PlanType.NONE:
        logger.warning("Approval attempted for %s without a requested plan", profile.uid)
        raise SubscriptionError("Requested plan type is missing.")
    return activate_plan(profile, profile.requested_plan_type, now)


def end_plan(profile: UserProfile) -> UserProfile:
    logger.info("Ending plan for %s", profile.uid)
    return replace(
        profile,
        subscription_status=SubscriptionStatus.EXPIRED,
        plan_type=PlanType.NONE,
        trial_end_date=None,
        subscription_end_date=None,
        subscribed_at=None,
        requested_plan_type=None,
    )


def can_end_plan(profile: UserProfile) -> bool:
    return SubscriptionStatus.parse(profile.subscription_status) in (SubscriptionStatus.ACTIVE, SubscriptionStatus.TRIAL)
