"""Tests for trial / subscription lifecycle transitions."""

from datetime import datetime, timedelta, timezone

import pytest

import subscriptions
from entitlement import evaluate_entitlement
from models import EntitlementState, PlanType, SubscriptionStatus, UserProfile
from subscriptions import SubscriptionError


@pytest.fixture
def trial(now):
    return subscriptions.new_trial_profile("u1", "u1@example.com", "User One", now)


def test_new_trial_profile(trial, now):
    assert trial.subscription_status is SubscriptionStatus.TRIAL
    assert trial.plan_type is PlanType.NONE
    assert trial.trial_end_date == now + timedelta(days=15)
    assert trial.created_at == now
    assert evaluate_entitlement(trial, now).state is EntitlementState.TRIAL_ACTIVE


def test_request_plan_keeps_trial(trial, now):
    pending = subscriptions.request_plan(trial, "monthly")
    assert pending.subscription_status is SubscriptionStatus.PENDING_CONFIRMATION
    assert pending.requested_plan_type is PlanType.MONTHLY
    assert pending.trial_end_date == trial.trial_end_date
    assert pending.subscription_end_date is None
    ent = evaluate_entitlement(pending, now)
    assert ent.state is EntitlementState.PENDING
    assert ent.can_write


def test_duplicate_request_rejected(trial):
    pending = subscriptions.request_plan(trial, PlanType.YEARLY)
    with pytest.raises(SubscriptionError):
        subscriptions.request_plan(pending, PlanType.YEARLY)
    # switching plans while pending is allowed
    assert subscriptions.request_plan(pending, PlanType.MONTHLY).requested_plan_type is PlanType.MONTHLY


def test_unknown_plan_rejected(trial):
    with pytest.raises(SubscriptionError):
        subscriptions.request_plan(trial, "weekly")
    with pytest.raises(SubscriptionError):
        subscriptions.request_plan(trial, PlanType.NONE)


def test_approve_monthly(trial, now):
    active = subscriptions.approve_request(subscriptions.request_plan(trial, "monthly"), now)
    assert active.subscription_status is SubscriptionStatus.ACTIVE
    assert active.plan_type is PlanType.MONTHLY
    assert active.subscribed_at == now
    assert active.subscription_end_date == datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)
    assert active.trial_end_date is None
    assert active.requested_plan_type is None
    assert evaluate_entitlement(active, now).state is EntitlementState.ACTIVE


def test_activate_yearly(trial, now):
    active = subscriptions.activate_plan(trial, "yearly", now)
    assert active.subscription_end_date == datetime(2025, 5, 15, 12, 0, tzinfo=timezone.utc)


def test_monthly_end_date_clamps_to_month_end(trial):
    start = datetime(2024, 1, 31, 9, 0, tzinfo=timezone.utc)
    active = subscriptions.activate_plan(trial, PlanType.MONTHLY, start)
    assert active.subscription_end_date == datetime(2024, 2, 29, 9, 0, tzinfo=timezone.utc)


def test_approve_without_request(trial, now):
    with pytest.raises(SubscriptionError, match="missing"):
        subscriptions.approve_request(trial, now)


def test_start_trial_resets_subscription(trial, now):
    active = subscriptions.activate_plan(trial, PlanType.MONTHLY, now)
    later = now + timedelta(days=60)
    restarted = subscriptions.start_trial(active, later)
    assert restarted.subscription_status is SubscriptionStatus.TRIAL
    assert restarted.trial_end_date == later + timedelta(days=15)
    assert restarted.subscription_end_date is None
    assert restarted.subscribed_at is None
    assert restarted.plan_type is PlanType.NONE


def test_end_plan(trial, now):
    ended = subscriptions.end_plan(subscriptions.activate_plan(trial, PlanType.YEARLY, now))
    assert ended.subscription_status is SubscriptionStatus.EXPIRED
    assert ended.plan_type is PlanType.NONE
    assert ended.subscription_end_date is None
    assert ended.trial_end_date is None
    assert evaluate_entitlement(ended, now).state is EntitlementState.SUBSCRIPTION_EXPIRED


def test_can_end_plan():
    base = UserProfile(uid="u", email="u@example.com")
    assert not subscriptions.can_end_plan(base)
    assert subscriptions.can_end_plan(UserProfile(uid="u", email="e", subscription_status=SubscriptionStatus.TRIAL))


def test_transitions_do_not_mutate_input(trial, now):
    subscriptions.activate_plan(trial, PlanType.MONTHLY, now)
    assert trial.subscription_status is SubscriptionStatus.TRIAL
