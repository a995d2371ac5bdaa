"""Tests for the entitlement evaluator and trial limits."""

from datetime import timedelta

import pytest

from entitlement import (
    can_add_limited_item,
    describe_status,
    evaluate_entitlement,
    has_write_access,
    is_trial_limit_reached,
)
from models import Entitlement, EntitlementState, PlanType, SubscriptionStatus, UserProfile


def profile(**kwargs):
    return UserProfile(uid="u1", email="u1@example.com", **kwargs)


class TestEvaluateEntitlement:

    def test_active_subscription_in_future(self, now):
        p = profile(subscription_status=SubscriptionStatus.ACTIVE, plan_type=PlanType.MONTHLY,
                    subscription_end_date=now + timedelta(seconds=1))
        ent = evaluate_entitlement(p, now)
        assert ent == Entitlement(EntitlementState.ACTIVE, True)

    def test_active_subscription_past_end(self, now):
        p = profile(subscription_status=SubscriptionStatus.ACTIVE, subscription_end_date=now - timedelta(days=1))
        ent = evaluate_entitlement(p, now)
        assert ent.state is EntitlementState.SUBSCRIPTION_EXPIRED
        assert ent.can_write is False

    def test_active_without_end_date_fails_closed(self, now):
        ent = evaluate_entitlement(profile(subscription_status=SubscriptionStatus.ACTIVE), now)
        assert ent.state is EntitlementState.SUBSCRIPTION_EXPIRED
        assert not ent.can_write

    def test_trial_in_future(self, now):
        p = profile(subscription_status=SubscriptionStatus.TRIAL, trial_end_date=now + timedelta(days=3))
        assert evaluate_entitlement(p, now) == Entitlement(EntitlementState.TRIAL_ACTIVE, True)

    def test_trial_ending_exactly_now_is_expired(self, now):
        p = profile(subscription_status=SubscriptionStatus.TRIAL, trial_end_date=now)
        ent = evaluate_entitlement(p, now)
        assert ent.state is EntitlementState.TRIAL_EXPIRED
        assert ent.can_write is False

    def test_subscription_ending_exactly_now_is_expired(self, now):
        p = profile(subscription_status=SubscriptionStatus.ACTIVE, subscription_end_date=now)
        assert not evaluate_entitlement(p, now).can_write

    def test_trial_without_end_date(self, now):
        ent = evaluate_entitlement(profile(subscription_status=SubscriptionStatus.TRIAL), now)
        assert ent.state is EntitlementState.TRIAL_EXPIRED

    def test_pending_keeps_running_trial(self, now):
        p = profile(subscription_status=SubscriptionStatus.PENDING_CONFIRMATION,
                    requested_plan_type=PlanType.YEARLY, trial_end_date=now + timedelta(days=5))
        assert evaluate_entitlement(p, now) == Entitlement(EntitlementState.PENDING, True)

    def test_pending_alone_grants_nothing(self, now):
        p = profile(subscription_status=SubscriptionStatus.PENDING_CONFIRMATION,
                    requested_plan_type=PlanType.MONTHLY, trial_end_date=now - timedelta(days=5))
        assert evaluate_entitlement(p, now) == Entitlement(EntitlementState.PENDING, False)

    def test_pending_without_requested_plan_is_none(self, now):
        p = profile(subscription_status=SubscriptionStatus.PENDING_CONFIRMATION)
        assert evaluate_entitlement(p, now).state is EntitlementState.NONE

    @pytest.mark.parametrize("status", [SubscriptionStatus.EXPIRED, SubscriptionStatus.CANCELLED])
    def test_expired_and_cancelled(self, now, status):
        p = profile(subscription_status=status, subscription_end_date=now + timedelta(days=30))
        ent = evaluate_entitlement(p, now)
        assert ent.state is EntitlementState.SUBSCRIPTION_EXPIRED
        assert not ent.can_write

    def test_unknown_status_is_none(self, now):
        ent = evaluate_entitlement(profile(subscription_status="bogus"), now)
        assert ent == Entitlement(EntitlementState.NONE, False)

    def test_profile_is_not_mutated(self, now):
        p = profile(subscription_status=SubscriptionStatus.TRIAL, trial_end_date=now - timedelta(days=1))
        before = p
        evaluate_entitlement(p, now)
        assert p == before
        assert p.subscription_status is SubscriptionStatus.TRIAL

    def test_has_write_access_without_profile(self, now):
        assert has_write_access(None, now) is False


class TestTrialLimits:

    def test_limit_reached(self):
        assert is_trial_limit_reached(3, 3) is True
        assert is_trial_limit_reached(4, 3) is True

    def test_limit_not_reached(self):
        assert is_trial_limit_reached(2, 3) is False

    def test_active_trial_capped(self):
        ent = Entitlement(EntitlementState.TRIAL_ACTIVE, True)
        assert can_add_limited_item(ent, 2, 3)
        assert not can_add_limited_item(ent, 3, 3)

    def test_paid_plan_not_capped(self):
        assert can_add_limited_item(Entitlement(EntitlementState.ACTIVE, True), 50, 3)

    def test_no_write_access(self):
        assert not can_add_limited_item(Entitlement(EntitlementState.TRIAL_EXPIRED, False), 0, 3)


class TestDescribeStatus:

    def test_pending(self, now):
        p = profile(subscription_status=SubscriptionStatus.PENDING_CONFIRMATION, requested_plan_type=PlanType.YEARLY)
        assert describe_status(p, now) == "Your yearly plan request is pending admin approval."

    def test_trial_ended(self, now):
        p = profile(subscription_status=SubscriptionStatus.TRIAL, trial_end_date=now - timedelta(days=1))
        assert describe_status(p, now).startswith("Your trial ended on")

    def test_active_plan(self, now):
        p = profile(subscription_status=SubscriptionStatus.ACTIVE, plan_type=PlanType.MONTHLY,
                    subscription_end_date=now + timedelta(days=10))
        assert describe_status(p, now).startswith("Active monthly plan. Renews on")

    def test_cancelled(self, now):
        assert describe_status(profile(subscription_status=SubscriptionStatus.CANCELLED), now) == \
            "Your subscription is cancelled."

    def test_nothing(self, now):
        assert describe_status(profile(), now) == "No active subscription or pending request."
