from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import timedelta

from django.db import transaction
from django.utils import timezone

from core.exceptions import NotFoundError
from subscriptions.models import (
    FREE_FEATURES,
    PREMIUM_FEATURES,
    PlanType,
    SubscriptionStatus,
    UserSubscription,
)

logger = logging.getLogger(__name__)


def _calculate_period_end(start, plan_type: str) -> timezone.datetime:
    if plan_type == PlanType.YEARLY:
        return start + timedelta(days=365)
    # Default monthly billing to 30 days to avoid new dependencies.
    return start + timedelta(days=30)


@dataclass
class LifecycleResult:
    subscription: UserSubscription


class SubscriptionLifecycleService:
    def __init__(self, *, now=None):
        self._now = now or timezone.now

    def ensure_subscription(self, user) -> UserSubscription:
        subscription, created = UserSubscription.objects.get_or_create(
            user=user,
            defaults={"status": SubscriptionStatus.FREE, "features": list(FREE_FEATURES)},
        )
        if created:
            logger.info("Created free subscription for user %s", user.pk)
        return subscription

    def refresh_status(self, subscription: UserSubscription) -> LifecycleResult:
        """Persist ``expired`` on a premium subscription whose end date has passed."""
        if subscription.has_lapsed(self._now()):
            subscription.status = SubscriptionStatus.EXPIRED
            subscription.save(update_fields=["status", "updated_at"])
            logger.info("Subscription %s for user %s lapsed", subscription.pk, subscription.user_id)
        return LifecycleResult(subscription=subscription)

    def upgrade(self, user, *, plan_type: str, auto_renew: bool = True) -> LifecycleResult:
        with transaction.atomic():
            subscription = self.ensure_subscription(user)
            self._start_premium_period(subscription, plan_type=plan_type, auto_renew=auto_renew)

        logger.info("User %s upgraded to premium (%s)", user.pk, plan_type)
        return LifecycleResult(subscription=subscription)

    def reactivate(self, user, *, plan_type: str, auto_renew: bool = True) -> LifecycleResult:
        subscription = self._get_subscription(user)
        self._start_premium_period(subscription, plan_type=plan_type, auto_renew=auto_renew)

        logger.info("User %s reactivated premium (%s)", user.pk, plan_type)
        return LifecycleResult(subscription=subscription)

    def cancel(self, user) -> LifecycleResult:
        subscription = self._get_subscription(user)
        subscription.status = SubscriptionStatus.EXPIRED
        subscription.auto_renew = False
        subscription.save(update_fields=["status", "auto_renew", "updated_at"])

        logger.info("User %s cancelled subscription", user.pk)
        return LifecycleResult(subscription=subscription)

    def change_plan(self, user, *, plan_type: str, auto_renew: bool = True) -> LifecycleResult:
        subscription = UserSubscription.objects.filter(user=user, status=SubscriptionStatus.PREMIUM).first()
        if subscription is None:
            raise NotFoundError("No active premium subscription found")

        now = self._now()
        if plan_type != subscription.plan_type and subscription.end_date is not None:
            # Switching plans keeps the time already paid for.
            remaining_days = math.ceil((subscription.end_date - now).total_seconds() / 86400)
            subscription.end_date = now + timedelta(days=max(remaining_days, 0))

        subscription.plan_type = plan_type
        subscription.auto_renew = auto_renew
        subscription.save(update_fields=["plan_type", "end_date", "auto_renew", "updated_at"])

        logger.info("User %s switched to %s plan", user.pk, plan_type)
        return LifecycleResult(subscription=subscription)

    def expire_lapsed(self) -> int:
        now = self._now()
        return UserSubscription.objects.filter(
            status=SubscriptionStatus.PREMIUM,
            end_date__isnull=False,
            end_date__lte=now,
        ).update(status=SubscriptionStatus.EXPIRED, updated_at=now)

    def _get_subscription(self, user) -> UserSubscription:
        subscription = UserSubscription.objects.filter(user=user).first()
        if subscription is None:
            raise NotFoundError("Subscription not found")
        return subscription

    def _start_premium_period(self, subscription: UserSubscription, *, plan_type: str, auto_renew: bool) -> None:
        now = self._now()
        subscription.status = SubscriptionStatus.PREMIUM
        subscription.plan_type = plan_type
        subscription.start_date = now
        subscription.end_date = _calculate_period_end(now, plan_type)
        subscription.auto_renew = auto_renew
        subscription.features = list(PREMIUM_FEATURES)
        subscription.save(
            update_fields=[
                "status",
                "plan_type",
                "start_date",
                "end_date",
                "auto_renew",
                "features",
                "updated_at",
            ]
        )
