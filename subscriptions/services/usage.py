from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from django.utils import timezone

from events.models import Event
from subscriptions.models import SubscriptionStatus, UserSubscription

# (daily, monthly) event-creation allowances per tier.
TIER_LIMITS = {
    SubscriptionStatus.FREE: (1, 30),
    SubscriptionStatus.EXPIRED: (5, 150),
    SubscriptionStatus.PREMIUM: (50, 1500),
}


@dataclass(frozen=True)
class UsageWindow:
    used: int
    limit: int

    @property
    def remaining(self) -> int:
        return max(0, self.limit - self.used)

    def as_dict(self) -> dict:
        return {"used": self.used, "limit": self.limit, "remaining": self.remaining}


class UsageService:
    def __init__(self, *, now=None):
        self._now = now or timezone.now

    def effective_status(self, subscription: Optional[UserSubscription]) -> str:
        if subscription is None:
            return SubscriptionStatus.FREE
        if subscription.has_lapsed(self._now()):
            return SubscriptionStatus.EXPIRED
        return subscription.status

    def summarize(self, user, subscription: Optional[UserSubscription] = None) -> dict:
        now = self._now()
        day_start = now.replace(hour=0, minute=0, second=0, microsecond=0)
        month_start = day_start.replace(day=1)

        daily_limit, monthly_limit = TIER_LIMITS[self.effective_status(subscription)]
        created = Event.all_objects.filter(created_by=user)

        daily = UsageWindow(used=created.filter(created_at__gte=day_start).count(), limit=daily_limit)
        monthly = UsageWindow(used=created.filter(created_at__gte=month_start).count(), limit=monthly_limit)
        ratings_given = user.ratings.count()

        return {
            "daily": daily.as_dict(),
            "monthly": monthly.as_dict(),
            "total": {
                "eventsCreated": created.count(),
                "ratingsGiven": ratings_given,
            },
        }
