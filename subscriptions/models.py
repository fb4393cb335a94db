from django.conf import settings
from django.db import models
from django.utils import timezone


class SubscriptionStatus(models.TextChoices):
    FREE = "free", "Free"
    PREMIUM = "premium", "Premium"
    EXPIRED = "expired", "Expired"


class PlanType(models.TextChoices):
    MONTHLY = "monthly", "Monthly"
    YEARLY = "yearly", "Yearly"


FREE_FEATURES = ["basic_search", "basic_filtering", "local_ratings"]

BASIC_FEATURES = [
    "basic_search",
    "basic_filtering",
    "view_events",
    "create_events",
    "rate_events",
]

PREMIUM_FEATURES = [
    "unlimited_events",
    "advanced_search",
    "priority_support",
    "analytics",
    "custom_categories",
    "export_data",
    "no_ads",
    "early_access",
    "extended_event_radius",
    "advanced_filtering",
    "premium_categories",
    "create_groups",
]


class UserSubscription(models.Model):
    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="subscription")
    status = models.CharField(max_length=16, choices=SubscriptionStatus.choices, default=SubscriptionStatus.FREE)
    plan_type = models.CharField(max_length=16, choices=PlanType.choices, null=True, blank=True)
    start_date = models.DateTimeField(null=True, blank=True)
    end_date = models.DateTimeField(null=True, blank=True)
    auto_renew = models.BooleanField(default=False)
    features = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("-created_at",)
        indexes = [
            models.Index(fields=("status", "end_date"), name="subscription_status_end_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.user.email} / {self.status}"

    def is_active_premium(self, now=None) -> bool:
        if self.status != SubscriptionStatus.PREMIUM:
            return False
        if self.end_date is None:
            return True
        return self.end_date > (now or timezone.now())

    def has_lapsed(self, now=None) -> bool:
        return self.status == SubscriptionStatus.PREMIUM and not self.is_active_premium(now)
