from rest_framework import serializers

from .models import FREE_FEATURES, PlanType, SubscriptionStatus, UserSubscription


class UserSubscriptionSerializer(serializers.ModelSerializer):
    plan = serializers.CharField(source="plan_type", allow_null=True, read_only=True)
    startDate = serializers.DateTimeField(source="start_date", read_only=True)
    endDate = serializers.DateTimeField(source="end_date", read_only=True)
    autoRenew = serializers.BooleanField(source="auto_renew", read_only=True)

    class Meta:
        model = UserSubscription
        fields = ("status", "plan", "startDate", "endDate", "autoRenew", "features")
        read_only_fields = fields


def subscription_payload(subscription=None):
    """Serialized subscription, or the implicit free tier when the user has no row yet."""
    if subscription is not None:
        return UserSubscriptionSerializer(subscription).data
    return {
        "status": SubscriptionStatus.FREE.value,
        "plan": None,
        "startDate": None,
        "endDate": None,
        "autoRenew": False,
        "features": list(FREE_FEATURES),
    }


class PlanSelectionSerializer(serializers.Serializer):
    plan = serializers.ChoiceField(choices=PlanType.choices)
    autoRenew = serializers.BooleanField(required=False, default=True)
