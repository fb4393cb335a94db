import logging

from rest_framework import permissions
from rest_framework.views import APIView

from core.responses import success_response

from .models import BASIC_FEATURES, FREE_FEATURES, PREMIUM_FEATURES, SubscriptionStatus, UserSubscription
from .serializers import PlanSelectionSerializer, UserSubscriptionSerializer, subscription_payload
from .services import SubscriptionLifecycleService, UsageService

logger = logging.getLogger(__name__)


class SubscriptionStatusView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        subscription = UserSubscription.objects.filter(user=request.user).first()
        if subscription is not None:
            subscription = SubscriptionLifecycleService().refresh_status(subscription).subscription
        return success_response(subscription_payload(subscription))


class _PlanSelectionView(APIView):
    permission_classes = [permissions.IsAuthenticated]
    success_message = ""

    def run(self, lifecycle, user, *, plan_type, auto_renew):
        raise NotImplementedError

    def post(self, request):
        serializer = PlanSelectionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = self.run(
            SubscriptionLifecycleService(),
            request.user,
            plan_type=serializer.validated_data["plan"],
            auto_renew=serializer.validated_data["autoRenew"],
        )
        return success_response(
            UserSubscriptionSerializer(result.subscription).data,
            message=self.success_message,
        )


class UpgradeView(_PlanSelectionView):
    success_message = "Successfully upgraded to premium"

    def run(self, lifecycle, user, *, plan_type, auto_renew):
        return lifecycle.upgrade(user, plan_type=plan_type, auto_renew=auto_renew)


class ReactivateView(_PlanSelectionView):
    success_message = "Subscription reactivated successfully"

    def run(self, lifecycle, user, *, plan_type, auto_renew):
        return lifecycle.reactivate(user, plan_type=plan_type, auto_renew=auto_renew)


class ChangePlanView(_PlanSelectionView):
    success_message = "Subscription plan changed successfully"

    def run(self, lifecycle, user, *, plan_type, auto_renew):
        return lifecycle.change_plan(user, plan_type=plan_type, auto_renew=auto_renew)


class CancelView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        subscription = SubscriptionLifecycleService().cancel(request.user).subscription
        return success_response(
            {"status": subscription.status, "autoRenew": subscription.auto_renew},
            message="Subscription cancelled successfully",
        )


class FeaturesView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        subscription = UserSubscription.objects.filter(user=request.user).first()
        status_value = SubscriptionStatus.FREE.value
        features = list(FREE_FEATURES)
        if subscription is not None:
            subscription = SubscriptionLifecycleService().refresh_status(subscription).subscription
            status_value = subscription.status
            if subscription.is_active_premium():
                features = subscription.features or list(PREMIUM_FEATURES)

        return success_response(
            {
                "status": status_value,
                "currentFeatures": features,
                "availableFeatures": {"basic": BASIC_FEATURES, "premium": PREMIUM_FEATURES},
                "upgradeBenefits": PREMIUM_FEATURES if status_value != SubscriptionStatus.PREMIUM else [],
            }
        )


class UsageView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        subscription = UserSubscription.objects.filter(user=request.user).first()
        return success_response(UsageService().summarize(request.user, subscription))
