from django.urls import path

from .views import (
    CancelView,
    ChangePlanView,
    FeaturesView,
    ReactivateView,
    SubscriptionStatusView,
    UpgradeView,
    UsageView,
)

app_name = "subscriptions"


urlpatterns = [
    path("status/", SubscriptionStatusView.as_view(), name="status"),
    path("usage/", UsageView.as_view(), name="usage"),
    path("features/", FeaturesView.as_view(), name="features"),
    path("upgrade/", UpgradeView.as_view(), name="upgrade"),
    path("cancel/", CancelView.as_view(), name="cancel"),
    path("reactivate/", ReactivateView.as_view(), name="reactivate"),
    path("change-plan/", ChangePlanView.as_view(), name="change-plan"),
]
