from django.contrib import admin
from django.urls import include, path
from drf_yasg import openapi
from drf_yasg.views import get_schema_view
from rest_framework import permissions

schema_view = get_schema_view(
    openapi.Info(
        title="EventRadar API",
        default_version="v1",
        description="Event discovery backend: events, ratings, accounts and subscriptions.",
    ),
    public=True,
    permission_classes=[permissions.AllowAny],
    authentication_classes=[],
)

urlpatterns = [
    path("admin/", admin.site.urls),

    # Accounts and tokens
    path("api/auth/", include("accounts.urls")),

    # Subscription tiers
    path("api/subscription/", include("subscriptions.urls")),

    # Events and ratings
    path("api/events/", include("events.urls")),
    path("api/ratings/", include("ratings.urls")),

    # Health checks
    path("api/health/", include("core.urls")),

    # API docs
    path("api/docs/", schema_view.with_ui("swagger", cache_timeout=0), name="api-docs"),
    path("api/docs/schema.json", schema_view.without_ui(cache_timeout=0), name="api-schema"),
]
