from django.urls import path

from .views import DetailedHealthView, HealthView, LivenessView, ReadinessView

app_name = "core"


urlpatterns = [
    path("", HealthView.as_view(), name="health"),
    path("detailed/", DetailedHealthView.as_view(), name="health-detailed"),
    path("ready/", ReadinessView.as_view(), name="health-ready"),
    path("live/", LivenessView.as_view(), name="health-live"),
]
