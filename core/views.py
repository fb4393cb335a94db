import logging
import os
import time

from django.db import DatabaseError, connection
from django.utils import timezone
from rest_framework import permissions, status
from rest_framework.views import APIView

from events.models import Event

from .responses import success_response

logger = logging.getLogger(__name__)

_STARTED_AT = time.monotonic()


def _uptime_seconds() -> float:
    return round(time.monotonic() - _STARTED_AT, 3)


def _database_time():
    with connection.cursor() as cursor:
        cursor.execute("SELECT CURRENT_TIMESTAMP")
        return cursor.fetchone()[0]


class HealthView(APIView):
    authentication_classes = []
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        return success_response(
            {
                "status": "OK",
                "timestamp": timezone.now().isoformat(),
                "uptime": _uptime_seconds(),
                "environment": os.getenv("APP_ENV", "development"),
            }
        )


class DetailedHealthView(APIView):
    """Health plus database round trip and live event count; 503 when degraded."""

    authentication_classes = []
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        health = {
            "status": "OK",
            "timestamp": timezone.now().isoformat(),
            "uptime": _uptime_seconds(),
            "environment": os.getenv("APP_ENV", "development"),
            "services": {},
        }
        try:
            health["services"]["database"] = {"status": "OK", "currentTime": str(_database_time())}
            health["events"] = {"total": Event.objects.count()}
        except DatabaseError as exc:
            logger.exception("Detailed health check: database unavailable")
            health["services"]["database"] = {"status": "ERROR", "error": str(exc)}
            health["status"] = "DEGRADED"

        if health["status"] != "OK":
            return success_response(health, status=status.HTTP_503_SERVICE_UNAVAILABLE, success=False)
        return success_response(health)


class ReadinessView(APIView):
    authentication_classes = []
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        try:
            with connection.cursor() as cursor:
                cursor.execute("SELECT 1")
                cursor.fetchone()
        except DatabaseError:
            logger.exception("Readiness check failed: database unavailable")
            return success_response(
                {"status": "NOT_READY", "database": "ERROR"},
                status=status.HTTP_503_SERVICE_UNAVAILABLE,
                success=False,
            )
        return success_response({"status": "READY", "database": "OK"})


class LivenessView(APIView):
    authentication_classes = []
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        return success_response({"status": "ALIVE", "timestamp": timezone.now().isoformat()})
