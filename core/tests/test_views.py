from datetime import timedelta
from unittest import mock

from django.db import DatabaseError
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from events.models import Event


class HealthEndpointTests(APITestCase):
    def test_health(self):
        response = self.client.get(reverse("core:health"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data["success"])
        self.assertEqual(response.data["data"]["status"], "OK")
        self.assertIn("uptime", response.data["data"])

    def test_liveness(self):
        response = self.client.get(reverse("core:health-live"))
        self.assertTrue(response.data["success"])
        self.assertEqual(response.data["data"]["status"], "ALIVE")

    def test_readiness(self):
        response = self.client.get(reverse("core:health-ready"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["data"]["database"], "OK")

    def test_readiness_when_database_is_down(self):
        with mock.patch("core.views.connection") as connection, mock.patch("core.views.logger"):
            connection.cursor.side_effect = DatabaseError("down")
            response = self.client.get(reverse("core:health-ready"))

        self.assertEqual(response.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)
        self.assertFalse(response.data["success"])
        self.assertEqual(response.data["data"]["status"], "NOT_READY")

    def test_detailed_health(self):
        Event.objects.create(
            name="Live", venue="V", latitude=59.4, longitude=24.7, starts_at=timezone.now() + timedelta(days=1)
        )
        gone = Event.objects.create(
            name="Gone", venue="V", latitude=59.4, longitude=24.7, starts_at=timezone.now() + timedelta(days=1)
        )
        gone.soft_delete()

        response = self.client.get(reverse("core:health-detailed"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data["data"]
        self.assertEqual(data["status"], "OK")
        self.assertEqual(data["services"]["database"]["status"], "OK")
        self.assertTrue(data["services"]["database"]["currentTime"])
        self.assertEqual(data["events"], {"total": 1})

    def test_detailed_health_when_database_is_down(self):
        with mock.patch("core.views.connection") as connection, mock.patch("core.views.logger"):
            connection.cursor.side_effect = DatabaseError("down")
            response = self.client.get(reverse("core:health-detailed"))

        self.assertEqual(response.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)
        self.assertFalse(response.data["success"])
        self.assertEqual(response.data["data"]["status"], "DEGRADED")
        self.assertEqual(response.data["data"]["services"]["database"]["status"], "ERROR")

    def test_health_ignores_bad_tokens(self):
        self.client.credentials(HTTP_AUTHORIZATION="Bearer garbage")
        response = self.client.get(reverse("core:health"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
