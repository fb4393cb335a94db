from datetime import timedelta

from django.contrib.auth import get_user_model
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from subscriptions.models import FREE_FEATURES, PREMIUM_FEATURES, SubscriptionStatus, UserSubscription


class SubscriptionAPITests(APITestCase):
    def setUp(self):
        self.user = get_user_model().objects.create_user(
            email="api@example.com", username="api_user", password="pass1234"
        )
        self.client.force_authenticate(user=self.user)

    def test_status_without_subscription_is_free(self):
        response = self.client.get(reverse("subscriptions:status"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["data"]["status"], SubscriptionStatus.FREE)
        self.assertEqual(response.data["data"]["features"], FREE_FEATURES)

    def test_status_persists_expiry(self):
        UserSubscription.objects.create(
            user=self.user, status=SubscriptionStatus.PREMIUM, end_date=timezone.now() - timedelta(days=1)
        )
        response = self.client.get(reverse("subscriptions:status"))

        self.assertEqual(response.data["data"]["status"], SubscriptionStatus.EXPIRED)
        self.assertEqual(UserSubscription.objects.get(user=self.user).status, SubscriptionStatus.EXPIRED)

    def test_upgrade(self):
        response = self.client.post(reverse("subscriptions:upgrade"), {"plan": "yearly"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data["data"]
        self.assertEqual(data["status"], SubscriptionStatus.PREMIUM)
        self.assertEqual(data["plan"], "yearly")
        self.assertTrue(data["autoRenew"])
        self.assertEqual(data["features"], PREMIUM_FEATURES)

    def test_upgrade_rejects_unknown_plan(self):
        response = self.client.post(reverse("subscriptions:upgrade"), {"plan": "weekly"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("plan", response.data["details"])

    def test_cancel_then_reactivate(self):
        self.client.post(reverse("subscriptions:upgrade"), {"plan": "monthly"}, format="json")

        response = self.client.post(reverse("subscriptions:cancel"))
        self.assertEqual(response.data["data"], {"status": SubscriptionStatus.EXPIRED, "autoRenew": False})

        response = self.client.post(reverse("subscriptions:reactivate"), {"plan": "monthly"}, format="json")
        self.assertEqual(response.data["data"]["status"], SubscriptionStatus.PREMIUM)

    def test_cancel_without_subscription(self):
        response = self.client.post(reverse("subscriptions:cancel"))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["error"], "Subscription not found")

    def test_change_plan_requires_premium(self):
        response = self.client.post(reverse("subscriptions:change-plan"), {"plan": "yearly"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_features_for_free_user(self):
        response = self.client.get(reverse("subscriptions:features"))

        data = response.data["data"]
        self.assertEqual(data["currentFeatures"], FREE_FEATURES)
        self.assertEqual(data["upgradeBenefits"], PREMIUM_FEATURES)

    def test_features_after_premium_lapsed(self):
        UserSubscription.objects.create(
            user=self.user,
            status=SubscriptionStatus.PREMIUM,
            end_date=timezone.now() - timedelta(days=1),
            features=list(PREMIUM_FEATURES),
        )
        response = self.client.get(reverse("subscriptions:features"))

        data = response.data["data"]
        self.assertEqual(data["status"], SubscriptionStatus.EXPIRED)
        self.assertEqual(data["currentFeatures"], FREE_FEATURES)
        self.assertEqual(data["upgradeBenefits"], PREMIUM_FEATURES)
        self.assertEqual(UserSubscription.objects.get(user=self.user).status, SubscriptionStatus.EXPIRED)

    def test_usage(self):
        response = self.client.get(reverse("subscriptions:usage"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["data"]["daily"]["limit"], 1)
        self.assertEqual(response.data["data"]["total"], {"eventsCreated": 0, "ratingsGiven": 0})

    def test_requires_authentication(self):
        self.client.force_authenticate(user=None)
        response = self.client.get(reverse("subscriptions:status"))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
