from datetime import timedelta
from io import StringIO

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.test import TestCase
from django.utils import timezone

from subscriptions.models import SubscriptionStatus, UserSubscription


class ExpireSubscriptionsCommandTests(TestCase):
    def setUp(self):
        self.user = get_user_model().objects.create_user(
            email="lapsed@example.com", username="lapsed", password="pass1234"
        )

    def test_marks_lapsed_subscriptions(self):
        subscription = UserSubscription.objects.create(
            user=self.user, status=SubscriptionStatus.PREMIUM, end_date=timezone.now() - timedelta(hours=1)
        )
        out = StringIO()
        call_command("expire_subscriptions", stdout=out)

        subscription.refresh_from_db()
        self.assertEqual(subscription.status, SubscriptionStatus.EXPIRED)
        self.assertIn("1 subscription(s) marked as expired.", out.getvalue())

    def test_nothing_to_expire(self):
        UserSubscription.objects.create(
            user=self.user, status=SubscriptionStatus.PREMIUM, end_date=timezone.now() + timedelta(days=3)
        )
        out = StringIO()
        call_command("expire_subscriptions", stdout=out)
        self.assertIn("No subscriptions to expire.", out.getvalue())
