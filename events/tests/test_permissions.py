from datetime import timedelta

from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from django.test import SimpleTestCase, TestCase
from django.utils import timezone

from events.models import Event, EventSource
from events.permissions import ANONYMOUS, Principal, can_edit_event
from subscriptions.models import SubscriptionStatus, UserSubscription


class CanEditEventTests(SimpleTestCase):
    def setUp(self):
        self.owned = Event(name="Owned", venue="Hall", created_by_id=1, source=EventSource.USER)
        self.ownerless = Event(name="Legacy", venue="Hall", created_by_id=None, source=EventSource.USER)
        self.public = Event(name="Imported", venue="Hall", created_by_id=None, source=EventSource.PUBLIC)

    def test_anonymous_can_never_edit(self):
        for event in (self.owned, self.ownerless, self.public):
            self.assertFalse(can_edit_event(ANONYMOUS, event))

    def test_premium_can_edit_anything(self):
        principal = Principal(user_id=2, is_premium=True)
        for event in (self.owned, self.ownerless, self.public):
            self.assertTrue(can_edit_event(principal, event))

    def test_creator_can_edit_own_event(self):
        self.assertTrue(can_edit_event(Principal(user_id=1), self.owned))

    def test_free_user_cannot_edit_foreign_event(self):
        self.assertFalse(can_edit_event(Principal(user_id=2), self.owned))

    def test_ownerless_user_events_are_editable_by_signed_in_users(self):
        self.assertTrue(can_edit_event(Principal(user_id=2), self.ownerless))

    def test_ownerless_non_user_events_are_not(self):
        self.assertFalse(can_edit_event(Principal(user_id=2), self.public))


class PrincipalFromUserTests(TestCase):
    def setUp(self):
        self.user = get_user_model().objects.create_user(
            email="member@example.com", username="member", password="pass1234"
        )

    def _principal(self):
        user = get_user_model().objects.get(pk=self.user.pk)
        return Principal.from_user(user)

    def test_anonymous_user(self):
        self.assertIs(Principal.from_user(AnonymousUser()), ANONYMOUS)
        self.assertIs(Principal.from_user(None), ANONYMOUS)

    def test_user_without_subscription_is_free(self):
        principal = self._principal()
        self.assertEqual(principal.user_id, self.user.pk)
        self.assertFalse(principal.is_premium)

    def test_active_premium(self):
        UserSubscription.objects.create(
            user=self.user,
            status=SubscriptionStatus.PREMIUM,
            end_date=timezone.now() + timedelta(days=3),
        )
        self.assertTrue(self._principal().is_premium)

    def test_expired_premium_behaves_as_free(self):
        UserSubscription.objects.create(
            user=self.user,
            status=SubscriptionStatus.PREMIUM,
            end_date=timezone.now() - timedelta(minutes=1),
        )
        principal = self._principal()
        self.assertFalse(principal.is_premium)

        foreign = Event(name="Foreign", venue="Hall", created_by_id=self.user.pk + 1, source=EventSource.USER)
        self.assertFalse(can_edit_event(principal, foreign))
