from datetime import timedelta

import jwt
from django.contrib.auth import get_user_model
from django.test import TestCase
from django.utils import timezone
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import AccessToken, RefreshToken

from accounts.tokens import (
    TokenKind,
    exchange_refresh_token,
    issue_token_pair,
    revoke_refresh_token,
    revoke_user_tokens,
    validate_access_token,
    validate_refresh_token,
)
from core.exceptions import AuthenticationError, TokenExpiredError


class TokenValidationTests(TestCase):
    def setUp(self):
        self.user = get_user_model().objects.create_user(
            email="tokens@example.com", username="tokens", password="pass1234"
        )

    def _expired(self, token_class):
        token = token_class.for_user(self.user)
        token.set_exp(from_time=timezone.now() - timedelta(days=30))
        return str(token)

    def test_issued_pair_validates_by_kind(self):
        pair = issue_token_pair(self.user)
        self.assertEqual(str(validate_access_token(pair.access)[api_settings.USER_ID_CLAIM]), str(self.user.pk))
        self.assertEqual(str(validate_refresh_token(pair.refresh)[api_settings.USER_ID_CLAIM]), str(self.user.pk))
        self.assertEqual(set(pair.as_dict()), {"accessToken", "refreshToken"})

    def test_kinds_are_not_interchangeable(self):
        pair = issue_token_pair(self.user)
        with self.assertRaises(AuthenticationError) as ctx:
            validate_access_token(pair.refresh)
        self.assertEqual(ctx.exception.get_codes(), "token_invalid")

        with self.assertRaises(AuthenticationError):
            validate_refresh_token(pair.access)

    def test_expired_access_token_is_distinguishable(self):
        with self.assertRaises(TokenExpiredError) as ctx:
            validate_access_token(self._expired(AccessToken))
        self.assertEqual(ctx.exception.get_codes(), "token_expired")

    def test_expired_refresh_token(self):
        with self.assertRaises(TokenExpiredError) as ctx:
            validate_refresh_token(self._expired(RefreshToken))
        self.assertEqual(ctx.exception.get_codes(), "refresh_expired")

    def test_wrong_signature_is_invalid_not_expired(self):
        forged = jwt.encode(
            {"token_type": "access", "user_id": self.user.pk, "exp": timezone.now() - timedelta(hours=1), "jti": "x"},
            "some-other-secret",
            algorithm="HS256",
        )
        with self.assertRaises(AuthenticationError) as ctx:
            validate_access_token(forged)
        self.assertNotIsInstance(ctx.exception, TokenExpiredError)
        self.assertEqual(ctx.exception.get_codes(), "token_invalid")

    def test_garbage_and_missing_tokens(self):
        for raw, code in (("not.a.jwt", "token_invalid"), ("", "token_missing"), (None, "token_missing")):
            with self.assertRaises(AuthenticationError) as ctx:
                validate_access_token(raw)
            self.assertEqual(ctx.exception.get_codes(), code)

    def test_token_kind_classes(self):
        self.assertIs(TokenKind.ACCESS.token_class, AccessToken)
        self.assertIs(TokenKind.REFRESH.token_class, RefreshToken)


class RefreshExchangeTests(TestCase):
    def setUp(self):
        self.user = get_user_model().objects.create_user(
            email="refresh@example.com", username="refresh", password="pass1234"
        )

    def test_exchange_rotates_refresh_token(self):
        pair = issue_token_pair(self.user)
        new_pair = exchange_refresh_token(pair.refresh)

        self.assertNotEqual(new_pair.refresh, pair.refresh)
        validate_access_token(new_pair.access)
        with self.assertRaises(AuthenticationError) as ctx:
            exchange_refresh_token(pair.refresh)
        self.assertEqual(ctx.exception.get_codes(), "token_revoked")

    def test_exchange_for_inactive_user(self):
        pair = issue_token_pair(self.user)
        self.user.is_active = False
        self.user.save(update_fields=["is_active"])

        with self.assertRaises(AuthenticationError) as ctx:
            exchange_refresh_token(pair.refresh)
        self.assertEqual(ctx.exception.get_codes(), "user_inactive")

    def test_revoke_refresh_token(self):
        pair = issue_token_pair(self.user)
        self.assertTrue(revoke_refresh_token(pair.refresh))
        self.assertFalse(revoke_refresh_token(pair.refresh))
        self.assertFalse(revoke_refresh_token("garbage"))

    def test_revoke_user_tokens(self):
        first = issue_token_pair(self.user)
        second = issue_token_pair(self.user)

        self.assertEqual(revoke_user_tokens(self.user), 2)
        for pair in (first, second):
            with self.assertRaises(AuthenticationError):
                validate_refresh_token(pair.refresh)
        self.assertEqual(revoke_user_tokens(self.user), 0)
