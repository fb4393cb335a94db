"""
JWT issuance and validation.

Access and refresh tokens are SimpleJWT tokens carrying a ``token_type``
claim. ``TokenKind`` names the two variants; every validation call states
which kind it expects, so a refresh token can never stand in for an access
token (or the reverse).
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Union

import jwt
from django.contrib.auth import get_user_model
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken, OutstandingToken
from rest_framework_simplejwt.tokens import AccessToken, RefreshToken

from core.exceptions import AuthenticationError, TokenExpiredError

logger = logging.getLogger(__name__)


class TokenKind(str, enum.Enum):
    ACCESS = "access"
    REFRESH = "refresh"

    @property
    def token_class(self):
        return AccessToken if self is TokenKind.ACCESS else RefreshToken


@dataclass(frozen=True)
class TokenPair:
    access: str
    refresh: str

    def as_dict(self) -> dict:
        return {"accessToken": self.access, "refreshToken": self.refresh}


def issue_token_pair(user) -> TokenPair:
    # RefreshToken.for_user also records the token as outstanding.
    refresh = RefreshToken.for_user(user)
    return TokenPair(access=str(refresh.access_token), refresh=str(refresh))


def _decode_claims(raw_token, kind: TokenKind) -> dict:
    try:
        return jwt.decode(
            raw_token,
            api_settings.SIGNING_KEY,
            algorithms=[api_settings.ALGORITHM],
            leeway=api_settings.LEEWAY,
        )
    except jwt.ExpiredSignatureError:
        if kind is TokenKind.ACCESS:
            raise TokenExpiredError()
        raise TokenExpiredError("Refresh token expired", code="refresh_expired")
    except jwt.InvalidTokenError:
        raise AuthenticationError(f"Invalid {kind.value} token", code="token_invalid")


def validate_token(raw_token, kind: TokenKind) -> Union[AccessToken, RefreshToken]:
    """
    Verify signature, expiry and kind of ``raw_token``.

    Raises ``TokenExpiredError`` when only the expiry check fails and
    ``AuthenticationError`` for everything else.
    """
    if not raw_token:
        raise AuthenticationError(f"{kind.value.capitalize()} token is required", code="token_missing")

    claims = _decode_claims(raw_token, kind)
    if claims.get(api_settings.TOKEN_TYPE_CLAIM) != kind.value:
        raise AuthenticationError("Invalid token type", code="token_invalid")

    try:
        return kind.token_class(raw_token)
    except TokenError as exc:
        if kind is TokenKind.REFRESH and _is_blacklisted(claims):
            raise AuthenticationError("Refresh token has been revoked", code="token_revoked")
        logger.info("Rejected %s token: %s", kind.value, exc)
        raise AuthenticationError(f"Invalid {kind.value} token", code="token_invalid")


def validate_access_token(raw_token) -> AccessToken:
    return validate_token(raw_token, TokenKind.ACCESS)


def validate_refresh_token(raw_token) -> RefreshToken:
    return validate_token(raw_token, TokenKind.REFRESH)


def _is_blacklisted(claims: dict) -> bool:
    jti = claims.get(api_settings.JTI_CLAIM)
    return bool(jti) and BlacklistedToken.objects.filter(token__jti=jti).exists()


def exchange_refresh_token(raw_token) -> TokenPair:
    """Rotate a refresh token: revoke it and mint a fresh pair for its user."""
    refresh = validate_refresh_token(raw_token)
    user_id = refresh.payload.get(api_settings.USER_ID_CLAIM)
    User = get_user_model()
    user = User.objects.filter(**{api_settings.USER_ID_FIELD: user_id}).first()
    if user is None or not user.is_active:
        raise AuthenticationError("User not found or inactive", code="user_inactive")

    refresh.blacklist()
    return issue_token_pair(user)


def revoke_refresh_token(raw_token) -> bool:
    try:
        RefreshToken(raw_token).blacklist()
    except TokenError:
        logger.info("Signout with an unusable refresh token, nothing to revoke")
        return False
    return True


def revoke_user_tokens(user) -> int:
    outstanding = OutstandingToken.objects.filter(user=user, blacklistedtoken__isnull=True)
    revoked = 0
    for token in outstanding:
        BlacklistedToken.objects.get_or_create(token=token)
        revoked += 1
    return revoked
