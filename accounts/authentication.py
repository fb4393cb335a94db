import logging

from rest_framework import exceptions
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.settings import api_settings

from core.exceptions import AuthenticationError

from .tokens import validate_access_token

logger = logging.getLogger(__name__)


class BearerTokenAuthentication(JWTAuthentication):
    """
    ``Authorization: Bearer <access token>``.

    Expired access tokens surface as ``token_expired`` so clients know to
    run the refresh exchange instead of signing in again.
    """

    def get_validated_token(self, raw_token):
        return validate_access_token(raw_token)

    def get_user(self, validated_token):
        user_id = validated_token.get(api_settings.USER_ID_CLAIM)
        if user_id is None:
            raise AuthenticationError("Token contained no recognizable user identification", code="token_invalid")

        user = self.user_model.objects.filter(**{api_settings.USER_ID_FIELD: user_id}).first()
        if user is None:
            raise AuthenticationError("User not found", code="user_not_found")
        if not user.is_active:
            raise AuthenticationError("Account is deactivated", code="user_inactive")
        return user


class OptionalBearerTokenAuthentication(BearerTokenAuthentication):
    """Same as ``BearerTokenAuthentication`` but falls back to anonymous on any token problem."""

    def authenticate(self, request):
        try:
            return super().authenticate(request)
        except (AuthenticationError, exceptions.AuthenticationFailed) as exc:
            logger.debug("Ignoring unusable bearer token on public endpoint: %s", exc.detail)
            return None
