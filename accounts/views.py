import logging
from datetime import timedelta

from django.conf import settings
from django.contrib.auth import get_user_model
from django.contrib.auth.hashers import check_password, make_password
from django.db import IntegrityError, transaction
from django.utils import timezone
from django.utils.crypto import get_random_string
from rest_framework import permissions, status
from rest_framework.views import APIView

from core.exceptions import AuthenticationError, ConflictError, ValidationError
from core.responses import success_response
from subscriptions.models import UserSubscription
from subscriptions.serializers import subscription_payload
from subscriptions.services import SubscriptionLifecycleService

from .models import PasswordResetCode, PasswordResetToken
from .serializers import (
    ChangePasswordSerializer,
    ForgotPasswordSerializer,
    ProfileSerializer,
    RefreshSerializer,
    RequestResetCodeSerializer,
    ResetPasswordSerializer,
    ResetPasswordWithCodeSerializer,
    SigninSerializer,
    SignoutSerializer,
    SignupSerializer,
    UserSerializer,
    VerifyResetCodeSerializer,
)
from .tokens import exchange_refresh_token, issue_token_pair, revoke_refresh_token, revoke_user_tokens
from .utils import send_password_reset_code_email, send_password_reset_email

logger = logging.getLogger(__name__)
User = get_user_model()

GENERIC_RESET_MESSAGE = "If an account exists, reset instructions have been sent."
GENERIC_RESET_CODE_MESSAGE = "If an account with this email exists, a reset code has been sent."


# -------------------------------------------------------
# SIGNUP / SIGNIN / TOKENS
# -------------------------------------------------------


class SignupView(APIView):
    authentication_classes = []
    permission_classes = [permissions.AllowAny]

    def post(self, request):
        serializer = SignupSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        email = serializer.validated_data["email"]

        if User.objects.filter(email__iexact=email).exists():
            raise ConflictError("User with this email already exists")

        try:
            with transaction.atomic():
                user = User.objects.create_user(
                    username=email[:150],
                    email=email,
                    password=serializer.validated_data["password"],
                    name=serializer.validated_data["name"],
                )
                SubscriptionLifecycleService().ensure_subscription(user)
        except IntegrityError:
            # Lost a race with a concurrent signup, or the username is still held.
            logger.warning("Signup conflict for %s", email)
            raise ConflictError("User with this email already exists")

        logger.info("New user signed up: %s", user.pk)
        tokens = issue_token_pair(user)
        return success_response(
            {**tokens.as_dict(), "user": UserSerializer(user).data},
            status=status.HTTP_201_CREATED,
            message="User created successfully",
        )


class SigninView(APIView):
    authentication_classes = []
    permission_classes = [permissions.AllowAny]

    def post(self, request):
        serializer = SigninSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = User.objects.filter(email__iexact=serializer.validated_data["email"]).first()
        if user is None or not user.check_password(serializer.validated_data["password"]):
            raise AuthenticationError("Invalid credentials", code="invalid_credentials")
        if not user.is_active:
            raise AuthenticationError("Account is deactivated", code="user_inactive")

        # One live session per account: older refresh tokens stop working.
        revoke_user_tokens(user)
        user.last_login = timezone.now()
        user.save(update_fields=["last_login"])

        tokens = issue_token_pair(user)
        logger.info("User %s signed in", user.pk)
        return success_response(
            {**tokens.as_dict(), "user": UserSerializer(user).data},
            message="Signed in successfully",
        )


class RefreshView(APIView):
    authentication_classes = []
    permission_classes = [permissions.AllowAny]

    def post(self, request):
        serializer = RefreshSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        tokens = exchange_refresh_token(serializer.validated_data["refreshToken"])
        return success_response(tokens.as_dict())


class SignoutView(APIView):
    authentication_classes = []
    permission_classes = [permissions.AllowAny]

    def post(self, request):
        serializer = SignoutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        raw_token = serializer.validated_data.get("refreshToken")
        if raw_token:
            revoke_refresh_token(raw_token)
        return success_response(message="Signed out successfully")


# -------------------------------------------------------
# CURRENT USER
# -------------------------------------------------------


class ProfileView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return success_response(UserSerializer(request.user).data)

    def put(self, request):
        serializer = ProfileSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        try:
            with transaction.atomic():
                user = serializer.save()
        except IntegrityError:
            raise ConflictError("Email is already in use")
        return success_response(UserSerializer(user).data, message="Profile updated successfully")


class ChangePasswordView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        serializer = ChangePasswordSerializer(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)

        user = request.user
        user.set_password(serializer.validated_data["newPassword"])
        user.save(update_fields=["password"])
        revoke_user_tokens(user)

        logger.info("User %s changed password", user.pk)
        return success_response(message="Password changed successfully")


class AuthStatusView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        subscription = UserSubscription.objects.filter(user=request.user).first()
        if subscription is not None:
            subscription = SubscriptionLifecycleService().refresh_status(subscription).subscription

        return success_response(
            {
                "authenticated": True,
                "user": UserSerializer(request.user).data,
                "subscription": subscription_payload(subscription),
            }
        )


# -------------------------------------------------------
# PASSWORD RESET
# -------------------------------------------------------


class ForgotPasswordView(APIView):
    authentication_classes = []
    permission_classes = [permissions.AllowAny]

    def post(self, request):
        serializer = ForgotPasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        email = serializer.validated_data["email"]

        user = User.objects.filter(email__iexact=email, is_active=True).first()
        if user is None:
            logger.info("Password reset requested for unknown email: %s", email)
            return success_response(message=GENERIC_RESET_MESSAGE)

        token_obj = PasswordResetToken.objects.create(user=user)
        send_password_reset_email(user, token_obj.token)
        return success_response(message=GENERIC_RESET_MESSAGE)


def _reset_with_token(token, new_password):
    reset = PasswordResetToken.objects.select_related("user").filter(token=token, is_used=False).first()
    if reset is None:
        raise ValidationError("Invalid or expired token", code="invalid_reset_token")
    if reset.is_expired():
        reset.is_used = True
        reset.save(update_fields=["is_used"])
        raise ValidationError("Invalid or expired token", code="invalid_reset_token")

    user = reset.user
    with transaction.atomic():
        user.set_password(new_password)
        user.save(update_fields=["password"])
        reset.is_used = True
        reset.save(update_fields=["is_used"])
    revoke_user_tokens(user)

    logger.info("Password reset for user %s", user.pk)
    return success_response(message="Password reset successfully")


class ResetPasswordView(APIView):
    authentication_classes = []
    permission_classes = [permissions.AllowAny]

    def post(self, request):
        serializer = ResetPasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return _reset_with_token(serializer.validated_data["token"], serializer.validated_data["newPassword"])


# -------------------------------------------------------
# PASSWORD RESET BY CODE
# -------------------------------------------------------


class RequestResetCodeView(APIView):
    authentication_classes = []
    permission_classes = [permissions.AllowAny]

    def post(self, request):
        serializer = RequestResetCodeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        email = serializer.validated_data["email"]

        user = User.objects.filter(email__iexact=email, is_active=True).first()
        if user is None:
            logger.info("Password reset code requested for unknown email: %s", email)
            return success_response(message=GENERIC_RESET_CODE_MESSAGE)

        code = get_random_string(6, allowed_chars="0123456789")
        with transaction.atomic():
            # Only the newest code is ever accepted.
            PasswordResetCode.objects.filter(user=user, is_used=False).update(is_used=True)
            PasswordResetCode.objects.create(
                user=user,
                code_hash=make_password(code),
                expires_at=timezone.now() + timedelta(minutes=settings.PASSWORD_RESET_CODE_MINUTES),
            )
        send_password_reset_code_email(user, code)
        return success_response(message=GENERIC_RESET_CODE_MESSAGE)


class VerifyResetCodeView(APIView):
    authentication_classes = []
    permission_classes = [permissions.AllowAny]

    def post(self, request):
        serializer = VerifyResetCodeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = User.objects.filter(email__iexact=serializer.validated_data["email"], is_active=True).first()
        if user is None:
            raise ValidationError("Invalid email or reset code", code="invalid_reset_code")

        reset_code = PasswordResetCode.objects.filter(user=user, is_used=False).first()
        if reset_code is None:
            raise ValidationError("No reset code found. Please request a new one.", code="invalid_reset_code")
        if reset_code.is_expired():
            raise ValidationError("Reset code has expired. Please request a new one.", code="reset_code_expired")
        if not check_password(serializer.validated_data["code"], reset_code.code_hash):
            raise ValidationError("Invalid reset code", code="invalid_reset_code")

        with transaction.atomic():
            reset_code.is_used = True
            reset_code.save(update_fields=["is_used"])
            token_obj = PasswordResetToken.objects.create(user=user)

        return success_response(
            {"resetToken": str(token_obj.token), "email": user.email},
            message="Reset code verified successfully",
        )


class ResetPasswordWithCodeView(APIView):
    authentication_classes = []
    permission_classes = [permissions.AllowAny]

    def post(self, request):
        serializer = ResetPasswordWithCodeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return _reset_with_token(serializer.validated_data["resetToken"], serializer.validated_data["newPassword"])
