import logging

from django.conf import settings
from django.core.mail import send_mail

logger = logging.getLogger(__name__)


def send_password_reset_email(user, token):
    subject = "Reset your password - EventRadar"
    reset_link = f"{settings.FRONTEND_BASE_URL.rstrip('/')}/reset-password/{token}"
    greeting = user.name or user.email
    message = (
        f"Hi {greeting},\n\n"
        f"Click the link below to reset your password:\n{reset_link}\n\n"
        f"The link is valid for {settings.PASSWORD_RESET_TOKEN_HOURS} hour(s). "
        "If you didn't request this, ignore this email."
    )
    send_mail(subject, message, settings.DEFAULT_FROM_EMAIL, [user.email])
    logger.info("Password reset email sent to user %s", user.pk)


def send_password_reset_code_email(user, code):
    subject = "Your password reset code - EventRadar"
    greeting = user.name or user.email
    message = (
        f"Hi {greeting},\n\n"
        f"Your password reset code is {code}.\n\n"
        f"It expires in {settings.PASSWORD_RESET_CODE_MINUTES} minutes. "
        "If you didn't request this, ignore this email."
    )
    send_mail(subject, message, settings.DEFAULT_FROM_EMAIL, [user.email])
    logger.info("Password reset code sent to user %s", user.pk)
