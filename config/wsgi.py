"""
WSGI config for the EventRadar backend.

Hosts without a release phase can opt into a few boot-time chores through
environment flags: AUTO_MIGRATE, AUTO_CREATE_SUPERUSER and
AUTO_COLLECTSTATIC.
"""

import logging
import os
from pathlib import Path

import django
from django.core.wsgi import get_wsgi_application

logger = logging.getLogger("config.wsgi")


def _flag(name):
    return os.getenv(name, "").strip().lower() in ("1", "true", "yes")


def _collectstatic_if_requested():
    if not _flag("AUTO_COLLECTSTATIC"):
        return

    from django.conf import settings
    from django.core.management import call_command
    from django.core.management.base import CommandError

    sentinel = Path(settings.STATIC_ROOT) / ".static_ready"
    if sentinel.exists():
        return

    try:
        call_command("collectstatic", interactive=False, verbosity=0)
    except CommandError as exc:
        logger.warning("collectstatic skipped: %s", exc)
    else:
        sentinel.write_text("ok", encoding="utf-8")
        logger.info("Static assets collected at startup")


def _migrate_if_requested():
    if not _flag("AUTO_MIGRATE"):
        return

    from django.core.management import call_command

    call_command("migrate", interactive=False, verbosity=1)
    logger.info("Database up to date at startup")


def _create_superuser_if_requested():
    """Requires AUTO_CREATE_SUPERUSER plus DJANGO_SUPERUSER_EMAIL and DJANGO_SUPERUSER_PASSWORD."""
    if not _flag("AUTO_CREATE_SUPERUSER"):
        return

    email = os.getenv("DJANGO_SUPERUSER_EMAIL", "").strip().lower()
    password = os.getenv("DJANGO_SUPERUSER_PASSWORD", "").strip()
    if not email or not password:
        logger.warning("AUTO_CREATE_SUPERUSER set without DJANGO_SUPERUSER_EMAIL/PASSWORD")
        return

    from django.contrib.auth import get_user_model

    User = get_user_model()
    if User.objects.filter(email=email).exists():
        logger.info("Superuser %s already exists, skipping creation", email)
        return

    User.objects.create_superuser(email=email, password=password, username=email[:150])
    logger.info("Created admin user %s", email)


os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")
django.setup()
_migrate_if_requested()
_create_superuser_if_requested()
_collectstatic_if_requested()

application = get_wsgi_application()
