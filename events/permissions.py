from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from rest_framework import permissions

from .models import EventSource


@dataclass(frozen=True)
class Principal:
    """Resolved identity behind a request: anonymous, free or premium."""

    user_id: Optional[int] = None
    is_premium: bool = False

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @classmethod
    def from_user(cls, user, now=None) -> "Principal":
        if user is None or not getattr(user, "is_authenticated", False):
            return ANONYMOUS
        # A missing subscription row means a free user.
        subscription = getattr(user, "subscription", None)
        is_premium = subscription is not None and subscription.is_active_premium(now)
        return cls(user_id=user.pk, is_premium=is_premium)


ANONYMOUS = Principal()


def can_edit_event(principal: Principal, event) -> bool:
    """
    Whether ``principal`` may update or delete ``event``.

    Checked in order: anonymous never, active premium always, the creator
    always, then ownerless user-sourced rows for any signed-in user.
    """
    if not principal.is_authenticated:
        return False
    if principal.is_premium:
        return True
    if event.created_by_id is not None and event.created_by_id == principal.user_id:
        return True
    # Legacy rows saved before ownership was tracked have no creator.
    # TODO: drop once product confirms whether ownerless user events should stay editable.
    if event.source == EventSource.USER and event.created_by_id is None:
        return True
    return False


class CanEditEvent(permissions.BasePermission):
    message = "You can only edit events you created."

    def has_object_permission(self, request, view, obj):
        if request.method in permissions.SAFE_METHODS:
            return True
        return can_edit_event(Principal.from_user(request.user), obj)
