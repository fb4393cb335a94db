from __future__ import annotations

import logging
from typing import Tuple

from django.db import transaction
from django.db.models import Avg, Count, Q, QuerySet

from events.models import Event

from .models import MAX_RATING, MIN_RATING, Rating

logger = logging.getLogger(__name__)

STAR_VALUES = range(MIN_RATING, MAX_RATING + 1)


def _star_counts():
    return {f"rating{star}": Count("id", filter=Q(rating=star)) for star in STAR_VALUES}


def rating_stats(event) -> dict:
    """Average, total and per-star counts of the ratings left on ``event``."""
    totals = Rating.objects.filter(event=event).aggregate(
        average=Avg("rating"),
        total=Count("id"),
        **_star_counts(),
    )
    return {
        "eventId": str(event.pk),
        "averageRating": round(totals["average"] or 0, 2),
        "totalRatings": totals["total"],
        "distribution": {str(star): totals[f"rating{star}"] for star in STAR_VALUES},
    }


def submit_rating(*, user, event: Event, rating: int, review: str = "") -> Tuple[Rating, bool]:
    """Create the user's rating for ``event`` or overwrite the one they left before."""
    with transaction.atomic():
        obj, created = Rating.objects.update_or_create(
            event=event,
            user=user,
            defaults={"rating": rating, "review": review or ""},
        )

    logger.info("User %s rated event %s with %s stars", user.pk, event.pk, rating)
    return obj, created


def delete_rating(rating: Rating) -> None:
    event_id = rating.event_id
    rating.delete()
    logger.info("Rating removed from event %s", event_id)


def user_ratings(user) -> QuerySet:
    return (
        Rating.objects.filter(user=user, event__deleted_at__isnull=True)
        .select_related("event")
        .order_by("-created_at", "-id")
    )


def top_rated_events(*, limit: int = 10, min_ratings: int = 1) -> QuerySet:
    return (
        Event.objects.annotate(average_rating=Avg("ratings__rating"), total_ratings=Count("ratings"))
        .filter(total_ratings__gte=max(min_ratings, 1))
        .order_by("-average_rating", "-total_ratings", "id")[:limit]
    )
