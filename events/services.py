from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, time, timezone as dt_timezone
from typing import Optional, Tuple

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import Q, QuerySet
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from core.exceptions import ConflictError

from .geo import GeoQuery, haversine_expression
from .models import Event
from .permissions import Principal

logger = logging.getLogger(__name__)


def _parse_int(value, default: int) -> int:
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return default
    return parsed if parsed >= 0 else default


def parse_timestamp(value, *, end_of_day: bool = False) -> Optional[datetime]:
    """Parse an ISO datetime or date; ``None`` when missing or malformed."""
    if not value:
        return None
    try:
        parsed = parse_datetime(value)
        if parsed is None:
            day = parse_date(value)
            if day is None:
                return None
            parsed = datetime.combine(day, time.max if end_of_day else time.min)
    except ValueError:
        return None
    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed, dt_timezone.utc)
    return parsed


@dataclass(frozen=True)
class EventQuery:
    geo: Optional[GeoQuery] = None
    category: Optional[str] = None
    venue: Optional[str] = None
    starts_from: Optional[datetime] = None
    starts_to: Optional[datetime] = None
    limit: Optional[int] = None
    offset: int = 0

    @classmethod
    def from_params(cls, params) -> "EventQuery":
        default_limit = getattr(settings, "EVENTS_DEFAULT_LIMIT", 15000)
        max_limit = getattr(settings, "EVENTS_MAX_LIMIT", default_limit)
        return cls(
            geo=GeoQuery.from_params(params),
            category=(params.get("category") or "").strip() or None,
            venue=(params.get("venue") or "").strip() or None,
            starts_from=parse_timestamp(params.get("from")),
            starts_to=parse_timestamp(params.get("to"), end_of_day=True),
            limit=min(_parse_int(params.get("limit"), default_limit), max_limit),
            offset=_parse_int(params.get("offset"), 0),
        )


def visible_events(query: EventQuery, principal: Principal) -> QuerySet:
    """
    Non-deleted events matching ``query`` as seen by ``principal``.

    With a radius query, an event is visible when it lies within the radius
    or, for a signed-in principal, when the principal created it. A radius
    of zero or less matches nothing by distance.
    """
    queryset = Event.objects.all()

    if query.category:
        queryset = queryset.filter(category=query.category)
    if query.venue:
        queryset = queryset.filter(venue__icontains=query.venue)
    if query.starts_from:
        queryset = queryset.filter(starts_at__gte=query.starts_from)
    if query.starts_to:
        queryset = queryset.filter(starts_at__lte=query.starts_to)

    geo = query.geo
    if geo is not None:
        own_events = Q(created_by_id=principal.user_id) if principal.is_authenticated else None
        if geo.radius_km > 0:
            queryset = queryset.annotate(distance_km=haversine_expression(geo.latitude, geo.longitude))
            match = Q(distance_km__lte=geo.radius_km)
            if own_events is not None:
                match |= own_events
            queryset = queryset.filter(match)
        elif own_events is not None:
            queryset = queryset.filter(own_events)
        else:
            queryset = queryset.none()

    return queryset.order_by("-starts_at", "created_at", "id")


def paginate(queryset: QuerySet, query: EventQuery) -> QuerySet:
    if query.limit is None:
        return queryset[query.offset:]
    return queryset[query.offset:query.offset + query.limit]


def create_event(*, validated_data: dict, created_by=None) -> Tuple[Event, bool]:
    """
    Create an event, or return the live event that already uses the same
    name and venue. The second element tells whether a row was created.
    """
    name = validated_data["name"]
    venue = validated_data["venue"]

    existing = Event.objects.filter(name=name, venue=venue).first()
    if existing is not None:
        logger.info("Event already exists: %s at %s, returning existing event", name, venue)
        return existing, False

    try:
        with transaction.atomic():
            event = Event.objects.create(created_by=created_by, **validated_data)
    except IntegrityError:
        existing = Event.objects.filter(name=name, venue=venue).first()
        if existing is None:
            raise ConflictError("An event with this name and venue already exists")
        return existing, False

    logger.info("Event created: %s at %s (id=%s)", event.name, event.venue, event.id)
    return event, True


def update_event(event: Event, validated_data: dict) -> Event:
    for field, value in validated_data.items():
        setattr(event, field, value)
    try:
        with transaction.atomic():
            event.save()
    except IntegrityError:
        raise ConflictError("An event with this name and venue already exists")

    logger.info("Event updated: %s (id=%s)", event.name, event.id)
    return event


def delete_event(event: Event) -> Event:
    event.soft_delete()
    logger.info("Event soft-deleted: %s (id=%s)", event.name, event.id)
    return event


def changed_since(since: Optional[datetime]) -> QuerySet:
    queryset = Event.objects.all()
    if since is not None:
        queryset = queryset.filter(updated_at__gt=since)
    return queryset.order_by("updated_at", "id")
