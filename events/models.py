import uuid

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import Q
from django.utils import timezone


class EventCategory(models.TextChoices):
    MUSIC = "music", "Music"
    FOOD = "food", "Food"
    SPORTS = "sports", "Sports"
    ART = "art", "Art"
    BUSINESS = "business", "Business"
    OTHER = "other", "Other"


class EventSource(models.TextChoices):
    USER = "user", "User"
    MIGRATED = "migrated", "Migrated"
    PUBLIC = "public", "Public"


class ActiveEventManager(models.Manager):
    def get_queryset(self):
        return super().get_queryset().filter(deleted_at__isnull=True)


class Event(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=500)
    description = models.TextField(blank=True, default="")
    category = models.CharField(max_length=16, choices=EventCategory.choices, default=EventCategory.OTHER)
    venue = models.CharField(max_length=500)
    address = models.TextField(blank=True, default="")
    latitude = models.FloatField(validators=[MinValueValidator(-90), MaxValueValidator(90)])
    longitude = models.FloatField(validators=[MinValueValidator(-180), MaxValueValidator(180)])
    starts_at = models.DateTimeField()
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="events",
    )
    source = models.CharField(max_length=16, choices=EventSource.choices, default=EventSource.USER)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    deleted_at = models.DateTimeField(null=True, blank=True)

    objects = ActiveEventManager()
    all_objects = models.Manager()

    class Meta:
        ordering = ("-starts_at", "created_at", "id")
        indexes = [
            models.Index(fields=("deleted_at", "starts_at"), name="events_deleted_starts_idx"),
            models.Index(fields=("latitude", "longitude"), name="events_lat_lon_idx"),
            models.Index(fields=("updated_at",), name="events_updated_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=("name", "venue"),
                condition=Q(deleted_at__isnull=True),
                name="events_name_venue_unique",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} @ {self.venue}"

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def soft_delete(self, now=None) -> None:
        self.deleted_at = now or timezone.now()
        self.save(update_fields=["deleted_at", "updated_at"])
