from rest_framework import serializers

from .models import Event


class EventSerializer(serializers.ModelSerializer):
    startsAt = serializers.DateTimeField(source="starts_at")
    createdBy = serializers.ReadOnlyField(source="created_by_id")
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)
    deletedAt = serializers.DateTimeField(source="deleted_at", read_only=True)
    distanceKm = serializers.SerializerMethodField()
    description = serializers.CharField(max_length=2000, required=False, allow_blank=True)
    address = serializers.CharField(max_length=1000, required=False, allow_blank=True)
    latitude = serializers.FloatField(min_value=-90, max_value=90)
    longitude = serializers.FloatField(min_value=-180, max_value=180)

    class Meta:
        model = Event
        fields = (
            "id",
            "name",
            "description",
            "category",
            "venue",
            "address",
            "latitude",
            "longitude",
            "startsAt",
            "createdBy",
            "source",
            "createdAt",
            "updatedAt",
            "deletedAt",
            "distanceKm",
        )
        read_only_fields = ("id", "source")
        # Name and venue clashes are resolved in create_event, not rejected here.
        validators = []

    def get_distanceKm(self, obj):
        distance = getattr(obj, "distance_km", None)
        if distance is None:
            return None
        return round(distance, 3)

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Event name is required.")
        return value

    def validate_venue(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Venue is required.")
        return value


class SyncChangesSerializer(serializers.Serializer):
    lastSyncAt = serializers.DateTimeField(required=False, allow_null=True)
