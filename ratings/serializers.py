from rest_framework import serializers

from .models import MAX_RATING, MIN_RATING, Rating


class RatingSerializer(serializers.ModelSerializer):
    eventId = serializers.UUIDField(source="event_id", read_only=True)
    userName = serializers.CharField(source="user.name", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Rating
        fields = ("id", "eventId", "rating", "review", "userName", "createdAt", "updatedAt")
        read_only_fields = fields


class UserRatingSerializer(RatingSerializer):
    eventName = serializers.CharField(source="event.name", read_only=True)
    eventVenue = serializers.CharField(source="event.venue", read_only=True)
    eventStartsAt = serializers.DateTimeField(source="event.starts_at", read_only=True)

    class Meta(RatingSerializer.Meta):
        fields = RatingSerializer.Meta.fields + ("eventName", "eventVenue", "eventStartsAt")
        read_only_fields = fields


class SubmitRatingSerializer(serializers.Serializer):
    eventId = serializers.UUIDField()
    rating = serializers.IntegerField(min_value=MIN_RATING, max_value=MAX_RATING)
    review = serializers.CharField(max_length=1000, required=False, allow_blank=True, default="")


class TopRatedEventSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    name = serializers.CharField()
    description = serializers.CharField()
    venue = serializers.CharField()
    category = serializers.CharField()
    averageRating = serializers.SerializerMethodField()
    totalRatings = serializers.IntegerField(source="total_ratings")

    def get_averageRating(self, obj):
        return round(obj.average_rating or 0, 2)
