import logging
import math

from rest_framework import permissions, status
from rest_framework.views import APIView

from accounts.authentication import OptionalBearerTokenAuthentication
from core.exceptions import AuthorizationError, NotFoundError
from core.responses import success_response
from events.models import Event

from .models import Rating
from .serializers import RatingSerializer, SubmitRatingSerializer, TopRatedEventSerializer, UserRatingSerializer
from .services import delete_rating, rating_stats, submit_rating, top_rated_events, user_ratings

logger = logging.getLogger(__name__)


def _positive_int(value, default: int, maximum: int = 100) -> int:
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return default
    if parsed < 1:
        return default
    return min(parsed, maximum)


class SubmitRatingView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        serializer = SubmitRatingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        event = Event.objects.filter(pk=serializer.validated_data["eventId"]).first()
        if event is None:
            raise NotFoundError("Event not found")

        rating, created = submit_rating(
            user=request.user,
            event=event,
            rating=serializer.validated_data["rating"],
            review=serializer.validated_data["review"],
        )
        return success_response(
            {"rating": RatingSerializer(rating).data, "stats": rating_stats(event)},
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
            message="Rating submitted successfully",
        )


class EventRatingsView(APIView):
    authentication_classes = [OptionalBearerTokenAuthentication]
    permission_classes = [permissions.AllowAny]

    def get(self, request, event_id):
        event = Event.objects.filter(pk=event_id).first()
        if event is None:
            raise NotFoundError("Event not found")

        page = _positive_int(request.query_params.get("page"), 1, maximum=10_000)
        limit = _positive_int(request.query_params.get("limit"), 10)
        ratings = event.ratings.select_related("user").order_by("-created_at", "-id")
        total = ratings.count()
        offset = (page - 1) * limit

        return success_response(
            {
                "stats": rating_stats(event),
                "ratings": RatingSerializer(ratings[offset:offset + limit], many=True).data,
                "pagination": {
                    "page": page,
                    "limit": limit,
                    "total": total,
                    "pages": math.ceil(total / limit),
                },
            }
        )


class MyRatingsView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        ratings = user_ratings(request.user)
        return success_response(UserRatingSerializer(ratings, many=True).data)


class RatingDetailView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def delete(self, request, pk):
        rating = Rating.objects.filter(pk=pk).first()
        if rating is None:
            raise NotFoundError("Rating not found")
        if rating.user_id != request.user.pk:
            raise AuthorizationError("You can only delete your own ratings")

        delete_rating(rating)
        return success_response(message="Rating deleted successfully")


class TopRatedView(APIView):
    authentication_classes = [OptionalBearerTokenAuthentication]
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        limit = _positive_int(request.query_params.get("limit"), 10)
        min_ratings = _positive_int(request.query_params.get("minRatings"), 1, maximum=10_000)
        events = top_rated_events(limit=limit, min_ratings=min_ratings)
        return success_response(TopRatedEventSerializer(events, many=True).data)
