from django.urls import path

from .views import EventRatingsView, MyRatingsView, RatingDetailView, SubmitRatingView, TopRatedView

app_name = "ratings"


urlpatterns = [
    path("", SubmitRatingView.as_view(), name="submit"),
    path("event/<uuid:event_id>/", EventRatingsView.as_view(), name="event-ratings"),
    path("mine/", MyRatingsView.as_view(), name="mine"),
    path("top-rated/", TopRatedView.as_view(), name="top-rated"),
    path("<int:pk>/", RatingDetailView.as_view(), name="detail"),
]
