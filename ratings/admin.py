from django.contrib import admin

from .models import Rating


@admin.register(Rating)
class RatingAdmin(admin.ModelAdmin):
    list_display = ("event", "user", "rating", "created_at")
    list_filter = ("rating",)
    search_fields = ("event__name", "user__email", "review")
    raw_id_fields = ("event", "user")
