from django.contrib import admin

from .models import Event


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ("name", "venue", "category", "starts_at", "created_by", "source", "deleted_at")
    list_filter = ("category", "source")
    search_fields = ("name", "venue", "address", "created_by__email")
    readonly_fields = ("created_at", "updated_at")

    def get_queryset(self, request):
        return Event.all_objects.select_related("created_by")
