from django.contrib import admin

from .models import UserSubscription


@admin.register(UserSubscription)
class UserSubscriptionAdmin(admin.ModelAdmin):
    list_display = ("user", "status", "plan_type", "start_date", "end_date", "auto_renew")
    list_filter = ("status", "plan_type", "auto_renew")
    search_fields = ("user__email",)
    ordering = ("-created_at",)
