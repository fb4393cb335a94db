from django.contrib import admin
from django.contrib.auth import get_user_model

from .models import PasswordResetCode, PasswordResetToken

User = get_user_model()


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ("email", "name", "is_active", "is_staff", "date_joined", "last_login")
    list_filter = ("is_staff", "is_active", "is_superuser")
    search_fields = ("email", "name", "username")
    ordering = ("email",)


@admin.register(PasswordResetToken)
class PasswordResetTokenAdmin(admin.ModelAdmin):
    list_display = ("user", "token", "created_at", "is_used")
    search_fields = ("user__email", "token")


@admin.register(PasswordResetCode)
class PasswordResetCodeAdmin(admin.ModelAdmin):
    list_display = ("user", "created_at", "expires_at", "is_used")
    search_fields = ("user__email",)
    exclude = ("code_hash",)
