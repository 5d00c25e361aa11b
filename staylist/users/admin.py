from django.contrib import admin

from .models import UserProfile


@admin.register(UserProfile)
class UserProfileAdmin(admin.ModelAdmin):
    list_display = ("id", "user_id", "username", "first_name", "last_name", "updated_at")
    search_fields = ("user_id", "username", "first_name", "last_name")
    readonly_fields = ("updated_at",)
    ordering = ("user_id",)
