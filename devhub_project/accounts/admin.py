from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from notifications.models import NotificationSetting
from projects.models import Member
from .models import User


class MembershipInline(admin.TabularInline):
    model = Member
    fk_name = "user"
    extra = 0
    fields = ("project", "group", "access_level")
    autocomplete_fields = ("project", "group")


class NotificationSettingInline(admin.TabularInline):
    model = NotificationSetting
    extra = 0
    fields = ("project", "group", "level")
    autocomplete_fields = ("project", "group")


# ============================================================
# USER ADMIN
# ============================================================

@admin.register(User)
class UserAdmin(BaseUserAdmin):
    ordering = ("username",)

    list_display = (
        "username",
        "email",
        "first_name",
        "last_name",
        "notified_of_own_activity",
        "is_active",
        "is_staff",
    )

    list_filter = (
        "notified_of_own_activity",
        "is_active",
        "is_staff",
    )

    search_fields = (
        "username",
        "email",
        "first_name",
        "last_name",
    )

    fieldsets = BaseUserAdmin.fieldsets + (
        ("Notifications", {
            "fields": (
                "notified_of_own_activity",
            )
        }),
    )

    inlines = (MembershipInline, NotificationSettingInline)
