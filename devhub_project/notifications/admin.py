from django.contrib import admin
from django.utils import timezone
from django.utils.html import format_html

from .models import Notification, NotificationSetting


@admin.register(NotificationSetting)
class NotificationSettingAdmin(admin.ModelAdmin):
    list_display = (
        "user",
        "source_display",
        "level",
        "updated_at",
    )

    list_filter = (
        "level",
    )

    search_fields = (
        "user__username",
        "project__name",
        "group__name",
    )

    autocomplete_fields = ("user", "project", "group")

    fieldsets = (
        ("Owner", {
            "fields": ("user",),
        }),
        ("Source (leave both empty for the global setting)", {
            "fields": ("project", "group"),
        }),
        ("Level", {
            "fields": ("level",),
        }),
        ("Custom events", {
            "classes": ("collapse",),
            "fields": NotificationSetting.EMAIL_EVENTS,
        }),
    )

    def source_display(self, obj):
        return obj.source or "Global"

    source_display.short_description = "Source"


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    """
    Admin configuration for in-app notifications
    """

    # =====================================================
    # LIST VIEW
    # =====================================================
    list_display = (
        "id",
        "recipient",
        "category",
        "action",
        "priority",
        "colored_title",
        "is_read",
        "emailed_at",
        "created_at",
    )

    list_filter = (
        "category",
        "priority",
        "is_read",
        "created_at",
    )

    search_fields = (
        "title",
        "message",
        "recipient__username",
        "recipient__first_name",
        "recipient__last_name",
    )

    ordering = ("-created_at",)
    list_per_page = 25

    # =====================================================
    # FIELDSETS (DETAIL VIEW)
    # =====================================================
    fieldsets = (
        ("Recipient", {
            "fields": ("recipient", "actor"),
        }),
        ("Classification", {
            "fields": ("category", "action", "priority"),
        }),
        ("Content", {
            "fields": ("title", "message"),
        }),
        ("Context", {
            "fields": ("project", "target_type", "target_id", "action_url"),
        }),
        ("Status", {
            "fields": ("is_read", "read_at", "emailed_at", "created_at"),
        }),
    )

    readonly_fields = (
        "created_at",
        "read_at",
        "emailed_at",
    )

    actions = (
        "mark_as_read",
        "mark_as_unread",
        "requeue_email",
    )

    # =====================================================
    # CUSTOM DISPLAY HELPERS
    # =====================================================
    def colored_title(self, obj):
        color_map = {
            Notification.Category.ISSUE: "#16a34a",          # green
            Notification.Category.MERGE_REQUEST: "#2563eb",  # blue
            Notification.Category.NOTE: "#0ea5e9",           # sky
            Notification.Category.PIPELINE: "#f59e0b",       # orange
        }

        color = color_map.get(obj.category, "#000000")

        return format_html(
            '<span style="color:{}; font-weight:600;">{}</span>',
            color,
            obj.title,
        )

    colored_title.short_description = "Title"

    # =====================================================
    # ADMIN ACTIONS
    # =====================================================
    @admin.action(description="Mark selected notifications as READ")
    def mark_as_read(self, request, queryset):
        queryset.update(is_read=True, read_at=timezone.now())

    @admin.action(description="Mark selected notifications as UNREAD")
    def mark_as_unread(self, request, queryset):
        queryset.update(is_read=False, read_at=None)

    @admin.action(description="Send the email for selected notifications again")
    def requeue_email(self, request, queryset):
        queryset.update(emailed_at=None)
