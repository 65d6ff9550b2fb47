from django.contrib import admin

from .models import Pipeline


@admin.register(Pipeline)
class PipelineAdmin(admin.ModelAdmin):
    list_display = ("id", "project", "ref", "status", "user", "created_at", "finished_at")
    list_filter = ("status",)
    search_fields = ("ref", "sha", "project__name", "user__username")
    ordering = ("-created_at",)
