from django.contrib import admin
from django.contrib.contenttypes.admin import GenericTabularInline

from .models import Issue, Label, MergeRequest, Note, Snippet, Subscription


class NoteInline(GenericTabularInline):
    model = Note
    extra = 0
    fields = ("author", "note", "created_at")
    readonly_fields = ("created_at",)
    autocomplete_fields = ("author",)


class SubscriptionInline(GenericTabularInline):
    model = Subscription
    extra = 0
    fields = ("user", "project", "subscribed")
    autocomplete_fields = ("user",)


@admin.register(Label)
class LabelAdmin(admin.ModelAdmin):
    list_display = ("title", "project", "group", "color")
    search_fields = ("title",)
    inlines = (SubscriptionInline,)


@admin.register(Issue)
class IssueAdmin(admin.ModelAdmin):
    list_display = ("title", "project", "author", "state", "confidential", "created_at")
    list_filter = ("state", "confidential")
    search_fields = ("title", "description", "author__username")
    filter_horizontal = ("assignees", "labels")
    inlines = (NoteInline, SubscriptionInline)


@admin.register(MergeRequest)
class MergeRequestAdmin(admin.ModelAdmin):
    list_display = ("title", "project", "author", "assignee", "state", "created_at")
    list_filter = ("state",)
    search_fields = ("title", "description", "author__username")
    filter_horizontal = ("labels",)
    inlines = (NoteInline, SubscriptionInline)


@admin.register(Snippet)
class SnippetAdmin(admin.ModelAdmin):
    list_display = ("title", "author", "project", "visibility", "created_at")
    list_filter = ("visibility",)
    search_fields = ("title", "author__username")
    inlines = (NoteInline,)


@admin.register(Note)
class NoteAdmin(admin.ModelAdmin):
    list_display = ("author", "noteable", "project", "created_at")
    search_fields = ("note", "author__username")
    ordering = ("-created_at",)
