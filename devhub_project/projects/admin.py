from django.contrib import admin

from .models import Group, Member, Project


class MemberInline(admin.TabularInline):
    model = Member
    fk_name = "project"
    extra = 0
    fields = ("user", "access_level")
    autocomplete_fields = ("user",)


class GroupMemberInline(MemberInline):
    fk_name = "group"


@admin.register(Group)
class GroupAdmin(admin.ModelAdmin):
    list_display = ("name", "path", "visibility", "created_at")
    list_filter = ("visibility",)
    search_fields = ("name", "path")
    prepopulated_fields = {"path": ("name",)}
    inlines = (GroupMemberInline,)


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = ("name", "group", "path", "visibility", "created_at")
    list_filter = ("visibility", "group")
    search_fields = ("name", "path", "group__name")
    prepopulated_fields = {"path": ("name",)}
    autocomplete_fields = ("group",)
    inlines = (MemberInline,)


@admin.register(Member)
class MemberAdmin(admin.ModelAdmin):
    list_display = ("user", "project", "group", "access_level", "created_at")
    list_filter = ("access_level",)
    search_fields = (
        "user__username",
        "project__name",
        "group__name",
    )
    autocomplete_fields = ("user", "project", "group", "created_by")
