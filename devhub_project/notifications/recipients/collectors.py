"""
notifications/recipients/collectors.py

User id collection from notification settings, and the
watcher set of a project built on top of it.
"""

from django.contrib.auth import get_user_model

from notifications.models import NotificationSetting

Level = NotificationSetting.Level


def unique_ids(ids):
    seen = set()
    result = []
    for user_id in ids:
        if user_id not in seen:
            seen.add(user_id)
            result.append(user_id)
    return result


def users_by_ids(ids):
    """Users for `ids`, in the order given, duplicates dropped."""
    ids = unique_ids(ids)
    if not ids:
        return []

    found = get_user_model().objects.in_bulk(ids)
    return [found[user_id] for user_id in ids if user_id in found]


# ============================================================
# LEVEL-BASED ID COLLECTION
# ============================================================

def user_ids_notifiable_on(resource, notification_level=None, action=None):
    """
    Ids of users with a setting on a project or group.

    - no level: every user with a setting on `resource`
    - level: users whose setting has that level
    - level + action: further limited to settings with the
      custom event for `action` enabled
    """
    if resource is None:
        return []

    settings_qs = resource.notification_settings.order_by("id")

    if not notification_level:
        return list(settings_qs.values_list("user_id", flat=True))

    settings_qs = settings_qs.filter(level=notification_level)

    if action:
        return [s.user_id for s in settings_qs if s.event_enabled(action)]

    return list(settings_qs.values_list("user_id", flat=True))


def settings_with_global_level_of(level, ids):
    return NotificationSetting.objects.filter(
        user_id__in=ids,
        project__isnull=True,
        group__isnull=True,
        level=level,
    ).order_by("id")


def user_ids_with_global_level_watch(ids):
    return list(
        settings_with_global_level_of(Level.WATCH, ids)
        .values_list("user_id", flat=True)
    )


def user_ids_with_global_level_custom(ids, action):
    return [
        s.user_id
        for s in settings_with_global_level_of(Level.CUSTOM, ids)
        if s.event_enabled(action)
    ]


# ============================================================
# WATCHERS
# ============================================================

def select_project_members_ids(project, global_setting, user_ids_global_level_watch):
    user_ids = user_ids_notifiable_on(project, Level.WATCH)

    # project setting is global: watching if the global setting is watch
    user_ids.extend(
        user_id for user_id in global_setting
        if user_id in user_ids_global_level_watch
    )

    return user_ids


def select_group_members_ids(group, project_members, global_setting, user_ids_global_level_watch):
    # group watchers only count when not already project members
    user_ids = [
        user_id for user_id in user_ids_notifiable_on(group, Level.WATCH)
        if user_id not in project_members
    ]

    user_ids.extend(
        user_id for user_id in global_setting
        if user_id not in project_members and user_id in user_ids_global_level_watch
    )

    return user_ids


def project_watchers(project):
    """
    Users watching `project`, explicitly or through the group
    and global fallbacks.
    """
    if project is None:
        return []

    group = project.group
    project_members_ids = set(user_ids_notifiable_on(project))

    user_ids_with_project_global = user_ids_notifiable_on(project, Level.GLOBAL)
    user_ids_with_group_global = user_ids_notifiable_on(group, Level.GLOBAL)

    user_ids = set(user_ids_with_global_level_watch(
        unique_ids(user_ids_with_project_global + user_ids_with_group_global)
    ))

    user_ids_with_project_setting = select_project_members_ids(
        project, user_ids_with_project_global, user_ids
    )
    user_ids_with_group_setting = select_group_members_ids(
        group, project_members_ids, user_ids_with_group_global, user_ids
    )

    return users_by_ids(user_ids_with_project_setting + user_ids_with_group_setting)
