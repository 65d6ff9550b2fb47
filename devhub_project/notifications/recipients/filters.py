"""
notifications/recipients/filters.py

Steps the recipient builders are assembled from.

Every step takes a list of users and returns a new list. None
entries and duplicates are tolerated on the way in; builders
call `unique_users` once at the end.
"""

from notifications.models import NotificationSetting
from .collectors import (
    project_watchers,
    unique_ids,
    user_ids_notifiable_on,
    user_ids_with_global_level_custom,
    users_by_ids,
)

Level = NotificationSetting.Level


def unique_users(users):
    seen = set()
    result = []
    for user in users:
        if user is None or user.pk in seen:
            continue
        seen.add(user.pk)
        result.append(user)
    return result


def without_user(users, user):
    if user is None:
        return list(users)
    return [u for u in users if u is not None and u.pk != user.pk]


def as_list(value):
    if value is None:
        return []
    if isinstance(value, (list, tuple, set)):
        return list(value)
    return [value]


# ============================================================
# LEVEL REJECTION
# ============================================================

def reject_users(context, users, level):
    """
    Drop users whose resolved setting for the context project
    is `level`.

        reject_users(context, users, "mention")
    """
    level = str(level)

    if level not in Level.values:
        raise ValueError(f"Invalid notification level: {level!r}")

    return [
        user for user in unique_users(users)
        if context.setting_for(user).level != level
    ]


def reject_muted_users(context, users):
    return reject_users(context, users, Level.DISABLED)


def reject_mention_users(context, users):
    return reject_users(context, users, Level.MENTION)


# ============================================================
# SUBSCRIPTIONS + ACCESS
# ============================================================

def reject_unsubscribed_users(context, recipients, target):
    """
    Drop users with an explicit unsubscribe for the target in the
    context project.
    """
    if target.subscription_for is None:
        return list(recipients)

    kept = []
    for user in recipients:
        if user is None:
            continue
        subscription = target.subscription_for(user, context.project)
        if subscription is not None and not subscription.subscribed:
            continue
        kept.append(user)
    return kept


def reject_users_without_access(recipients, target):
    recipients = [
        user for user in recipients
        if user is not None and user.can("receive_notifications")
    ]

    if target.is_issuable:
        ability = f"read_{target.ability_name}"
    elif target.is_pipeline:
        # pipeline emails carry the build trace
        ability = "read_build"
    else:
        return recipients

    return [user for user in recipients if user.can(ability, target.obj)]


# ============================================================
# ADDITIONS
# ============================================================

def participants(target, user):
    """
    Copy of the target's participants, or None when the target
    has no notion of participants.
    """
    if target.participants is None:
        return None
    return list(target.participants(user))


def add_project_watchers(context, recipients):
    return list(recipients) + project_watchers(context.project)


def add_custom_notifications(context, recipients, action):
    project, group = context.project, context.group

    user_ids = []

    # custom level on the project or its group
    user_ids += user_ids_notifiable_on(project, Level.CUSTOM, action)
    user_ids += user_ids_notifiable_on(group, Level.CUSTOM, action)

    # deferring to a global level of custom
    global_users_ids = (
        user_ids_notifiable_on(project, Level.GLOBAL)
        + user_ids_notifiable_on(group, Level.GLOBAL)
    )
    user_ids += user_ids_with_global_level_custom(unique_ids(global_users_ids), action)

    return list(recipients) + users_by_ids(user_ids)


def add_subscribed_users(context, recipients, target):
    if target.subscribers is None:
        return list(recipients)
    return list(recipients) + list(target.subscribers(context.project))


def add_labels_subscribers(context, recipients, target, labels=None):
    if target.labels is None:
        return list(recipients)

    recipients = list(recipients)
    for label in (labels if labels is not None else target.labels()):
        recipients += label.subscribers(context.project)
    return recipients
