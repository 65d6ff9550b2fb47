"""
Recipient resolution for notifications.

Given a target (issue, merge request, pipeline, note) and an
action, compute the deduplicated list of users to notify,
honoring project / group / global notification levels,
subscriptions, mentions and read access.
"""

from .builders import (
    NotificationRecipientService,
    build_new_note_recipients,
    build_pipeline_recipients,
    build_recipients,
    build_relabeled_recipients,
)
from .collectors import project_watchers, user_ids_notifiable_on
from .resolution import RecipientContext, notification_setting_for_user_project
from .targets import NotificationTarget, TargetKind, as_target

__all__ = [
    "NotificationRecipientService",
    "NotificationTarget",
    "RecipientContext",
    "TargetKind",
    "as_target",
    "build_new_note_recipients",
    "build_pipeline_recipients",
    "build_recipients",
    "build_relabeled_recipients",
    "notification_setting_for_user_project",
    "project_watchers",
    "user_ids_notifiable_on",
]
