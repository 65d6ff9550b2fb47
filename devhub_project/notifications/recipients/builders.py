"""
notifications/recipients/builders.py

Who gets notified, per kind of event.

Each builder is one linear pipeline of the steps in
`filters.py`, so the order of the rules can be read top to
bottom in a single function.
"""

import logging

from notifications.models import NotificationSetting
from .filters import (
    add_custom_notifications,
    add_labels_subscribers,
    add_project_watchers,
    add_subscribed_users,
    as_list,
    participants,
    reject_mention_users,
    reject_muted_users,
    reject_unsubscribed_users,
    reject_users_without_access,
    unique_users,
    without_user,
)
from .resolution import RecipientContext, notification_setting_for_user_project
from .targets import as_target

logger = logging.getLogger(__name__)


REASSIGN_ACTIONS = frozenset({"reassign_issue", "reassign_merge_request"})
NEW_ISSUABLE_ACTIONS = frozenset({"new_issue", "new_merge_request"})

PIPELINE_ACTIONS = {
    "failed": "failed_pipeline",
    "success": "success_pipeline",
}


def _skip_actor(recipients, actor):
    if actor is None or actor.notified_of_own_activity:
        return recipients
    return without_user(recipients, actor)


# ============================================================
# DEFAULT (ISSUE / MERGE REQUEST EVENTS)
# ============================================================

def build_recipients(
    target,
    current_user,
    action,
    previous_assignee=None,
    skip_current_user=True,
    project=None,
):
    target = as_target(target)
    context = RecipientContext(project if project is not None else target.project)
    custom_action = target.custom_action(action)

    recipients = participants(target, current_user) or []
    recipients = add_project_watchers(context, recipients)
    recipients = add_custom_notifications(context, recipients, custom_action)
    recipients = reject_mention_users(context, recipients)

    # Reassigning counts as mentioning the assignees, so they are
    # added back after "on mention" users were rejected.
    if custom_action in REASSIGN_ACTIONS:
        recipients += as_list(previous_assignee)
        if target.assignees is not None:
            recipients += target.assignees()

    recipients = reject_muted_users(context, recipients)
    recipients = add_subscribed_users(context, recipients, target)

    if custom_action in NEW_ISSUABLE_ACTIONS:
        recipients = add_labels_subscribers(context, recipients, target)

    recipients = reject_unsubscribed_users(context, recipients, target)
    recipients = reject_users_without_access(recipients, target)

    if skip_current_user:
        recipients = _skip_actor(recipients, current_user)

    recipients = unique_users(recipients)
    logger.debug("%s on %s: %d recipients", custom_action, target.obj, len(recipients))
    return recipients


# ============================================================
# PIPELINE
# ============================================================

def build_pipeline_recipients(target, current_user, action):
    """
    Pipeline emails only ever go to the user who triggered the
    pipeline, and only if their setting asks for this event.
    """
    if current_user is None:
        return []

    target = as_target(target)
    custom_action = PIPELINE_ACTIONS.get(str(action))

    setting = notification_setting_for_user_project(current_user, target.project)

    if setting.is_mention or setting.is_disabled:
        return []

    if setting.is_custom and not setting.event_enabled(custom_action):
        return []

    if (setting.is_watch or setting.is_participating) and \
            custom_action in NotificationSetting.EXCLUDED_WATCHER_EVENTS:
        return []

    recipients = reject_users_without_access([current_user], target)
    logger.debug("%s on %s: %d recipients", custom_action, target.obj, len(recipients))
    return recipients


# ============================================================
# RELABELED
# ============================================================

def build_relabeled_recipients(target, current_user, labels, project=None):
    target = as_target(target)
    context = RecipientContext(project if project is not None else target.project)

    recipients = add_labels_subscribers(context, [], target, labels=list(labels))
    recipients = reject_unsubscribed_users(context, recipients, target)
    recipients = reject_users_without_access(recipients, target)
    recipients = _skip_actor(recipients, current_user)

    recipients = unique_users(recipients)
    logger.debug("relabel on %s: %d recipients", target.obj, len(recipients))
    return recipients


# ============================================================
# NEW NOTE
# ============================================================

def build_new_note_recipients(note, project=None):
    target = as_target(note.noteable)
    context = RecipientContext(project if project is not None else note.project)

    if note.for_personal_snippet:
        ability, subject = "read_personal_snippet", note.noteable
    else:
        ability, subject = "read_project", note.project

    mentioned_users = [
        user for user in note.mentioned_users()
        if user.can(ability, subject)
    ]
    mentioned_ids = {user.pk for user in mentioned_users}

    # Everyone in the thread: author, assignees, commenters
    recipients = participants(target, note.author)
    if recipients is None:
        recipients = list(mentioned_users)

    if not note.for_personal_snippet:
        recipients = add_project_watchers(context, recipients)
        recipients = add_custom_notifications(context, recipients, "new_note")

    # "On mention" users are dropped unless mentioned in this note
    recipients = reject_mention_users(
        context,
        [user for user in recipients if user is not None and user.pk not in mentioned_ids],
    )
    recipients = recipients + mentioned_users

    recipients = reject_muted_users(context, recipients)

    recipients = add_subscribed_users(context, recipients, target)
    recipients = reject_unsubscribed_users(context, recipients, target)
    recipients = reject_users_without_access(recipients, target)

    recipients = _skip_actor(recipients, note.author)

    recipients = unique_users(recipients)
    logger.debug("new note %s: %d recipients", note.pk, len(recipients))
    return recipients


# ============================================================
# SERVICE FACADE
# ============================================================

class NotificationRecipientService:
    """
    The builders bound to one project, for callers that resolve
    recipients against a project other than the target's own.
    """

    notification_setting_for_user_project = staticmethod(
        notification_setting_for_user_project
    )

    def __init__(self, project):
        self.project = project

    def build_recipients(self, target, current_user, action, previous_assignee=None, skip_current_user=True):
        return build_recipients(
            target,
            current_user,
            action,
            previous_assignee=previous_assignee,
            skip_current_user=skip_current_user,
            project=self.project,
        )

    def build_pipeline_recipients(self, target, current_user, action):
        return build_pipeline_recipients(target, current_user, action)

    def build_relabeled_recipients(self, target, current_user, labels):
        return build_relabeled_recipients(target, current_user, labels, project=self.project)

    def build_new_note_recipients(self, note):
        return build_new_note_recipients(note, project=self.project)
