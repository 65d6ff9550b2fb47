"""
Shared plumbing for issue and merge request notifications.
"""

from notifications.models import Notification
from notifications.recipients import build_recipients, build_relabeled_recipients
from .delivery import create_notifications


def _actor_name(user):
    if user is None:
        return "Someone"
    return user.get_full_name() or user.username


def _category_for(issuable):
    if issuable.ability_name == "merge_request":
        return Notification.Category.MERGE_REQUEST
    return Notification.Category.ISSUE


def notify_issuable_event(
    issuable,
    current_user,
    action,
    *,
    title,
    message,
    previous_assignee=None,
    skip_current_user=True,
    priority=Notification.Priority.INFO,
):
    recipients = build_recipients(
        issuable,
        current_user,
        action,
        previous_assignee=previous_assignee,
        skip_current_user=skip_current_user,
    )

    return create_notifications(
        recipients,
        category=_category_for(issuable),
        action=f"{action}_{issuable.ability_name}",
        title=title,
        message=message,
        target=issuable,
        project=issuable.project,
        actor=current_user,
        priority=priority,
    )


def notify_issuable_relabeled(issuable, added_labels, current_user):
    """
    Only subscribers of the labels that were just added hear
    about a relabel.
    """
    labels = list(added_labels)
    if not labels:
        return []

    recipients = build_relabeled_recipients(issuable, current_user, labels)
    label_names = ", ".join(f"“{label.title}”" for label in labels)

    return create_notifications(
        recipients,
        category=_category_for(issuable),
        action=f"relabel_{issuable.ability_name}",
        title=f"Labels added to “{issuable.title}”",
        message=(
            f"{_actor_name(current_user)} added {label_names} "
            f"to “{issuable.title}” in {issuable.project}."
        ),
        target=issuable,
        project=issuable.project,
        actor=current_user,
    )
