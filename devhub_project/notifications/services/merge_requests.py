from notifications.models import Notification
from .issuables import _actor_name, notify_issuable_event, notify_issuable_relabeled


def new_merge_request(merge_request, current_user):
    return notify_issuable_event(
        merge_request,
        current_user,
        "new",
        title=f"New merge request: “{merge_request.title}”",
        message=(
            f"{_actor_name(current_user)} opened the merge request "
            f"“{merge_request.title}” in {merge_request.project}."
        ),
    )


def close_merge_request(merge_request, current_user):
    return notify_issuable_event(
        merge_request,
        current_user,
        "close",
        title=f"Merge request closed: “{merge_request.title}”",
        message=(
            f"{_actor_name(current_user)} closed the merge request "
            f"“{merge_request.title}” in {merge_request.project}."
        ),
    )


def reopen_merge_request(merge_request, current_user):
    return notify_issuable_event(
        merge_request,
        current_user,
        "reopen",
        title=f"Merge request reopened: “{merge_request.title}”",
        message=(
            f"{_actor_name(current_user)} reopened the merge request "
            f"“{merge_request.title}” in {merge_request.project}."
        ),
        priority=Notification.Priority.WARNING,
    )


def merge_merge_request(merge_request, current_user):
    return notify_issuable_event(
        merge_request,
        current_user,
        "merge",
        title=f"Merge request merged: “{merge_request.title}”",
        message=(
            f"{_actor_name(current_user)} merged "
            f"“{merge_request.title}” into {merge_request.target_branch}."
        ),
    )


def reassigned_merge_request(merge_request, current_user, previous_assignee=None):
    assignee = _actor_name(merge_request.assignee) if merge_request.assignee_id else "nobody"

    return notify_issuable_event(
        merge_request,
        current_user,
        "reassign",
        title=f"Merge request reassigned: “{merge_request.title}”",
        message=(
            f"{_actor_name(current_user)} assigned the merge request "
            f"“{merge_request.title}” to {assignee}."
        ),
        previous_assignee=previous_assignee,
    )


def relabeled_merge_request(merge_request, added_labels, current_user):
    return notify_issuable_relabeled(merge_request, added_labels, current_user)
