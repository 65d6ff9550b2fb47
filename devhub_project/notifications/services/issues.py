from notifications.models import Notification
from .issuables import _actor_name, notify_issuable_event, notify_issuable_relabeled


# ============================================================
# ISSUE OPENED
# ============================================================

def new_issue(issue, current_user):
    return notify_issuable_event(
        issue,
        current_user,
        "new",
        title=f"New issue: “{issue.title}”",
        message=(
            f"{_actor_name(current_user)} opened the issue "
            f"“{issue.title}” in {issue.project}."
        ),
    )


# ============================================================
# ISSUE CLOSED / REOPENED
# ============================================================

def close_issue(issue, current_user):
    return notify_issuable_event(
        issue,
        current_user,
        "close",
        title=f"Issue closed: “{issue.title}”",
        message=(
            f"{_actor_name(current_user)} closed the issue "
            f"“{issue.title}” in {issue.project}."
        ),
    )


def reopen_issue(issue, current_user):
    return notify_issuable_event(
        issue,
        current_user,
        "reopen",
        title=f"Issue reopened: “{issue.title}”",
        message=(
            f"{_actor_name(current_user)} reopened the issue "
            f"“{issue.title}” in {issue.project}."
        ),
        priority=Notification.Priority.WARNING,
    )


# ============================================================
# ISSUE REASSIGNED
# ============================================================

def reassigned_issue(issue, current_user, previous_assignees=None):
    """
    Previous and new assignees are told even when their level
    is "on mention".
    """
    assignees = issue.assignee_list()
    names = ", ".join(_actor_name(user) for user in assignees) or "nobody"

    return notify_issuable_event(
        issue,
        current_user,
        "reassign",
        title=f"Issue reassigned: “{issue.title}”",
        message=(
            f"{_actor_name(current_user)} assigned the issue "
            f"“{issue.title}” to {names}."
        ),
        previous_assignee=list(previous_assignees or []),
    )


# ============================================================
# ISSUE RELABELED
# ============================================================

def relabeled_issue(issue, added_labels, current_user):
    return notify_issuable_relabeled(issue, added_labels, current_user)
