"""
Notification service layer.

Each module corresponds to a Notification.Category and exposes
functions that resolve recipients (see `notifications.recipients`)
and create one in-app notification per recipient.

Email delivery is handled separately by the
`send_notification_emails` management command.
"""

# =====================================================
# ISSUES
# =====================================================
from .issues import (
    new_issue,
    close_issue,
    reopen_issue,
    reassigned_issue,
    relabeled_issue,
)

# =====================================================
# MERGE REQUESTS
# =====================================================
from .merge_requests import (
    new_merge_request,
    close_merge_request,
    reopen_merge_request,
    merge_merge_request,
    reassigned_merge_request,
    relabeled_merge_request,
)

# =====================================================
# NOTES
# =====================================================
from .notes import (
    new_note,
)

# =====================================================
# PIPELINES
# =====================================================
from .pipelines import (
    pipeline_finished,
)

# =====================================================
# PUBLIC EXPORTS
# =====================================================
__all__ = [
    # Issues
    "new_issue",
    "close_issue",
    "reopen_issue",
    "reassigned_issue",
    "relabeled_issue",

    # Merge requests
    "new_merge_request",
    "close_merge_request",
    "reopen_merge_request",
    "merge_merge_request",
    "reassigned_merge_request",
    "relabeled_merge_request",

    # Notes
    "new_note",

    # Pipelines
    "pipeline_finished",
]
