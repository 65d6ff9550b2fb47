# notifications/signals/issues.py

from django.db import transaction
from django.db.models.signals import post_save
from django.dispatch import receiver

from issues.models import Issue, MergeRequest
from notifications.services import new_issue, new_merge_request


# ============================================================
# ISSUE OPENED
# ============================================================

@receiver(post_save, sender=Issue)
def notify_issue_opened(sender, instance, created, **kwargs):
    if not created:
        return

    # Assignees and labels are set after the first save, so dispatch
    # waits for the enclosing transaction (ATOMIC_REQUESTS for views).
    # Outside a transaction on_commit runs immediately.
    transaction.on_commit(lambda: new_issue(instance, instance.author))


# ============================================================
# MERGE REQUEST OPENED
# ============================================================

@receiver(post_save, sender=MergeRequest)
def notify_merge_request_opened(sender, instance, created, **kwargs):
    if not created:
        return

    transaction.on_commit(lambda: new_merge_request(instance, instance.author))
