"""
notifications/services/delivery.py

Turns a resolved recipient list into in-app notifications.
Emails are sent later by the `send_notification_emails`
command, so creating notifications never blocks on SMTP.
"""

import logging

from django.contrib.contenttypes.models import ContentType

from notifications.models import Notification

logger = logging.getLogger(__name__)


def create_notifications(
    recipients,
    *,
    category,
    action,
    title,
    message,
    target=None,
    project=None,
    actor=None,
    priority=Notification.Priority.INFO,
    action_url="",
):
    """
    One notification per recipient, in one query.
    Returns the created notifications.
    """
    if not recipients:
        return []

    target_type = ContentType.objects.get_for_model(target) if target is not None else None
    target_id = target.pk if target is not None else None

    notifications = Notification.objects.bulk_create([
        Notification(
            recipient=user,
            actor=actor,
            category=category,
            priority=priority,
            action=action,
            title=title,
            message=message,
            project=project,
            target_type=target_type,
            target_id=target_id,
            action_url=action_url,
        )
        for user in recipients
    ])

    logger.info(
        "Created %d %s notifications (%s)",
        len(notifications),
        category,
        action,
    )
    return notifications
