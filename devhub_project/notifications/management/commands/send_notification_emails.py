"""
notifications/management/commands/send_notification_emails.py

Emails pending in-app notifications.

Runs on the APScheduler interval (see notifications/scheduler.py)
and can be run by hand. Each notification is emailed at most
once: `emailed_at` is stamped after a successful send, and
failed sends stay pending for the next run.
"""

import logging

from django.conf import settings
from django.core.mail import send_mail
from django.core.management.base import BaseCommand
from django.utils import timezone

from notifications.models import Notification

logger = logging.getLogger(__name__)


def _email_body(notification):
    recipient = notification.recipient
    name = recipient.get_full_name() or recipient.username

    body = (
        f"Hello {name},\n\n"
        f"{notification.message}\n\n"
    )

    if notification.action_url:
        body += f"View it here: {notification.action_url}\n\n"

    body += (
        "You are receiving this email because of your notification "
        "settings. You can change them at any time.\n\n"
        "DevHub"
    )
    return body


def pending_notifications(limit):
    return (
        Notification.objects
        .select_related("recipient")
        .filter(emailed_at__isnull=True)
        .exclude(recipient__email="")
        .order_by("created_at", "id")[:limit]
    )


class Command(BaseCommand):
    help = "Email in-app notifications that have not been emailed yet"

    def add_arguments(self, parser):
        parser.add_argument(
            "--limit",
            type=int,
            default=getattr(settings, "NOTIFICATION_EMAIL_BATCH_SIZE", 200),
            help="Maximum number of emails to send in this run",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="List what would be sent without sending anything",
        )

    def handle(self, *args, **options):
        now = timezone.now()
        prefix = getattr(settings, "NOTIFICATION_EMAIL_SUBJECT_PREFIX", "[DevHub] ")

        self.stdout.write(
            self.style.NOTICE(
                f"[{now:%Y-%m-%d %H:%M:%S}] Sending pending notification emails"
            )
        )

        sent = 0
        failed = 0

        for notification in pending_notifications(options["limit"]):
            if options["dry_run"]:
                self.stdout.write(
                    f"Would email {notification.recipient.email}: {notification.title}"
                )
                continue

            try:
                send_mail(
                    subject=f"{prefix}{notification.title}",
                    message=_email_body(notification),
                    from_email=settings.DEFAULT_FROM_EMAIL,
                    recipient_list=[notification.recipient.email],
                )
            except Exception:
                failed += 1
                logger.exception(
                    "Failed to email notification %s to %s",
                    notification.pk,
                    notification.recipient.email,
                )
                continue

            Notification.objects.filter(pk=notification.pk).update(emailed_at=timezone.now())
            sent += 1

        logger.info("Notification emails: %d sent, %d failed", sent, failed)

        self.stdout.write(
            self.style.SUCCESS(
                f"[{now:%Y-%m-%d %H:%M:%S}] Completed: "
                f"{sent} sent, {failed} failed"
            )
        )
