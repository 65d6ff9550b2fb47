from apscheduler.schedulers.background import BackgroundScheduler
from django.conf import settings
from django.core.management import call_command
from django.utils import timezone
import logging

logger = logging.getLogger(__name__)

# ============================================================
# GLOBAL SAFETY LOCK
# Prevents scheduler from starting more than once
# ============================================================
_scheduler = None


def start_scheduler():
    """
    Start APScheduler safely.

    - Respects ENABLE_SCHEDULER setting
    - Prevents double start (Django autoreload, imports)
    - Safe for development and single-process production
    """
    global _scheduler

    # --------------------------------------------
    # DEV / PROD TOGGLE
    # --------------------------------------------
    if not getattr(settings, "ENABLE_SCHEDULER", False):
        logger.info("APScheduler disabled via settings (ENABLE_SCHEDULER=False)")
        return None

    # --------------------------------------------
    # SAFETY LOCK (NO DOUBLE START)
    # --------------------------------------------
    if _scheduler is not None:
        logger.info("APScheduler already running, skipping initialization")
        return _scheduler

    interval = int(getattr(settings, "NOTIFICATION_EMAIL_INTERVAL_MINUTES", 5))

    logger.info("Starting APScheduler...")

    _scheduler = BackgroundScheduler(
        timezone=settings.TIME_ZONE
    )

    _scheduler.add_job(
        run_notification_emails,
        trigger="interval",
        minutes=interval,
        id="send_notification_emails",
        replace_existing=True,
        max_instances=1,      # Prevent overlapping runs
        coalesce=True,        # Merge missed runs if server was down
    )

    _scheduler.start()

    logger.info(
        "APScheduler started: notification emails every %d minutes",
        interval,
    )
    return _scheduler


def stop_scheduler():
    global _scheduler

    if _scheduler is None:
        return

    _scheduler.shutdown(wait=False)
    _scheduler = None
    logger.info("APScheduler stopped")


def run_notification_emails():
    """
    Wrapper job that calls the Django management command.
    Keeps all business logic out of the scheduler.
    """
    now = timezone.now()
    logger.info(f"Running scheduled notification emails at {now:%Y-%m-%d %H:%M:%S}")

    call_command("send_notification_emails")
