# projects/signals.py

from django.db.models.signals import post_save
from django.dispatch import receiver

from notifications.models import NotificationSetting
from .models import Member


# ============================================================
# MEMBERSHIP CREATED -> NOTIFICATION SETTING FOR THE SOURCE
# ============================================================

@receiver(post_save, sender=Member)
def create_member_notification_setting(sender, instance, created, **kwargs):
    """
    Every member gets a notification setting on the project or
    group they joined. It starts at `global`, so nothing changes
    for the user until they pick a level for that source.
    """
    if not created:
        return

    NotificationSetting.objects.get_or_create(
        user=instance.user,
        project=instance.project,
        group=instance.group,
        defaults={"level": NotificationSetting.Level.GLOBAL},
    )
