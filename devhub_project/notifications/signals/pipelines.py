# notifications/signals/pipelines.py

from django.db import transaction
from django.db.models.signals import post_save, pre_save
from django.dispatch import receiver

from ci.models import Pipeline
from notifications.services import pipeline_finished


@receiver(pre_save, sender=Pipeline)
def remember_previous_pipeline_status(sender, instance, **kwargs):
    if instance.pk is None:
        instance._previous_status = None
        return

    instance._previous_status = (
        sender.objects
        .filter(pk=instance.pk)
        .values_list("status", flat=True)
        .first()
    )


@receiver(post_save, sender=Pipeline)
def notify_pipeline_finished(sender, instance, created, **kwargs):
    """
    Fires once per transition into success or failed.
    """
    previous = getattr(instance, "_previous_status", None)

    if instance.status == previous:
        return

    if instance.status not in Pipeline.NOTIFIABLE_STATUSES:
        return

    transaction.on_commit(lambda: pipeline_finished(instance))
