# notifications/signals/notes.py

from django.db import transaction
from django.db.models.signals import post_save
from django.dispatch import receiver

from issues.models import Note
from notifications.services import new_note


@receiver(post_save, sender=Note)
def notify_new_note(sender, instance, created, **kwargs):
    if not created:
        return

    transaction.on_commit(lambda: new_note(instance))
