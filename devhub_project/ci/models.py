from django.conf import settings
from django.contrib.contenttypes.fields import GenericRelation
from django.db import models
from django.utils import timezone

from issues.models import Note
from notifications.recipients.targets import NotificationTarget, TargetKind
from projects.models import Project


class Pipeline(models.Model):
    class Status(models.TextChoices):
        CREATED = "created", "Created"
        PENDING = "pending", "Pending"
        RUNNING = "running", "Running"
        SUCCESS = "success", "Passed"
        FAILED = "failed", "Failed"
        CANCELED = "canceled", "Canceled"
        SKIPPED = "skipped", "Skipped"

    # statuses that end a pipeline run and are worth an email
    NOTIFIABLE_STATUSES = (Status.SUCCESS, Status.FAILED)

    project = models.ForeignKey(
        Project,
        on_delete=models.CASCADE,
        related_name="pipelines",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="pipelines",
        help_text="User who triggered the pipeline",
    )
    ref = models.CharField(max_length=255, default="main")
    sha = models.CharField(max_length=40, blank=True)
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.CREATED,
        db_index=True,
    )
    notes = GenericRelation(Note)
    created_at = models.DateTimeField(default=timezone.now)
    finished_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"Pipeline #{self.pk} ({self.ref}, {self.status})"

    def as_notification_target(self):
        return NotificationTarget(
            obj=self,
            kind=TargetKind.PIPELINE,
            name="pipeline",
            project=self.project,
        )
