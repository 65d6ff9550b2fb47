from django.db import models
from django.conf import settings
from django.contrib.contenttypes.fields import GenericForeignKey
from django.contrib.contenttypes.models import ContentType
from django.core.exceptions import ValidationError
from django.db.models import Q
from django.utils import timezone

from projects.models import Group, Project


class NotificationSetting(models.Model):
    """
    How eagerly a user wants to hear about a project, a group,
    or (neither set) everything else.

    `global` on a project or group row means "defer to the next
    scope up": project -> group -> global row.
    """

    # =====================================================
    # LEVELS
    # =====================================================
    class Level(models.TextChoices):
        GLOBAL = "global", "Global"
        WATCH = "watch", "Watch"
        PARTICIPATING = "participating", "Participate"
        MENTION = "mention", "On mention"
        DISABLED = "disabled", "Disabled"
        CUSTOM = "custom", "Custom"

    # Custom level toggles, one boolean column each
    EMAIL_EVENTS = (
        "new_note",
        "new_issue",
        "reopen_issue",
        "close_issue",
        "reassign_issue",
        "new_merge_request",
        "reopen_merge_request",
        "close_merge_request",
        "reassign_merge_request",
        "merge_merge_request",
        "failed_pipeline",
        "success_pipeline",
    )

    # Watchers and participants are not told about these
    EXCLUDED_WATCHER_EVENTS = frozenset({"success_pipeline"})

    # =====================================================
    # OWNER + SOURCE
    # =====================================================
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notification_settings",
    )

    project = models.ForeignKey(
        Project,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="notification_settings",
    )

    group = models.ForeignKey(
        Group,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="notification_settings",
    )

    level = models.CharField(
        max_length=20,
        choices=Level.choices,
        default=Level.GLOBAL,
        db_index=True,
    )

    # =====================================================
    # CUSTOM EVENTS
    # =====================================================
    new_note = models.BooleanField(default=False)
    new_issue = models.BooleanField(default=False)
    reopen_issue = models.BooleanField(default=False)
    close_issue = models.BooleanField(default=False)
    reassign_issue = models.BooleanField(default=False)
    new_merge_request = models.BooleanField(default=False)
    reopen_merge_request = models.BooleanField(default=False)
    close_merge_request = models.BooleanField(default=False)
    reassign_merge_request = models.BooleanField(default=False)
    merge_merge_request = models.BooleanField(default=False)
    failed_pipeline = models.BooleanField(default=False)
    success_pipeline = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["user", "project"],
                condition=Q(project__isnull=False),
                name="unique_project_notification_setting",
            ),
            models.UniqueConstraint(
                fields=["user", "group"],
                condition=Q(group__isnull=False),
                name="unique_group_notification_setting",
            ),
            models.UniqueConstraint(
                fields=["user"],
                condition=Q(project__isnull=True, group__isnull=True),
                name="unique_global_notification_setting",
            ),
        ]
        indexes = [
            models.Index(fields=["project", "level"]),
            models.Index(fields=["group", "level"]),
        ]

    def __str__(self):
        return f"{self.user} | {self.source or 'global'} | {self.level}"

    # =====================================================
    # SOURCE HELPERS
    # =====================================================
    @property
    def source(self):
        return self.project or self.group

    @property
    def source_type(self):
        if self.project_id:
            return "Project"
        if self.group_id:
            return "Group"
        return None

    def clean(self):
        if self.project_id and self.group_id:
            raise ValidationError(
                "A notification setting belongs to a project or a group, not both."
            )

        if self.level == self.Level.GLOBAL and self.source_type is None:
            raise ValidationError(
                "The global notification setting cannot defer to itself."
            )

    # =====================================================
    # LEVEL PREDICATES
    # =====================================================
    @property
    def is_global(self):
        return self.level == self.Level.GLOBAL

    @property
    def is_watch(self):
        return self.level == self.Level.WATCH

    @property
    def is_participating(self):
        return self.level == self.Level.PARTICIPATING

    @property
    def is_mention(self):
        return self.level == self.Level.MENTION

    @property
    def is_disabled(self):
        return self.level == self.Level.DISABLED

    @property
    def is_custom(self):
        return self.level == self.Level.CUSTOM

    def event_enabled(self, action):
        if not action or action not in self.EMAIL_EVENTS:
            return False
        return bool(getattr(self, action))

    def events(self):
        return {event: getattr(self, event) for event in self.EMAIL_EVENTS}


class Notification(models.Model):
    """
    A derived, user-facing notification.
    One row per recipient resolved for an event; emailed later
    by the `send_notification_emails` command.
    """

    # =====================================================
    # CATEGORY
    # =====================================================
    class Category(models.TextChoices):
        ISSUE = "issue", "Issue"
        MERGE_REQUEST = "merge_request", "Merge request"
        NOTE = "note", "Comment"
        PIPELINE = "pipeline", "Pipeline"

    # =====================================================
    # SEVERITY / PRIORITY (UI + sorting)
    # =====================================================
    class Priority(models.TextChoices):
        INFO = "info", "Info"
        WARNING = "warning", "Warning"
        DANGER = "danger", "Danger"

    # =====================================================
    # CORE RELATIONSHIPS
    # =====================================================
    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notifications",
        help_text="User who receives this notification"
    )

    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        help_text="User whose action caused this notification"
    )

    # =====================================================
    # CLASSIFICATION
    # =====================================================
    category = models.CharField(
        max_length=20,
        choices=Category.choices,
        db_index=True
    )

    priority = models.CharField(
        max_length=20,
        choices=Priority.choices,
        default=Priority.INFO,
        db_index=True
    )

    action = models.CharField(max_length=50, blank=True)

    # =====================================================
    # CONTENT
    # =====================================================
    title = models.CharField(
        max_length=200,
        help_text="Short headline shown in notification list"
    )

    message = models.TextField(
        help_text="Detailed message shown when expanded"
    )

    # =====================================================
    # CONTEXT
    # =====================================================
    project = models.ForeignKey(
        Project,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="notifications"
    )

    target_type = models.ForeignKey(
        ContentType,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
    )
    target_id = models.PositiveBigIntegerField(null=True, blank=True)
    target = GenericForeignKey("target_type", "target_id")

    action_url = models.CharField(
        max_length=255,
        blank=True,
        help_text="Optional URL the notification should link to"
    )

    # =====================================================
    # STATE
    # =====================================================
    is_read = models.BooleanField(
        default=False,
        db_index=True
    )

    read_at = models.DateTimeField(
        null=True,
        blank=True
    )

    emailed_at = models.DateTimeField(
        null=True,
        blank=True,
        db_index=True
    )

    created_at = models.DateTimeField(
        default=timezone.now,
        db_index=True
    )

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["recipient", "is_read"]),
            models.Index(fields=["recipient", "category", "is_read"]),
            models.Index(fields=["target_type", "target_id"]),
        ]

    def __str__(self):
        return (
            f"{self.recipient} | "
            f"{self.category.upper()} | "
            f"{self.title}"
        )

    # =====================================================
    # INSTANCE HELPERS
    # =====================================================
    def mark_as_read(self):
        """Safely mark notification as read."""
        if not self.is_read:
            self.is_read = True
            self.read_at = timezone.now()
            self.save(update_fields=["is_read", "read_at"])

    @classmethod
    def mark_all_as_read(cls, user, category=None):
        """
        Mark all unread notifications (optionally by category)
        as read for a user.
        """
        qs = cls.objects.filter(recipient=user, is_read=False)
        if category:
            qs = qs.filter(category=category)

        return qs.update(
            is_read=True,
            read_at=timezone.now()
        )
