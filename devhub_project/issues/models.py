from django.conf import settings
from django.contrib.contenttypes.fields import GenericForeignKey, GenericRelation
from django.contrib.contenttypes.models import ContentType
from django.db import models
from django.db.models import Q
from django.utils import timezone

from notifications.recipients.filters import unique_users
from notifications.recipients.targets import NotificationTarget, TargetKind
from projects.models import Group, Project, Visibility
from .mentions import mentioned_users


# ============================================================
# SUBSCRIPTIONS
# ============================================================

class Subscription(models.Model):
    """
    Explicit subscribe / unsubscribe of a user to an issuable
    or a label, optionally scoped to one project.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="subscriptions",
    )
    project = models.ForeignKey(
        Project,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="subscriptions",
    )

    content_type = models.ForeignKey(ContentType, on_delete=models.CASCADE)
    object_id = models.PositiveBigIntegerField()
    subject = GenericForeignKey("content_type", "object_id")

    subscribed = models.BooleanField(default=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        indexes = [
            models.Index(fields=["content_type", "object_id"]),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["user", "content_type", "object_id", "project"],
                condition=Q(project__isnull=False),
                name="unique_subscription_per_project",
            ),
            models.UniqueConstraint(
                fields=["user", "content_type", "object_id"],
                condition=Q(project__isnull=True),
                name="unique_subscription_without_project",
            ),
        ]

    def __str__(self):
        state = "subscribed" if self.subscribed else "unsubscribed"
        return f"{self.user} {state} to {self.subject}"


class Subscribable(models.Model):
    subscriptions = GenericRelation(Subscription)

    class Meta:
        abstract = True

    def subscribers(self, project=None):
        qs = (
            self.subscriptions
            .filter(subscribed=True)
            .filter(Q(project=project) | Q(project__isnull=True))
            .select_related("user")
            .order_by("id")
        )
        return unique_users(sub.user for sub in qs)

    def subscription_for(self, user, project=None):
        """
        The subscription row that decides for `user` in `project`:
        the row scoped to that project wins over the unscoped one.
        """
        if user is None:
            return None

        rows = self.subscriptions.filter(user=user)
        if project is not None:
            scoped = rows.filter(project=project).first()
            if scoped is not None:
                return scoped
        return rows.filter(project__isnull=True).first()


# ============================================================
# LABELS
# ============================================================

class Label(Subscribable):
    title = models.CharField(max_length=100)
    color = models.CharField(max_length=7, default="#428bca")
    project = models.ForeignKey(
        Project,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="labels",
    )
    group = models.ForeignKey(
        Group,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="labels",
    )

    def __str__(self):
        return self.title


# ============================================================
# NOTES
# ============================================================

class Note(models.Model):
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notes",
    )
    project = models.ForeignKey(
        Project,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="notes",
    )

    content_type = models.ForeignKey(ContentType, on_delete=models.CASCADE)
    object_id = models.PositiveBigIntegerField()
    noteable = GenericForeignKey("content_type", "object_id")

    note = models.TextField()
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["content_type", "object_id"]),
        ]

    def __str__(self):
        return f"Note by {self.author} on {self.noteable}"

    def save(self, *args, **kwargs):
        if self.project_id is None and self.noteable is not None:
            self.project = getattr(self.noteable, "project", None)
        super().save(*args, **kwargs)

    @property
    def for_personal_snippet(self):
        return isinstance(self.noteable, Snippet) and self.noteable.is_personal

    def mentioned_users(self):
        return mentioned_users(self.note)


class Noteable(models.Model):
    notes = GenericRelation(Note)

    class Meta:
        abstract = True

    def note_participants(self):
        users = []
        for note in self.notes.select_related("author"):
            users.append(note.author)
            users.extend(note.mentioned_users())
        return users


# ============================================================
# ISSUABLES (ISSUE + MERGE REQUEST)
# ============================================================

class Issuable(Subscribable, Noteable):
    class State(models.TextChoices):
        OPENED = "opened", "Open"
        CLOSED = "closed", "Closed"
        MERGED = "merged", "Merged"

    project = models.ForeignKey(
        Project,
        on_delete=models.CASCADE,
        related_name="%(class)ss",
    )
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="authored_%(class)ss",
    )
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    state = models.CharField(
        max_length=20,
        choices=State.choices,
        default=State.OPENED,
        db_index=True,
    )
    labels = models.ManyToManyField(Label, blank=True, related_name="%(class)ss")
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    # event suffix for custom settings and read_<ability_name>
    ability_name = None

    class Meta:
        abstract = True

    def __str__(self):
        return self.title

    def assignee_list(self):
        raise NotImplementedError

    def participants(self, current_user=None):
        """
        Users involved with this issuable: author, assignees,
        anyone mentioned in the description, note authors and
        users mentioned in notes.
        """
        users = [self.author]
        users.extend(self.assignee_list())
        users.extend(mentioned_users(self.description))
        users.extend(self.note_participants())
        return unique_users(users)

    def as_notification_target(self):
        return NotificationTarget(
            obj=self,
            kind=TargetKind.ISSUABLE,
            name=self.ability_name,
            ability_name=self.ability_name,
            project=self.project,
            participants=self.participants,
            subscribers=self.subscribers,
            subscription_for=self.subscription_for,
            labels=lambda: list(self.labels.all()),
            assignees=self.assignee_list,
        )


class Issue(Issuable):
    confidential = models.BooleanField(default=False)
    assignees = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        blank=True,
        related_name="assigned_issues",
    )

    ability_name = "issue"

    def assignee_list(self):
        return list(self.assignees.order_by("id"))


class MergeRequest(Issuable):
    assignee = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="assigned_merge_requests",
    )
    source_branch = models.CharField(max_length=255, blank=True)
    target_branch = models.CharField(max_length=255, default="main")

    ability_name = "merge_request"

    def assignee_list(self):
        return [self.assignee] if self.assignee_id else []


# ============================================================
# SNIPPETS
# ============================================================

class Snippet(Noteable):
    """
    A snippet without a project is a personal snippet.
    """

    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="snippets",
    )
    project = models.ForeignKey(
        Project,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="snippets",
    )
    title = models.CharField(max_length=255)
    content = models.TextField(blank=True)
    visibility = models.CharField(
        max_length=20,
        choices=Visibility.choices,
        default=Visibility.PRIVATE,
    )
    created_at = models.DateTimeField(default=timezone.now)

    def __str__(self):
        return self.title

    @property
    def is_personal(self):
        return self.project_id is None

    def participants(self, current_user=None):
        users = [self.author]
        users.extend(note.author for note in self.notes.select_related("author"))
        return unique_users(users)

    def as_notification_target(self):
        return NotificationTarget(
            obj=self,
            kind=TargetKind.SNIPPET,
            name="snippet",
            project=self.project,
            participants=self.participants,
        )
