from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Max, Q


class Visibility(models.TextChoices):
    PRIVATE = "private", "Private"
    INTERNAL = "internal", "Internal"
    PUBLIC = "public", "Public"


class AccessLevel(models.IntegerChoices):
    GUEST = 10, "Guest"
    REPORTER = 20, "Reporter"
    DEVELOPER = 30, "Developer"
    MAINTAINER = 40, "Maintainer"
    OWNER = 50, "Owner"


class Group(models.Model):
    name = models.CharField(max_length=150)
    path = models.SlugField(max_length=150, unique=True)
    visibility = models.CharField(
        max_length=20,
        choices=Visibility.choices,
        default=Visibility.PRIVATE,
    )
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.name


class Project(models.Model):
    name = models.CharField(max_length=150)
    path = models.SlugField(max_length=150)
    group = models.ForeignKey(
        Group,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="projects",
    )
    visibility = models.CharField(
        max_length=20,
        choices=Visibility.choices,
        default=Visibility.PRIVATE,
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["group", "path"],
                name="unique_project_path_per_group",
            ),
        ]

    def __str__(self):
        if self.group_id:
            return f"{self.group.path}/{self.path}"
        return self.path

    def max_member_access_for(self, user):
        """
        Highest access level the user holds through project
        or group membership. 0 when the user is not a member.
        """
        if user is None or user.pk is None:
            return 0

        scope = Q(project=self)
        if self.group_id:
            scope |= Q(group_id=self.group_id)

        level = (
            Member.objects
            .filter(scope, user=user)
            .aggregate(level=Max("access_level"))["level"]
        )
        return level or 0


class Member(models.Model):
    """
    Membership of a user in exactly one project or group.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="memberships",
    )
    project = models.ForeignKey(
        Project,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="members",
    )
    group = models.ForeignKey(
        Group,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="members",
    )
    access_level = models.PositiveSmallIntegerField(
        choices=AccessLevel.choices,
        default=AccessLevel.GUEST,
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["user", "project"],
                condition=Q(project__isnull=False),
                name="unique_project_member",
            ),
            models.UniqueConstraint(
                fields=["user", "group"],
                condition=Q(group__isnull=False),
                name="unique_group_member",
            ),
        ]

    def __str__(self):
        return f"{self.user} @ {self.source} ({self.get_access_level_display()})"

    @property
    def source(self):
        return self.project or self.group

    def clean(self):
        if bool(self.project_id) == bool(self.group_id):
            raise ValidationError(
                "A membership must belong to exactly one project or group."
            )
