"""
Shared fixtures: a private group "acme" with a private project
"acme/widgets", and factories for users, memberships, settings
and subscriptions.
"""

import itertools

import pytest

from accounts.models import User
from ci.models import Pipeline
from issues.models import Issue, Label, MergeRequest, Note, Subscription
from notifications.models import NotificationSetting
from projects.models import AccessLevel, Group, Member, Project, Visibility


@pytest.fixture
def make_user(db):
    counter = itertools.count(1)

    def _make(username=None, **kwargs):
        username = username or f"user{next(counter)}"
        kwargs.setdefault("email", f"{username}@example.com")
        return User.objects.create_user(username=username, password="secret", **kwargs)

    return _make


@pytest.fixture
def group(db):
    return Group.objects.create(name="Acme", path="acme", visibility=Visibility.PRIVATE)


@pytest.fixture
def project(group):
    return Project.objects.create(
        name="Widgets",
        path="widgets",
        group=group,
        visibility=Visibility.PRIVATE,
    )


@pytest.fixture
def add_member(db):
    def _add(user, source, access_level=AccessLevel.DEVELOPER):
        if isinstance(source, Group):
            return Member.objects.create(user=user, group=source, access_level=access_level)
        return Member.objects.create(user=user, project=source, access_level=access_level)

    return _add


@pytest.fixture
def member(make_user, add_member, project):
    """A developer of the project, with default settings."""

    def _make(username=None, access_level=AccessLevel.DEVELOPER, **kwargs):
        user = make_user(username, **kwargs)
        add_member(user, project, access_level)
        return user

    return _make


@pytest.fixture
def set_level(db):
    """
    Upsert a notification setting. `source` is a project, a
    group, or None for the global setting.
    """

    def _set(user, source, level, **events):
        project = source if isinstance(source, Project) else None
        group = source if isinstance(source, Group) else None
        setting, _ = NotificationSetting.objects.update_or_create(
            user=user,
            project=project,
            group=group,
            defaults={"level": level, **events},
        )
        return setting

    return _set


@pytest.fixture
def subscribe(db):
    def _subscribe(user, subject, project=None, subscribed=True):
        return Subscription.objects.create(
            user=user,
            subject=subject,
            project=project,
            subscribed=subscribed,
        )

    return _subscribe


@pytest.fixture
def make_issue(project):
    def _make(author, assignees=(), labels=(), **kwargs):
        kwargs.setdefault("title", "Widget crashes on start")
        issue = Issue.objects.create(project=kwargs.pop("project", project), author=author, **kwargs)
        issue.assignees.set(assignees)
        issue.labels.set(labels)
        return issue

    return _make


@pytest.fixture
def make_merge_request(project):
    def _make(author, assignee=None, labels=(), **kwargs):
        kwargs.setdefault("title", "Fix widget crash")
        merge_request = MergeRequest.objects.create(
            project=project,
            author=author,
            assignee=assignee,
            **kwargs,
        )
        merge_request.labels.set(labels)
        return merge_request

    return _make


@pytest.fixture
def make_label(project):
    def _make(title="bug", **kwargs):
        kwargs.setdefault("project", project)
        return Label.objects.create(title=title, **kwargs)

    return _make


@pytest.fixture
def make_note(db):
    def _make(author, noteable, text="Looks good"):
        return Note.objects.create(author=author, noteable=noteable, note=text)

    return _make


@pytest.fixture
def make_pipeline(project):
    def _make(user, status=Pipeline.Status.RUNNING, **kwargs):
        return Pipeline.objects.create(project=project, user=user, status=status, **kwargs)

    return _make
