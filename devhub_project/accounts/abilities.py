"""
accounts/abilities.py

Capability checks used across the site.

`can(user, ability, subject)` is the single entry point. Each
ability maps to one rule function; unknown abilities are denied.
"""

import logging

from projects.models import AccessLevel, Visibility

logger = logging.getLogger(__name__)


# ============================================================
# HELPERS
# ============================================================

def _max_access(user, project):
    if project is None or user is None:
        return 0
    return project.max_member_access_for(user)


def _is_authenticated(user):
    return user is not None and user.is_authenticated and user.is_active


# ============================================================
# RULES
# ============================================================

def _receive_notifications(user, subject):
    return user is not None and user.is_active


def _read_project(user, project):
    if project is None:
        return False

    if project.visibility == Visibility.PUBLIC:
        return True

    if not _is_authenticated(user):
        return False

    if user.is_superuser:
        return True

    if project.visibility == Visibility.INTERNAL:
        return True

    return _max_access(user, project) > 0


def _read_group(user, group):
    if group is None:
        return False

    if group.visibility == Visibility.PUBLIC:
        return True

    if not _is_authenticated(user):
        return False

    if user.is_superuser or group.visibility == Visibility.INTERNAL:
        return True

    return group.members.filter(user=user).exists()


def _read_issue(user, issue):
    if not _read_project(user, issue.project):
        return False

    if not issue.confidential:
        return True

    if user is None:
        return False

    if user.is_superuser or issue.author_id == user.id:
        return True

    if issue.assignees.filter(pk=user.pk).exists():
        return True

    return _max_access(user, issue.project) >= AccessLevel.REPORTER


def _read_merge_request(user, merge_request):
    return _read_project(user, merge_request.project)


def _read_build(user, subject):
    project = getattr(subject, "project", subject)

    if not _read_project(user, project):
        return False

    if project.visibility == Visibility.PUBLIC:
        return True

    if user is not None and user.is_superuser:
        return True

    return _max_access(user, project) >= AccessLevel.REPORTER


def _read_personal_snippet(user, snippet):
    if snippet.visibility == Visibility.PUBLIC:
        return True

    if not _is_authenticated(user):
        return False

    if snippet.visibility == Visibility.INTERNAL:
        return True

    return user.is_superuser or snippet.author_id == user.id


RULES = {
    "receive_notifications": _receive_notifications,
    "read_project": _read_project,
    "read_group": _read_group,
    "read_issue": _read_issue,
    "read_merge_request": _read_merge_request,
    "read_build": _read_build,
    "read_personal_snippet": _read_personal_snippet,
}


# ============================================================
# ENTRY POINT
# ============================================================

def can(user, ability, subject=None):
    rule = RULES.get(str(ability))

    if rule is None:
        logger.debug("Unknown ability %r requested, denying", ability)
        return False

    return bool(rule(user, subject))
