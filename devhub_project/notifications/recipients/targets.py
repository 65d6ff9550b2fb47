"""
notifications/recipients/targets.py

Explicit capability description of a notification target.

Models that can be the subject of a notification implement
`as_notification_target()` and return a `NotificationTarget`.
Every capability is optional: a missing one means "this step
contributes no recipients", never an error.
"""

import enum
from dataclasses import dataclass
from typing import Any, Callable, Optional


class TargetKind(enum.Enum):
    ISSUABLE = "issuable"
    PIPELINE = "pipeline"
    SNIPPET = "snippet"
    OTHER = "other"


@dataclass(frozen=True)
class NotificationTarget:
    obj: Any
    kind: TargetKind = TargetKind.OTHER
    name: str = ""
    ability_name: Optional[str] = None
    project: Any = None

    participants: Optional[Callable[[Any], list]] = None
    subscribers: Optional[Callable[[Any], list]] = None
    subscription_for: Optional[Callable[[Any, Any], Any]] = None
    labels: Optional[Callable[[], list]] = None
    assignees: Optional[Callable[[], list]] = None

    @property
    def is_issuable(self):
        return self.kind is TargetKind.ISSUABLE

    @property
    def is_pipeline(self):
        return self.kind is TargetKind.PIPELINE

    def custom_action(self, action):
        """Event key looked up on custom notification settings."""
        return f"{action}_{self.name}"


def as_target(obj):
    """
    Resolve an object into a NotificationTarget once, up front.
    """
    if isinstance(obj, NotificationTarget):
        return obj

    adapter = getattr(obj, "as_notification_target", None)
    if adapter is None:
        return NotificationTarget(
            obj=obj,
            project=getattr(obj, "project", None),
        )

    return adapter()
