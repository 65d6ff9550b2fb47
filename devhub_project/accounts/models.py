from django.db import models
from django.contrib.auth.models import AbstractUser


class User(AbstractUser):
    notified_of_own_activity = models.BooleanField(
        default=False,
        help_text="Also notify this user about their own actions",
    )

    def __str__(self):
        full = self.get_full_name()
        return f"{full} ({self.username})" if full else self.username

    # =====================================================
    # ABILITIES
    # =====================================================
    def can(self, ability, subject=None):
        from .abilities import can

        return can(self, ability, subject)

    # =====================================================
    # NOTIFICATION SETTINGS
    # =====================================================
    def notification_settings_for(self, source):
        """
        Stored notification setting for a project or group,
        or None when the user never had one.
        """
        if source is None:
            return None

        from projects.models import Group

        field = "group" if isinstance(source, Group) else "project"
        return self.notification_settings.filter(**{field: source}).first()

    def global_notification_setting(self):
        """
        The user's global setting.

        Never writes: a user without a stored global row gets an
        unsaved default at the participating level.
        """
        from notifications.models import NotificationSetting

        setting = self.notification_settings.filter(
            project__isnull=True,
            group__isnull=True,
        ).first()

        if setting is None:
            setting = NotificationSetting(
                user=self,
                level=NotificationSetting.Level.PARTICIPATING,
            )

        return setting
