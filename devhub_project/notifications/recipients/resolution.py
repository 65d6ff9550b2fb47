"""
notifications/recipients/resolution.py

Effective notification setting for a (user, project) pair.
"""


def notification_setting_for_user_project(user, project):
    """
    Project setting, unless missing or `global`;
    then group setting, unless missing or `global`;
    then the user's global setting.

    `project` may be None (personal snippets): the global
    setting applies.
    """
    project_setting = project and user.notification_settings_for(project)

    if project_setting and not project_setting.is_global:
        return project_setting

    group = project.group if project is not None else None
    group_setting = group and user.notification_settings_for(group)

    if group_setting and not group_setting.is_global:
        return group_setting

    return user.global_notification_setting()


class RecipientContext:
    """
    State shared by the steps of one builder call: the project
    the recipients are resolved against and memoized settings.

    Create one per call. Nothing here outlives the call.
    """

    def __init__(self, project):
        self.project = project
        self._settings = {}

    @property
    def group(self):
        return self.project.group if self.project is not None else None

    def setting_for(self, user):
        if user.pk not in self._settings:
            self._settings[user.pk] = notification_setting_for_user_project(
                user, self.project
            )
        return self._settings[user.pk]
