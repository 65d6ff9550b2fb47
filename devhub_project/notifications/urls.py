from django.urls import path

from . import views

app_name = "notifications"

urlpatterns = [
    # Inbox
    path("", views.notification_inbox, name="inbox"),
    path("read/", views.notification_mark_all_read, name="mark-all-read"),

    # Settings
    path("settings/", views.notification_setting, name="global-setting"),
    path("settings/projects/<int:project_id>/", views.notification_setting, name="project-setting"),
    path("settings/groups/<int:group_id>/", views.notification_setting, name="group-setting"),
]
