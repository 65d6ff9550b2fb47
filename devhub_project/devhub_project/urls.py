from django.contrib import admin
from django.urls import path, include


urlpatterns = [
    # DJANGO ADMIN (STAFF ONLY)
    path("admin/", admin.site.urls),

    # AUTH
    path("accounts/", include("django.contrib.auth.urls")),

    # NOTIFICATIONS
    path("notifications/", include("notifications.urls")),
]
