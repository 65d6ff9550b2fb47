from django.contrib.auth.decorators import login_required
from django.http import Http404, JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.http import require_http_methods, require_POST

from projects.models import Group, Project
from .forms import NotificationSettingForm
from .models import Notification, NotificationSetting


def _setting_payload(setting):
    return {
        "source_type": setting.source_type,
        "source_id": setting.project_id or setting.group_id,
        "level": setting.level,
        "events": setting.events(),
    }


def _setting_for(user, project=None, group=None):
    """
    The caller's stored setting for the source, or an unsaved
    default (global for projects/groups, participating globally).
    """
    if project is None and group is None:
        return user.global_notification_setting()

    setting = NotificationSetting.objects.filter(
        user=user,
        project=project,
        group=group,
    ).first()

    if setting is None:
        setting = NotificationSetting(
            user=user,
            project=project,
            group=group,
            level=NotificationSetting.Level.GLOBAL,
        )

    return setting


# ============================================================
# NOTIFICATION SETTINGS (GLOBAL / PROJECT / GROUP)
# ============================================================

@login_required
@require_http_methods(["GET", "POST"])
def notification_setting(request, project_id=None, group_id=None):
    project = group = None

    if project_id is not None:
        project = get_object_or_404(Project, pk=project_id)
        if not request.user.can("read_project", project):
            raise Http404("Project not found")

    elif group_id is not None:
        group = get_object_or_404(Group, pk=group_id)
        if not request.user.can("read_group", group):
            raise Http404("Group not found")

    setting = _setting_for(request.user, project=project, group=group)

    if request.method == "GET":
        return JsonResponse(_setting_payload(setting))

    form = NotificationSettingForm(request.POST, instance=setting)

    if not form.is_valid():
        return JsonResponse(
            {"success": False, "errors": form.errors},
            status=400
        )

    setting = form.save()

    return JsonResponse({
        "success": True,
        **_setting_payload(setting),
    })


# ============================================================
# INBOX
# ============================================================

@login_required
def notification_inbox(request):
    category = request.GET.get("category")

    qs = (
        Notification.objects
        .filter(recipient=request.user, is_read=False)
        .select_related("actor", "project")
    )

    if category:
        qs = qs.filter(category=category)

    return JsonResponse({
        "unread_count": qs.count(),
        "notifications": [
            {
                "id": n.id,
                "category": n.category,
                "priority": n.priority,
                "action": n.action,
                "title": n.title,
                "message": n.message,
                "project": str(n.project) if n.project else None,
                "actor": n.actor.username if n.actor else None,
                "action_url": n.action_url,
                "created_at": n.created_at.isoformat(),
            }
            for n in qs[:50]
        ],
    })


@login_required
@require_POST
def notification_mark_all_read(request):
    updated = Notification.mark_all_as_read(
        request.user,
        category=request.POST.get("category") or None,
    )
    return JsonResponse({"success": True, "updated": updated})
