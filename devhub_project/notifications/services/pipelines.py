from ci.models import Pipeline
from notifications.models import Notification
from notifications.recipients import build_pipeline_recipients
from .delivery import create_notifications


# ============================================================
# PIPELINE FINISHED (SUCCESS / FAILED)
# ============================================================

def pipeline_finished(pipeline):
    """
    Tell the user who triggered the pipeline how it ended.
    Other statuses are ignored.
    """
    if pipeline.status not in Pipeline.NOTIFIABLE_STATUSES:
        return []

    recipients = build_pipeline_recipients(pipeline, pipeline.user, pipeline.status)

    if pipeline.status == Pipeline.Status.FAILED:
        title = f"Pipeline #{pipeline.pk} failed"
        message = (
            f"Your pipeline for {pipeline.ref} in {pipeline.project} failed."
        )
        priority = Notification.Priority.DANGER
    else:
        title = f"Pipeline #{pipeline.pk} passed"
        message = (
            f"Your pipeline for {pipeline.ref} in {pipeline.project} passed."
        )
        priority = Notification.Priority.INFO

    return create_notifications(
        recipients,
        category=Notification.Category.PIPELINE,
        action=f"{pipeline.status}_pipeline",
        title=title,
        message=message,
        target=pipeline,
        project=pipeline.project,
        actor=pipeline.user,
        priority=priority,
    )
