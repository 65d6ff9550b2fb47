from notifications.models import Notification
from notifications.recipients import build_new_note_recipients
from .delivery import create_notifications


# ============================================================
# NEW COMMENT
# ============================================================

def new_note(note):
    """
    Comment notifications go to the thread participants, project
    watchers and everyone mentioned in the comment.
    """
    recipients = build_new_note_recipients(note)

    author = note.author
    author_name = author.get_full_name() or author.username
    excerpt = note.note if len(note.note) <= 200 else f"{note.note[:197]}..."

    return create_notifications(
        recipients,
        category=Notification.Category.NOTE,
        action="new_note",
        title=f"New comment on “{note.noteable}”",
        message=f"{author_name} commented:\n\n{excerpt}",
        target=note.noteable,
        project=note.project,
        actor=author,
    )
