import re

from django.contrib.auth import get_user_model

# @username, not preceded by a word character (emails) and
# without trailing punctuation ("thanks @alice." -> "alice")
MENTION_PATTERN = re.compile(
    r"(?<![\w.@])@([A-Za-z0-9_](?:[A-Za-z0-9_.-]*[A-Za-z0-9_])?)"
)


def mentioned_usernames(text):
    names = []
    for match in MENTION_PATTERN.finditer(text or ""):
        name = match.group(1)
        if name not in names:
            names.append(name)
    return names


def mentioned_users(text):
    """
    Users referenced with @username in `text`, in the order
    they first appear. Unknown usernames are ignored.
    """
    names = mentioned_usernames(text)
    if not names:
        return []

    User = get_user_model()
    by_name = {
        user.username: user
        for user in User.objects.filter(username__in=names)
    }
    return [by_name[name] for name in names if name in by_name]
