import pytest
from django.db import IntegrityError, transaction

from notifications.models import NotificationSetting
from notifications.recipients import NotificationTarget, RecipientContext, as_target
from notifications.recipients.filters import (
    add_custom_notifications,
    add_labels_subscribers,
    add_subscribed_users,
    reject_mention_users,
    reject_muted_users,
    reject_unsubscribed_users,
    reject_users,
    reject_users_without_access,
    unique_users,
)
from projects.models import AccessLevel, Project

Level = NotificationSetting.Level


def names(users):
    return [user.username for user in users]


@pytest.mark.django_db
class TestLevelRejection:

    def test_invalid_level_is_a_programming_error(self, make_user, project):
        with pytest.raises(ValueError, match="Invalid notification level"):
            reject_users(RecipientContext(project), [make_user()], "loud")

    def test_invalid_level_raises_even_for_no_users(self, project):
        with pytest.raises(ValueError):
            reject_users(RecipientContext(project), [], "loud")

    def test_reject_muted_uses_resolved_setting(self, make_user, project, set_level):
        muted, group_muted, fine = make_user("muted"), make_user("group-muted"), make_user("fine")
        set_level(muted, project, Level.DISABLED)
        set_level(group_muted, project.group, Level.DISABLED)
        set_level(fine, project, Level.WATCH)
        set_level(fine, project.group, Level.DISABLED)

        result = reject_muted_users(RecipientContext(project), [muted, group_muted, fine])

        assert names(result) == ["fine"]

    def test_reject_mention(self, make_user, project, set_level):
        quiet, loud = make_user("quiet"), make_user("loud")
        set_level(quiet, None, Level.MENTION)

        result = reject_mention_users(RecipientContext(project), [quiet, loud])

        assert names(result) == ["loud"]

    def test_duplicates_and_none_are_dropped(self, make_user, project):
        user = make_user("dup")

        result = reject_muted_users(RecipientContext(project), [user, None, user])

        assert names(result) == ["dup"]

    def test_empty_in_empty_out(self, project):
        assert reject_muted_users(RecipientContext(project), []) == []


@pytest.mark.django_db
class TestSubscriptionFilters:

    def test_explicit_unsubscribe_is_rejected(self, member, make_issue, subscribe, project):
        author, left, silent = member("author"), member("left"), member("silent")
        issue = make_issue(author)
        subscribe(left, issue, project, subscribed=False)

        result = reject_unsubscribed_users(
            RecipientContext(project), [author, left, silent], as_target(issue)
        )

        assert names(result) == ["author", "silent"]

    def test_target_without_subscriptions_keeps_everyone(self, make_user, make_pipeline):
        user = make_user()
        target = as_target(make_pipeline(user))

        assert reject_unsubscribed_users(RecipientContext(None), [user], target) == [user]
        assert add_subscribed_users(RecipientContext(None), [user], target) == [user]

    def test_subscribers_scoped_to_project(self, member, make_issue, subscribe, project):
        author, scoped, unscoped, other = (
            member("author"), member("scoped"), member("unscoped"), member("other")
        )
        issue = make_issue(author)
        subscribe(scoped, issue, project)
        subscribe(unscoped, issue)
        subscribe(other, issue, project, subscribed=False)

        result = add_subscribed_users(RecipientContext(project), [], as_target(issue))

        assert names(result) == ["scoped", "unscoped"]

    def test_project_unsubscribe_overrides_unscoped_subscribe(self, member, make_issue, subscribe, project):
        author, quitter = member("author"), member("quitter")
        issue = make_issue(author)
        subscribe(quitter, issue)
        subscribe(quitter, issue, project, subscribed=False)

        result = reject_unsubscribed_users(RecipientContext(project), [quitter], as_target(issue))

        assert result == []

    def test_unsubscribe_in_another_project_does_not_apply(
        self, member, make_issue, subscribe, project
    ):
        author, follower = member("author"), member("follower")
        other = Project.objects.create(name="Other", path="other")
        issue = make_issue(author)
        subscribe(follower, issue)
        subscribe(follower, issue, other, subscribed=False)

        kept = reject_unsubscribed_users(RecipientContext(project), [follower], as_target(issue))
        dropped = reject_unsubscribed_users(RecipientContext(other), [follower], as_target(issue))

        assert names(kept) == ["follower"]
        assert dropped == []

    def test_unscoped_unsubscribe_applies_to_every_project(self, member, make_issue, subscribe, project):
        author, left = member("author"), member("left")
        issue = make_issue(author)
        subscribe(left, issue, subscribed=False)

        assert reject_unsubscribed_users(RecipientContext(project), [left], as_target(issue)) == []
        assert reject_unsubscribed_users(RecipientContext(None), [left], as_target(issue)) == []

    def test_subscription_for_prefers_the_project_row(self, member, make_issue, subscribe, project):
        author, user = member("author"), member("user")
        issue = make_issue(author)
        unscoped = subscribe(user, issue)
        scoped = subscribe(user, issue, project, subscribed=False)

        assert issue.subscription_for(user, project) == scoped
        assert issue.subscription_for(user) == unscoped
        assert issue.subscription_for(None, project) is None

    def test_one_unscoped_subscription_per_user(self, member, make_issue, subscribe):
        author, user = member("author"), member("user")
        issue = make_issue(author)
        subscribe(user, issue)

        with pytest.raises(IntegrityError), transaction.atomic():
            subscribe(user, issue, subscribed=False)


@pytest.mark.django_db
class TestAccessFilter:

    def test_inactive_users_do_not_receive_notifications(self, member, make_issue):
        author = member("author")
        inactive = member("inactive", is_active=False)
        issue = make_issue(author)

        result = reject_users_without_access([author, inactive], as_target(issue))

        assert names(result) == ["author"]

    def test_issuable_requires_read_ability(self, member, make_user, make_issue):
        author = member("author")
        outsider = make_user("outsider")
        issue = make_issue(author)

        result = reject_users_without_access([author, outsider], as_target(issue))

        assert names(result) == ["author"]

    def test_confidential_issue_hides_from_guests(self, member, make_issue):
        author = member("author")
        guest = member("guest", access_level=AccessLevel.GUEST)
        reporter = member("reporter", access_level=AccessLevel.REPORTER)
        issue = make_issue(author, confidential=True)

        result = reject_users_without_access([author, guest, reporter], as_target(issue))

        assert names(result) == ["author", "reporter"]

    def test_pipeline_requires_read_build(self, member, make_pipeline):
        guest = member("guest", access_level=AccessLevel.GUEST)
        reporter = member("reporter", access_level=AccessLevel.REPORTER)
        target = as_target(make_pipeline(reporter))

        result = reject_users_without_access([guest, reporter], target)

        assert names(result) == ["reporter"]

    def test_other_targets_only_need_receive_notifications(self, make_user):
        user = make_user()
        target = NotificationTarget(obj=object())

        assert reject_users_without_access([user, None], target) == [user]


@pytest.mark.django_db
class TestAdditions:

    def test_custom_notifications_on_project_group_and_global(self, make_user, project, set_level):
        on_project = make_user("on-project")
        on_group = make_user("on-group")
        via_global = make_user("via-global")
        event_off = make_user("event-off")

        set_level(on_project, project, Level.CUSTOM, new_issue=True)
        set_level(on_group, project.group, Level.CUSTOM, new_issue=True)
        set_level(via_global, project, Level.GLOBAL)
        set_level(via_global, None, Level.CUSTOM, new_issue=True)
        set_level(event_off, project, Level.CUSTOM, close_issue=True)

        result = add_custom_notifications(RecipientContext(project), [], "new_issue")

        assert set(names(result)) == {"on-project", "on-group", "via-global"}

    def test_global_custom_needs_a_deferring_setting(self, make_user, project, set_level):
        stranger = make_user("stranger")
        set_level(stranger, None, Level.CUSTOM, new_issue=True)

        assert add_custom_notifications(RecipientContext(project), [], "new_issue") == []

    def test_label_subscribers_from_explicit_labels(self, member, make_issue, make_label, subscribe, project):
        author, bug_fan, ui_fan = member("author"), member("bug-fan"), member("ui-fan")
        bug, ui = make_label("bug"), make_label("ui")
        issue = make_issue(author, labels=[bug, ui])
        subscribe(bug_fan, bug, project)
        subscribe(ui_fan, ui)

        context = RecipientContext(project)
        target = as_target(issue)

        assert names(add_labels_subscribers(context, [], target, labels=[bug])) == ["bug-fan"]
        assert set(names(add_labels_subscribers(context, [], target))) == {"bug-fan", "ui-fan"}

    def test_label_subscribers_need_labels_capability(self, make_user, make_label):
        user = make_user()
        target = NotificationTarget(obj=object())

        assert add_labels_subscribers(RecipientContext(None), [user], target, labels=[make_label()]) == [user]


def test_unique_users_keeps_first_occurrence():
    class Stub:
        def __init__(self, pk):
            self.pk = pk

    a, b = Stub(1), Stub(2)

    assert unique_users([a, None, b, Stub(1)]) == [a, b]
