import pytest
from django.db import connection

from ci.models import Pipeline
from notifications.models import Notification, NotificationSetting
from notifications.services import (
    close_merge_request,
    merge_merge_request,
    new_issue,
    new_note,
    pipeline_finished,
    reassigned_issue,
    reassigned_merge_request,
    relabeled_issue,
)
from notifications.services.delivery import create_notifications

Level = NotificationSetting.Level


def recipients_of(notifications):
    return sorted(n.recipient.username for n in notifications)


@pytest.mark.django_db
class TestIssuableServices:

    def test_new_issue_creates_one_notification_per_recipient(self, member, make_issue, project):
        author, assignee = member("author"), member("assignee")
        issue = make_issue(author, assignees=[assignee])

        created = new_issue(issue, author)

        assert recipients_of(created) == ["assignee"]
        notification = Notification.objects.get(recipient=assignee)
        assert notification.category == Notification.Category.ISSUE
        assert notification.action == "new_issue"
        assert notification.actor == author
        assert notification.project == project
        assert notification.target == issue
        assert notification.emailed_at is None

    def test_reassigned_issue_reaches_previous_assignees(self, member, make_issue, project, set_level):
        author, old, new = member("author"), member("old"), member("new")
        set_level(old, project, Level.MENTION)
        issue = make_issue(author, assignees=[new])

        created = reassigned_issue(issue, author, previous_assignees=[old])

        assert recipients_of(created) == ["new", "old"]
        assert all(n.action == "reassign_issue" for n in created)

    def test_relabeled_issue_without_added_labels_is_a_no_op(self, member, make_issue):
        author = member("author")

        assert relabeled_issue(make_issue(author), [], author) == []
        assert not Notification.objects.exists()

    def test_relabeled_issue(self, member, make_issue, make_label, subscribe, project):
        author, fan = member("author"), member("fan")
        bug = make_label("bug")
        subscribe(fan, bug, project)
        issue = make_issue(author, labels=[bug])

        created = relabeled_issue(issue, [bug], author)

        assert recipients_of(created) == ["fan"]
        assert created[0].action == "relabel_issue"

    def test_merge_request_events(self, member, make_merge_request):
        author, reviewer, old = member("author"), member("reviewer"), member("old")
        merge_request = make_merge_request(author, assignee=reviewer)

        merged = merge_merge_request(merge_request, reviewer)
        closed = close_merge_request(merge_request, author)
        reassigned = reassigned_merge_request(merge_request, author, previous_assignee=old)

        assert recipients_of(merged) == ["author"]
        assert merged[0].category == Notification.Category.MERGE_REQUEST
        assert recipients_of(closed) == ["reviewer"]
        assert recipients_of(reassigned) == ["old", "reviewer"]

    def test_no_recipients_creates_nothing(self, member, make_issue):
        author = member("author")

        assert new_issue(make_issue(author), author) == []
        assert create_notifications([], category="issue", action="new_issue", title="t", message="m") == []
        assert not Notification.objects.exists()


@pytest.mark.django_db
class TestNoteAndPipelineServices:

    def test_new_note(self, member, make_issue, make_note):
        owner, writer = member("owner"), member("writer")
        issue = make_issue(owner)
        note = make_note(writer, issue, "a" * 250)

        created = new_note(note)

        assert recipients_of(created) == ["owner"]
        assert created[0].category == Notification.Category.NOTE
        assert created[0].message.endswith("...")

    def test_pipeline_failed(self, member, make_pipeline):
        user = member("dev")
        pipeline = make_pipeline(user, status=Pipeline.Status.FAILED)

        created = pipeline_finished(pipeline)

        assert recipients_of(created) == ["dev"]
        assert created[0].priority == Notification.Priority.DANGER
        assert created[0].action == "failed_pipeline"

    def test_pipeline_success_for_participating_user(self, member, make_pipeline):
        user = member("dev")

        assert pipeline_finished(make_pipeline(user, status=Pipeline.Status.SUCCESS)) == []

    def test_unfinished_pipeline_is_ignored(self, member, make_pipeline):
        user = member("dev")

        assert pipeline_finished(make_pipeline(user, status=Pipeline.Status.CANCELED)) == []


@pytest.mark.django_db
class TestSignals:

    def test_opening_an_issue_notifies_after_commit(
        self, member, make_issue, django_capture_on_commit_callbacks
    ):
        author, assignee = member("author"), member("assignee")

        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            make_issue(author, assignees=[assignee])

        assert len(callbacks) == 1
        assert recipients_of(Notification.objects.all()) == ["assignee"]

    def test_labels_set_in_the_same_transaction_are_seen(
        self, member, make_issue, make_label, subscribe, project, django_capture_on_commit_callbacks
    ):
        author, fan = member("author"), member("fan")
        bug = make_label("bug")
        subscribe(fan, bug, project)

        with django_capture_on_commit_callbacks(execute=True):
            make_issue(author, labels=[bug])

        assert recipients_of(Notification.objects.all()) == ["fan"]

    def test_requests_run_in_a_transaction(self):
        assert connection.settings_dict["ATOMIC_REQUESTS"]

    def test_updating_an_issue_does_not_notify(
        self, member, make_issue, django_capture_on_commit_callbacks
    ):
        issue = make_issue(member("author"))

        with django_capture_on_commit_callbacks() as callbacks:
            issue.title = "Renamed"
            issue.save()

        assert callbacks == []

    def test_new_note_notifies_after_commit(
        self, member, make_issue, make_note, django_capture_on_commit_callbacks
    ):
        owner, writer = member("owner"), member("writer")
        issue = make_issue(owner)

        with django_capture_on_commit_callbacks(execute=True):
            make_note(writer, issue, "@owner done")

        assert recipients_of(Notification.objects.filter(category="note")) == ["owner"]

    def test_pipeline_transition_notifies_once(
        self, member, make_pipeline, django_capture_on_commit_callbacks
    ):
        user = member("dev")
        pipeline = make_pipeline(user)

        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            pipeline.status = Pipeline.Status.FAILED
            pipeline.save()
            pipeline.save()

        assert len(callbacks) == 1
        assert recipients_of(Notification.objects.filter(category="pipeline")) == ["dev"]

    def test_pipeline_still_running_does_not_notify(
        self, member, make_pipeline, django_capture_on_commit_callbacks
    ):
        pipeline = make_pipeline(member("dev"), status=Pipeline.Status.PENDING)

        with django_capture_on_commit_callbacks() as callbacks:
            pipeline.status = Pipeline.Status.RUNNING
            pipeline.save()

        assert callbacks == []
