"""Tests related to the automatic assignment of submissions to testers and reviewers."""

import datetime
import logging

import pytest
from django.contrib.auth import get_user_model
from django.test import override_settings
from django.utils import timezone

from xperts.xperts_profile import constants
from xperts.xperts_profile.factories import ReviewerFactory, TesterFactory

from ..exceptions import InvalidTransition
from ..factories import ExtendedSubmissionFactory, SubmissionFactory
from ..logic import CreateSubmission
from ..logic__assignment import AssignSubmission, ReassignPending
from ..logic__availability import ToggleAvailability
from ..models import Submission, SubmissionAssignment
from ..workload import open_submissions_for, queue_stats, workload_for
from .conftest import EXTENDED_FORM_DATA, SIMPLE_FORM_DATA, assign_to

Account = get_user_model()

DEFAULT_ASSIGNMENT_FUNCTION = "xperts.plugins.xperts_review.events.assignment.assign_least_loaded"
RANDOM_ASSIGNMENT_FUNCTION = "xperts.plugins.xperts_review.events.assignment.assign_random"


@pytest.mark.django_db
def test_new_simple_submission_is_claimed_by_available_reviewer(contributor, reviewer):
    submission = CreateSubmission(contributor=contributor, form_data=SIMPLE_FORM_DATA).run()

    submission.refresh_from_db()
    assert submission.state == Submission.States.CLAIMED
    assert submission.assignee == reviewer
    assert submission.assigned_at
    assignment = SubmissionAssignment.objects.get(submission=submission)
    assert assignment.assignee == reviewer
    assert assignment.role == constants.REVIEWER_ROLE
    assert assignment.date_released is None


@pytest.mark.django_db
def test_new_submission_is_deferred_without_available_reviewer(contributor, unavailable_reviewer, caplog):
    caplog.set_level(logging.INFO)
    submission = CreateSubmission(contributor=contributor, form_data=SIMPLE_FORM_DATA).run()

    submission.refresh_from_db()
    assert submission.state == Submission.States.PENDING
    assert submission.assignee is None
    assert list(Submission.objects.deferred()) == [submission]
    assert f"No REVIEWER available for submission {submission.pk}: deferred" in caplog.text
    assert not SubmissionAssignment.objects.exists()


@pytest.mark.django_db
def test_deferred_submission_is_assigned_when_reviewer_turns_available(contributor, unavailable_reviewer):
    submission = CreateSubmission(contributor=contributor, form_data=SIMPLE_FORM_DATA).run()

    result = ToggleAvailability(user=unavailable_reviewer, actor=unavailable_reviewer).run()

    assert result.is_green_light
    assert result.assigned_count == 1
    submission.refresh_from_db()
    assert submission.state == Submission.States.CLAIMED
    assert submission.assignee == unavailable_reviewer


@pytest.mark.django_db
def test_new_extended_submission_goes_to_testing(contributor, tester, reviewer):
    submission = CreateSubmission(
        contributor=contributor,
        form_data=EXTENDED_FORM_DATA,
        kind=Submission.Kinds.EXTENDED,
    ).run()

    submission.refresh_from_db()
    assert submission.state == Submission.States.IN_TESTING
    assert submission.assignee == tester
    assert SubmissionAssignment.objects.get(submission=submission).role == constants.TESTER_ROLE


@pytest.mark.django_db
def test_new_extended_submission_deferred_without_testers(contributor, reviewer):
    submission = CreateSubmission(
        contributor=contributor,
        form_data=EXTENDED_FORM_DATA,
        kind=Submission.Kinds.EXTENDED,
    ).run()

    submission.refresh_from_db()
    assert submission.state == Submission.States.TASK_SUBMITTED
    assert submission.assignee is None
    assert list(Submission.objects.deferred(constants.TESTER_ROLE)) == [submission]
    assert not Submission.objects.deferred(constants.REVIEWER_ROLE).exists()


@pytest.mark.django_db
def test_least_loaded_reviewer_is_selected(contributor):
    busy = ReviewerFactory()
    idle = ReviewerFactory()
    assign_to(SubmissionFactory(state=Submission.States.CLAIMED), busy)
    # closed submissions do not count
    assign_to(SubmissionFactory(state=Submission.States.ELIGIBLE), idle)
    Submission.objects.filter(assignee=idle).update(state=Submission.States.APPROVED)

    result = AssignSubmission(submission=SubmissionFactory(contributor=contributor)).run()

    assert result.assignee == idle
    assert not result.deferred
    assert workload_for(idle) == 1
    assert workload_for(busy) == 1


@pytest.mark.django_db
def test_workload_ties_are_broken_by_registration_date(contributor):
    now = timezone.now()
    newcomer = ReviewerFactory(date_joined=now)
    veteran = ReviewerFactory(date_joined=now - datetime.timedelta(days=30))

    result = AssignSubmission(submission=SubmissionFactory(contributor=contributor)).run()

    assert result.assignee == veteran
    assert newcomer.assigned_submissions.count() == 0


@pytest.mark.django_db
def test_unapproved_and_inactive_reviewers_are_never_selected(contributor):
    ReviewerFactory(is_approved=False)
    ReviewerFactory(is_active=False)
    TesterFactory()

    result = AssignSubmission(submission=SubmissionFactory(contributor=contributor)).run()

    assert result.deferred
    assert result.assignee is None


@pytest.mark.django_db
def test_already_assigned_submission_is_left_alone(claimed_submission, reviewer):
    ReviewerFactory()

    result = AssignSubmission(submission=claimed_submission).run()

    assert result.assignee == reviewer
    assert SubmissionAssignment.objects.filter(submission=claimed_submission).count() == 1


@pytest.mark.django_db
@pytest.mark.parametrize("state", [Submission.States.APPROVED, Submission.States.REJECTED])
def test_closed_submissions_are_never_assigned(reviewer, state):
    submission = SubmissionFactory(state=state)

    with pytest.raises(InvalidTransition):
        AssignSubmission(submission=submission).run()
    submission.refresh_from_db()
    assert submission.assignee is None


@pytest.mark.django_db
@pytest.mark.parametrize(
    "state",
    [Submission.States.ELIGIBLE, Submission.States.REWORK, Submission.States.CHANGES_REQUESTED],
)
def test_states_without_assignee_cannot_be_assigned(reviewer, tester, state):
    submission = SubmissionFactory(state=state)

    with pytest.raises(InvalidTransition):
        AssignSubmission(submission=submission).run()


@pytest.mark.django_db
def test_reassign_pending_spreads_submissions():
    reviewers = [ReviewerFactory() for __ in range(3)]
    submissions = [SubmissionFactory() for __ in range(3)]

    result = ReassignPending().run()

    assert result.assigned_count == 3
    assert result.deferred_count == 0
    for reviewer in reviewers:
        assert workload_for(reviewer) == 1
    assert {s.assignee for s in Submission.objects.filter(pk__in=[s.pk for s in submissions])} == set(reviewers)


@pytest.mark.django_db
def test_reassign_pending_continues_round_robin_when_pool_is_exhausted():
    reviewers = [ReviewerFactory() for __ in range(2)]
    for __ in range(5):
        SubmissionFactory()

    result = ReassignPending().run()

    assert result.assigned_count == 5
    assert sorted(workload_for(reviewer) for reviewer in reviewers) == [2, 3]


@pytest.mark.django_db
def test_reassign_pending_is_idempotent(reviewer):
    SubmissionFactory()
    SubmissionFactory()

    first = ReassignPending().run()
    second = ReassignPending().run()

    assert first.assigned_count == 2
    assert second.assigned_count == 0
    assert second.deferred_count == 0


@pytest.mark.django_db
def test_reassign_pending_reports_deferred(unavailable_reviewer, tester, caplog):
    caplog.set_level(logging.INFO)
    SubmissionFactory()
    ExtendedSubmissionFactory()

    result = ReassignPending().run()

    assert result.assigned_count == 1
    assert result.deferred_count == 1
    assert "Reassigned 1 pending submissions, 1 still deferred" in caplog.text


@pytest.mark.django_db
def test_random_assignment_function(contributor, reviewer):
    other = ReviewerFactory()
    with override_settings(XPERTS_ASSIGNMENT_FUNCTIONS={None: RANDOM_ASSIGNMENT_FUNCTION}):
        result = AssignSubmission(submission=SubmissionFactory(contributor=contributor)).run()
    assert result.assignee in (reviewer, other)


@pytest.mark.django_db
def test_assignment_function_by_kind(contributor, reviewer):
    functions = {
        None: DEFAULT_ASSIGNMENT_FUNCTION,
        Submission.Kinds.SIMPLE: RANDOM_ASSIGNMENT_FUNCTION,
    }
    with override_settings(XPERTS_ASSIGNMENT_FUNCTIONS=functions):
        result = AssignSubmission(submission=SubmissionFactory(contributor=contributor)).run()
    assert result.assignee == reviewer


@pytest.mark.django_db
def test_workload_helpers(reviewer, tester, unavailable_reviewer):
    first = assign_to(SubmissionFactory(state=Submission.States.CLAIMED), reviewer)
    second = assign_to(SubmissionFactory(state=Submission.States.CLAIMED), reviewer)
    SubmissionFactory()
    ExtendedSubmissionFactory()
    ExtendedSubmissionFactory()

    assert list(open_submissions_for(reviewer)) == [first, second]
    annotated = Account.objects.annotate_workload().get(pk=reviewer.pk)
    assert annotated.workload == 2
    assert list(Account.objects.assignment_candidates(constants.REVIEWER_ROLE)) == [reviewer]
    assert queue_stats() == {
        constants.TESTER_ROLE: {"deferred": 2, "available": 1},
        constants.REVIEWER_ROLE: {"deferred": 1, "available": 1},
    }
