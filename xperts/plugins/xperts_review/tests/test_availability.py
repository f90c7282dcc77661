"""Tests of the operations on testers and reviewers."""

from io import StringIO

import pytest
from django.contrib import admin, messages
from django.contrib.auth import get_user_model
from django.contrib.messages import get_messages
from django.contrib.messages.storage.fallback import FallbackStorage
from django.core.management import CommandError, call_command
from django.test import override_settings

from xperts.xperts_profile import constants
from xperts.xperts_profile.admin import AccountAdmin
from xperts.xperts_profile.factories import ReviewerFactory, TesterFactory

from ..exceptions import Unauthorized, ValidationFailure
from ..factories import ExtendedSubmissionFactory, SubmissionFactory
from ..logic__assignment import ReactivateUser
from ..logic__availability import ApproveUser, DeactivateUser, SwitchUserRole, ToggleAvailability
from ..models import Submission, SubmissionAssignment
from ..workload import workload_for
from .conftest import assign_to

Account = get_user_model()


@pytest.mark.django_db
def test_toggle_off_keeps_current_assignments(claimed_submission, reviewer):
    result = ToggleAvailability(user=reviewer, actor=reviewer).run()

    assert not result.is_green_light
    assert result.assigned_count == 0
    reviewer.refresh_from_db()
    assert not reviewer.is_green_light
    claimed_submission.refresh_from_db()
    assert claimed_submission.assignee == reviewer


@pytest.mark.django_db
def test_admin_toggles_other_users(admin_account, unavailable_reviewer):
    SubmissionFactory()

    result = ToggleAvailability(user=unavailable_reviewer, actor=admin_account).run()

    assert result.is_green_light
    assert result.assigned_count == 1


@pytest.mark.django_db
def test_toggle_reads_current_green_light(reviewer):
    stale = Account.objects.get(pk=reviewer.pk)
    ToggleAvailability(user=reviewer, actor=reviewer).run()

    # the second toggle must not flip the outdated value of its copy
    result = ToggleAvailability(user=stale, actor=stale).run()

    assert result.is_green_light
    reviewer.refresh_from_db()
    assert reviewer.is_green_light


@pytest.mark.django_db
def test_users_cannot_toggle_others(reviewer, tester):
    with pytest.raises(Unauthorized):
        ToggleAvailability(user=reviewer, actor=tester).run()


@pytest.mark.django_db
def test_contributors_have_no_green_light(contributor):
    with pytest.raises(ValidationFailure) as e:
        ToggleAvailability(user=contributor, actor=contributor).run()
    assert e.value.field == "role"


@pytest.mark.django_db
@override_settings(XPERTS_REACTIVATION_SOFT_CAP=2)
def test_reactivation_stops_at_soft_cap(unavailable_reviewer):
    submissions = [SubmissionFactory() for __ in range(4)]

    result = ToggleAvailability(user=unavailable_reviewer, actor=unavailable_reviewer).run()

    assert result.assigned_count == 2
    assert workload_for(unavailable_reviewer) == 2
    # oldest first
    assert [s.pk for s in Submission.objects.filter(assignee=unavailable_reviewer)] == [
        submissions[0].pk,
        submissions[1].pk,
    ]
    assert Submission.objects.deferred().count() == 2


@pytest.mark.django_db
def test_reactivation_only_touches_the_user_pool(unavailable_reviewer):
    ExtendedSubmissionFactory()

    result = ToggleAvailability(user=unavailable_reviewer, actor=unavailable_reviewer).run()

    assert result.assigned_count == 0
    assert Submission.objects.deferred(constants.TESTER_ROLE).count() == 1


@pytest.mark.django_db
def test_reactivation_of_unavailable_user_does_nothing(unavailable_reviewer):
    SubmissionFactory()

    assert ReactivateUser(user=unavailable_reviewer).run() == 0
    assert Submission.objects.deferred().count() == 1


@pytest.mark.django_db
def test_approve_green_lit_user_gets_deferred_submissions(admin_account):
    SubmissionFactory()
    reviewer = ReviewerFactory(is_approved=False)

    assert ApproveUser(user=reviewer, actor=admin_account).run() == 1

    reviewer.refresh_from_db()
    assert reviewer.is_approved
    assert workload_for(reviewer) == 1


@pytest.mark.django_db
def test_only_admins_approve_users(reviewer):
    tester = TesterFactory(is_approved=False)

    with pytest.raises(Unauthorized):
        ApproveUser(user=tester, actor=reviewer).run()


@pytest.mark.django_db
def test_switch_role_releases_assignments(admin_account, claimed_submission, reviewer):
    SwitchUserRole(user=reviewer, actor=admin_account, role=constants.TESTER_ROLE).run()

    reviewer.refresh_from_db()
    assert reviewer.role == constants.TESTER_ROLE
    # new testers must be approved again
    assert not reviewer.is_approved
    claimed_submission.refresh_from_db()
    assert claimed_submission.state == Submission.States.PENDING
    assert claimed_submission.assignee is None
    assert SubmissionAssignment.objects.get().release_reason == SubmissionAssignment.ReleaseReasons.ROLE_CHANGED


@pytest.mark.django_db
def test_switch_to_contributor_approves(admin_account):
    tester = TesterFactory(is_approved=False)

    SwitchUserRole(user=tester, actor=admin_account, role=constants.CONTRIBUTOR_ROLE).run()

    tester.refresh_from_db()
    assert tester.is_approved


@pytest.mark.django_db
def test_switch_to_unknown_role(admin_account, reviewer):
    with pytest.raises(ValidationFailure):
        SwitchUserRole(user=reviewer, actor=admin_account, role="EDITOR").run()


@pytest.mark.django_db
def test_deactivate_user_releases_assignments(admin_account, tester):
    in_testing = assign_to(ExtendedSubmissionFactory(state=Submission.States.IN_TESTING), tester)
    in_rework = assign_to(ExtendedSubmissionFactory(state=Submission.States.REWORK), tester)

    assert DeactivateUser(user=tester, actor=admin_account).run() == 2

    tester.refresh_from_db()
    assert not tester.is_active
    assert not tester.is_green_light
    in_testing.refresh_from_db()
    in_rework.refresh_from_db()
    assert in_testing.assignee is None
    assert in_rework.assignee is None
    assert list(Submission.objects.deferred(constants.TESTER_ROLE)) == [in_testing]


@pytest.mark.django_db
def test_only_admins_deactivate(reviewer, tester):
    with pytest.raises(Unauthorized):
        DeactivateUser(user=tester, actor=reviewer).run()


@pytest.mark.django_db
def test_toggle_availability_command(unavailable_reviewer):
    SubmissionFactory()
    out = StringIO()

    call_command("toggle_availability", unavailable_reviewer.username, stdout=out)

    assert out.getvalue().strip() == f"{unavailable_reviewer}: green light on, 1 submissions assigned"


@pytest.mark.django_db
def test_toggle_availability_command_errors(contributor):
    with pytest.raises(CommandError):
        call_command("toggle_availability", "nobody@example.org")
    with pytest.raises(CommandError):
        call_command("toggle_availability", contributor.username)


@pytest.mark.django_db
def test_admin_action_reports_accounts_without_green_light(rf, admin_account, contributor, unavailable_reviewer):
    request = rf.post("/admin/xperts_profile/account/")
    request.user = admin_account
    request.session = {}
    request._messages = FallbackStorage(request)
    model_admin = AccountAdmin(Account, admin.site)

    model_admin.toggle_availability(request, Account.objects.filter(pk__in=[contributor.pk, unavailable_reviewer.pk]))

    unavailable_reviewer.refresh_from_db()
    assert unavailable_reviewer.is_green_light
    sent = [(message.level, str(message.message)) for message in get_messages(request)]
    assert (messages.ERROR, f"{contributor}: Only testers and reviewers can toggle their availability") in sent
    assert (messages.SUCCESS, f"{unavailable_reviewer}: green light on, 0 submissions assigned.") in sent
