"""Assignment of submissions to testers and reviewers.

Assignee and state are written with conditional updates: whoever loses a race on the same submission gets
:py:class:`ConcurrentModification` and must reload the submission before retrying.
"""

import dataclasses
from typing import List, Optional

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone
from django.utils.translation import gettext_lazy as _
from django_fsm import ConcurrentTransition, can_proceed

from xperts.logger import get_logger

from .events import SubmissionAction, emit
from .events.assignment import dispatch_assignment
from .exceptions import ConcurrentModification, InvalidTransition
from .models import Submission, SubmissionAssignment
from .workload import workload_for

logger = get_logger(__name__)

Account = get_user_model()


@dataclasses.dataclass
class AssignmentResult:
    submission: Submission
    assignee: Optional[Account] = None
    deferred: bool = False


@dataclasses.dataclass
class ReassignResult:
    assigned_count: int = 0
    deferred_count: int = 0


def save_submission(submission: Submission, **kwargs):
    """Save the submission, translating a concurrent state change into :py:class:`ConcurrentModification`."""
    try:
        submission.save(**kwargs)
    except ConcurrentTransition as e:
        raise ConcurrentModification(
            _("Submission %(pk)s changed since it was loaded") % {"pk": submission.pk},
        ) from e


def claim_submission(submission: Submission, assignee: Account, role: str):
    """
    Make the given account the assignee of an unassigned submission and open the assignment history record.

    The update only succeeds if nobody took the submission, nor changed its state, since it was loaded.

    :param submission: the submission to assign
    :type submission: Submission

    :param assignee: the tester or reviewer taking the submission
    :type assignee: Account

    :param role: the pool the assignee is drawn from
    :type role: str

    :raises ConcurrentModification: if the submission was assigned or moved concurrently
    """
    assigned_at = timezone.now()
    updated = Submission.objects.filter(
        pk=submission.pk,
        assignee__isnull=True,
        state=submission.state,
    ).update(assignee=assignee, assigned_at=assigned_at)
    if not updated:
        raise ConcurrentModification(
            _("Submission %(pk)s was assigned or moved concurrently") % {"pk": submission.pk},
        )
    submission.assignee = assignee
    submission.assigned_at = assigned_at
    SubmissionAssignment.objects.create(
        submission=submission,
        assignee=assignee,
        role=role,
        date_assigned=assigned_at,
    )


@dataclasses.dataclass
class AssignSubmission:
    """
    Find an assignee for a submission that needs one.

    The selection algorithm is chosen by :py:func:`xperts_review.events.assignment.dispatch_assignment`. When nobody
    is available the submission is left unassigned and reported as deferred: the sweeper will try again later.
    """

    submission: Submission
    result: Optional[AssignmentResult] = None

    def _check_conditions(self) -> str:
        if self.submission.is_terminal:
            raise InvalidTransition(_("Submission %(pk)s is closed") % {"pk": self.submission.pk})
        role = self.submission.required_role()
        if not role:
            raise InvalidTransition(
                _("Submission %(pk)s in state %(state)s does not need an assignee")
                % {"pk": self.submission.pk, "state": self.submission.state},
            )
        return role

    def _update_state(self):
        """Run the FSM transition bound to the first assignment, if any."""
        if can_proceed(self.submission.system_claims):
            self.submission.system_claims()
        elif can_proceed(self.submission.system_starts_testing):
            self.submission.system_starts_testing()
        else:
            return
        save_submission(self.submission)

    def run(self) -> AssignmentResult:
        from_status = self.submission.state
        with transaction.atomic():
            role = self._check_conditions()
            if self.submission.assignee_id:
                return AssignmentResult(submission=self.submission, assignee=self.submission.assignee)
            assignee = dispatch_assignment(self.submission, role)
            if not assignee:
                logger.info("No %s available for submission %s: deferred", role, self.submission.pk)
                return AssignmentResult(submission=self.submission, deferred=True)
            claim_submission(self.submission, assignee, role)
            self._update_state()
            self.result = AssignmentResult(submission=self.submission, assignee=assignee)
        logger.debug("Submission %s assigned to %s (%s)", self.submission.pk, assignee, role)
        emit(self.submission, from_status, SubmissionAction.ASSIGNED)
        return self.result


def try_assign(submission: Submission) -> Optional[AssignmentResult]:
    """
    Run :py:class:`AssignSubmission` on a submission whose last change has already been saved.

    Losing the race against the sweeper or another writer is not an error for the caller: the change stands and the
    winner took care of the assignee, so the submission is only reloaded.

    :return: the assignment result, None if the submission was assigned or moved concurrently
    :rtype: AssignmentResult
    """
    try:
        return AssignSubmission(submission=submission).run()
    except ConcurrentModification:
        logger.debug("Submission %s changed while assigning: reloaded", submission.pk)
        submission.refresh_from_db()
        return None


@dataclasses.dataclass
class ReleaseAssignment:
    """
    Remove the assignee from a submission and close its assignment history record.

    Claimed simple submissions go back to pending so that they can be assigned again.
    """

    submission: Submission
    reason: str

    def _update_state(self):
        if can_proceed(self.submission.system_requeues):
            self.submission.system_requeues()
            save_submission(self.submission, update_fields=["state", "latest_state_change"])

    def run(self) -> Submission:
        from_status = self.submission.state
        assignee_id = self.submission.assignee_id
        with transaction.atomic():
            if not assignee_id:
                return self.submission
            released = Submission.objects.filter(
                pk=self.submission.pk,
                assignee_id=assignee_id,
                state=from_status,
            ).update(assignee=None, assigned_at=None)
            if not released:
                raise ConcurrentModification(
                    _("Submission %(pk)s was reassigned or moved concurrently") % {"pk": self.submission.pk},
                )
            SubmissionAssignment.objects.filter(submission=self.submission, assignee_id=assignee_id).release(
                self.reason,
            )
            self.submission.assignee = None
            self.submission.assigned_at = None
            self._update_state()
        logger.debug("Submission %s released (%s)", self.submission.pk, self.reason)
        emit(self.submission, from_status, SubmissionAction.RELEASED)
        return self.submission


@dataclasses.dataclass
class ReassignPending:
    """Try to assign every deferred submission, oldest first."""

    role: Optional[str] = None

    def run(self) -> ReassignResult:
        result = ReassignResult()
        for submission in list(Submission.objects.deferred(self.role)):
            try:
                outcome = AssignSubmission(submission=submission).run()
            except ConcurrentModification:
                # somebody else got there first; nothing left to do for this submission
                logger.debug("Submission %s changed while reassigning: skipped", submission.pk)
                continue
            if outcome.deferred:
                result.deferred_count += 1
            else:
                result.assigned_count += 1
        if result.assigned_count:
            logger.info(
                "Reassigned %s pending submissions, %s still deferred",
                result.assigned_count,
                result.deferred_count,
            )
        else:
            logger.info("No pending submission could be assigned (%s deferred)", result.deferred_count)
        return result


@dataclasses.dataclass
class ReactivateUser:
    """
    Feed the deferred submissions of the user's pool to the assignment engine, now that the user is available.

    Stops as soon as the queue is empty, nobody can take the next submission, or the user holds
    ``XPERTS_REACTIVATION_SOFT_CAP`` submissions.
    """

    user: Account
    assigned: List[Submission] = dataclasses.field(default_factory=list)

    def _check_conditions(self) -> bool:
        return Account.objects.available(self.user.role).filter(pk=self.user.pk).exists()

    def run(self) -> int:
        if not self._check_conditions():
            return 0
        soft_cap = getattr(settings, "XPERTS_REACTIVATION_SOFT_CAP", 5)
        for submission in list(Submission.objects.deferred(self.user.role)):
            if workload_for(self.user) >= soft_cap:
                break
            try:
                outcome = AssignSubmission(submission=submission).run()
            except ConcurrentModification:
                continue
            if outcome.deferred:
                break
            self.assigned.append(submission)
        logger.info("%s became available: %s submissions assigned", self.user, len(self.assigned))
        return len(self.assigned)
