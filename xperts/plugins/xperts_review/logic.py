"""Business logic is here.

Most logic is encapsulated into dataclasses that take the necessary data structures upon creation and perform their
action in a method named "run()".

Workflow actions share the same sequence, implemented by :py:class:`SubmissionTransition`:

- the state check comes first (:py:class:`InvalidTransition`), then the actor check (:py:class:`Unauthorized`), then
  the required fields (:py:class:`ValidationFailure`)
- a tester or reviewer acting on a submission nobody holds becomes its assignee
- the transition is saved, feedback is appended and the event is sent
- if the new state draws from another pool, the current assignee is released and a new one is assigned
"""

import dataclasses
import re
from typing import Any, ClassVar, Dict, Optional, Tuple

from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils.translation import gettext_lazy as _
from django_fsm import can_proceed, has_transition_perm

from xperts.logger import get_logger
from xperts.xperts_profile import constants
from xperts.xperts_profile.permissions import has_admin_role, has_pool_role

from .events import SubmissionAction, emit
from .exceptions import ConcurrentModification, InvalidTransition, Unauthorized, ValidationFailure
from .logic__assignment import (  # noqa F401
    AssignmentResult,
    AssignSubmission,
    ReactivateUser,
    ReassignPending,
    ReassignResult,
    ReleaseAssignment,
    claim_submission,
    save_submission,
    try_assign,
)
from .logic__sweep import RequeueSweep, SweepResult  # noqa F401
from .models import Feedback, Submission, SubmissionAssignment

logger = get_logger(__name__)

Account = get_user_model()

GITHUB_REPO_RE = re.compile(r"^https?://github\.com/[\w-]+/[\w.-]+/?$")

# Fields a contributor sets when creating or resubmitting a submission
CONTRIBUTOR_FIELDS = (
    "title",
    "domain",
    "language",
    "difficulty",
    "description",
    "file_url",
    "github_repo",
    "commit_hash",
    "issue_url",
    "test_patch_url",
    "dockerfile_url",
    "solution_patch_url",
)

REQUIRED_FIELDS_BY_KIND = {
    Submission.Kinds.SIMPLE: ("title", "domain", "language", "file_url"),
    Submission.Kinds.EXTENDED: (
        "title",
        "domain",
        "language",
        "difficulty",
        "description",
        "github_repo",
        "commit_hash",
    ),
}

# States from which the contributor can still withdraw the submission
DELETABLE_STATES_BY_KIND = {
    Submission.Kinds.SIMPLE: (Submission.States.PENDING,),
    Submission.Kinds.EXTENDED: (
        Submission.States.TASK_SUBMITTED,
        Submission.States.CHANGES_REQUESTED,
        Submission.States.REWORK,
    ),
}


def validate_contributor_fields(form_data: Dict[str, Any]):
    """
    Check the format of the contributor fields found in ``form_data``.

    :raises ValidationFailure: if the description is not plain ASCII, or the repository is not a GitHub URL
    """
    description = form_data.get("description")
    if description and not description.isascii():
        raise ValidationFailure("description", _("Description must contain only ASCII characters"))
    github_repo = form_data.get("github_repo")
    if github_repo and not GITHUB_REPO_RE.match(github_repo):
        raise ValidationFailure("github_repo", _("Invalid GitHub repository URL"))
    file_url = form_data.get("file_url")
    if file_url and form_data.get("kind", Submission.Kinds.SIMPLE) == Submission.Kinds.SIMPLE:
        if not file_url.lower().endswith(".zip"):
            raise ValidationFailure("file_url", _("Only .zip files are allowed"))


@dataclasses.dataclass
class CreateSubmission:
    """Record a new submission of the contributor and try to assign it straight away."""

    contributor: Account
    form_data: Dict[str, Any]
    kind: str = Submission.Kinds.SIMPLE
    submission: Optional[Submission] = None

    def _check_conditions(self):
        if self.contributor.role != constants.CONTRIBUTOR_ROLE and not has_admin_role(self.contributor):
            raise Unauthorized(_("Only contributors can submit"))
        for field in REQUIRED_FIELDS_BY_KIND[self.kind]:
            if not str(self.form_data.get(field) or "").strip():
                raise ValidationFailure(field)
        validate_contributor_fields({**self.form_data, "kind": self.kind})

    def _create_submission(self) -> Submission:
        return Submission.objects.create(
            contributor=self.contributor,
            kind=self.kind,
            state=Submission.initial_state(self.kind),
            **{field: self.form_data[field] for field in CONTRIBUTOR_FIELDS if self.form_data.get(field)},
        )

    def run(self) -> Submission:
        with transaction.atomic():
            self._check_conditions()
            self.submission = self._create_submission()
        emit(self.submission, None, SubmissionAction.CREATED)
        try_assign(self.submission)
        return self.submission


@dataclasses.dataclass
class SubmissionTransition:
    """
    Base class for the workflow actions.

    Subclasses declare the FSM transition to run, the fields the action requires and the kind of feedback it records.
    """

    submission: Submission
    actor: Optional[Account]
    form_data: Dict[str, Any] = dataclasses.field(default_factory=dict)

    transition_name: ClassVar[str] = ""
    # fields that must be non empty, either in form_data or already on the submission
    required_fields: ClassVar[Tuple[str, ...]] = ()
    # fields copied from form_data onto the submission
    updated_fields: ClassVar[Tuple[str, ...]] = ()
    feedback_kind: ClassVar[Optional[str]] = None

    def _get_transition_name(self) -> str:
        return self.transition_name

    def _get_transition(self):
        return getattr(self.submission, self._get_transition_name())

    def _check_state_conditions(self):
        if not can_proceed(self._get_transition()):
            raise InvalidTransition(
                _("Cannot %(action)s a submission in state %(state)s")
                % {"action": self._get_transition_name(), "state": self.submission.state},
            )

    def _check_user_conditions(self):
        if not has_transition_perm(self._get_transition(), self.actor):
            raise Unauthorized(_("%(actor)s cannot act on this submission") % {"actor": self.actor})

    def _check_fields(self):
        for field in self.required_fields:
            value = self.form_data.get(field) or getattr(self.submission, field, "")
            if not str(value or "").strip():
                raise ValidationFailure(field)
        if self.feedback_kind and not str(self.form_data.get("feedback") or "").strip():
            raise ValidationFailure("feedback")

    def _check_conditions(self):
        self._check_state_conditions()
        self._check_user_conditions()
        self._check_fields()

    def _claim(self):
        """Make the acting tester or reviewer the assignee of a submission that nobody holds."""
        role = self.submission.required_role()
        if role and not self.submission.assignee_id and has_pool_role(self.actor, role):
            claim_submission(self.submission, self.actor, role)

    def _update_fields(self):
        for field in self.updated_fields:
            if self.form_data.get(field):
                setattr(self.submission, field, self.form_data[field])

    def _update_state(self):
        """Run FSM transition."""
        self._get_transition()()
        save_submission(self.submission)

    def _record_feedback(self):
        if self.feedback_kind:
            Feedback.objects.create(
                submission=self.submission,
                author=self.actor,
                kind=self.feedback_kind,
                text=self.form_data["feedback"],
            )

    def _reconcile_assignee(self):
        """Make sure the assignee matches what the new state needs."""
        # receivers of the transition event may have assigned or released the submission already
        self.submission.refresh_from_db()
        if self.submission.is_terminal:
            SubmissionAssignment.objects.filter(submission=self.submission).release(
                SubmissionAssignment.ReleaseReasons.COMPLETED,
            )
            return
        role = self.submission.required_role()
        if not role:
            return
        if self.submission.assignee_id and self.submission.assignee.role != role:
            try:
                ReleaseAssignment(
                    submission=self.submission,
                    reason=SubmissionAssignment.ReleaseReasons.PHASE_COMPLETED,
                ).run()
            except ConcurrentModification:
                logger.debug("Submission %s changed while releasing: reloaded", self.submission.pk)
                self.submission.refresh_from_db()
        if not self.submission.assignee_id:
            try_assign(self.submission)

    def _emit(self, from_status: str):
        emit(self.submission, from_status, self._get_transition_name())

    def run(self) -> Submission:
        from_status = self.submission.state
        with transaction.atomic():
            self._check_conditions()
            self._claim()
            self._update_fields()
            self._update_state()
            self._record_feedback()
        self._emit(from_status)
        self._reconcile_assignee()
        return self.submission


# Simple pipeline


@dataclasses.dataclass
class ClaimSubmission(SubmissionTransition):
    """A reviewer picks a pending submission by hand."""

    transition_name: ClassVar[str] = "reviewer_claims"


@dataclasses.dataclass
class SubmitReviewerFeedback(SubmissionTransition):
    """
    The reviewer records feedback on a claimed submission.

    If ``eligible`` the submission moves on to the admins, otherwise it stays claimed and only the feedback is
    recorded.
    """

    eligible: bool = False

    feedback_kind: ClassVar[Optional[str]] = Feedback.Kinds.REVIEWER_FEEDBACK

    def _get_transition_name(self) -> str:
        if self.eligible:
            return "reviewer_deems_eligible"
        return "reviewer_submits_feedback"

    def _emit(self, from_status: str):
        if self.submission.state != from_status:
            super()._emit(from_status)


# Extended pipeline, tester phase


@dataclasses.dataclass
class MarkSubmittedToPlatform(SubmissionTransition):
    transition_name: ClassVar[str] = "tester_marks_submitted_to_platform"
    required_fields: ClassVar[Tuple[str, ...]] = ("submitted_account", "task_link_submitted")
    updated_fields: ClassVar[Tuple[str, ...]] = ("submitted_account", "task_link_submitted")


@dataclasses.dataclass
class MarkEligibleForManualReview(SubmissionTransition):
    transition_name: ClassVar[str] = "tester_marks_eligible"
    required_fields: ClassVar[Tuple[str, ...]] = ("task_link",)
    updated_fields: ClassVar[Tuple[str, ...]] = ("task_link",)


@dataclasses.dataclass
class SendToReview(SubmissionTransition):
    transition_name: ClassVar[str] = "tester_sends_to_review"


@dataclasses.dataclass
class SendTesterFeedback(SubmissionTransition):
    transition_name: ClassVar[str] = "tester_requests_rework"
    feedback_kind: ClassVar[Optional[str]] = Feedback.Kinds.TESTER_FEEDBACK


@dataclasses.dataclass
class ResubmitRework(SubmissionTransition):
    """The contributor addresses the tester feedback, possibly uploading new files."""

    transition_name: ClassVar[str] = "contributor_completes_rework"
    updated_fields: ClassVar[Tuple[str, ...]] = CONTRIBUTOR_FIELDS

    def _check_fields(self):
        super()._check_fields()
        validate_contributor_fields({**self.form_data, "kind": self.submission.kind})


# Extended pipeline, review phase


@dataclasses.dataclass
class RequestChanges(SubmissionTransition):
    transition_name: ClassVar[str] = "reviewer_requests_changes"
    feedback_kind: ClassVar[Optional[str]] = Feedback.Kinds.CHANGES_REQUESTED


@dataclasses.dataclass
class MarkChangesDone(SubmissionTransition):
    transition_name: ClassVar[str] = "contributor_completes_changes"


@dataclasses.dataclass
class ResubmitChanges(MarkChangesDone):
    """The contributor addresses the requested changes uploading new files."""

    updated_fields: ClassVar[Tuple[str, ...]] = CONTRIBUTOR_FIELDS

    def _check_fields(self):
        super()._check_fields()
        validate_contributor_fields({**self.form_data, "kind": self.submission.kind})


@dataclasses.dataclass
class StartFinalChecks(SubmissionTransition):
    transition_name: ClassVar[str] = "reviewer_starts_final_checks"


# Both pipelines


@dataclasses.dataclass
class ApproveSubmission(SubmissionTransition):
    """
    Approve the submission.

    Simple submissions are approved by admins once deemed eligible; extended ones by their reviewer (or an admin) at
    the end of the final checks, recording where the task was posted.
    """

    def _get_transition_name(self) -> str:
        if self.submission.kind == Submission.Kinds.EXTENDED:
            return "reviewer_approves"
        return "admin_approves"

    def _check_fields(self):
        if self.submission.kind == Submission.Kinds.EXTENDED and not self.form_data.get("account_posted_in"):
            raise ValidationFailure("account_posted_in")

    def _update_fields(self):
        if self.submission.kind == Submission.Kinds.EXTENDED:
            self.submission.account_posted_in = self.form_data["account_posted_in"]


@dataclasses.dataclass
class RejectSubmission(SubmissionTransition):
    feedback_kind: ClassVar[Optional[str]] = Feedback.Kinds.REJECTION_REASON

    def _get_transition_name(self) -> str:
        if self.submission.kind == Submission.Kinds.EXTENDED:
            return "reviewer_rejects"
        return "admin_rejects"

    def _check_fields(self):
        if not str(self.form_data.get("rejection_reason") or "").strip():
            raise ValidationFailure("rejection_reason")

    def _update_fields(self):
        self.submission.rejection_reason = self.form_data["rejection_reason"]

    def _record_feedback(self):
        Feedback.objects.create(
            submission=self.submission,
            author=self.actor,
            kind=self.feedback_kind,
            text=self.form_data["rejection_reason"],
        )


@dataclasses.dataclass
class DeleteSubmission:
    """
    Delete a submission.

    Admins can delete from any state; the contributor only while little review work has been spent on it.
    """

    submission: Submission
    actor: Account

    def _check_conditions(self):
        if has_admin_role(self.actor):
            return
        if self.submission.contributor_id != self.actor.pk:
            raise Unauthorized(_("Only the contributor or an admin can delete a submission"))
        if self.submission.state not in DELETABLE_STATES_BY_KIND[self.submission.kind]:
            raise InvalidTransition(
                _("Cannot delete a submission in state %(state)s") % {"state": self.submission.state},
            )

    def run(self):
        from_status = self.submission.state
        submission_id = self.submission.pk
        with transaction.atomic():
            self._check_conditions()
            self.submission.delete()
        # delete() resets the primary key
        self.submission.pk = submission_id
        emit(self.submission, from_status, SubmissionAction.DELETED, to_status="")
        logger.info("Submission %s deleted by %s", submission_id, self.actor)
