"""Submissions, their assignee history and feedback."""

from typing import Optional

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _
from django_fsm import ConcurrentTransitionMixin, FSMField, transition
from model_utils.models import TimeStampedModel

from xperts.xperts_profile import constants

from . import permissions
from .managers import SubmissionAssignmentQuerySet, SubmissionQuerySet


class Submission(ConcurrentTransitionMixin, TimeStampedModel):
    class Kinds(models.TextChoices):
        SIMPLE = "SIMPLE", _("Simple review")
        EXTENDED = "EXTENDED", _("Extended review")

    class States(models.TextChoices):
        # simple pipeline
        PENDING = "PENDING", _("Pending")
        CLAIMED = "CLAIMED", _("Claimed")
        ELIGIBLE = "ELIGIBLE", _("Eligible")
        # extended pipeline
        TASK_SUBMITTED = "TASK_SUBMITTED", _("Task submitted")
        IN_TESTING = "IN_TESTING", _("In testing")
        TASK_SUBMITTED_TO_PLATFORM = "TASK_SUBMITTED_TO_PLATFORM", _("Task submitted to platform")
        ELIGIBLE_FOR_MANUAL_REVIEW = "ELIGIBLE_FOR_MANUAL_REVIEW", _("Eligible for manual review")
        REWORK = "REWORK", _("Rework")
        REWORK_DONE = "REWORK_DONE", _("Rework done")
        PENDING_REVIEW = "PENDING_REVIEW", _("Pending review")
        CHANGES_REQUESTED = "CHANGES_REQUESTED", _("Changes requested")
        CHANGES_DONE = "CHANGES_DONE", _("Changes done")
        FINAL_CHECKS = "FINAL_CHECKS", _("Final checks")
        # shared terminal states
        APPROVED = "APPROVED", _("Approved")
        REJECTED = "REJECTED", _("Rejected")

    # tester phase and review phase of the extended pipeline
    TESTING_STATES = [
        States.TASK_SUBMITTED,
        States.IN_TESTING,
        States.TASK_SUBMITTED_TO_PLATFORM,
        States.REWORK_DONE,
    ]
    REVIEW_STATES = [
        States.ELIGIBLE_FOR_MANUAL_REVIEW,
        States.PENDING_REVIEW,
        States.CHANGES_DONE,
        States.FINAL_CHECKS,
    ]

    contributor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        verbose_name=_("Contributor"),
        on_delete=models.CASCADE,
        related_name="submissions",
    )
    kind = models.CharField(_("Kind"), max_length=10, choices=Kinds.choices, default=Kinds.SIMPLE)
    state = FSMField(default=States.PENDING, choices=States.choices, verbose_name=_("State"), db_index=True)
    assignee = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        verbose_name=_("Assignee"),
        blank=True,
        null=True,
        on_delete=models.SET_NULL,
        related_name="assigned_submissions",
    )
    assigned_at = models.DateTimeField(_("Assigned at"), blank=True, null=True)
    latest_state_change = models.DateTimeField(default=timezone.now, null=True, blank=True)

    title = models.CharField(_("Title"), max_length=500)
    domain = models.CharField(_("Domain"), max_length=255, blank=True)
    language = models.CharField(_("Language"), max_length=100, blank=True)
    difficulty = models.CharField(_("Difficulty"), max_length=100, blank=True)
    description = models.TextField(_("Description"), blank=True)

    # Attachments are opaque references to the file storage
    file_url = models.CharField(_("File"), max_length=1000, blank=True)
    test_patch_url = models.CharField(_("Test patch"), max_length=1000, blank=True)
    dockerfile_url = models.CharField(_("Dockerfile"), max_length=1000, blank=True)
    solution_patch_url = models.CharField(_("Solution patch"), max_length=1000, blank=True)
    github_repo = models.CharField(_("GitHub repository"), max_length=500, blank=True)
    commit_hash = models.CharField(_("Commit hash"), max_length=100, blank=True)
    issue_url = models.CharField(_("Issue URL"), max_length=1000, blank=True)

    # Outcome of the extended pipeline
    submitted_account = models.CharField(_("Submitted account"), max_length=255, blank=True)
    task_link_submitted = models.CharField(_("Submitted task link"), max_length=1000, blank=True)
    task_link = models.CharField(_("Task link"), max_length=1000, blank=True)
    account_posted_in = models.CharField(_("Account posted in"), max_length=255, blank=True)
    rejection_reason = models.TextField(_("Rejection reason"), blank=True)

    objects = SubmissionQuerySet.as_manager()

    class Meta:
        verbose_name = _("Submission")
        verbose_name_plural = _("Submissions")
        ordering = ("created", "pk")

    def __str__(self):
        return f"{self.title} ({self.get_kind_display()})"

    @classmethod
    def initial_state(cls, kind: str) -> "Submission.States":
        if kind == cls.Kinds.EXTENDED:
            return cls.States.TASK_SUBMITTED
        return cls.States.PENDING

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    def required_role(self) -> Optional[str]:
        """
        Return the assignment pool the current state draws its assignee from.

        :return: the tester or reviewer role, None if the state does not need an assignee
        :rtype: str
        """
        return ASSIGNEE_ROLE_BY_STATE.get(self.state)

    # system assigns a reviewer
    @transition(
        field=state,
        source=States.PENDING,
        target=States.CLAIMED,
        permission=permissions.is_system,
    )
    def system_claims(self):
        pass

    # reviewer claims the submission by hand
    @transition(
        field=state,
        source=States.PENDING,
        target=States.CLAIMED,
        permission=permissions.can_claim_submission,
    )
    def reviewer_claims(self):
        pass

    # system releases a claimed submission whose reviewer is gone
    @transition(
        field=state,
        source=States.CLAIMED,
        target=States.PENDING,
        permission=permissions.is_system,
    )
    def system_requeues(self):
        pass

    # reviewer submits feedback without deeming the submission eligible
    @transition(
        field=state,
        source=States.CLAIMED,
        target=States.CLAIMED,
        permission=permissions.is_submission_reviewer,
    )
    def reviewer_submits_feedback(self):
        pass

    @transition(
        field=state,
        source=States.CLAIMED,
        target=States.ELIGIBLE,
        permission=permissions.is_submission_reviewer,
    )
    def reviewer_deems_eligible(self):
        pass

    @transition(
        field=state,
        source=States.ELIGIBLE,
        target=States.APPROVED,
        permission=permissions.is_admin,
    )
    def admin_approves(self):
        pass

    @transition(
        field=state,
        source=States.ELIGIBLE,
        target=States.REJECTED,
        permission=permissions.is_admin,
    )
    def admin_rejects(self):
        pass

    # system assigns a tester
    @transition(
        field=state,
        source=States.TASK_SUBMITTED,
        target=States.IN_TESTING,
        permission=permissions.is_system,
    )
    def system_starts_testing(self):
        pass

    @transition(
        field=state,
        source=TESTING_STATES,
        target=States.TASK_SUBMITTED_TO_PLATFORM,
        permission=permissions.is_submission_tester,
    )
    def tester_marks_submitted_to_platform(self):
        pass

    @transition(
        field=state,
        source=TESTING_STATES,
        target=States.ELIGIBLE_FOR_MANUAL_REVIEW,
        permission=permissions.is_submission_tester,
    )
    def tester_marks_eligible(self):
        pass

    @transition(
        field=state,
        source=TESTING_STATES,
        target=States.PENDING_REVIEW,
        permission=permissions.is_submission_tester,
    )
    def tester_sends_to_review(self):
        pass

    @transition(
        field=state,
        source=TESTING_STATES,
        target=States.REWORK,
        permission=permissions.is_submission_tester,
    )
    def tester_requests_rework(self):
        pass

    @transition(
        field=state,
        source=States.REWORK,
        target=States.REWORK_DONE,
        permission=permissions.is_submission_owner,
    )
    def contributor_completes_rework(self):
        pass

    @transition(
        field=state,
        source=REVIEW_STATES,
        target=States.CHANGES_REQUESTED,
        permission=permissions.is_submission_reviewer,
    )
    def reviewer_requests_changes(self):
        pass

    @transition(
        field=state,
        source=States.CHANGES_REQUESTED,
        target=States.CHANGES_DONE,
        permission=permissions.is_submission_owner,
    )
    def contributor_completes_changes(self):
        pass

    @transition(
        field=state,
        source=[States.ELIGIBLE_FOR_MANUAL_REVIEW, States.CHANGES_DONE],
        target=States.FINAL_CHECKS,
        permission=permissions.is_submission_reviewer,
    )
    def reviewer_starts_final_checks(self):
        pass

    @transition(
        field=state,
        source=States.FINAL_CHECKS,
        target=States.APPROVED,
        permission=permissions.is_submission_reviewer,
    )
    def reviewer_approves(self):
        pass

    @transition(
        field=state,
        source=REVIEW_STATES,
        target=States.REJECTED,
        permission=permissions.is_submission_reviewer,
    )
    def reviewer_rejects(self):
        pass


class SubmissionAssignment(models.Model):
    """One period during which an account held a submission."""

    class ReleaseReasons(models.TextChoices):
        COMPLETED = "completed", _("Submission completed")
        PHASE_COMPLETED = "phase_completed", _("Moved to the next phase")
        ORPHANED = "orphaned", _("Assignee no longer eligible")
        ROLE_CHANGED = "role_changed", _("Assignee role changed")
        DEACTIVATED = "deactivated", _("Assignee deactivated")

    submission = models.ForeignKey(Submission, on_delete=models.CASCADE, related_name="assignments")
    assignee = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="+")
    role = models.CharField(
        max_length=20,
        choices=[(pool, constants.LABELS[pool]) for pool in constants.ASSIGNMENT_POOLS],
    )
    date_assigned = models.DateTimeField(default=timezone.now)
    date_released = models.DateTimeField(blank=True, null=True)
    release_reason = models.CharField(max_length=20, choices=ReleaseReasons.choices, blank=True)

    objects = SubmissionAssignmentQuerySet.as_manager()

    class Meta:
        verbose_name = _("Submission assignment")
        verbose_name_plural = _("Submission assignments")
        ordering = ("date_assigned", "pk")

    def __str__(self):
        return f"{self.assignee} on {self.submission_id} ({self.role})"


class Feedback(TimeStampedModel):
    """Role-attributed note attached to a submission. Records are only ever appended."""

    class Kinds(models.TextChoices):
        REVIEWER_FEEDBACK = "reviewer_feedback", _("Reviewer feedback")
        TESTER_FEEDBACK = "tester_feedback", _("Tester feedback")
        CHANGES_REQUESTED = "changes_requested", _("Changes requested")
        REJECTION_REASON = "rejection_reason", _("Rejection reason")

    submission = models.ForeignKey(Submission, on_delete=models.CASCADE, related_name="feedback")
    author = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="+")
    kind = models.CharField(max_length=30, choices=Kinds.choices)
    text = models.TextField()

    class Meta:
        verbose_name = _("Feedback")
        verbose_name_plural = _("Feedback")
        ordering = ("created", "pk")

    def __str__(self):
        return f"{self.get_kind_display()} by {self.author} on {self.submission_id}"


TERMINAL_STATES = (Submission.States.APPROVED, Submission.States.REJECTED)

ASSIGNEE_ROLE_BY_STATE = {
    Submission.States.PENDING: constants.REVIEWER_ROLE,
    Submission.States.CLAIMED: constants.REVIEWER_ROLE,
    Submission.States.TASK_SUBMITTED: constants.TESTER_ROLE,
    Submission.States.IN_TESTING: constants.TESTER_ROLE,
    Submission.States.TASK_SUBMITTED_TO_PLATFORM: constants.TESTER_ROLE,
    Submission.States.REWORK_DONE: constants.TESTER_ROLE,
    Submission.States.ELIGIBLE_FOR_MANUAL_REVIEW: constants.REVIEWER_ROLE,
    Submission.States.PENDING_REVIEW: constants.REVIEWER_ROLE,
    Submission.States.CHANGES_DONE: constants.REVIEWER_ROLE,
    Submission.States.FINAL_CHECKS: constants.REVIEWER_ROLE,
}
