"""Operations on testers and reviewers that affect the assignment of submissions."""

import dataclasses
from typing import Optional

from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils.translation import gettext_lazy as _

from xperts.logger import get_logger
from xperts.xperts_profile import constants
from xperts.xperts_profile.permissions import has_admin_role

from .exceptions import ConcurrentModification, Unauthorized, ValidationFailure
from .logic__assignment import ReactivateUser, ReleaseAssignment
from .models import Submission, SubmissionAssignment

logger = get_logger(__name__)

Account = get_user_model()


def release_open_submissions(user: Account, reason: str) -> int:
    """
    Release every open submission held by the user.

    Submissions that still need somebody of the pool are left deferred: the next sweep assigns them.

    :return: the number of released submissions
    :rtype: int
    """
    released = 0
    for submission in list(Submission.objects.assigned_to(user)):
        try:
            ReleaseAssignment(submission=submission, reason=reason).run()
        except ConcurrentModification:
            logger.debug("Submission %s changed while releasing: skipped", submission.pk)
            continue
        released += 1
    return released


@dataclasses.dataclass
class AvailabilityResult:
    is_green_light: bool
    assigned_count: int = 0


@dataclasses.dataclass
class ToggleAvailability:
    """
    Switch the green light of a tester or reviewer.

    Turning it on hands the user the oldest deferred submissions of their pool.
    """

    user: Account
    actor: Account

    def _check_conditions(self):
        if not has_admin_role(self.actor) and self.actor.pk != self.user.pk:
            raise Unauthorized(_("Only admins can change the availability of other users"))
        if self.user.role not in constants.ASSIGNMENT_POOLS:
            raise ValidationFailure("role", _("Only testers and reviewers can toggle their availability"))

    def run(self) -> AvailabilityResult:
        with transaction.atomic():
            self._check_conditions()
            # the flag may have changed since the user was loaded
            locked = Account.objects.select_for_update().get(pk=self.user.pk)
            self.user.is_green_light = not locked.is_green_light
            self.user.save(update_fields=["is_green_light"])
        logger.info("%s green light %s", self.user, "on" if self.user.is_green_light else "off")
        result = AvailabilityResult(is_green_light=self.user.is_green_light)
        if self.user.is_green_light:
            result.assigned_count = ReactivateUser(user=self.user).run()
        return result


@dataclasses.dataclass
class ApproveUser:
    """Approve a tester or reviewer; a green-lit user immediately receives the deferred submissions."""

    user: Account
    actor: Account

    def run(self) -> int:
        if not has_admin_role(self.actor):
            raise Unauthorized(_("Only admins can approve users"))
        with transaction.atomic():
            self.user.is_approved = True
            self.user.save(update_fields=["is_approved"])
        logger.info("%s approved by %s", self.user, self.actor)
        if self.user.is_green_light:
            return ReactivateUser(user=self.user).run()
        return 0


@dataclasses.dataclass
class SwitchUserRole:
    """
    Move a user to another role.

    Contributors need no approval; testers must be approved again before receiving submissions. Whatever the user
    held in the previous role is released.
    """

    user: Account
    actor: Account
    role: str
    released_count: Optional[int] = None

    def _check_conditions(self):
        if not has_admin_role(self.actor):
            raise Unauthorized(_("Only admins can change user roles"))
        if self.role not in Account.Roles.values:
            raise ValidationFailure("role", _("Unknown role %(role)s") % {"role": self.role})

    def run(self) -> Account:
        with transaction.atomic():
            self._check_conditions()
            if self.user.role == self.role:
                return self.user
            previous_role = self.user.role
            self.user.role = self.role
            if self.role == constants.TESTER_ROLE:
                self.user.is_approved = False
            # saving a contributor approves it
            self.user.save()
        self.released_count = release_open_submissions(self.user, SubmissionAssignment.ReleaseReasons.ROLE_CHANGED)
        logger.info("%s moved from %s to %s by %s", self.user, previous_role, self.role, self.actor)
        return self.user


@dataclasses.dataclass
class DeactivateUser:
    """Deactivate a user, releasing the submissions it holds."""

    user: Account
    actor: Account

    def run(self) -> int:
        if not has_admin_role(self.actor):
            raise Unauthorized(_("Only admins can deactivate users"))
        with transaction.atomic():
            self.user.is_active = False
            self.user.is_green_light = False
            self.user.save(update_fields=["is_active", "is_green_light"])
        released = release_open_submissions(self.user, SubmissionAssignment.ReleaseReasons.DEACTIVATED)
        logger.info("%s deactivated by %s: %s submissions released", self.user, self.actor, released)
        return released
