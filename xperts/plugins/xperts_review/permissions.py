from typing import TYPE_CHECKING, Optional

from django.contrib.auth import get_user_model

from xperts.xperts_profile import constants
from xperts.xperts_profile import permissions as base_permissions

if TYPE_CHECKING:
    from .models import Submission

Account = get_user_model()


def is_system(instance: "Submission", user: Optional[Account]) -> bool:
    """
    Fake permission for system-managed transitions.

    :param instance: An instance of the Submission class.
    :type instance: Submission

    :param user: The user to check for role.
    :type user: Account

    :return: True if the user is None, False otherwise.
    :rtype: bool
    """
    return user is None


def is_admin(instance: "Submission", user: Optional[Account]) -> bool:
    """
    Check if the user can override the workflow on the given submission.

    :param instance: An instance of the Submission class.
    :type instance: Submission

    :param user: The user to check for role.
    :type user: Account

    :return: True if the user is an admin, False otherwise.
    :rtype: bool
    """
    return base_permissions.has_admin_role(user)


def _is_pool_assignee(instance: "Submission", user: Optional[Account], role: str) -> bool:
    if base_permissions.has_admin_role(user):
        return True
    if not base_permissions.has_pool_role(user, role):
        return False
    # a deferred submission is claimed by the first approved member of the pool acting on it
    return instance.assignee_id is None or instance.assignee_id == user.pk


def is_submission_tester(instance: "Submission", user: Optional[Account]) -> bool:
    """
    Check if the user can act as tester on the given submission.

    Admins always can; approved testers can if they hold the submission or if nobody holds it.

    :param instance: An instance of the Submission class.
    :type instance: Submission

    :param user: The user to check for role.
    :type user: Account

    :return: True if the user can act as tester, False otherwise.
    :rtype: bool
    """
    return _is_pool_assignee(instance, user, constants.TESTER_ROLE)


def is_submission_reviewer(instance: "Submission", user: Optional[Account]) -> bool:
    """
    Check if the user can act as reviewer on the given submission.

    Admins always can; approved reviewers can if they hold the submission or if nobody holds it.

    :param instance: An instance of the Submission class.
    :type instance: Submission

    :param user: The user to check for role.
    :type user: Account

    :return: True if the user can act as reviewer, False otherwise.
    :rtype: bool
    """
    return _is_pool_assignee(instance, user, constants.REVIEWER_ROLE)


def is_submission_owner(instance: "Submission", user: Optional[Account]) -> bool:
    """
    Check if the user is the contributor of the given submission (or an admin acting on their behalf).

    :param instance: An instance of the Submission class.
    :type instance: Submission

    :param user: The user to check for role.
    :type user: Account

    :return: True if the user owns the submission, False otherwise.
    :rtype: bool
    """
    if user is None:
        return False
    return instance.contributor_id == user.pk or base_permissions.has_admin_role(user)


def can_claim_submission(instance: "Submission", user: Optional[Account]) -> bool:
    """
    Check if the user can pick the given submission by hand.

    Only approved reviewers can, and only while nobody holds the submission: a claim always leaves the submission
    with an assignee, so admins are not allowed to claim.

    :param instance: An instance of the Submission class.
    :type instance: Submission

    :param user: The user to check for role.
    :type user: Account

    :return: True if the user can claim the submission, False otherwise.
    :rtype: bool
    """
    return base_permissions.has_pool_role(user, constants.REVIEWER_ROLE) and instance.assignee_id is None
