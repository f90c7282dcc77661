"""Workload bookkeeping for testers and reviewers.

Workload is never stored: it is the count of open submissions assigned to an account, computed on demand, so that it
cannot drift from the submissions themselves.
"""

from django.contrib.auth import get_user_model
from django.db.models import QuerySet

from xperts.xperts_profile import constants

from .models import Submission

Account = get_user_model()


def workload_for(user: Account) -> int:
    """Return the number of open submissions currently assigned to the user."""
    return Submission.objects.assigned_to(user).count()


def open_submissions_for(user: Account) -> QuerySet:
    """Return the open submissions currently assigned to the user, oldest first."""
    return Submission.objects.assigned_to(user).order_by("created", "pk")


def queue_stats() -> dict[str, dict[str, int]]:
    """
    Summarize the state of the assignment pools.

    :return: for each pool, the number of deferred submissions and of available accounts
    :rtype: dict
    """
    deferred = Submission.objects.deferred().count_by_pool()
    return {
        pool: {
            "deferred": deferred[pool],
            "available": Account.objects.available(pool).count(),
        }
        for pool in constants.ASSIGNMENT_POOLS
    }
