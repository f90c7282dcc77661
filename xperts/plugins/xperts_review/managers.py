from typing import Optional

from django.db import models
from django.db.models import Q, QuerySet
from django.utils import timezone

from xperts.xperts_profile import constants


def _states_for_pool(role: Optional[str] = None) -> list[str]:
    from .models import ASSIGNEE_ROLE_BY_STATE

    return [state for state, pool in ASSIGNEE_ROLE_BY_STATE.items() if role is None or pool == role]


class SubmissionQuerySet(models.QuerySet):
    def open(self) -> QuerySet:
        """Return the submissions not yet approved or rejected."""
        from .models import TERMINAL_STATES

        return self.exclude(state__in=TERMINAL_STATES)

    def assigned_to(self, user) -> QuerySet:
        """Return the open submissions currently assigned to the given user."""
        return self.open().filter(assignee=user)

    def deferred(self, role: Optional[str] = None) -> QuerySet:
        """
        Return the submissions waiting for an assignee, oldest first.

        A submission is deferred if its state needs an assignee of one of the pools and nobody holds it.

        :param role: restrict to the states served by the given pool
        :type role: str

        :return: the queryset of deferred submissions
        :rtype: QuerySet
        """
        return self.filter(state__in=_states_for_pool(role), assignee__isnull=True).order_by("created", "pk")

    def orphaned(self) -> QuerySet:
        """
        Return the submissions whose assignee can no longer work on them.

        The assignee is orphaning the submission if deactivated, unapproved or if their role no longer matches the
        pool the current state draws from.

        :return: the queryset of orphaned submissions
        :rtype: QuerySet
        """
        wrong_role = Q()
        for pool in constants.ASSIGNMENT_POOLS:
            wrong_role |= Q(state__in=_states_for_pool(pool)) & ~Q(assignee__role=pool)
        return (
            self.filter(state__in=_states_for_pool(), assignee__isnull=False)
            .filter(Q(assignee__is_active=False) | Q(assignee__is_approved=False) | wrong_role)
            .order_by("created", "pk")
        )

    def count_by_pool(self) -> dict[str, int]:
        return {pool: self.filter(state__in=_states_for_pool(pool)).count() for pool in constants.ASSIGNMENT_POOLS}


class SubmissionAssignmentQuerySet(models.QuerySet):
    def current(self) -> QuerySet:
        """Return the assignments not yet released."""
        return self.filter(date_released__isnull=True)

    def release(self, reason: str) -> int:
        """
        Close the open assignments in the queryset.

        :param reason: one of :py:class:`SubmissionAssignment.ReleaseReasons`
        :type reason: str

        :return: the number of assignments closed
        :rtype: int
        """
        return self.current().update(date_released=timezone.now(), release_reason=reason)
