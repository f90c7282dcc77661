"""Account queryset functions attached to the account manager in the app ``ready()``."""

from django.db.models import Count, Q, QuerySet

from .models import TERMINAL_STATES


def annotate_workload(self) -> QuerySet:
    """Annotate each account with the number of open submissions it currently holds."""
    return self.annotate(
        workload=Count(
            "assigned_submissions",
            filter=~Q(assigned_submissions__state__in=TERMINAL_STATES),
            distinct=True,
        ),
    )


def assignment_candidates(self, role: str) -> QuerySet:
    """
    Return the accounts that can receive a new submission of the given pool, least loaded first.

    Ties on workload are broken by registration date and then by id, so that the choice is deterministic.

    :param role: The assignment pool (tester or reviewer role).
    :type role: str

    :return: the ordered queryset of candidates, annotated with ``workload``
    :rtype: QuerySet
    """
    return annotate_workload(self.available(role)).order_by("workload", "date_joined", "pk")
