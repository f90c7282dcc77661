"""Assignee selection functions, called whenever a submission needs a tester or a reviewer.

Configuration by submission kind is made using the 'XPERTS_ASSIGNMENT_FUNCTIONS' setting; the ``None`` key holds the
default function.
"""

from typing import TYPE_CHECKING, Optional

from django.conf import settings
from django.contrib.auth import get_user_model
from django.utils.module_loading import import_string

if TYPE_CHECKING:
    from ..models import Submission


Account = get_user_model()


def assign_least_loaded(submission: "Submission", role: str) -> Optional[Account]:
    """Select the available account of the pool with the lowest workload. Default algorithm."""
    return Account.objects.assignment_candidates(role).first()


def assign_random(submission: "Submission", role: str) -> Optional[Account]:
    """Select a random available account of the pool, for test purposes."""
    return Account.objects.available(role).order_by("?").first()


def dispatch_assignment(submission: "Submission", role: str) -> Optional[Account]:
    """Dispatch assignee selection on submission kind basis, selecting the requested assignment algorithm."""
    functions = settings.XPERTS_ASSIGNMENT_FUNCTIONS
    assignment_function = import_string(functions.get(submission.kind, functions.get(None)))
    return assignment_function(submission, role)
