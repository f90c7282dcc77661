"""
Submission workflow events.

Every successful transition or assignment sends :py:data:`submission_event` once the database write is done:

- receivers get a :py:class:`SubmissionEvent` as the ``event`` keyword argument
- receivers failures are logged and never undo the change that raised the event
- :py:func:`xperts_review.events.handlers.log_submission_event` is connected by default and records every event in
  the log
"""

import dataclasses
from datetime import datetime
from typing import Optional

from django.dispatch import Signal
from django.utils import timezone

from xperts.logger import get_logger

logger = get_logger(__name__)

submission_event = Signal()


class SubmissionAction:
    CREATED = "created"
    ASSIGNED = "assigned"
    RELEASED = "released"
    DELETED = "deleted"


@dataclasses.dataclass(frozen=True)
class SubmissionEvent:
    submission_id: int
    from_status: Optional[str]
    to_status: Optional[str]
    assignee_id: Optional[int]
    action: str
    timestamp: datetime = dataclasses.field(default_factory=timezone.now)


def emit(submission, from_status: Optional[str], action: str, to_status: Optional[str] = None) -> SubmissionEvent:
    """
    Send :py:data:`submission_event` for the given submission.

    :param submission: the submission the event is about
    :type submission: Submission

    :param from_status: the state before the change
    :type from_status: str

    :param action: one of :py:class:`SubmissionAction`, or the name of the transition
    :type action: str

    :param to_status: the state after the change, defaults to the current state of the submission
    :type to_status: str

    :return: the event sent
    :rtype: SubmissionEvent
    """
    event = SubmissionEvent(
        submission_id=submission.pk,
        from_status=from_status,
        to_status=to_status if to_status is not None else submission.state,
        assignee_id=submission.assignee_id,
        action=action,
    )
    for receiver, response in submission_event.send_robust(sender=submission.__class__, event=event):
        if isinstance(response, Exception):
            logger.error(
                "Receiver %s failed on %s of submission %s: %s",
                receiver,
                event.action,
                event.submission_id,
                response,
            )
    return event
