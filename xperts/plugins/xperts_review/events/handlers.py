"""Handlers functions.

Generally connected to :py:data:`xperts_review.events.submission_event` in the `app` module.
"""

from xperts.logger import get_logger

from . import SubmissionEvent

logger = get_logger(__name__)


def log_submission_event(sender, event: SubmissionEvent, **kwargs) -> None:
    """Record every submission event in the audit log."""
    logger.info(
        "Submission %s: %s (%s -> %s, assignee %s)",
        event.submission_id,
        event.action,
        event.from_status,
        event.to_status,
        event.assignee_id,
    )
