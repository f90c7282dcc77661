import dataclasses

from xperts.logger import get_logger

from .exceptions import ConcurrentModification
from .logic__assignment import ReassignPending, ReleaseAssignment
from .models import Submission, SubmissionAssignment

logger = get_logger(__name__, prefix="requeue")


@dataclasses.dataclass
class SweepResult:
    assigned_count: int = 0
    deferred_count: int = 0
    released_count: int = 0


@dataclasses.dataclass
class RequeueSweep:
    """
    Reconcile the assignment queue.

    First the submissions held by accounts that can no longer work on them (deactivated, unapproved or moved to
    another role) are released; then every deferred submission goes through the assignment engine again.

    A sweep that assigns nothing is not an error: it only means nobody is available, and the next sweep will try
    again.
    """

    result: SweepResult = dataclasses.field(default_factory=SweepResult)

    def _release_orphans(self):
        for submission in list(Submission.objects.orphaned().select_related("assignee")):
            logger.info("Submission %s orphaned by %s", submission.pk, submission.assignee)
            try:
                ReleaseAssignment(
                    submission=submission,
                    reason=SubmissionAssignment.ReleaseReasons.ORPHANED,
                ).run()
            except ConcurrentModification:
                logger.debug("Submission %s changed while releasing: skipped", submission.pk)
                continue
            self.result.released_count += 1

    def run(self) -> SweepResult:
        self._release_orphans()
        reassigned = ReassignPending().run()
        self.result.assigned_count = reassigned.assigned_count
        self.result.deferred_count = reassigned.deferred_count
        logger.info(
            "Sweep completed: %s released, %s assigned, %s deferred",
            self.result.released_count,
            self.result.assigned_count,
            self.result.deferred_count,
        )
        return self.result
