"""Tasks run by the django-q cluster."""

import dataclasses

from .logic__sweep import RequeueSweep

REQUEUE_SCHEDULE_NAME = "xperts_requeue_sweep"


def requeue_sweep() -> dict:
    """Periodic sweep of the assignment queue; the result is stored by django-q with the task."""
    return dataclasses.asdict(RequeueSweep().run())
