"""Errors raised by the submission services."""

from django.core.exceptions import PermissionDenied, ValidationError
from django_fsm import ConcurrentTransition, TransitionNotAllowed


class InvalidTransition(TransitionNotAllowed):
    """The action is not allowed from the current state of the submission."""


class Unauthorized(PermissionDenied):
    """The actor lacks the role, ownership or assignment needed for the action."""


class ConcurrentModification(ConcurrentTransition):
    """Another writer changed the submission since it was loaded: reload and retry."""


class ValidationFailure(ValidationError):
    """A field required by the action is missing or malformed."""

    def __init__(self, field: str, message: str = ""):
        self.field = field
        super().__init__(message or f"{field} is required", code="invalid")
