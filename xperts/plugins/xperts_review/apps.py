from django.apps import AppConfig


class XpertsReviewConfig(AppConfig):
    """Configuration for this django app."""

    name = "xperts.plugins.xperts_review"
    label = "xperts_review"
    verbose_name = "Xperts Review plugin"
    default_auto_field = "django.db.models.BigAutoField"

    def ready(self):
        """Monkeypatch AccountQuerySet / AccountManager and connect the default event receivers."""
        from xperts.xperts_profile.models import AccountManager, AccountQuerySet

        from . import signals, users  # noqa: F401
        from .events import submission_event
        from .events.handlers import log_submission_event

        # We have to patch both classes to be able to use the functions both as Account.objects.annotate_workload()
        # and Account.objects.all().annotate_workload()
        AccountManager.annotate_workload = users.annotate_workload
        AccountManager.assignment_candidates = users.assignment_candidates

        AccountQuerySet.annotate_workload = users.annotate_workload
        AccountQuerySet.assignment_candidates = users.assignment_candidates

        submission_event.connect(log_submission_event, dispatch_uid="xperts_review_log_submission_event")
