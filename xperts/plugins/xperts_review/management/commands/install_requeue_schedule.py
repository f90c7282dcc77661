"""Install the periodic sweep of the assignment queue in the django-q scheduler."""

from django.conf import settings
from django.core.management.base import BaseCommand
from django_q.models import Schedule

from ...tasks import REQUEUE_SCHEDULE_NAME


class Command(BaseCommand):
    help = "Install the periodic sweep of the assignment queue."  # noqa: A003

    def add_arguments(self, parser):
        parser.add_argument("--action", choices=["test", "dry-run"], default="")

    def handle(self, *args, **options):
        action = options.get("action")
        minutes = getattr(settings, "XPERTS_REQUEUE_INTERVAL_MINUTES", 10)
        if action == "test":
            self.stdout.write(f"{REQUEUE_SCHEDULE_NAME}: every {minutes} minutes")
            return
        if action == "dry-run":
            return
        schedule, created = Schedule.objects.update_or_create(
            name=REQUEUE_SCHEDULE_NAME,
            defaults={
                "func": "xperts.plugins.xperts_review.tasks.requeue_sweep",
                "schedule_type": Schedule.MINUTES,
                "minutes": minutes,
            },
        )
        if created:
            self.stdout.write(f"{REQUEUE_SCHEDULE_NAME} schedule installed.")
        else:
            self.stdout.write(f"{REQUEUE_SCHEDULE_NAME} schedule updated.")
