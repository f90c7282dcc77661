from django.core.management.base import BaseCommand

from ...logic__sweep import RequeueSweep


class Command(BaseCommand):
    help = "Release orphaned submissions and assign the deferred ones."  # noqa: A003

    def handle(self, *args, **options):
        result = RequeueSweep().run()
        self.stdout.write(
            f"Assigned: {result.assigned_count} "
            f"Deferred: {result.deferred_count} "
            f"Released: {result.released_count}"
        )
