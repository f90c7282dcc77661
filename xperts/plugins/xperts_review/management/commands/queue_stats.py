from django.core.management.base import BaseCommand

from ...workload import queue_stats


class Command(BaseCommand):
    help = "Show deferred submissions and available accounts for each pool."  # noqa: A003

    def handle(self, *args, **options):
        for pool, stats in queue_stats().items():
            self.stdout.write(f"{pool}: {stats['deferred']} deferred, {stats['available']} available")
