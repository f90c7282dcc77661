from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

from xperts.plugins.xperts_review.exceptions import ValidationFailure
from xperts.plugins.xperts_review.logic__availability import ToggleAvailability

Account = get_user_model()


class Command(BaseCommand):
    help = "Toggle the green light of a tester or reviewer."  # noqa: A003

    def add_arguments(self, parser):
        parser.add_argument("username")

    def handle(self, *args, **options):
        try:
            user = Account.objects.get(username=options["username"])
        except Account.DoesNotExist:
            raise CommandError(f"User {options['username']} does not exist")
        try:
            # operators act as the user
            result = ToggleAvailability(user=user, actor=user).run()
        except ValidationFailure as e:
            raise CommandError(e.message)
        self.stdout.write(
            f"{user}: green light {'on' if result.is_green_light else 'off'}, "
            f"{result.assigned_count} submissions assigned"
        )
