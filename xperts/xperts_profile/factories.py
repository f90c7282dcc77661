"""Utility factories.

Used in management commands and tests.
"""

import factory
from django.contrib.auth import get_user_model

Account = get_user_model()


class AccountFactory(factory.django.DjangoModelFactory):
    """Account of any role; contributor by default."""

    class Meta:
        model = Account
        django_get_or_create = ("username",)

    first_name = factory.Faker("first_name")
    last_name = factory.Faker("last_name")
    email = factory.Sequence(lambda n: f"user{n}@example.org")
    username = factory.LazyAttribute(lambda obj: obj.email)
    role = Account.Roles.CONTRIBUTOR
    is_active = True


class TesterFactory(AccountFactory):
    """Approved tester, with the green light on."""

    role = Account.Roles.TESTER
    is_approved = True
    is_green_light = True


class ReviewerFactory(AccountFactory):
    """Approved reviewer, with the green light on."""

    role = Account.Roles.REVIEWER
    is_approved = True
    is_green_light = True


class AdminFactory(AccountFactory):
    role = Account.Roles.ADMIN
    is_approved = True
    is_staff = True
