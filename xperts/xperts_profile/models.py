"""Accounts of contributors, testers, reviewers and admins."""

from django.contrib.auth.models import AbstractUser, UserManager
from django.db import models
from django.db.models import QuerySet
from django.utils.translation import gettext_lazy as _

from . import constants


class AccountQuerySet(models.QuerySet):
    def with_role(self, role: str) -> QuerySet:
        return self.filter(role=role)

    def approved(self) -> QuerySet:
        return self.filter(is_approved=True)

    def available(self, role: str) -> QuerySet:
        """
        Return the accounts that can receive new assignments in the given pool.

        An account is available if it is active, approved and has the green light on.

        :param role: The assignment pool (tester or reviewer role).
        :type role: str

        :return: the queryset of candidate accounts
        :rtype: QuerySet
        """
        return self.filter(role=role, is_active=True, is_approved=True, is_green_light=True)


class AccountManager(UserManager.from_queryset(AccountQuerySet)):
    pass


class Account(AbstractUser):
    class Roles(models.TextChoices):
        CONTRIBUTOR = constants.CONTRIBUTOR_ROLE, constants.LABELS[constants.CONTRIBUTOR_ROLE]
        TESTER = constants.TESTER_ROLE, constants.LABELS[constants.TESTER_ROLE]
        REVIEWER = constants.REVIEWER_ROLE, constants.LABELS[constants.REVIEWER_ROLE]
        ADMIN = constants.ADMIN_ROLE, constants.LABELS[constants.ADMIN_ROLE]

    role = models.CharField(
        _("Role"),
        max_length=20,
        choices=Roles.choices,
        default=Roles.CONTRIBUTOR,
        db_index=True,
    )
    is_approved = models.BooleanField(
        _("Approved"),
        default=False,
        help_text=_("Only approved testers and reviewers receive assignments."),
    )
    is_green_light = models.BooleanField(
        _("Green light"),
        default=False,
        help_text=_("Available for new automatic assignments."),
    )

    objects = AccountManager()

    class Meta:
        verbose_name = _("Account")
        verbose_name_plural = _("Accounts")
        ordering = ("date_joined", "pk")

    def __str__(self):
        full_name = self.get_full_name()
        return full_name or self.username

    @property
    def is_assignable(self) -> bool:
        """True if the account belongs to one of the assignment pools."""
        return self.role in constants.ASSIGNMENT_POOLS

    def save(self, *args, **kwargs):
        # Contributors do not need any approval
        if self.role == self.Roles.CONTRIBUTOR:
            self.is_approved = True
        super().save(*args, **kwargs)
