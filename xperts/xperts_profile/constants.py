"""Roles slugs and other constants.

TESTER and REVIEWER are the two assignment pools: submissions needing a human are dispatched among the accounts of
one of these roles.
"""

from django.utils.translation import gettext_lazy as _

CONTRIBUTOR_ROLE = "CONTRIBUTOR"
TESTER_ROLE = "TESTER"
REVIEWER_ROLE = "REVIEWER"
ADMIN_ROLE = "ADMIN"

ASSIGNMENT_POOLS = (TESTER_ROLE, REVIEWER_ROLE)

LABELS = {
    CONTRIBUTOR_ROLE: _("Contributor"),
    TESTER_ROLE: _("Tester"),
    REVIEWER_ROLE: _("Reviewer"),
    ADMIN_ROLE: _("Admin"),
}
