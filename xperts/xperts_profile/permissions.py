from typing import Optional

from django.contrib.auth import get_user_model

from . import constants

Account = get_user_model()


def has_admin_role(user: Optional[Account]) -> bool:
    """
    Check if the given user is an admin.

    Superusers are always considered admins, whatever their role.

    :param user: The user to check for role.
    :type user: Account

    :return: True if the user is an admin, False otherwise.
    :rtype: bool
    """
    if user is None:
        return False
    return user.is_superuser or user.role == constants.ADMIN_ROLE


def has_pool_role(user: Optional[Account], role: str) -> bool:
    """
    Check if the given user belongs to the given assignment pool and is approved.

    :param user: The user to check for role.
    :type user: Account

    :param role: The assignment pool (tester or reviewer role).
    :type role: str

    :return: True if the user has the role and is approved, False otherwise.
    :rtype: bool
    """
    if user is None:
        return False
    return user.role == role and user.is_approved and user.is_active
