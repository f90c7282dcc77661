"""pytest common stuff and fixtures."""

import pytest
import pytest_factoryboy

from ..factories import AccountFactory, AdminFactory, ReviewerFactory, TesterFactory


@pytest.fixture
def contributor(db):
    return AccountFactory(first_name="Connie", last_name="Tributor")


@pytest.fixture
def tester(db):
    return TesterFactory(first_name="Tess", last_name="Ter")


@pytest.fixture
def reviewer(db):
    return ReviewerFactory(first_name="Rev", last_name="Iewer")


@pytest.fixture
def admin_account(db):
    """Admin by role; not to be confused with pytest-django ``admin_user``, which is a superuser."""
    return AdminFactory(first_name="Ad", last_name="Min")


# Make a fixture that returns a reviewer that is not available for new submissions
pytest_factoryboy.register(
    ReviewerFactory,
    "unavailable_reviewer",
    is_green_light=False,
)
