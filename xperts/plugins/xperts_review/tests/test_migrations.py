"""The test database skips migrations: check that the shipped ones build every model of the project."""

import pytest
from django.contrib.auth import get_user_model
from django.db.migrations.loader import MigrationLoader
from django.test import override_settings

from ..models import Feedback, Submission, SubmissionAssignment

Account = get_user_model()


@pytest.fixture
def migration_loader() -> MigrationLoader:
    with override_settings(MIGRATION_MODULES={}):
        return MigrationLoader(None)


@pytest.mark.parametrize("model", [Account, Submission, SubmissionAssignment, Feedback])
def test_migrations_create_model_fields(migration_loader, model):
    state = migration_loader.project_state().models[(model._meta.app_label, model._meta.model_name)]

    fields = {field.name for field in model._meta.local_fields + model._meta.local_many_to_many}
    assert set(state.fields) == fields


def test_initial_migrations(migration_loader):
    leaves = migration_loader.graph.leaf_nodes()

    assert ("xperts_profile", "0001_initial") in leaves
    assert ("xperts_review", "0001_initial") in leaves
