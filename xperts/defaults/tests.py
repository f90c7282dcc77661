"""
Settings for pytest.

isort:skip_file
"""
from collections.abc import Mapping  # noqa

from .settings import *  # noqa

SECRET_KEY = "uxprsdhk^gzd-r=_287byolxn)$k6tsd8_cepl^s^tms2w1qrv"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    },
}

DEBUG = True
PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

# Run django-q tasks synchronously and use the database as broker
Q_CLUSTER = {
    "name": "xperts-tests",
    "orm": "default",
    "sync": True,
}


class SkipMigrations(Mapping):
    """Make every app look unmigrated, so that the test database is created straight from the models."""

    def __getitem__(self, key):
        return None

    def __contains__(self, key):
        return True

    def __iter__(self):
        return iter("")

    def __len__(self):
        return 1


MIGRATION_MODULES = SkipMigrations()
