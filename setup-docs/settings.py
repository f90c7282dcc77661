"""Sample setting for deployed environments."""
from xperts.defaults.settings import *  # noqa

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": "xperts",
        "USER": "postgres",
        "PASSWORD": "",
        "HOST": "",
        "PORT": "",
    },
}

SECRET_KEY = "..."
ALLOWED_HOSTS = ["xperts.example.org"]

# Extended submissions go to a random tester, everything else to the least loaded account
XPERTS_ASSIGNMENT_FUNCTIONS = {
    None: "xperts.plugins.xperts_review.events.assignment.assign_least_loaded",
    "EXTENDED": "xperts.plugins.xperts_review.events.assignment.assign_random",
}
XPERTS_REQUEUE_INTERVAL_MINUTES = 5

Q_CLUSTER["redis"] = {  # noqa: F405
    "host": "redis",
    "port": 6379,
    "db": 0,
}
