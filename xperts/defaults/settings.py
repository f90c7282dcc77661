"""Default Xperts settings.

Import these in the deployment settings module (``from xperts.defaults.settings import *``) and override what differs
(database, secret key, redis host, ...).
"""

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "django_fsm",
    "model_utils",
    "django_q",
    "xperts.xperts_profile",
    "xperts.plugins.xperts_review",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
]

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

ROOT_URLCONF = "xperts.urls"
STATIC_URL = "/static/"

AUTH_USER_MODEL = "xperts_profile.Account"
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

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

LANGUAGE_CODE = "en"
TIME_ZONE = "UTC"
USE_TZ = True

DEBUG = False

# Functions that select the assignee of a submission, by submission kind.
# The None key is the fallback for kinds not listed.
XPERTS_ASSIGNMENT_FUNCTIONS = {
    None: "xperts.plugins.xperts_review.events.assignment.assign_least_loaded",
}

# When an assignee turns the green light on, deferred submissions of their pool are dispatched until their workload
# reaches this value.
XPERTS_REACTIVATION_SOFT_CAP = 5

# Interval between two scheduled requeue sweeps (see the install_requeue_schedule command).
XPERTS_REQUEUE_INTERVAL_MINUTES = 10

Q_CLUSTER = {
    "name": "xperts",
    "label": "Xperts tasks",
    "workers": 1,
    "redis": {
        "host": "localhost",
        "port": 6379,
        "db": 10,
    },
    "retry": 90,
    "timeout": 60,
}

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "root": {
        "level": "INFO",
        "handlers": ["console"],
    },
    "formatters": {
        "default": {
            "format": "%(levelname)s %(asctime)s %(module)s P:%(process)d T:%(thread)d %(message)s",
        },
        "coloured": {
            "()": "colorlog.ColoredFormatter",
            "format": "%(log_color)s%(levelname)s %(asctime)s M:%(module)s: %(message)s",
            "log_colors": {
                "DEBUG": "cyan",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "red,bg_white",
            },
        },
    },
    "handlers": {
        "console": {
            "level": "DEBUG",
            "class": "logging.StreamHandler",
            "formatter": "coloured",
            "stream": "ext://sys.stdout",
        },
    },
    "loggers": {
        "django.db.backends": {
            "level": "WARNING",
            "handlers": ["console"],
            "propagate": False,
        },
        "django-q": {
            "level": "WARNING",
        },
    },
}
