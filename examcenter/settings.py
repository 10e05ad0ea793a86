"""
Django settings for the exam center.
"""

# Do not change this file. All these settings can be overridden in
# local_settings.py.

import os
import sys
from os.path import join
from warnings import warn


BASE_DIR = os.path.dirname(os.path.dirname(__file__))

_local_settings_file = join(BASE_DIR, "local_settings.py")

if os.environ.get("EXAMCENTER_LOCAL_TEST_SETTINGS", None):
    # This is to make sure local_settings.py is not used for unit tests.
    assert _local_settings_file != os.environ["EXAMCENTER_LOCAL_TEST_SETTINGS"]
    _local_settings_file = os.environ["EXAMCENTER_LOCAL_TEST_SETTINGS"]

if os.path.isfile(_local_settings_file):
    local_settings_module_name, ext = (
        os.path.splitext(os.path.split(_local_settings_file)[-1]))
    assert ext == ".py"

    _local_settings_dir = os.path.dirname(os.path.abspath(_local_settings_file))
    if _local_settings_dir not in sys.path:
        sys.path.insert(0, _local_settings_dir)

    import importlib
    local_settings = importlib.import_module(
            local_settings_module_name).__dict__
else:
    warn("'%s' is missing: running on built-in development defaults, "
            "which are not fit for production." % _local_settings_file)
    local_settings = {
            "SECRET_KEY": "examcenter-development-only-not-secret",
            "DEBUG": True,
            }

# {{{ django: apps

INSTALLED_APPS = (
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",

    "center",
)

# }}}

# {{{ django: middleware

MIDDLEWARE = (
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.locale.LocaleMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
)

# }}}

# {{{ django: auth

AUTHENTICATION_BACKENDS = (
    "django.contrib.auth.backends.ModelBackend",
    )

# }}}

ROOT_URLCONF = "examcenter.urls"

WSGI_APPLICATION = "examcenter.wsgi.application"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "APP_DIRS": True,
        "DIRS": (),
        "OPTIONS": {
            "context_processors": (
                "django.contrib.auth.context_processors.auth",
                "django.template.context_processors.debug",
                "django.template.context_processors.i18n",
                "django.template.context_processors.request",
                "django.contrib.messages.context_processors.messages",
                ),
            }
    },
]

# {{{ database

# default, likely overridden by local_settings.py
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.path.join(BASE_DIR, "db.sqlite3"),
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# }}}

# {{{ internationalization

LANGUAGE_CODE = "en-us"

USE_I18N = True

USE_TZ = True

TIME_ZONE = "UTC"

# }}}

# {{{ static

STATIC_URL = "/static/"

STATIC_ROOT = join(BASE_DIR, "static")

# }}}

SESSION_COOKIE_NAME = "examcenter_sessionid"
SESSION_COOKIE_AGE = 12 * 60 * 60

# {{{ logging

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
            },
        },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "default",
            },
        },
    "loggers": {
        "center": {
            "handlers": ["console"],
            "level": "INFO",
            "propagate": False,
            },
        },
    }

# }}}

# {{{ exam center

# Minutes before the scheduled start from which a student may log in.
EXAMCENTER_LOGIN_WINDOW_MINUTES = 10

EXAMCENTER_DEFAULT_EXAM_DURATION_MINUTES = 60

# Honour the X-Examcenter-Fake-Time request header. Never enable in
# production.
EXAMCENTER_ALLOW_FAKE_TIME = False

# }}}

for name, val in local_settings.items():
    if not name.startswith("_") and name.isupper():
        globals()[name] = val

# vim: foldmethod=marker
