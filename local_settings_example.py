# Copy to local_settings.py and adapt.
# See https://docs.djangoproject.com/en/dev/howto/deployment/checklist/

# {{{ database and site

SECRET_KEY = "<CHANGE ME TO SOME RANDOM STRING ONCE IN PRODUCTION>"

ALLOWED_HOSTS = [
        "examcenter.example.com",
        "localhost",
        "testserver",
        ]

# Uncomment this to use a real database. If left commented out, a local SQLite3
# database will be used. Both honour the partial unique index that keeps a
# student logged in at most once per PC.
#
# DATABASES = {
#     "default": {
#         "ENGINE": "django.db.backends.postgresql",
#         "NAME": "examcenter",
#         "USER": "examcenter",
#         "PASSWORD": "<PASSWORD>",
#         "HOST": "127.0.0.1",
#         "PORT": "5432",
#     }
# }

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = True

# }}}

# {{{ exam center

# Students may log in this many minutes before the scheduled exam start.
EXAMCENTER_LOGIN_WINDOW_MINUTES = 10

# Used when an assignment is created without a duration.
EXAMCENTER_DEFAULT_EXAM_DURATION_MINUTES = 60

# Lets clients pretend a different current time through the
# X-Examcenter-Fake-Time header, for rehearsals. Never enable in production.
EXAMCENTER_ALLOW_FAKE_TIME = False

# Dotted paths of additional Django system checks to register at startup.
# EXAMCENTER_STARTUP_CHECKS_EXTRA = ["mysite.checks.check_something"]

# }}}

# vim: foldmethod=marker
