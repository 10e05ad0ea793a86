from __future__ import annotations


__copyright__ = "Copyright (C) 2024 Exam Center contributors"

__license__ = """
Permission is hereby granted, free of charge, to any person obtaining a copy
of this software and associated documentation files (the "Software"), to deal
in the Software without restriction, including without limitation the rights
to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
copies of the Software, and to permit persons to whom the Software is
furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included in
all copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN
THE SOFTWARE.
"""

from django.conf import settings
from django.core.checks import Critical, register
from django.core.exceptions import ImproperlyConfigured
from django.utils.module_loading import import_string


REQUIRED_CONF_ERROR_PATTERN = (
    "You must configure %(location)s for the exam center to run properly.")
INSTANCE_ERROR_PATTERN = "%(location)s must be an instance of %(types)s."
GENERIC_ERROR_PATTERN = "Error in '%(location)s': %(error_type)s: %(error_str)s"

EXAMCENTER_LOGIN_WINDOW_MINUTES = "EXAMCENTER_LOGIN_WINDOW_MINUTES"
EXAMCENTER_DEFAULT_EXAM_DURATION_MINUTES = (
    "EXAMCENTER_DEFAULT_EXAM_DURATION_MINUTES")
EXAMCENTER_ALLOW_FAKE_TIME = "EXAMCENTER_ALLOW_FAKE_TIME"
EXAMCENTER_STARTUP_CHECKS_EXTRA = "EXAMCENTER_STARTUP_CHECKS_EXTRA"

EXAMCENTER_STARTUP_CHECKS_TAG = "start_up_check"
EXAMCENTER_STARTUP_CHECKS_EXTRA_TAG = "startup_checks_extra"


class ExamCenterCriticalCheckMessage(Critical):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.obj = self.obj or ImproperlyConfigured.__name__


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def check_examcenter_settings(app_configs, **kwargs):
    errors = []

    # {{{ check EXAMCENTER_LOGIN_WINDOW_MINUTES
    login_window = getattr(settings, EXAMCENTER_LOGIN_WINDOW_MINUTES, None)
    if login_window is None:
        errors.append(ExamCenterCriticalCheckMessage(
            msg=(REQUIRED_CONF_ERROR_PATTERN
                 % {"location": EXAMCENTER_LOGIN_WINDOW_MINUTES}),
            id="examcenter_login_window_minutes.E001"
        ))
    elif not _is_int(login_window):
        errors.append(ExamCenterCriticalCheckMessage(
            msg=(INSTANCE_ERROR_PATTERN
                 % {"location": EXAMCENTER_LOGIN_WINDOW_MINUTES,
                    "types": "int"}),
            id="examcenter_login_window_minutes.E002"
        ))
    elif login_window < 0:
        errors.append(ExamCenterCriticalCheckMessage(
            msg=(f"{EXAMCENTER_LOGIN_WINDOW_MINUTES} must not be negative, "
                 f"got {login_window} instead"),
            id="examcenter_login_window_minutes.E003"
        ))
    # }}}

    # {{{ check EXAMCENTER_DEFAULT_EXAM_DURATION_MINUTES
    duration = getattr(settings, EXAMCENTER_DEFAULT_EXAM_DURATION_MINUTES, None)
    if duration is not None:
        if not _is_int(duration):
            errors.append(ExamCenterCriticalCheckMessage(
                msg=(INSTANCE_ERROR_PATTERN
                     % {"location": EXAMCENTER_DEFAULT_EXAM_DURATION_MINUTES,
                        "types": "int"}),
                id="examcenter_default_exam_duration_minutes.E001"
            ))
        elif duration <= 0:
            errors.append(ExamCenterCriticalCheckMessage(
                msg=(f"{EXAMCENTER_DEFAULT_EXAM_DURATION_MINUTES} must be "
                     f"positive, got {duration} instead"),
                id="examcenter_default_exam_duration_minutes.E002"
            ))
    # }}}

    # {{{ check EXAMCENTER_ALLOW_FAKE_TIME
    allow_fake_time = getattr(settings, EXAMCENTER_ALLOW_FAKE_TIME, None)
    if allow_fake_time is not None and not isinstance(allow_fake_time, bool):
        errors.append(ExamCenterCriticalCheckMessage(
            msg=(INSTANCE_ERROR_PATTERN
                 % {"location": EXAMCENTER_ALLOW_FAKE_TIME, "types": "bool"}),
            id="examcenter_allow_fake_time.E001"
        ))
    # }}}

    return errors


def register_startup_checks():
    register(check_examcenter_settings, EXAMCENTER_STARTUP_CHECKS_TAG)


def register_startup_checks_extra():
    """
    Register extra checks provided by user.
    Exceptions are raised here rather than reported as check messages, since
    checks only run after AppConfig.ready() is done.
    """
    startup_checks_extra = getattr(
        settings, EXAMCENTER_STARTUP_CHECKS_EXTRA, None)
    if startup_checks_extra is not None:
        if not isinstance(startup_checks_extra, list | tuple):
            raise ImproperlyConfigured(
                INSTANCE_ERROR_PATTERN
                % {"location": EXAMCENTER_STARTUP_CHECKS_EXTRA,
                   "types": "list or tuple"
                   }
            )
        for c in startup_checks_extra:
            try:
                check_item = import_string(c)
            except Exception as e:
                raise ImproperlyConfigured(
                    GENERIC_ERROR_PATTERN
                    % {
                        "location": EXAMCENTER_STARTUP_CHECKS_EXTRA,
                        "error_type": type(e).__name__,
                        "error_str": str(e)
                    })
            else:
                register(check_item, EXAMCENTER_STARTUP_CHECKS_EXTRA_TAG)

# vim: foldmethod=marker
