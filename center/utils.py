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

import datetime
import re
from typing import TYPE_CHECKING, Any

from django.core.exceptions import PermissionDenied

from center.constants import EXAM_TIME_REGEX


# {{{ mypy

if TYPE_CHECKING:
    from django import http

# }}}


# {{{ errors

class APIError(Exception):
    """Malformed or incomplete request data. Raised before anything is
    written."""


class NotFound(Exception):  # noqa: N818
    pass


class Conflict(Exception):  # noqa: N818
    """A unique key is taken, or a conditional update lost against a
    concurrent writer."""


class Ineligible(PermissionDenied):  # noqa: N818
    """The request is understood but the device or the exam window does not
    allow it right now."""


class InvalidCredentials(Exception):  # noqa: N818
    pass

# }}}


# {{{ time

FAKE_TIME_HEADER = "HTTP_X_EXAMCENTER_FAKE_TIME"

_EXAM_TIME_RE = re.compile(EXAM_TIME_REGEX)


def get_fake_time(request: http.HttpRequest | None) -> datetime.datetime | None:
    from django.conf import settings
    if request is None or not getattr(
            settings, "EXAMCENTER_ALLOW_FAKE_TIME", False):
        return None

    fake_time_str = request.META.get(FAKE_TIME_HEADER)
    if not fake_time_str:
        return None

    return parse_aware_datetime(fake_time_str, "fake time")


def get_now_or_fake_time(
        request: http.HttpRequest | None = None) -> datetime.datetime:
    fake_time = get_fake_time(request)
    if fake_time is None:
        from django.utils.timezone import now
        return now()
    else:
        return fake_time


def utc_today(now_datetime: datetime.datetime) -> datetime.date:
    """Calendar day of *now_datetime* in UTC. An ``exam_date`` equal to this
    lies in ``[today 00:00, tomorrow 00:00)`` UTC."""
    return now_datetime.astimezone(datetime.timezone.utc).date()


def is_valid_exam_time(exam_time: Any) -> bool:
    if not isinstance(exam_time, str):
        return False
    return bool(_EXAM_TIME_RE.match(exam_time))


def combine_exam_start(
        exam_date: datetime.date, exam_time: str) -> datetime.datetime:
    """Turn a calendar date and an ``HH:MM`` wall-clock time into an aware
    UTC instant."""

    if not is_valid_exam_time(exam_time):
        raise ValueError("exam time must be given as HH:MM, got '%s'"
                % exam_time)

    hours, minutes = (int(part) for part in exam_time.split(":"))
    return datetime.datetime.combine(
            exam_date, datetime.time(hours, minutes),
            tzinfo=datetime.timezone.utc)


def parse_aware_datetime(value: str, what: str) -> datetime.datetime:
    from django.utils.dateparse import parse_datetime

    try:
        result = parse_datetime(value)
    except (TypeError, ValueError):
        result = None

    if result is None:
        raise APIError("%s is not a valid ISO 8601 date/time: '%s'"
                % (what, value))

    if result.tzinfo is None:
        result = result.replace(tzinfo=datetime.timezone.utc)

    return result


def parse_date(value: str, what: str) -> datetime.date:
    from django.utils.dateparse import parse_date as django_parse_date

    # accept full timestamps, which some clients send for date-only fields
    try:
        result = django_parse_date(value[:10])
    except (TypeError, ValueError):
        result = None

    if result is None:
        raise APIError("%s is not a valid date: '%s'" % (what, value))

    return result

# }}}

# vim: foldmethod=marker
