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
import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from django.utils.translation import gettext, ngettext

from center.constants import DEFAULT_LOGIN_WINDOW_MINUTES, login_session_status


# {{{ mypy

if TYPE_CHECKING:
    from center.models import LoginSession, Registration

# }}}


__doc__ = """
Decides whether a student may log in to an exam right now.

Everything here except :func:`scan_auto_login` is a pure function of the
records passed in and the current time. State changes that follow from these
decisions live in :mod:`center.lifecycle`.

.. autofunction:: compute_login_window
.. autofunction:: filter_eligible_assignments
.. autofunction:: is_due_for_auto_login
.. autofunction:: select_auto_login_session
.. autofunction:: scan_auto_login
"""


class ScheduledExam(Protocol):
    scheduled_start: datetime.datetime
    duration_minutes: int


def get_login_window_minutes() -> int:
    from django.conf import settings
    return getattr(settings, "EXAMCENTER_LOGIN_WINDOW_MINUTES",
            DEFAULT_LOGIN_WINDOW_MINUTES)


# {{{ login window

class LoginWindow:
    """Base of the four possible outcomes of :func:`compute_login_window`."""


@dataclass(frozen=True)
class TooEarly(LoginWindow):
    minutes_remaining: int


@dataclass(frozen=True)
class Eligible(LoginWindow):
    pass


@dataclass(frozen=True)
class Started(LoginWindow):
    pass


@dataclass(frozen=True)
class Closed(LoginWindow):
    pass


def compute_login_window(
        assignment: ScheduledExam,
        now_datetime: datetime.datetime,
        window_minutes: int | None = None) -> LoginWindow:
    """
    :returns: :class:`Closed` from the end of the exam on, :class:`Started`
        while the exam clock runs, :class:`TooEarly` before the login window
        opens and :class:`Eligible` inside the window, which spans the
        *window_minutes* before the scheduled start.
    """

    if window_minutes is None:
        window_minutes = get_login_window_minutes()

    start = assignment.scheduled_start
    end = start + datetime.timedelta(minutes=assignment.duration_minutes)
    window_open = start - datetime.timedelta(minutes=window_minutes)

    if now_datetime >= end:
        return Closed()
    if now_datetime >= start:
        return Started()
    if now_datetime < window_open:
        remaining = (window_open - now_datetime).total_seconds()
        return TooEarly(minutes_remaining=math.ceil(remaining / 60))

    return Eligible()


def login_diagnostic(
        windows: Iterable[LoginWindow],
        window_minutes: int | None = None) -> str:
    """Pick the single message shown when none of a student's assignments
    admits a login."""

    if window_minutes is None:
        window_minutes = get_login_window_minutes()

    windows = list(windows)

    if any(isinstance(w, Closed) for w in windows):
        return gettext("The exam is closed. You cannot log in.")

    if any(isinstance(w, Started) for w in windows):
        return gettext("The exam has already started. You cannot log in now.")

    remaining = [w.minutes_remaining for w in windows if isinstance(w, TooEarly)]
    if remaining:
        minutes = min(remaining)
        return (ngettext(
                    "You can only log in %(window)d minutes before the "
                    "scheduled exam time. Time remaining: %(minutes)d minute.",
                    "You can only log in %(window)d minutes before the "
                    "scheduled exam time. Time remaining: %(minutes)d minutes.",
                    minutes)
                % {"window": window_minutes, "minutes": minutes})

    return gettext("No valid exam assignments found.")


def filter_eligible_assignments(
        candidates: Sequence[ScheduledExam],
        now_datetime: datetime.datetime,
        window_minutes: int | None = None,
        ) -> tuple[list[ScheduledExam], str | None]:
    """
    :returns: a tuple ``(eligible, msg)``. *eligible* keeps the order of
        *candidates*. *msg* is *None* unless *eligible* is empty.
    """

    if window_minutes is None:
        window_minutes = get_login_window_minutes()

    windows = [
            compute_login_window(assignment, now_datetime, window_minutes)
            for assignment in candidates]

    eligible = [
            assignment
            for assignment, window in zip(candidates, windows)
            if isinstance(window, Eligible)]

    if eligible:
        return eligible, None

    return eligible, login_diagnostic(windows, window_minutes)

# }}}


# {{{ auto-login

def get_effective_auto_login_time(
        session: LoginSession) -> datetime.datetime | None:
    """The session's own auto-login time overrides the assignment's.

    A session without a time of its own therefore follows the assignment's
    clock, not the agent's start: if the assignment has an auto-login time
    still in the future, the session waits for it even after the exam has
    been started. Only when neither carries a time does
    :func:`is_due_for_auto_login` fall back to ``exam_started``.
    """
    if session.auto_login_time is not None:
        return session.auto_login_time
    return session.assignment.auto_login_time


def is_due_for_auto_login(
        session: LoginSession, now_datetime: datetime.datetime) -> bool:
    auto_login_time = get_effective_auto_login_time(session)
    if auto_login_time is not None:
        return now_datetime >= auto_login_time

    # without a fixed time, the session follows the agent's start
    return bool(session.assignment.exam_started)


def select_auto_login_session(
        sessions: Iterable[LoginSession],
        logged_in_pairs: Iterable[tuple[int, int]],
        now_datetime: datetime.datetime) -> LoginSession | None:
    """Return the first session of *sessions* that is due and whose
    ``(student_id, pc_id)`` pair is not in *logged_in_pairs*.

    *sessions* must already be in creation order.
    """

    taken = frozenset(logged_in_pairs)

    for session in sessions:
        if session.status != login_session_status.scheduled:
            continue
        if not is_due_for_auto_login(session, now_datetime):
            continue
        if (session.student_id, session.pc_id) in taken:
            continue

        return session

    return None


def get_scheduled_sessions_for_today(
        pc: Registration, now_datetime: datetime.datetime):
    from center.models import LoginSession
    from center.utils import utc_today

    return (LoginSession.objects
            .filter(
                pc=pc,
                status=login_session_status.scheduled,
                assignment__exam_date=utc_today(now_datetime))
            .select_related("assignment", "student")
            .order_by("created_at", "pk"))


def scan_auto_login(
        pc: Registration,
        now_datetime: datetime.datetime) -> LoginSession | None:
    """Find the scheduled session on *pc* that should be logged in now, if
    any. Only sessions of assignments dated today (UTC) are considered.
    Nothing is written.
    """

    from center.models import LoginSession

    sessions = list(get_scheduled_sessions_for_today(pc, now_datetime))
    if not sessions:
        return None

    logged_in_pairs = (LoginSession.objects
            .filter(pc=pc, status=login_session_status.logged_in)
            .values_list("student_id", "pc_id"))

    return select_auto_login_session(sessions, logged_in_pairs, now_datetime)

# }}}

# vim: foldmethod=marker
