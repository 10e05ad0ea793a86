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

from django.utils.translation import pgettext_lazy


EXAM_TIME_REGEX = r"^([01]\d|2[0-3]):[0-5]\d$"

DEFAULT_LOGIN_WINDOW_MINUTES = 10
DEFAULT_EXAM_DURATION_MINUTES = 60


# {{{ device status

class device_status:  # noqa
    active = "active"
    inactive = "inactive"


DEVICE_STATUS_CHOICES = (
        (device_status.active, pgettext_lazy("Device status", "Active")),
        (device_status.inactive, pgettext_lazy("Device status", "Inactive")),
        )

# }}}


# {{{ agent status

class agent_status:  # noqa
    active = "active"
    inactive = "inactive"


AGENT_STATUS_CHOICES = (
        (agent_status.active, pgettext_lazy("Agent status", "Active")),
        (agent_status.inactive, pgettext_lazy("Agent status", "Inactive")),
        )

# }}}


# {{{ exam types

class exam_type:  # noqa
    writing = "writing"
    speaking = "speaking"
    listening = "listening"
    reading = "reading"


EXAM_TYPE_CHOICES = (
        (exam_type.writing, pgettext_lazy("Exam type", "Writing")),
        (exam_type.speaking, pgettext_lazy("Exam type", "Speaking")),
        (exam_type.listening, pgettext_lazy("Exam type", "Listening")),
        (exam_type.reading, pgettext_lazy("Exam type", "Reading")),
        )

EXAM_TYPES = frozenset(key for key, _label in EXAM_TYPE_CHOICES)

# }}}


# {{{ paper status

class paper_status:  # noqa
    draft = "draft"
    published = "published"


PAPER_STATUS_CHOICES = (
        (paper_status.draft, pgettext_lazy("Paper status", "Draft")),
        (paper_status.published, pgettext_lazy("Paper status", "Published")),
        )

# }}}


# {{{ assignment status

class assignment_status:  # noqa
    assigned = "assigned"
    in_progress = "in_progress"
    completed = "completed"
    cancelled = "cancelled"


ASSIGNMENT_STATUS_CHOICES = (
        (assignment_status.assigned,
            pgettext_lazy("Assignment status", "Assigned")),
        (assignment_status.in_progress,
            pgettext_lazy("Assignment status", "In progress")),
        (assignment_status.completed,
            pgettext_lazy("Assignment status", "Completed")),
        (assignment_status.cancelled,
            pgettext_lazy("Assignment status", "Cancelled")),
        )

# statuses in which an assignment is offered to students
ASSIGNMENT_OPEN_STATUSES = (
        assignment_status.assigned,
        assignment_status.in_progress,
        )

ASSIGNMENT_STATUS_TRANSITIONS = {
        assignment_status.assigned: frozenset([
            assignment_status.in_progress,
            assignment_status.cancelled,
            ]),
        assignment_status.in_progress: frozenset([
            assignment_status.completed,
            assignment_status.cancelled,
            ]),
        assignment_status.completed: frozenset(),
        assignment_status.cancelled: frozenset(),
        }

# }}}


# {{{ login session status

class login_session_status:  # noqa
    scheduled = "scheduled"
    logged_in = "logged_in"
    completed = "completed"


LOGIN_SESSION_STATUS_CHOICES = (
        (login_session_status.scheduled,
            pgettext_lazy("Login session status", "Scheduled")),
        (login_session_status.logged_in,
            pgettext_lazy("Login session status", "Logged in")),
        (login_session_status.completed,
            pgettext_lazy("Login session status", "Completed")),
        )

# }}}


# {{{ signaling events

class exam_event:  # noqa
    end_exam = "end-exam"
    change_section = "change-section"
    change_passage = "change-passage"


EXAM_EVENTS = frozenset([
    exam_event.end_exam,
    exam_event.change_section,
    exam_event.change_passage,
    ])

# }}}

# vim: foldmethod=marker
