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
import logging
from dataclasses import dataclass
from typing import Any

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models import F

from center.constants import (
    ASSIGNMENT_STATUS_TRANSITIONS,
    EXAM_EVENTS,
    EXAM_TYPES,
    LOGIN_SESSION_STATUS_CHOICES,
    assignment_status,
    device_status,
    login_session_status,
)
from center.eligibility import get_scheduled_sessions_for_today, scan_auto_login
from center.models import (
    Agent,
    ExamAssignment,
    LoginSession,
    MonitoringSession,
    Registration,
    Student,
)
from center.utils import (
    APIError,
    Conflict,
    Ineligible,
    NotFound,
    is_valid_exam_time,
    utc_today,
)


logger = logging.getLogger(__name__)

MAX_PROMOTION_ATTEMPTS = 5


class InvalidTransition(Conflict):
    pass


# {{{ lookups

def find_registration(
        mac_address: str, active_only: bool = False) -> Registration | None:
    qset = Registration.objects.filter(mac_address=mac_address)
    if active_only:
        qset = qset.filter(status=device_status.active)

    # "active" sorts before "inactive": prefer an active registration if a
    # MAC address was registered twice
    return qset.order_by("status", "pk").first()


def get_active_registration(mac_address: str) -> Registration:
    registration = find_registration(mac_address)
    if registration is None:
        raise NotFound("PC not found")
    if registration.status != device_status.active:
        raise Ineligible("PC is not active")
    return registration

# }}}


# {{{ assignment creation and editing

def normalize_exam_papers(
        exam_types: list[str], exam_papers: dict[str, Any]) -> dict[str, Any]:
    """Accept both ``{"reading": 3}`` and ``{"reading_exam_paper": 3}``."""

    result = {}
    for et in exam_types:
        paper_id = exam_papers.get(et) or exam_papers.get(f"{et}_exam_paper")
        if not paper_id:
            raise APIError("Missing exam paper for %s" % et)
        result[et] = paper_id

    return result


def validate_exam_types(exam_types: Any) -> list[str]:
    if not isinstance(exam_types, list) or not exam_types:
        raise APIError("exam_types must be a non-empty array")
    if not all(isinstance(et, str) and et in EXAM_TYPES for et in exam_types):
        raise APIError("Invalid exam type in array")
    if len(set(exam_types)) != len(exam_types):
        raise APIError("exam_types must not contain duplicates")
    return exam_types


def validate_duration(duration_minutes: Any) -> int:
    try:
        duration_minutes = int(duration_minutes)
    except (TypeError, ValueError):
        raise APIError("duration must be a whole number of minutes")
    if duration_minutes <= 0:
        raise APIError("duration must be positive")
    return duration_minutes


def create_assignment(
        *,
        student: Student,
        exam_types: Any,
        exam_papers: Any,
        exam_date: datetime.date,
        exam_time: str,
        title: str,
        bio: str = "",
        duration_minutes: Any = None,
        auto_login_time: datetime.datetime | None = None,
        is_visible: bool = True,
        agent: Agent | None = None,
        ) -> ExamAssignment:
    from center.papers import get_paper

    exam_types = validate_exam_types(exam_types)

    if not isinstance(exam_papers, dict):
        raise APIError("exam_papers must be an object")
    papers = normalize_exam_papers(exam_types, exam_papers)

    if not is_valid_exam_time(exam_time):
        raise APIError("exam_time must be given as HH:MM")

    if duration_minutes is None:
        from django.conf import settings
        duration_minutes = getattr(
                settings, "EXAMCENTER_DEFAULT_EXAM_DURATION_MINUTES", 60)
    duration_minutes = validate_duration(duration_minutes)

    # papers are checked once, here; later deletion of a paper is tolerated
    for et, paper_id in papers.items():
        papers[et] = get_paper(et, paper_id).pk

    assignment = ExamAssignment(
            student=student,
            agent=agent,
            exam_types=exam_types,
            exam_papers=papers,
            exam_date=exam_date,
            exam_time=exam_time,
            duration_minutes=duration_minutes,
            title=title,
            bio=bio,
            auto_login_time=auto_login_time,
            is_visible=is_visible,
            )
    assignment.update_scheduled_start()

    try:
        assignment.full_clean()
    except ValidationError as e:
        raise APIError("; ".join(e.messages))

    assignment.save()

    logger.info("assignment %d created for student '%s' at %s",
            assignment.pk, student.student_id,
            assignment.scheduled_start.isoformat())

    return assignment


ASSIGNMENT_EDITABLE_FIELDS = frozenset([
    "title", "bio", "exam_date", "exam_time", "duration_minutes",
    "auto_login_time", "is_visible", "agent",
    ])


def update_assignment(
        assignment: ExamAssignment,
        changes: dict[str, Any],
        expected_version: int | None = None) -> ExamAssignment:
    unknown = set(changes) - ASSIGNMENT_EDITABLE_FIELDS
    if unknown:
        raise APIError("Fields may not be edited: %s"
                % ", ".join(sorted(unknown)))

    if "exam_time" in changes and not is_valid_exam_time(changes["exam_time"]):
        raise APIError("exam_time must be given as HH:MM")
    if "duration_minutes" in changes:
        changes["duration_minutes"] = validate_duration(
                changes["duration_minutes"])

    with transaction.atomic():
        current = ExamAssignment.objects.select_for_update().get(
                pk=assignment.pk)
        if (expected_version is not None
                and current.version != expected_version):
            raise Conflict("Assignment was changed by someone else. "
                    "Reload and try again.")

        for name, value in changes.items():
            setattr(current, name, value)

        try:
            current.full_clean()
        except ValidationError as e:
            raise APIError("; ".join(e.messages))

        current.version += 1
        current.save()

    return current

# }}}


# {{{ progress facet

def transition_assignment_status(
        assignment: ExamAssignment, new_status: str) -> ExamAssignment:
    if new_status not in ASSIGNMENT_STATUS_TRANSITIONS:
        raise APIError("Invalid status")

    if assignment.status == new_status:
        return assignment

    if new_status not in ASSIGNMENT_STATUS_TRANSITIONS[assignment.status]:
        raise InvalidTransition(
                "Cannot change assignment status from '%s' to '%s'"
                % (assignment.status, new_status))

    updated = (ExamAssignment.objects
            .filter(pk=assignment.pk,
                status=assignment.status,
                version=assignment.version)
            .update(
                status=new_status,
                version=F("version") + 1,
                updated_at=datetime.datetime.now(datetime.timezone.utc)))

    if not updated:
        raise Conflict("Assignment was changed by someone else. "
                "Reload and try again.")

    logger.info("assignment %d: %s -> %s",
            assignment.pk, assignment.status, new_status)

    assignment.refresh_from_db()
    return assignment


def set_assignment_visibility(
        assignment: ExamAssignment, is_visible: bool) -> ExamAssignment:
    (ExamAssignment.objects
            .filter(pk=assignment.pk)
            .update(
                is_visible=is_visible,
                version=F("version") + 1,
                updated_at=datetime.datetime.now(datetime.timezone.utc)))
    assignment.refresh_from_db()
    return assignment

# }}}


# {{{ binding facet

def start_exam(
        student: Student,
        mac_address: str,
        now_datetime: datetime.datetime) -> ExamAssignment:
    """Bind today's next unstarted assignment of *student* to the PC with
    *mac_address* and mark it started.

    Agents and administrators use this, so the student login window is not
    consulted.
    """

    with transaction.atomic():
        registration = find_registration(mac_address, active_only=True)
        if registration is None:
            raise NotFound("PC not found")

        assignment = (ExamAssignment.objects
                .filter(
                    student=student,
                    exam_date=utc_today(now_datetime),
                    exam_started=False)
                .order_by("scheduled_start", "pk")
                .first())

        if assignment is None:
            raise NotFound(
                    "No exam is scheduled for this student today. Please "
                    "check the exam assignments and ensure the student has "
                    "a valid assignment.")

        updated = (ExamAssignment.objects
                .filter(pk=assignment.pk,
                    exam_started=False,
                    version=assignment.version)
                .update(
                    pc=registration,
                    exam_started=True,
                    started_at=now_datetime,
                    version=F("version") + 1,
                    updated_at=now_datetime))

        if not updated:
            raise Conflict("The exam was started concurrently.")

        registration.student = student
        registration.save(update_fields=["student"])

    logger.info("exam %d started for student '%s' on PC '%s'",
            assignment.pk, student.student_id, registration.pc_name)

    assignment.refresh_from_db()
    return assignment


def auto_start_due_assignments(
        student_pk: Any,
        registration: Registration,
        now_datetime: datetime.datetime) -> int:
    """Start assignments on *registration* whose auto-login time has passed.

    :returns: the number of assignments started by this call.
    """

    due = (ExamAssignment.objects
            .filter(
                student_id=student_pk,
                pc=registration,
                auto_login_time__lte=now_datetime,
                exam_started=False)
            .exclude(status__in=[
                assignment_status.completed,
                assignment_status.cancelled]))

    started = 0
    for assignment in due:
        started += (ExamAssignment.objects
                .filter(pk=assignment.pk,
                    exam_started=False,
                    version=assignment.version)
                .update(
                    exam_started=True,
                    started_at=now_datetime,
                    version=F("version") + 1,
                    updated_at=now_datetime))

        logger.info("exam %d auto-started on PC '%s'",
                assignment.pk, registration.pc_name)

    return started


@dataclass(frozen=True)
class ExamStatus:
    exam_started: bool
    has_assignment: bool
    assignment: ExamAssignment | None = None


def check_exam_status(
        mac_address: str,
        student_pk: Any,
        now_datetime: datetime.datetime) -> ExamStatus:
    registration = find_registration(mac_address)
    if registration is None:
        return ExamStatus(exam_started=False, has_assignment=False)

    has_assignment = (ExamAssignment.objects
            .filter(student_id=student_pk,
                exam_date=utc_today(now_datetime))
            .exists())

    auto_start_due_assignments(student_pk, registration, now_datetime)

    assignment = (ExamAssignment.objects
            .filter(
                student_id=student_pk,
                pc=registration,
                exam_started=True)
            .exclude(status__in=[
                assignment_status.completed,
                assignment_status.cancelled])
            .order_by("started_at", "pk")
            .first())

    if assignment is not None:
        return ExamStatus(
                exam_started=True, has_assignment=True, assignment=assignment)

    return ExamStatus(exam_started=False, has_assignment=has_assignment)

# }}}


# {{{ login sessions

def promote_session(
        session: LoginSession, now_datetime: datetime.datetime) -> bool:
    """Move *session* from scheduled to logged in, unless another writer got
    there first.

    :returns: *True* if this call performed the promotion.
    """

    try:
        with transaction.atomic():
            updated = (LoginSession.objects
                    .filter(pk=session.pk,
                        status=login_session_status.scheduled,
                        version=session.version)
                    .update(
                        status=login_session_status.logged_in,
                        login_time=now_datetime,
                        version=F("version") + 1))
    except IntegrityError:
        logger.warning("login session %d not promoted: student %d is "
                "already logged in on PC %d",
                session.pk, session.student_id, session.pc_id)
        return False

    if not updated:
        logger.warning("login session %d not promoted: changed concurrently",
                session.pk)
        return False

    session.refresh_from_db()
    logger.info("login session %d promoted to logged in", session.pk)
    return True


@dataclass(frozen=True)
class AutoLoginResult:
    session: LoginSession | None
    reason: str | None = None

    @property
    def eligible(self) -> bool:
        return self.session is not None


def check_auto_login(
        mac_address: str,
        now_datetime: datetime.datetime) -> AutoLoginResult:
    registration = get_active_registration(mac_address)

    if not get_scheduled_sessions_for_today(registration, now_datetime).exists():
        return AutoLoginResult(None, "No scheduled sessions")

    for _attempt in range(MAX_PROMOTION_ATTEMPTS):
        candidate = scan_auto_login(registration, now_datetime)
        if candidate is None:
            break

        if promote_session(candidate, now_datetime):
            return AutoLoginResult(candidate)

    return AutoLoginResult(None, "No eligible sessions")


def create_login_session(
        *,
        student: Student,
        pc: Registration,
        assignment: ExamAssignment,
        auto_login_time: datetime.datetime | None,
        now_datetime: datetime.datetime) -> LoginSession:
    if assignment.student_id != student.pk:
        raise APIError("Assignment does not belong to this student")

    if auto_login_time is not None:
        session = LoginSession(
                student=student, pc=pc, assignment=assignment,
                auto_login_time=auto_login_time,
                status=login_session_status.scheduled,
                created_at=now_datetime)
    else:
        session = LoginSession(
                student=student, pc=pc, assignment=assignment,
                status=login_session_status.logged_in,
                login_time=now_datetime,
                created_at=now_datetime)

    try:
        with transaction.atomic():
            session.save()
    except IntegrityError:
        raise Conflict("Student is already logged in on this PC")

    return session


def update_login_session_status(
        session: LoginSession,
        new_status: str,
        now_datetime: datetime.datetime) -> LoginSession:
    if new_status not in dict(LOGIN_SESSION_STATUS_CHOICES):
        raise APIError("Invalid status")

    changes: dict[str, Any] = {"status": new_status}
    if (new_status == login_session_status.logged_in
            and session.login_time is None):
        changes["login_time"] = now_datetime

    try:
        with transaction.atomic():
            updated = (LoginSession.objects
                    .filter(pk=session.pk, version=session.version)
                    .update(version=F("version") + 1, **changes))
    except IntegrityError:
        raise Conflict("Student is already logged in on this PC")

    if not updated:
        raise Conflict("Session was changed by someone else. "
                "Reload and try again.")

    session.refresh_from_db()
    return session

# }}}


# {{{ monitoring

def start_monitoring(
        agent: Agent,
        assignment: ExamAssignment,
        now_datetime: datetime.datetime) -> MonitoringSession:
    with transaction.atomic():
        closed = (MonitoringSession.objects
                .filter(agent=agent, end_time__isnull=True)
                .update(end_time=now_datetime))
        if closed:
            logger.info("agent '%s' left %d previous monitoring session(s)",
                    agent.agent_id, closed)

        entry = MonitoringSession.objects.create(
                agent=agent, assignment=assignment, start_time=now_datetime)

        if assignment.status == assignment_status.assigned:
            transition_assignment_status(
                    assignment, assignment_status.in_progress)

    logger.info("agent '%s' monitoring assignment %d",
            agent.agent_id, assignment.pk)

    return entry


def end_monitoring(
        agent: Agent,
        assignment: ExamAssignment,
        now_datetime: datetime.datetime) -> int:
    closed = (MonitoringSession.objects
            .filter(agent=agent, assignment=assignment, end_time__isnull=True)
            .update(end_time=now_datetime))

    logger.info("agent '%s' stopped monitoring assignment %d",
            agent.agent_id, assignment.pk)

    return closed


def send_exam_event(
        assignment: ExamAssignment,
        event: str,
        payload: Any = None,
        agent: Agent | None = None) -> None:
    from center.signaling import exam_event

    if event not in EXAM_EVENTS:
        raise APIError("Unknown event: '%s'" % event)

    logger.info("agent '%s' sent '%s' to assignment %d",
            agent.agent_id if agent is not None else None,
            event, assignment.pk)

    exam_event.send(
            sender=ExamAssignment,
            room=str(assignment.pk),
            event=event,
            payload=payload)

# }}}

# vim: foldmethod=marker
