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
import json
import logging
from functools import update_wrapper
from typing import Any

from django import http
from django.core.exceptions import ObjectDoesNotExist, PermissionDenied
from django.db import IntegrityError, transaction
from django.views.decorators.csrf import csrf_exempt

from center.constants import (
    AGENT_STATUS_CHOICES,
    ASSIGNMENT_OPEN_STATUSES,
    DEVICE_STATUS_CHOICES,
    agent_status,
    device_status,
)
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
    InvalidCredentials,
    NotFound,
    parse_aware_datetime,
    parse_date,
)


logger = logging.getLogger(__name__)

AGENT_SESSION_KEY = "examcenter_agent_pk"


# {{{ serialization

def _iso(dt: datetime.datetime | datetime.date | None) -> str | None:
    if dt is None:
        return None
    return dt.isoformat()


def registration_to_json(registration: Registration) -> dict[str, Any]:
    return {
            "id": registration.pk,
            "center_name": registration.center_name,
            "center_address": registration.center_address,
            "pc_name": registration.pc_name,
            "mac_address": registration.mac_address,
            "uuid": registration.uuid,
            "hostname": registration.hostname,
            "platform": registration.platform,
            "registered_at": _iso(registration.registered_at),
            "status": registration.status,
            "student": registration.student_id,
            }


def student_to_json(student: Student) -> dict[str, Any]:
    return {
            "id": student.pk,
            "name": student.name,
            "student_id": student.student_id,
            "dob": _iso(student.dob),
            "photo_url": student.photo_url,
            "unr": student.unr,
            "email": student.email,
            "phone": student.phone,
            "address": student.address,
            "nationality": student.nationality,
            "roll_no": student.roll_no,
            "test_date": _iso(student.test_date),
            "role": student.role,
            }


def agent_to_json(agent: Agent) -> dict[str, Any]:
    current = agent.get_current_monitoring_session()
    return {
            "id": agent.pk,
            "name": agent.name,
            "agent_id": agent.agent_id,
            "status": agent.status,
            "current_assignment": (
                current.assignment_id if current is not None else None),
            "created_at": _iso(agent.created_at),
            }


def assignment_to_json(assignment: ExamAssignment) -> dict[str, Any]:
    return {
            "id": assignment.pk,
            "student": assignment.student_id,
            "exam_types": assignment.exam_types,
            "exam_papers": assignment.exam_papers,
            "exam_date": _iso(assignment.exam_date),
            "exam_time": assignment.exam_time,
            "scheduled_start": _iso(assignment.scheduled_start),
            "duration_minutes": assignment.duration_minutes,
            "status": assignment.status,
            "is_visible": assignment.is_visible,
            "title": assignment.title,
            "bio": assignment.bio,
            "pc": assignment.pc_id,
            "agent": assignment.agent_id,
            "exam_started": assignment.exam_started,
            "started_at": _iso(assignment.started_at),
            "auto_login_time": _iso(assignment.auto_login_time),
            "version": assignment.version,
            }


def login_session_to_json(session: LoginSession) -> dict[str, Any]:
    return {
            "id": session.pk,
            "student": session.student_id,
            "pc": session.pc_id,
            "assignment": session.assignment_id,
            "login_time": _iso(session.login_time),
            "auto_login_time": _iso(session.auto_login_time),
            "status": session.status,
            "version": session.version,
            "created_at": _iso(session.created_at),
            }


def monitoring_session_to_json(entry: MonitoringSession) -> dict[str, Any]:
    return {
            "id": entry.pk,
            "agent": entry.agent_id,
            "assignment": entry.assignment_id,
            "start_time": _iso(entry.start_time),
            "end_time": _iso(entry.end_time),
            }

# }}}


# {{{ request helpers

def error_response(msg: str, status: int) -> http.JsonResponse:
    return http.JsonResponse({"error": msg}, status=status)


def api_view(*methods: str, exempt_csrf: bool = False):
    """Turn a view returning JSON-able data into one returning
    :class:`~django.http.JsonResponse`, mapping the exceptions of
    :mod:`center.utils` to status codes.

    Only views that do not rely on the session for authentication may pass
    *exempt_csrf*.
    """

    def decorator(f):
        def wrapper(request, *args, **kwargs):
            if methods and request.method not in methods:
                return http.HttpResponseNotAllowed(methods)

            try:
                result = f(request, *args, **kwargs)
            except APIError as e:
                return error_response(str(e), 400)
            except InvalidCredentials as e:
                return error_response(str(e), 401)
            except PermissionDenied as e:
                return error_response(str(e), 403)
            except (NotFound, ObjectDoesNotExist) as e:
                return error_response(str(e), 404)
            except Conflict as e:
                return error_response(str(e), 409)
            except Exception:
                logger.exception("unhandled error in %s", f.__name__)
                return error_response("Internal server error", 500)

            if isinstance(result, http.HttpResponse):
                return result

            return http.JsonResponse(result, safe=False)

        update_wrapper(wrapper, f)
        if exempt_csrf:
            return csrf_exempt(wrapper)
        return wrapper

    return decorator


def get_json_body(request: http.HttpRequest) -> dict[str, Any]:
    if not request.body:
        return {}

    try:
        data = json.loads(request.body)
    except ValueError:
        raise APIError("Request body is not valid JSON")

    if not isinstance(data, dict):
        raise APIError("Request body must be a JSON object")

    return data


def require_fields(data: dict[str, Any], *names: str) -> list[Any]:
    values = [data.get(name) for name in names]
    if any(value in (None, "") for value in values):
        raise APIError("All fields are required")
    return values


def require_string_fields(data: dict[str, Any], *names: str) -> list[str]:
    values = require_fields(data, *names)
    for name, value in zip(names, values):
        if not isinstance(value, str):
            raise APIError("%s must be a string" % name)
    return values


def to_pk(value: Any, what: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise APIError("%s must be an integer ID" % what)


def get_object(model, msg: str, **kwargs: Any):
    try:
        return model.objects.get(**kwargs)
    except (model.DoesNotExist, ValueError, TypeError):
        raise NotFound(msg)


def get_optional_datetime(
        data: dict[str, Any], name: str) -> datetime.datetime | None:
    value = data.get(name)
    if value in (None, ""):
        return None
    return parse_aware_datetime(value, name)


def require_staff(request: http.HttpRequest) -> None:
    if not (request.user.is_authenticated and request.user.is_staff):
        raise PermissionDenied("Staff login required")


def get_session_agent(request: http.HttpRequest, agent_pk: int) -> Agent:
    session_agent_pk = request.session.get(AGENT_SESSION_KEY)
    if session_agent_pk is None or session_agent_pk != agent_pk:
        raise PermissionDenied("Agent login required")

    try:
        agent = Agent.objects.get(pk=session_agent_pk)
    except Agent.DoesNotExist:
        raise PermissionDenied("Agent login required")

    if agent.status != agent_status.active:
        raise Ineligible("Agent account is not active")

    return agent


def get_now(request: http.HttpRequest) -> datetime.datetime:
    # imported here for mock to work
    from center.utils import get_now_or_fake_time
    return get_now_or_fake_time(request)

# }}}


# {{{ kiosk

@api_view("POST", exempt_csrf=True)
def register_pc(request):
    data = get_json_body(request)
    (center_name, center_address, pc_name, mac_address, uuid, hostname,
            platform) = require_string_fields(data,
                    "centerName", "centerAddress", "pcName", "macAddress",
                    "uuid", "hostname", "platform")

    if Registration.objects.filter(uuid=uuid).exists():
        raise Conflict("PC already registered")

    try:
        with transaction.atomic():
            registration = Registration.objects.create(
                    center_name=center_name,
                    center_address=center_address,
                    pc_name=pc_name,
                    mac_address=mac_address,
                    uuid=uuid,
                    hostname=hostname,
                    platform=platform,
                    registered_at=get_now(request))
    except IntegrityError:
        raise Conflict("PC already registered")

    return http.JsonResponse({
        "message": "Registration successful",
        "registration": registration_to_json(registration),
        }, status=201)


@api_view("POST", exempt_csrf=True)
def student_login(request):
    from center.eligibility import filter_eligible_assignments

    data = get_json_body(request)
    (student_id, password, mac_address, hostname,
            platform) = require_string_fields(
                    data, "studentId", "password", "macAddress", "hostname",
                    "platform")

    registration = (Registration.objects
            .filter(mac_address=mac_address, hostname=hostname,
                platform=platform)
            .order_by("status", "pk")
            .first())
    if registration is None:
        raise Ineligible("PC not registered. Please register this PC first.")
    if registration.status != device_status.active:
        raise Ineligible("Your device is not verified.")

    student = Student.objects.filter(student_id=student_id).first()
    if student is None or not student.check_password(password):
        raise InvalidCredentials("Invalid student ID or password")

    candidates = list(ExamAssignment.objects
            .filter(student=student,
                is_visible=True,
                status__in=ASSIGNMENT_OPEN_STATUSES)
            .order_by("scheduled_start", "pk"))

    eligible, msg = filter_eligible_assignments(candidates, get_now(request))
    if not eligible:
        logger.info("login refused for student '%s': %s", student_id, msg)
        raise Ineligible(msg)

    logger.info("student '%s' logged in on PC '%s'",
            student_id, registration.pc_name)

    return {
            "message": "Login successful",
            "student": student_to_json(student),
            "registration": registration_to_json(registration),
            "assignments": [assignment_to_json(a) for a in eligible],
            }


@api_view("POST", exempt_csrf=True)
def pc_auto_login(request):
    data = get_json_body(request)
    mac_address, uuid = require_fields(data, "macAddress", "uuid")

    registration = (Registration.objects
            .filter(mac_address=mac_address, uuid=uuid)
            .select_related("student")
            .first())
    if registration is None:
        raise NotFound("PC not registered")
    if registration.status != device_status.active:
        raise Ineligible("PC is not active")
    if registration.student is None:
        raise NotFound("Student not found")

    return {
            "student": student_to_json(registration.student),
            "registration": registration_to_json(registration),
            }


@api_view("GET")
def exam_status(request):
    from center.lifecycle import check_exam_status

    mac_address, student_pk = require_fields(
            request.GET, "macAddress", "studentId")

    status = check_exam_status(
            mac_address, to_pk(student_pk, "studentId"), get_now(request))

    return {
            "exam_started": status.exam_started,
            "has_assignment": status.has_assignment,
            "assignment": (
                assignment_to_json(status.assignment)
                if status.assignment is not None
                else None),
            }


@api_view("GET")
def auto_login_status(request):
    from center.lifecycle import check_auto_login

    mac_address, = require_fields(request.GET, "macAddress")

    result = check_auto_login(mac_address, get_now(request))
    if not result.eligible:
        return {"eligible": False, "reason": result.reason}

    return {
            "eligible": True,
            "session": login_session_to_json(result.session),
            }


@api_view("GET")
def student_assignments(request):
    # keyed by the login ID the kiosk knows, not the database id
    student_id, = require_fields(request.GET, "student_id")

    assignments = (ExamAssignment.objects
            .filter(student__student_id=student_id,
                is_visible=True,
                status__in=ASSIGNMENT_OPEN_STATUSES)
            .order_by("scheduled_start", "pk"))

    return [assignment_to_json(a) for a in assignments]


@api_view("GET")
def student_assignment_detail(request, assignment_pk):
    assignment = get_object(ExamAssignment, "Assignment not found",
            pk=assignment_pk, is_visible=True)
    return assignment_to_json(assignment)


@api_view("GET")
def get_exam_paper(request, kind, paper_pk):
    from center.papers import get_paper, paper_to_json
    return paper_to_json(get_paper(kind, paper_pk))

# }}}


# {{{ admin: devices and students

@api_view("GET")
def list_registrations(request):
    require_staff(request)
    qset = Registration.objects.all()
    if request.GET.get("status"):
        qset = qset.filter(status=request.GET["status"])
    return [registration_to_json(r) for r in qset]


@api_view("POST")
def set_registration_status(request, registration_pk):
    require_staff(request)
    status, = require_fields(get_json_body(request), "status")
    if status not in dict(DEVICE_STATUS_CHOICES):
        raise APIError("Invalid status")

    registration = get_object(Registration, "PC not found", pk=registration_pk)
    registration.status = status
    registration.save(update_fields=["status"])

    return registration_to_json(registration)


@api_view("GET", "POST")
def students(request):
    require_staff(request)

    if request.method == "GET":
        return [student_to_json(s) for s in Student.objects.all()]

    data = get_json_body(request)
    name, student_id, password = require_string_fields(
            data, "name", "student_id", "password")

    student = Student(
            name=name,
            student_id=student_id,
            email=data.get("email", ""),
            phone=data.get("phone", ""),
            address=data.get("address", ""),
            nationality=data.get("nationality", ""),
            roll_no=data.get("roll_no", ""),
            unr=data.get("unr", ""),
            photo_url=data.get("photo_url", ""),
            )
    if data.get("dob"):
        student.dob = parse_date(data["dob"], "dob")
    if data.get("test_date"):
        student.test_date = parse_date(data["test_date"], "test_date")
    student.set_password(password)

    try:
        with transaction.atomic():
            student.save()
    except IntegrityError:
        raise Conflict("Student ID already exists")

    return http.JsonResponse(student_to_json(student), status=201)


@api_view("POST")
def admin_start_exam(request):
    from center.lifecycle import start_exam

    require_staff(request)
    student_pk, mac_address = require_fields(
            get_json_body(request), "studentId", "macAddress")

    student = get_object(Student, "Student not found", pk=student_pk)
    assignment = start_exam(student, mac_address, get_now(request))

    return {
            "message": "Exam started",
            "assignment": assignment_to_json(assignment),
            }


@api_view("GET")
def list_exam_papers(request, kind):
    from center.papers import get_paper_model, paper_summary_to_json

    require_staff(request)
    model = get_paper_model(kind)
    return [paper_summary_to_json(p) for p in model.objects.all()]

# }}}


# {{{ admin: assignments

def _get_assignment_agent(data: dict[str, Any]) -> Agent | None:
    if data.get("agent") in (None, ""):
        return None
    return get_object(Agent, "Agent not found", pk=data["agent"])


@api_view("GET", "POST")
def assignments(request):
    from center.lifecycle import create_assignment

    require_staff(request)

    if request.method == "GET":
        qset = ExamAssignment.objects.all()
        if request.GET.get("status"):
            qset = qset.filter(status=request.GET["status"])
        if request.GET.get("student"):
            qset = qset.filter(
                    student_id=to_pk(request.GET["student"], "student"))
        if request.GET.get("exam_date"):
            qset = qset.filter(exam_date=parse_date(
                request.GET["exam_date"], "exam_date"))
        return [assignment_to_json(a) for a in qset]

    data = get_json_body(request)
    student_pk, exam_types, exam_papers, exam_date, exam_time, title = \
            require_fields(data,
                    "student", "exam_types", "exam_papers", "exam_date",
                    "exam_time", "title")

    exam_date = parse_date(exam_date, "exam_date")
    auto_login_time = get_optional_datetime(data, "auto_login_time")
    student = get_object(Student, "Student not found", pk=student_pk)

    assignment = create_assignment(
            student=student,
            exam_types=exam_types,
            exam_papers=exam_papers,
            exam_date=exam_date,
            exam_time=exam_time,
            title=title,
            bio=data.get("bio", ""),
            duration_minutes=data.get("duration_minutes"),
            auto_login_time=auto_login_time,
            is_visible=bool(data.get("is_visible", True)),
            agent=_get_assignment_agent(data),
            )

    return http.JsonResponse(assignment_to_json(assignment), status=201)


@api_view("GET", "PATCH")
def assignment_detail(request, assignment_pk):
    from center.lifecycle import update_assignment

    require_staff(request)
    assignment = get_object(ExamAssignment, "Assignment not found",
            pk=assignment_pk)

    if request.method == "GET":
        return assignment_to_json(assignment)

    data = get_json_body(request)
    expected_version = data.pop("version", None)

    changes = dict(data)
    if "exam_date" in changes:
        changes["exam_date"] = parse_date(changes["exam_date"], "exam_date")
    if "auto_login_time" in changes:
        changes["auto_login_time"] = get_optional_datetime(
                changes, "auto_login_time")
    if "agent" in changes:
        changes["agent"] = _get_assignment_agent(changes)

    assignment = update_assignment(
            assignment, changes, expected_version=expected_version)

    return assignment_to_json(assignment)


@api_view("POST")
def set_assignment_status(request, assignment_pk):
    from center.lifecycle import transition_assignment_status

    require_staff(request)
    status, = require_fields(get_json_body(request), "status")

    assignment = get_object(ExamAssignment, "Assignment not found",
            pk=assignment_pk)
    assignment = transition_assignment_status(assignment, status)

    return assignment_to_json(assignment)


@api_view("POST")
def set_assignment_visibility(request, assignment_pk):
    from center.lifecycle import set_assignment_visibility as set_visibility

    require_staff(request)
    data = get_json_body(request)
    if not isinstance(data.get("is_visible"), bool):
        raise APIError("is_visible must be true or false")

    assignment = get_object(ExamAssignment, "Assignment not found",
            pk=assignment_pk)
    assignment = set_visibility(assignment, data["is_visible"])

    return assignment_to_json(assignment)

# }}}


# {{{ admin: login sessions

@api_view("GET", "POST")
def login_sessions(request):
    from center.lifecycle import create_login_session

    require_staff(request)

    if request.method == "GET":
        qset = LoginSession.objects.all()
        if request.GET.get("status"):
            qset = qset.filter(status=request.GET["status"])
        if request.GET.get("pc"):
            qset = qset.filter(pc_id=to_pk(request.GET["pc"], "pc"))
        return [login_session_to_json(s) for s in qset]

    data = get_json_body(request)
    student_pk, pc_pk, assignment_pk = require_fields(
            data, "student", "pc", "assignment")
    auto_login_time = get_optional_datetime(data, "auto_login_time")

    session = create_login_session(
            student=get_object(Student, "Student not found", pk=student_pk),
            pc=get_object(Registration, "PC not found", pk=pc_pk),
            assignment=get_object(ExamAssignment, "Assignment not found",
                pk=assignment_pk),
            auto_login_time=auto_login_time,
            now_datetime=get_now(request))

    return http.JsonResponse(login_session_to_json(session), status=201)


@api_view("POST")
def set_login_session_status(request, session_pk):
    from center.lifecycle import update_login_session_status

    require_staff(request)
    status, = require_fields(get_json_body(request), "status")

    session = get_object(LoginSession, "Login session not found",
            pk=session_pk)
    session = update_login_session_status(session, status, get_now(request))

    return login_session_to_json(session)

# }}}


# {{{ admin: agents

def _validate_agent_status(status: str) -> str:
    if status not in dict(AGENT_STATUS_CHOICES):
        raise APIError("Invalid status")
    return status


@api_view("GET", "POST")
def agents(request):
    require_staff(request)

    if request.method == "GET":
        return [agent_to_json(a) for a in Agent.objects.all()]

    data = get_json_body(request)
    name, agent_id, password = require_string_fields(
            data, "name", "agent_id", "password")

    agent = Agent(
            name=name,
            agent_id=agent_id,
            status=_validate_agent_status(
                data.get("status", agent_status.active)))
    agent.set_password(password)

    if Agent.objects.filter(agent_id=agent_id.strip().upper()).exists():
        raise Conflict("Agent ID already exists")

    try:
        with transaction.atomic():
            agent.save()
    except IntegrityError:
        raise Conflict("Agent ID already exists")

    return http.JsonResponse(agent_to_json(agent), status=201)


@api_view("GET", "PATCH", "DELETE")
def agent_detail(request, agent_pk):
    require_staff(request)
    agent = get_object(Agent, "Agent not found", pk=agent_pk)

    if request.method == "GET":
        return agent_to_json(agent)

    if request.method == "DELETE":
        if agent.assignments.exists():
            raise Conflict("Cannot delete agent with assigned exams. "
                    "Please reassign exams first.")
        agent.delete()
        return {"message": "Agent deleted"}

    data = get_json_body(request)
    if data.get("name"):
        agent.name = data["name"]
    if data.get("status"):
        agent.status = _validate_agent_status(data["status"])
    if data.get("password"):
        agent.set_password(data["password"])
    agent.save()

    return agent_to_json(agent)

# }}}


# {{{ agent

@api_view("POST", exempt_csrf=True)
def agent_login(request):
    agent_id, password = require_string_fields(
            get_json_body(request), "agentId", "password")

    agent = Agent.objects.filter(agent_id=agent_id.strip().upper()).first()
    if agent is None or not agent.check_password(password):
        raise InvalidCredentials("Invalid agent ID or password")
    if agent.status != agent_status.active:
        raise Ineligible("Agent account is not active")

    request.session[AGENT_SESSION_KEY] = agent.pk
    logger.info("agent '%s' logged in", agent.agent_id)

    return {"message": "Login successful", "agent": agent_to_json(agent)}


@api_view("POST")
def agent_logout(request):
    request.session.pop(AGENT_SESSION_KEY, None)
    return {"message": "Logged out"}


@api_view("GET")
def agent_exams(request, agent_pk):
    agent = get_session_agent(request, agent_pk)
    assignments = (ExamAssignment.objects
            .filter(agent=agent)
            .order_by("scheduled_start", "pk"))
    return [assignment_to_json(a) for a in assignments]


@api_view("POST")
def agent_start_monitoring(request, agent_pk, assignment_pk):
    from center.lifecycle import start_monitoring

    agent = get_session_agent(request, agent_pk)
    assignment = get_object(ExamAssignment, "Assignment not found",
            pk=assignment_pk)
    entry = start_monitoring(agent, assignment, get_now(request))

    return monitoring_session_to_json(entry)


@api_view("POST")
def agent_end_monitoring(request, agent_pk, assignment_pk):
    from center.lifecycle import end_monitoring

    agent = get_session_agent(request, agent_pk)
    assignment = get_object(ExamAssignment, "Assignment not found",
            pk=assignment_pk)
    closed = end_monitoring(agent, assignment, get_now(request))

    return {"closed": closed}


@api_view("POST")
def agent_exam_event(request, agent_pk, assignment_pk, event):
    from center.lifecycle import send_exam_event

    agent = get_session_agent(request, agent_pk)
    assignment = get_object(ExamAssignment, "Assignment not found",
            pk=assignment_pk)
    send_exam_event(assignment, event,
            payload=get_json_body(request).get("payload"), agent=agent)

    return {"message": "Event sent", "event": event}

# }}}

# vim: foldmethod=marker
