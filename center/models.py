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

from django.contrib.auth.hashers import check_password, make_password
from django.core.exceptions import ValidationError
from django.core.validators import RegexValidator
from django.db import models
from django.db.models import Q
from django.utils.timezone import now
from django.utils.translation import gettext_lazy as _

from center.constants import (
    AGENT_STATUS_CHOICES,
    ASSIGNMENT_STATUS_CHOICES,
    DEFAULT_EXAM_DURATION_MINUTES,
    DEVICE_STATUS_CHOICES,
    EXAM_TIME_REGEX,
    EXAM_TYPES,
    LOGIN_SESSION_STATUS_CHOICES,
    PAPER_STATUS_CHOICES,
    agent_status,
    assignment_status,
    device_status,
    login_session_status,
    paper_status,
)


# {{{ registration

class Registration(models.Model):
    """A lab PC known to the exam center."""

    center_name = models.CharField(max_length=200,
            verbose_name=_("Center name"))
    center_address = models.CharField(max_length=500,
            verbose_name=_("Center address"))
    pc_name = models.CharField(max_length=200,
            verbose_name=_("PC name"))
    mac_address = models.CharField(max_length=64, db_index=True,
            verbose_name=_("MAC address"))
    uuid = models.CharField(max_length=200, unique=True,
            verbose_name=_("UUID"))
    hostname = models.CharField(max_length=200,
            verbose_name=_("Host name"))
    platform = models.CharField(max_length=100,
            verbose_name=_("Platform"))
    registered_at = models.DateTimeField(default=now,
            verbose_name=_("Registered at"))
    status = models.CharField(max_length=50,
            choices=DEVICE_STATUS_CHOICES,
            default=device_status.active,
            verbose_name=_("Device status"))

    student = models.ForeignKey("Student", null=True, blank=True,
            on_delete=models.SET_NULL, related_name="registrations",
            verbose_name=_("Student"),
            help_text=_("Student this PC is currently dedicated to"))

    class Meta:
        verbose_name = _("PC registration")
        verbose_name_plural = _("PC registrations")
        ordering = ("center_name", "pc_name")

    def __str__(self):
        return _("%(pc_name)s at %(center_name)s") % {
                "pc_name": self.pc_name,
                "center_name": self.center_name,
                }

    @property
    def is_active(self) -> bool:
        return self.status == device_status.active

# }}}


# {{{ people

class PasswordMixin:
    password: str

    def set_password(self, raw_password: str) -> None:
        self.password = make_password(raw_password)

    def check_password(self, raw_password: str) -> bool:
        return check_password(raw_password, self.password)


class Student(PasswordMixin, models.Model):
    name = models.CharField(max_length=200,
            verbose_name=_("Name"))
    student_id = models.CharField(max_length=100, unique=True,
            verbose_name=_("Student ID"))
    password = models.CharField(max_length=128,
            verbose_name=_("Password"))
    dob = models.DateField(null=True, blank=True,
            verbose_name=_("Date of birth"))
    photo_url = models.CharField(max_length=500, blank=True,
            verbose_name=_("Photo URL"))
    unr = models.CharField(max_length=100, blank=True,
            verbose_name=_("UNR"))
    email = models.EmailField(blank=True,
            verbose_name=_("Email"))
    phone = models.CharField(max_length=50, blank=True,
            verbose_name=_("Phone"))
    address = models.CharField(max_length=500, blank=True,
            verbose_name=_("Address"))
    nationality = models.CharField(max_length=100, blank=True,
            verbose_name=_("Nationality"))
    roll_no = models.CharField(max_length=100, blank=True,
            verbose_name=_("Roll number"))
    test_date = models.DateField(null=True, blank=True,
            verbose_name=_("Test date"))
    role = models.CharField(max_length=50, default="student",
            verbose_name=_("Role"))

    created_at = models.DateTimeField(default=now,
            verbose_name=_("Created at"))
    updated_at = models.DateTimeField(auto_now=True,
            verbose_name=_("Updated at"))

    class Meta:
        verbose_name = _("Student")
        verbose_name_plural = _("Students")
        ordering = ("student_id",)

    def __str__(self):
        return f"{self.name} ({self.student_id})"


class Agent(PasswordMixin, models.Model):
    name = models.CharField(max_length=200,
            verbose_name=_("Name"))
    agent_id = models.CharField(max_length=100, unique=True,
            verbose_name=_("Agent ID"),
            help_text=_("Stored in upper case"))
    password = models.CharField(max_length=128,
            verbose_name=_("Password"))
    status = models.CharField(max_length=50,
            choices=AGENT_STATUS_CHOICES,
            default=agent_status.active,
            verbose_name=_("Agent status"))

    created_at = models.DateTimeField(default=now,
            verbose_name=_("Created at"))
    updated_at = models.DateTimeField(auto_now=True,
            verbose_name=_("Updated at"))

    class Meta:
        verbose_name = _("Agent")
        verbose_name_plural = _("Agents")
        ordering = ("-created_at",)

    def __str__(self):
        return f"{self.name} ({self.agent_id})"

    def save(self, *args, **kwargs):
        self.agent_id = self.agent_id.strip().upper()
        super().save(*args, **kwargs)

    def get_current_monitoring_session(self) -> MonitoringSession | None:
        return (MonitoringSession.objects
                .filter(agent=self, end_time__isnull=True)
                .order_by("-start_time", "-pk")
                .first())

# }}}


# {{{ papers

class PaperBase(models.Model):
    title = models.CharField(max_length=200,
            verbose_name=_("Title"))
    description = models.TextField(blank=True,
            verbose_name=_("Description"))
    status = models.CharField(max_length=50,
            choices=PAPER_STATUS_CHOICES,
            default=paper_status.draft,
            verbose_name=_("Paper status"))
    created_by = models.CharField(max_length=200,
            verbose_name=_("Created by"))
    estimated_minutes = models.PositiveIntegerField(default=60,
            verbose_name=_("Estimated time in minutes"))
    content = models.JSONField(default=dict, blank=True,
            verbose_name=_("Content"),
            help_text=_("Sections, passages, tasks and questions of the paper"))

    created_at = models.DateTimeField(default=now,
            verbose_name=_("Created at"))
    updated_at = models.DateTimeField(auto_now=True,
            verbose_name=_("Updated at"))

    class Meta:
        abstract = True
        ordering = ("-created_at",)

    def __str__(self):
        return self.title


class WritingPaper(PaperBase):
    class Meta(PaperBase.Meta):
        verbose_name = _("Writing paper")
        verbose_name_plural = _("Writing papers")


class SpeakingPaper(PaperBase):
    class Meta(PaperBase.Meta):
        verbose_name = _("Speaking paper")
        verbose_name_plural = _("Speaking papers")


class ListeningPaper(PaperBase):
    class Meta(PaperBase.Meta):
        verbose_name = _("Listening paper")
        verbose_name_plural = _("Listening papers")


class ReadingPaper(PaperBase):
    class Meta(PaperBase.Meta):
        verbose_name = _("Reading paper")
        verbose_name_plural = _("Reading papers")

# }}}


# {{{ exam assignment

class ExamAssignment(models.Model):
    student = models.ForeignKey(Student, on_delete=models.CASCADE,
            related_name="assignments",
            verbose_name=_("Student"))

    exam_types = models.JSONField(
            verbose_name=_("Exam types"),
            help_text=_("List of exam types, e.g. ['reading', 'writing']"))
    exam_papers = models.JSONField(
            verbose_name=_("Exam papers"),
            help_text=_("Mapping of exam type to paper ID"))

    exam_date = models.DateField(db_index=True,
            verbose_name=_("Exam date"))
    exam_time = models.CharField(max_length=5,
            validators=[RegexValidator(EXAM_TIME_REGEX)],
            verbose_name=_("Exam time"),
            help_text=_("Wall-clock start time in UTC, as HH:MM"))
    scheduled_start = models.DateTimeField(db_index=True,
            editable=False,
            verbose_name=_("Scheduled start"))
    duration_minutes = models.PositiveIntegerField(
            default=DEFAULT_EXAM_DURATION_MINUTES,
            verbose_name=_("Duration in minutes"))

    status = models.CharField(max_length=50,
            choices=ASSIGNMENT_STATUS_CHOICES,
            default=assignment_status.assigned,
            verbose_name=_("Assignment status"))
    is_visible = models.BooleanField(default=True,
            verbose_name=_("Visible"),
            help_text=_("Shown to the student when logging in"))

    title = models.CharField(max_length=200,
            verbose_name=_("Title"))
    bio = models.TextField(blank=True,
            verbose_name=_("Description"))

    pc = models.ForeignKey(Registration, null=True, blank=True,
            on_delete=models.SET_NULL, related_name="assignments",
            verbose_name=_("PC"))
    agent = models.ForeignKey(Agent, null=True, blank=True,
            on_delete=models.PROTECT, related_name="assignments",
            verbose_name=_("Agent"))

    exam_started = models.BooleanField(default=False,
            verbose_name=_("Exam started"))
    started_at = models.DateTimeField(null=True, blank=True,
            verbose_name=_("Started at"))
    auto_login_time = models.DateTimeField(null=True, blank=True,
            verbose_name=_("Auto-login time"),
            help_text=_("If set, the exam starts by itself on its PC "
                "at this time"))

    version = models.PositiveIntegerField(default=0,
            verbose_name=_("Version"))

    created_at = models.DateTimeField(default=now,
            verbose_name=_("Created at"))
    updated_at = models.DateTimeField(auto_now=True,
            verbose_name=_("Updated at"))

    class Meta:
        verbose_name = _("Exam assignment")
        verbose_name_plural = _("Exam assignments")
        ordering = ("-created_at", "-pk")

    def __str__(self):
        return _("%(title)s for %(student)s on %(date)s %(time)s") % {
                "title": self.title,
                "student": self.student,
                "date": self.exam_date,
                "time": self.exam_time,
                }

    @property
    def scheduled_end(self) -> datetime.datetime:
        return self.scheduled_start + datetime.timedelta(
                minutes=self.duration_minutes)

    def update_scheduled_start(self) -> None:
        from center.utils import combine_exam_start
        self.scheduled_start = combine_exam_start(self.exam_date, self.exam_time)

    def clean(self):
        super().clean()

        if (not isinstance(self.exam_types, list)
                or not self.exam_types
                or not all(et in EXAM_TYPES for et in self.exam_types)):
            raise ValidationError({
                "exam_types": _("Must be a non-empty list drawn from %s.")
                % ", ".join(sorted(EXAM_TYPES))})

        if len(set(self.exam_types)) != len(self.exam_types):
            raise ValidationError({
                "exam_types": _("Exam types must not repeat.")})

        if not isinstance(self.exam_papers, dict):
            raise ValidationError({
                "exam_papers": _("Must map exam types to paper IDs.")})

        for et in self.exam_types:
            if not self.exam_papers.get(et):
                raise ValidationError({
                    "exam_papers": _("Missing exam paper for %s.") % et})

    def save(self, *args, **kwargs):
        if self.exam_date is not None and self.exam_time:
            self.update_scheduled_start()
        super().save(*args, **kwargs)

# }}}


# {{{ login session

class LoginSession(models.Model):
    student = models.ForeignKey(Student, on_delete=models.CASCADE,
            related_name="login_sessions",
            verbose_name=_("Student"))
    pc = models.ForeignKey(Registration, on_delete=models.CASCADE,
            related_name="login_sessions",
            verbose_name=_("PC"))
    assignment = models.ForeignKey(ExamAssignment, on_delete=models.CASCADE,
            related_name="login_sessions",
            verbose_name=_("Exam assignment"))

    login_time = models.DateTimeField(null=True, blank=True,
            verbose_name=_("Login time"))
    auto_login_time = models.DateTimeField(null=True, blank=True,
            verbose_name=_("Auto-login time"))
    status = models.CharField(max_length=50,
            choices=LOGIN_SESSION_STATUS_CHOICES,
            default=login_session_status.scheduled,
            verbose_name=_("Login session status"))

    version = models.PositiveIntegerField(default=0,
            verbose_name=_("Version"))

    created_at = models.DateTimeField(default=now, db_index=True,
            verbose_name=_("Created at"))

    class Meta:
        verbose_name = _("Login session")
        verbose_name_plural = _("Login sessions")
        ordering = ("-created_at", "-pk")
        constraints = [
            models.UniqueConstraint(
                fields=["student", "pc"],
                condition=Q(status=login_session_status.logged_in),
                name="center_one_logged_in_session_per_student_pc",
                ),
            ]

    def __str__(self):
        return _("Login session of %(student)s on %(pc)s (%(status)s)") % {
                "student": self.student,
                "pc": self.pc,
                "status": self.status,
                }

# }}}


# {{{ monitoring log

class MonitoringSession(models.Model):
    """One stretch of an agent watching an exam sitting. The agent's
    current session is its latest entry without an end time."""

    agent = models.ForeignKey(Agent, on_delete=models.CASCADE,
            related_name="monitoring_sessions",
            verbose_name=_("Agent"))
    assignment = models.ForeignKey(ExamAssignment, on_delete=models.CASCADE,
            related_name="monitoring_sessions",
            verbose_name=_("Exam assignment"))
    start_time = models.DateTimeField(default=now,
            verbose_name=_("Start time"))
    end_time = models.DateTimeField(null=True, blank=True,
            verbose_name=_("End time"))

    class Meta:
        verbose_name = _("Monitoring session")
        verbose_name_plural = _("Monitoring sessions")
        ordering = ("-start_time", "-pk")

    def __str__(self):
        return _("%(agent)s monitoring %(assignment)s") % {
                "agent": self.agent,
                "assignment": self.assignment,
                }

    @property
    def is_active(self) -> bool:
        return self.end_time is None

# }}}

# vim: foldmethod=marker
