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
from functools import lru_cache

import factory
from django.contrib.auth import get_user_model
from django.contrib.auth.hashers import make_password

from center import constants, models


DEFAULT_PASSWORD = "password"

# exams in the tests start on this day at 09:00 UTC unless stated otherwise
DEFAULT_EXAM_DATE = datetime.date(2024, 1, 10)
DEFAULT_EXAM_TIME = "09:00"


@lru_cache
def get_default_password_hash():
    return make_password(DEFAULT_PASSWORD)


def utc(*args):
    return datetime.datetime(*args, tzinfo=datetime.timezone.utc)


class UserFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = get_user_model()

    username = factory.Sequence(lambda n: "staff_%03d" % n)
    email = factory.Sequence(lambda n: "staff_%03d@example.com" % n)
    is_staff = True


class StudentFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = models.Student

    name = factory.Sequence(lambda n: "Student %03d" % n)
    student_id = factory.Sequence(lambda n: "S%05d" % n)
    password = factory.LazyFunction(get_default_password_hash)
    email = factory.Sequence(lambda n: "student_%03d@example.com" % n)


class AgentFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = models.Agent

    name = factory.Sequence(lambda n: "Agent %03d" % n)
    agent_id = factory.Sequence(lambda n: "AG%03d" % n)
    password = factory.LazyFunction(get_default_password_hash)
    status = constants.agent_status.active


class RegistrationFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = models.Registration

    center_name = "Downtown Center"
    center_address = "1 Main Street"
    pc_name = factory.Sequence(lambda n: "PC-%02d" % n)
    mac_address = factory.Sequence(
            lambda n: "00:1a:2b:3c:%02x:%02x" % (n // 256 % 256, n % 256))
    uuid = factory.Sequence(lambda n: "uuid-%05d" % n)
    hostname = factory.LazyAttribute(lambda o: o.pc_name.lower())
    platform = "win32"
    status = constants.device_status.active


class WritingPaperFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = models.WritingPaper

    title = factory.Sequence(lambda n: "Writing paper %d" % n)
    description = "Two tasks"
    created_by = "admin"
    content = factory.LazyFunction(lambda: {"tasks": []})


class SpeakingPaperFactory(WritingPaperFactory):
    class Meta:
        model = models.SpeakingPaper

    title = factory.Sequence(lambda n: "Speaking paper %d" % n)


class ListeningPaperFactory(WritingPaperFactory):
    class Meta:
        model = models.ListeningPaper

    title = factory.Sequence(lambda n: "Listening paper %d" % n)


class ReadingPaperFactory(WritingPaperFactory):
    class Meta:
        model = models.ReadingPaper

    title = factory.Sequence(lambda n: "Reading paper %d" % n)


class ExamAssignmentFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = models.ExamAssignment

    student = factory.SubFactory(StudentFactory)
    exam_types = factory.LazyFunction(lambda: [constants.exam_type.reading])
    exam_papers = factory.LazyFunction(
            lambda: {constants.exam_type.reading: ReadingPaperFactory().pk})
    exam_date = DEFAULT_EXAM_DATE
    exam_time = DEFAULT_EXAM_TIME
    duration_minutes = 60
    title = factory.Sequence(lambda n: "Mock test %d" % n)
    status = constants.assignment_status.assigned


class LoginSessionFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = models.LoginSession

    student = factory.SubFactory(StudentFactory)
    pc = factory.SubFactory(RegistrationFactory)
    assignment = factory.SubFactory(
            ExamAssignmentFactory, student=factory.SelfAttribute("..student"))
    status = constants.login_session_status.scheduled


class MonitoringSessionFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = models.MonitoringSession

    agent = factory.SubFactory(AgentFactory)
    assignment = factory.SubFactory(ExamAssignmentFactory)
