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

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.test import SimpleTestCase, TestCase

from center.constants import login_session_status
from center.models import Agent
from center.papers import get_paper, get_paper_model, paper_summary_to_json
from center.utils import APIError, NotFound
from tests import factories
from tests.factories import utc


class ExamAssignmentModelTest(TestCase):
    def test_scheduled_start(self):
        a = factories.ExamAssignmentFactory(
                exam_date=datetime.date(2024, 3, 31), exam_time="23:45",
                duration_minutes=30)
        self.assertEqual(a.scheduled_start, utc(2024, 3, 31, 23, 45))
        self.assertEqual(a.scheduled_end, utc(2024, 4, 1, 0, 15))

    def test_scheduled_start_follows_edits(self):
        a = factories.ExamAssignmentFactory()
        a.exam_date = datetime.date(2024, 2, 1)
        a.save()
        a.refresh_from_db()
        self.assertEqual(a.scheduled_start, utc(2024, 2, 1, 9, 0))

    def test_clean(self):
        a = factories.ExamAssignmentFactory.build(
                student=factories.StudentFactory(),
                exam_types=["reading", "speaking"],
                exam_papers={"reading": 1})
        with self.assertRaises(ValidationError):
            a.clean()

        a.exam_types = ["reading", "reading"]
        with self.assertRaises(ValidationError):
            a.clean()

    def test_bad_exam_time(self):
        with self.assertRaises(ValueError):
            factories.ExamAssignmentFactory(exam_time="9am")


class LoginSessionModelTest(TestCase):
    def test_one_logged_in_per_pair(self):
        session = factories.LoginSessionFactory(
                status=login_session_status.logged_in,
                login_time=utc(2024, 1, 10, 9))

        # scheduled and completed sessions may coexist
        factories.LoginSessionFactory(
                student=session.student, pc=session.pc)
        factories.LoginSessionFactory(
                student=session.student, pc=session.pc,
                status=login_session_status.completed)

        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                factories.LoginSessionFactory(
                        student=session.student, pc=session.pc,
                        status=login_session_status.logged_in)


class PeopleModelTest(TestCase):
    def test_agent_id_upper_case(self):
        agent = factories.AgentFactory(agent_id=" ab12 ")
        self.assertEqual(Agent.objects.get(pk=agent.pk).agent_id, "AB12")

    def test_password(self):
        student = factories.StudentFactory()
        student.set_password("new-secret")
        self.assertNotEqual(student.password, "new-secret")
        self.assertTrue(student.check_password("new-secret"))
        self.assertFalse(student.check_password("password"))

    def test_registration_active(self):
        self.assertTrue(factories.RegistrationFactory().is_active)

    def test_registration_logged(self):
        with self.assertLogs("center.receivers", level="INFO") as cm:
            pc = factories.RegistrationFactory(pc_name="PC-LOG")
            pc.status = "inactive"
            pc.save()

        self.assertEqual(len(cm.output), 2)
        self.assertIn("PC-LOG", cm.output[1])


class PaperTableTest(SimpleTestCase):
    def test_lookup(self):
        from center.models import ListeningPaper, WritingPaper

        self.assertIs(get_paper_model("writing"), WritingPaper)
        self.assertIs(get_paper_model("Listening"), ListeningPaper)

        with self.assertRaises(APIError):
            get_paper_model("maths")


class PaperLookupTest(TestCase):
    def test_get_paper(self):
        paper = factories.WritingPaperFactory()
        self.assertEqual(get_paper("writing", paper.pk), paper)
        self.assertEqual(paper_summary_to_json(paper), {
            "id": paper.pk,
            "title": paper.title,
            "description": paper.description,
            })

        for paper_id in [paper.pk + 1, "abc", None]:
            with self.assertRaises(NotFound):
                get_paper("writing", paper_id)
