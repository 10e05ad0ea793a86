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
import threading

import pytest
from django.db import connection
from django.test import TestCase, TransactionTestCase
from django.test.utils import override_settings

from center import lifecycle
from center.constants import (
    assignment_status,
    device_status,
    exam_event,
    login_session_status,
)
from center.models import LoginSession, MonitoringSession
from center.signaling import relay
from center.utils import APIError, Conflict, Ineligible, NotFound
from tests import factories
from tests.factories import utc
from tests.utils import mock


class LifecycleTestMixin:
    @classmethod
    def setUpTestData(cls):  # noqa
        super().setUpTestData()
        cls.student = factories.StudentFactory()
        cls.pc = factories.RegistrationFactory()


# {{{ binding facet

class StartExamTest(LifecycleTestMixin, TestCase):
    def test_outside_login_window(self):
        assignment = factories.ExamAssignmentFactory(student=self.student)

        # exam at 09:00, login window opens at 08:50
        now_datetime = utc(2024, 1, 10, 6, 0)
        started = lifecycle.start_exam(
                self.student, self.pc.mac_address, now_datetime)

        self.assertEqual(started.pk, assignment.pk)
        self.assertTrue(started.exam_started)
        self.assertEqual(started.started_at, now_datetime)
        self.assertEqual(started.pc, self.pc)
        self.assertEqual(started.version, assignment.version + 1)
        self.assertEqual(started.status, assignment_status.assigned)

        self.pc.refresh_from_db()
        self.assertEqual(self.pc.student, self.student)

    def test_after_exam_closed(self):
        factories.ExamAssignmentFactory(student=self.student)
        started = lifecycle.start_exam(
                self.student, self.pc.mac_address, utc(2024, 1, 10, 23, 0))
        self.assertTrue(started.exam_started)

    def test_earliest_first(self):
        late = factories.ExamAssignmentFactory(
                student=self.student, exam_time="13:00")
        early = factories.ExamAssignmentFactory(
                student=self.student, exam_time="09:00")

        now_datetime = utc(2024, 1, 10, 8, 0)
        self.assertEqual(lifecycle.start_exam(
            self.student, self.pc.mac_address, now_datetime), early)
        self.assertEqual(lifecycle.start_exam(
            self.student, self.pc.mac_address, now_datetime), late)

        with self.assertRaises(NotFound):
            lifecycle.start_exam(
                    self.student, self.pc.mac_address, now_datetime)

    def test_unknown_pc(self):
        factories.ExamAssignmentFactory(student=self.student)
        with self.assertRaises(NotFound) as cm:
            lifecycle.start_exam(
                    self.student, "ff:ff:ff:ff:ff:ff", utc(2024, 1, 10, 8))
        self.assertEqual(str(cm.exception), "PC not found")

    def test_inactive_pc(self):
        factories.ExamAssignmentFactory(student=self.student)
        pc = factories.RegistrationFactory(status=device_status.inactive)
        with self.assertRaises(NotFound):
            lifecycle.start_exam(
                    self.student, pc.mac_address, utc(2024, 1, 10, 8))

    def test_no_exam_today(self):
        assignment = factories.ExamAssignmentFactory(
                student=self.student, exam_date=datetime.date(2024, 1, 11))

        with self.assertRaises(NotFound) as cm:
            lifecycle.start_exam(
                    self.student, self.pc.mac_address, utc(2024, 1, 10, 8))
        self.assertIn("No exam is scheduled for this student today",
                str(cm.exception))

        assignment.refresh_from_db()
        self.assertFalse(assignment.exam_started)

    def test_utc_day(self):
        factories.ExamAssignmentFactory(student=self.student)

        # 2024-01-09 23:30 in UTC-5 is 2024-01-10 04:30 UTC
        now_datetime = datetime.datetime(2024, 1, 9, 23, 30,
                tzinfo=datetime.timezone(datetime.timedelta(hours=-5)))
        self.assertTrue(lifecycle.start_exam(
            self.student, self.pc.mac_address, now_datetime).exam_started)


class CheckExamStatusTest(LifecycleTestMixin, TestCase):
    def test_unknown_pc(self):
        self.assertEqual(
                lifecycle.check_exam_status(
                    "ff:ff:ff:ff:ff:ff", self.student.pk, utc(2024, 1, 10, 9)),
                lifecycle.ExamStatus(exam_started=False, has_assignment=False))

    def test_nothing_today(self):
        status = lifecycle.check_exam_status(
                self.pc.mac_address, self.student.pk, utc(2024, 1, 10, 9))
        self.assertFalse(status.exam_started)
        self.assertFalse(status.has_assignment)

    def test_assignment_not_started(self):
        factories.ExamAssignmentFactory(student=self.student)
        status = lifecycle.check_exam_status(
                self.pc.mac_address, self.student.pk, utc(2024, 1, 10, 9))
        self.assertFalse(status.exam_started)
        self.assertTrue(status.has_assignment)
        self.assertIsNone(status.assignment)

    def test_reports_started_exam(self):
        factories.ExamAssignmentFactory(student=self.student)
        started = lifecycle.start_exam(
                self.student, self.pc.mac_address, utc(2024, 1, 10, 8, 55))

        status = lifecycle.check_exam_status(
                self.pc.mac_address, self.student.pk, utc(2024, 1, 10, 9))
        self.assertTrue(status.exam_started)
        self.assertEqual(status.assignment, started)

    def test_auto_start(self):
        assignment = factories.ExamAssignmentFactory(
                student=self.student, pc=self.pc,
                auto_login_time=utc(2024, 1, 10, 8, 55))

        before = lifecycle.check_exam_status(
                self.pc.mac_address, self.student.pk, utc(2024, 1, 10, 8, 54))
        self.assertFalse(before.exam_started)

        status = lifecycle.check_exam_status(
                self.pc.mac_address, self.student.pk, utc(2024, 1, 10, 8, 56))
        self.assertTrue(status.exam_started)
        self.assertEqual(status.assignment, assignment)

        assignment.refresh_from_db()
        self.assertEqual(assignment.started_at, utc(2024, 1, 10, 8, 56))

    def test_repeated_calls_agree(self):
        assignment = factories.ExamAssignmentFactory(
                student=self.student, pc=self.pc,
                auto_login_time=utc(2024, 1, 10, 8, 55))

        now_datetime = utc(2024, 1, 10, 9)
        results = [
                lifecycle.check_exam_status(
                    self.pc.mac_address, self.student.pk, now_datetime)
                for _i in range(3)]

        self.assertEqual(results[0], results[1])
        self.assertEqual(results[1], results[2])

        assignment.refresh_from_db()
        self.assertEqual(assignment.version, 1)
        self.assertEqual(assignment.started_at, now_datetime)

    def test_completed_not_auto_started(self):
        factories.ExamAssignmentFactory(
                student=self.student, pc=self.pc,
                status=assignment_status.completed,
                auto_login_time=utc(2024, 1, 10, 8, 55))

        status = lifecycle.check_exam_status(
                self.pc.mac_address, self.student.pk, utc(2024, 1, 10, 9))
        self.assertFalse(status.exam_started)
        self.assertTrue(status.has_assignment)

# }}}


# {{{ progress facet

class AssignmentStatusTest(LifecycleTestMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.assignment = factories.ExamAssignmentFactory(
                student=self.student)

    def test_forward(self):
        a = lifecycle.transition_assignment_status(
                self.assignment, assignment_status.in_progress)
        self.assertEqual(a.status, assignment_status.in_progress)
        self.assertEqual(a.version, 1)

        a = lifecycle.transition_assignment_status(
                a, assignment_status.completed)
        self.assertEqual(a.status, assignment_status.completed)
        self.assertEqual(a.version, 2)

    def test_cancel_from_assigned(self):
        a = lifecycle.transition_assignment_status(
                self.assignment, assignment_status.cancelled)
        self.assertEqual(a.status, assignment_status.cancelled)

    def test_same_state_is_noop(self):
        a = lifecycle.transition_assignment_status(
                self.assignment, assignment_status.assigned)
        self.assertEqual(a.version, 0)

    def test_backwards(self):
        a = lifecycle.transition_assignment_status(
                self.assignment, assignment_status.cancelled)
        with self.assertRaises(lifecycle.InvalidTransition):
            lifecycle.transition_assignment_status(
                    a, assignment_status.in_progress)

    def test_skip_to_completed(self):
        with self.assertRaises(Conflict):
            lifecycle.transition_assignment_status(
                    self.assignment, assignment_status.completed)

    def test_unknown_status(self):
        with self.assertRaises(APIError):
            lifecycle.transition_assignment_status(self.assignment, "paused")

    def test_stale_copy(self):
        stale = type(self.assignment).objects.get(pk=self.assignment.pk)
        lifecycle.transition_assignment_status(
                self.assignment, assignment_status.in_progress)

        with self.assertRaises(Conflict):
            lifecycle.transition_assignment_status(
                    stale, assignment_status.cancelled)

    def test_start_exam_leaves_status_alone(self):
        started = lifecycle.start_exam(
                self.student, self.pc.mac_address, utc(2024, 1, 10, 9))
        self.assertEqual(started.status, assignment_status.assigned)
        self.assertTrue(started.exam_started)

    def test_visibility(self):
        a = lifecycle.set_assignment_visibility(self.assignment, False)
        self.assertFalse(a.is_visible)
        self.assertEqual(a.version, 1)

    def test_visibility_touches_updated_at(self):
        long_ago = utc(2000, 1, 1)
        type(self.assignment).objects.filter(pk=self.assignment.pk).update(
                updated_at=long_ago)
        self.assignment.refresh_from_db()

        a = lifecycle.set_assignment_visibility(self.assignment, False)
        self.assertGreater(a.updated_at, long_ago)

# }}}


# {{{ assignment creation

class CreateAssignmentTest(LifecycleTestMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.reading = factories.ReadingPaperFactory()
        self.writing = factories.WritingPaperFactory()

    def create(self, **kwargs):
        data = {
                "student": self.student,
                "exam_types": ["reading", "writing"],
                "exam_papers": {
                    "reading": self.reading.pk,
                    "writing": self.writing.pk,
                    },
                "exam_date": datetime.date(2024, 1, 10),
                "exam_time": "14:30",
                "title": "Mock test",
                }
        data.update(kwargs)
        return lifecycle.create_assignment(**data)

    def test_create(self):
        assignment = self.create(duration_minutes=120)
        self.assertEqual(assignment.scheduled_start, utc(2024, 1, 10, 14, 30))
        self.assertEqual(assignment.scheduled_end, utc(2024, 1, 10, 16, 30))
        self.assertEqual(assignment.exam_papers,
                {"reading": self.reading.pk, "writing": self.writing.pk})
        self.assertEqual(assignment.status, assignment_status.assigned)
        self.assertFalse(assignment.exam_started)

    def test_paper_key_with_suffix(self):
        assignment = self.create(exam_papers={
            "reading_exam_paper": self.reading.pk,
            "writing_exam_paper": self.writing.pk,
            })
        self.assertEqual(assignment.exam_papers["writing"], self.writing.pk)

    @override_settings(EXAMCENTER_DEFAULT_EXAM_DURATION_MINUTES=45)
    def test_default_duration(self):
        self.assertEqual(self.create().duration_minutes, 45)

    def test_missing_paper(self):
        with self.assertRaises(APIError) as cm:
            self.create(exam_papers={"reading": self.reading.pk})
        self.assertEqual(str(cm.exception), "Missing exam paper for writing")

    def test_paper_of_wrong_type(self):
        with self.assertRaises(NotFound):
            self.create(exam_papers={
                "reading": self.reading.pk,
                "writing": self.reading.pk + self.writing.pk + 100,
                })

    def test_bad_exam_types(self):
        for exam_types in [[], "reading", ["reading", "maths"],
                ["reading", "reading"]]:
            with self.assertRaises(APIError):
                self.create(exam_types=exam_types)

    def test_bad_exam_time(self):
        for exam_time in ["9:00", "24:00", "09:60", "noon"]:
            with self.assertRaises(APIError):
                self.create(exam_time=exam_time)

    def test_bad_duration(self):
        for duration in [0, -5, "long"]:
            with self.assertRaises(APIError):
                self.create(duration_minutes=duration)

    def test_nothing_written_on_error(self):
        with self.assertRaises(APIError):
            self.create(exam_time="25:00")
        self.assertFalse(self.student.assignments.exists())


class UpdateAssignmentTest(LifecycleTestMixin, TestCase):
    def test_reschedule(self):
        assignment = factories.ExamAssignmentFactory(student=self.student)
        updated = lifecycle.update_assignment(
                assignment, {"exam_time": "11:15"},
                expected_version=assignment.version)

        self.assertEqual(updated.scheduled_start, utc(2024, 1, 10, 11, 15))
        self.assertEqual(updated.version, assignment.version + 1)

    def test_version_mismatch(self):
        assignment = factories.ExamAssignmentFactory(student=self.student)
        with self.assertRaises(Conflict):
            lifecycle.update_assignment(
                    assignment, {"title": "new"},
                    expected_version=assignment.version + 1)

    def test_readonly_field(self):
        assignment = factories.ExamAssignmentFactory(student=self.student)
        with self.assertRaises(APIError):
            lifecycle.update_assignment(assignment, {"exam_started": True})

# }}}


# {{{ login sessions

class PromoteSessionTest(LifecycleTestMixin, TestCase):
    def test_promote_at_auto_login_time(self):
        t = utc(2024, 1, 10, 8, 55)
        assignment = factories.ExamAssignmentFactory(
                student=self.student, auto_login_time=t)
        session = factories.LoginSessionFactory(
                student=self.student, pc=self.pc, assignment=assignment)

        result = lifecycle.check_auto_login(self.pc.mac_address, t)

        self.assertTrue(result.eligible)
        self.assertEqual(result.session, session)

        session.refresh_from_db()
        self.assertEqual(session.status, login_session_status.logged_in)
        self.assertEqual(session.login_time, t)
        self.assertEqual(session.version, 1)

    def test_untimed_session_waits_for_agent(self):
        session = factories.LoginSessionFactory(
                student=self.student, pc=self.pc)

        result = lifecycle.check_auto_login(
                self.pc.mac_address, utc(2024, 1, 10, 9, 30))
        self.assertFalse(result.eligible)
        self.assertEqual(result.reason, "No eligible sessions")

        lifecycle.start_exam(
                self.student, self.pc.mac_address, utc(2024, 1, 10, 9, 30))

        result = lifecycle.check_auto_login(
                self.pc.mac_address, utc(2024, 1, 10, 9, 31))
        self.assertEqual(result.session, session)

    def test_no_scheduled_sessions(self):
        result = lifecycle.check_auto_login(
                self.pc.mac_address, utc(2024, 1, 10, 9))
        self.assertFalse(result.eligible)
        self.assertEqual(result.reason, "No scheduled sessions")

    def test_unknown_pc(self):
        with self.assertRaises(NotFound):
            lifecycle.check_auto_login(
                    "ff:ff:ff:ff:ff:ff", utc(2024, 1, 10, 9))

    def test_inactive_pc(self):
        pc = factories.RegistrationFactory(status=device_status.inactive)
        with self.assertRaises(Ineligible):
            lifecycle.check_auto_login(pc.mac_address, utc(2024, 1, 10, 9))

    def test_stale_session_not_promoted(self):
        session = factories.LoginSessionFactory(
                student=self.student, pc=self.pc,
                auto_login_time=utc(2024, 1, 10, 8))
        stale = LoginSession.objects.get(pk=session.pk)

        self.assertTrue(
                lifecycle.promote_session(session, utc(2024, 1, 10, 9)))
        self.assertFalse(
                lifecycle.promote_session(stale, utc(2024, 1, 10, 9, 1)))

        session.refresh_from_db()
        self.assertEqual(session.login_time, utc(2024, 1, 10, 9))

    def test_taken_pair_not_promoted(self):
        factories.LoginSessionFactory(
                student=self.student, pc=self.pc,
                status=login_session_status.logged_in,
                login_time=utc(2024, 1, 10, 8))
        session = factories.LoginSessionFactory(
                student=self.student, pc=self.pc,
                auto_login_time=utc(2024, 1, 10, 8))

        self.assertFalse(
                lifecycle.promote_session(session, utc(2024, 1, 10, 9)))

        session.refresh_from_db()
        self.assertEqual(session.status, login_session_status.scheduled)

    def test_at_most_one_logged_in_per_pair(self):
        for _i in range(3):
            factories.LoginSessionFactory(
                    student=self.student, pc=self.pc,
                    auto_login_time=utc(2024, 1, 10, 8))

        results = [
                lifecycle.check_auto_login(
                    self.pc.mac_address, utc(2024, 1, 10, 9, minute))
                for minute in range(4)]

        self.assertEqual([r.eligible for r in results],
                [True, False, False, False])
        self.assertEqual(
                LoginSession.objects.filter(
                    student=self.student, pc=self.pc,
                    status=login_session_status.logged_in).count(),
                1)

    def test_one_promotion_per_call(self):
        other = factories.StudentFactory()
        factories.LoginSessionFactory(
                student=self.student, pc=self.pc,
                auto_login_time=utc(2024, 1, 10, 8))
        factories.LoginSessionFactory(
                student=other, pc=self.pc,
                auto_login_time=utc(2024, 1, 10, 8))

        lifecycle.check_auto_login(self.pc.mac_address, utc(2024, 1, 10, 9))
        self.assertEqual(
                LoginSession.objects.filter(
                    status=login_session_status.logged_in).count(),
                1)

    def test_interleaved_callers_with_stale_scans(self):
        # both callers scanned before either promoted, each picking a
        # different scheduled session of the same (student, pc) pair
        first, second = [
                factories.LoginSessionFactory(
                    student=self.student, pc=self.pc,
                    auto_login_time=utc(2024, 1, 10, 8))
                for _i in range(2)]
        stale_first = LoginSession.objects.get(pk=first.pk)
        stale_second = LoginSession.objects.get(pk=second.pk)

        with mock.patch("center.lifecycle.scan_auto_login",
                side_effect=[stale_first, stale_second, None]):
            results = [
                    lifecycle.check_auto_login(
                        self.pc.mac_address, utc(2024, 1, 10, 9))
                    for _i in range(2)]

        self.assertEqual([r.eligible for r in results], [True, False])
        self.assertEqual(results[0].session.pk, first.pk)
        self.assertEqual(results[1].reason, "No eligible sessions")

        second.refresh_from_db()
        self.assertEqual(second.status, login_session_status.scheduled)
        self.assertEqual(
                LoginSession.objects.filter(
                    student=self.student, pc=self.pc,
                    status=login_session_status.logged_in).count(),
                1)


@pytest.mark.postgres
class ConcurrentPromotionTest(TransactionTestCase):
    def test_concurrent_check_auto_login(self):
        student = factories.StudentFactory()
        pc = factories.RegistrationFactory()
        for _i in range(4):
            factories.LoginSessionFactory(
                    student=student, pc=pc,
                    auto_login_time=utc(2024, 1, 10, 8))

        barrier = threading.Barrier(4)
        results = []

        def worker():
            try:
                barrier.wait()
                results.append(lifecycle.check_auto_login(
                    pc.mac_address, utc(2024, 1, 10, 9)).eligible)
            finally:
                connection.close()

        threads = [threading.Thread(target=worker) for _i in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(results.count(True), 1)
        self.assertEqual(
                LoginSession.objects.filter(
                    student=student, pc=pc,
                    status=login_session_status.logged_in).count(),
                1)


class LoginSessionCrudTest(LifecycleTestMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.assignment = factories.ExamAssignmentFactory(
                student=self.student)

    def create(self, **kwargs):
        data = {
                "student": self.student,
                "pc": self.pc,
                "assignment": self.assignment,
                "auto_login_time": None,
                "now_datetime": utc(2024, 1, 10, 8, 52),
                }
        data.update(kwargs)
        return lifecycle.create_login_session(**data)

    def test_scheduled(self):
        session = self.create(auto_login_time=utc(2024, 1, 10, 8, 55))
        self.assertEqual(session.status, login_session_status.scheduled)
        self.assertIsNone(session.login_time)

    def test_immediate(self):
        session = self.create()
        self.assertEqual(session.status, login_session_status.logged_in)
        self.assertEqual(session.login_time, utc(2024, 1, 10, 8, 52))

    def test_second_immediate_login_conflicts(self):
        self.create()
        with self.assertRaises(Conflict):
            self.create()

    def test_foreign_assignment(self):
        with self.assertRaises(APIError):
            self.create(assignment=factories.ExamAssignmentFactory())

    def test_update_status(self):
        session = self.create()
        session = lifecycle.update_login_session_status(
                session, login_session_status.completed,
                utc(2024, 1, 10, 10))
        self.assertEqual(session.status, login_session_status.completed)

        # the pair is free again
        self.create()

    def test_update_to_logged_in_sets_time(self):
        session = self.create(auto_login_time=utc(2024, 1, 10, 8, 55))
        session = lifecycle.update_login_session_status(
                session, login_session_status.logged_in,
                utc(2024, 1, 10, 8, 53))
        self.assertEqual(session.login_time, utc(2024, 1, 10, 8, 53))

    def test_update_invalid_status(self):
        session = self.create()
        with self.assertRaises(APIError):
            lifecycle.update_login_session_status(
                    session, "paused", utc(2024, 1, 10, 10))

    def test_deleting_assignment_removes_sessions(self):
        self.create()
        self.assignment.delete()
        self.assertFalse(LoginSession.objects.exists())

# }}}


# {{{ monitoring

class MonitoringTest(LifecycleTestMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.agent = factories.AgentFactory()
        self.assignment = factories.ExamAssignmentFactory(
                student=self.student, agent=self.agent)

    def test_start_moves_assignment_in_progress(self):
        entry = lifecycle.start_monitoring(
                self.agent, self.assignment, utc(2024, 1, 10, 9))

        self.assertTrue(entry.is_active)
        self.assertEqual(self.agent.get_current_monitoring_session(), entry)

        self.assignment.refresh_from_db()
        self.assertEqual(self.assignment.status, assignment_status.in_progress)

    def test_completed_assignment_keeps_status(self):
        self.assignment = lifecycle.transition_assignment_status(
                self.assignment, assignment_status.cancelled)
        lifecycle.start_monitoring(
                self.agent, self.assignment, utc(2024, 1, 10, 9))

        self.assignment.refresh_from_db()
        self.assertEqual(self.assignment.status, assignment_status.cancelled)

    def test_one_current_session_per_agent(self):
        other = factories.ExamAssignmentFactory()
        first = lifecycle.start_monitoring(
                self.agent, self.assignment, utc(2024, 1, 10, 9))
        second = lifecycle.start_monitoring(
                self.agent, other, utc(2024, 1, 10, 9, 30))

        first.refresh_from_db()
        self.assertEqual(first.end_time, utc(2024, 1, 10, 9, 30))
        self.assertEqual(self.agent.get_current_monitoring_session(), second)

    def test_end(self):
        lifecycle.start_monitoring(
                self.agent, self.assignment, utc(2024, 1, 10, 9))
        self.assertEqual(lifecycle.end_monitoring(
            self.agent, self.assignment, utc(2024, 1, 10, 10)), 1)

        self.assertIsNone(self.agent.get_current_monitoring_session())
        self.assertEqual(lifecycle.end_monitoring(
            self.agent, self.assignment, utc(2024, 1, 10, 10)), 0)

    def test_two_agents_one_assignment(self):
        other_agent = factories.AgentFactory()
        lifecycle.start_monitoring(
                self.agent, self.assignment, utc(2024, 1, 10, 9))
        lifecycle.start_monitoring(
                other_agent, self.assignment, utc(2024, 1, 10, 9, 5))

        self.assertEqual(
                MonitoringSession.objects.filter(
                    assignment=self.assignment, end_time__isnull=True).count(),
                2)

    def test_send_event(self):
        received = []
        relay.join(str(self.assignment.pk),
                lambda event, payload: received.append((event, payload)))

        lifecycle.send_exam_event(
                self.assignment, exam_event.change_section, {"section": 2},
                agent=self.agent)

        self.assertEqual(received, [("change-section", {"section": 2})])

    def test_unknown_event(self):
        with self.assertRaises(APIError):
            lifecycle.send_exam_event(self.assignment, "pause-exam")

# }}}

# vim: foldmethod=marker
