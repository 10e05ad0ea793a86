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

from django.contrib import admin
from django.urls import include, path, re_path

import center.api


kiosk_urlpatterns = [
    re_path(r"^auth/register/$",
        center.api.register_pc,
        name="examcenter-register_pc"),
    re_path(r"^auth/login/$",
        center.api.student_login,
        name="examcenter-student_login"),
    re_path(r"^auth/auto-login/$",
        center.api.pc_auto_login,
        name="examcenter-pc_auto_login"),
    re_path(r"^exam-status/$",
        center.api.exam_status,
        name="examcenter-exam_status"),
    re_path(r"^auto-login/$",
        center.api.auto_login_status,
        name="examcenter-auto_login_status"),
    re_path(r"^student/assignments/$",
        center.api.student_assignments,
        name="examcenter-student_assignments"),
    re_path(r"^student/assignments/(?P<assignment_pk>[0-9]+)/$",
        center.api.student_assignment_detail,
        name="examcenter-student_assignment_detail"),
    re_path(r"^papers/(?P<kind>[a-z]+)/(?P<paper_pk>[0-9]+)/$",
        center.api.get_exam_paper,
        name="examcenter-get_exam_paper"),
    ]

manage_urlpatterns = [
    re_path(r"^registrations/$",
        center.api.list_registrations,
        name="examcenter-list_registrations"),
    re_path(r"^registrations/(?P<registration_pk>[0-9]+)/status/$",
        center.api.set_registration_status,
        name="examcenter-set_registration_status"),
    re_path(r"^students/$",
        center.api.students,
        name="examcenter-students"),
    re_path(r"^start-exam/$",
        center.api.admin_start_exam,
        name="examcenter-admin_start_exam"),
    re_path(r"^papers/(?P<kind>[a-z]+)/$",
        center.api.list_exam_papers,
        name="examcenter-list_exam_papers"),
    re_path(r"^assignments/$",
        center.api.assignments,
        name="examcenter-assignments"),
    re_path(r"^assignments/(?P<assignment_pk>[0-9]+)/$",
        center.api.assignment_detail,
        name="examcenter-assignment_detail"),
    re_path(r"^assignments/(?P<assignment_pk>[0-9]+)/status/$",
        center.api.set_assignment_status,
        name="examcenter-set_assignment_status"),
    re_path(r"^assignments/(?P<assignment_pk>[0-9]+)/visibility/$",
        center.api.set_assignment_visibility,
        name="examcenter-set_assignment_visibility"),
    re_path(r"^login-sessions/$",
        center.api.login_sessions,
        name="examcenter-login_sessions"),
    re_path(r"^login-sessions/(?P<session_pk>[0-9]+)/status/$",
        center.api.set_login_session_status,
        name="examcenter-set_login_session_status"),
    re_path(r"^agents/$",
        center.api.agents,
        name="examcenter-agents"),
    re_path(r"^agents/(?P<agent_pk>[0-9]+)/$",
        center.api.agent_detail,
        name="examcenter-agent_detail"),
    ]

agent_urlpatterns = [
    re_path(r"^login/$",
        center.api.agent_login,
        name="examcenter-agent_login"),
    re_path(r"^logout/$",
        center.api.agent_logout,
        name="examcenter-agent_logout"),
    path("<int:agent_pk>/exams/",
        center.api.agent_exams,
        name="examcenter-agent_exams"),
    path("<int:agent_pk>/exams/<int:assignment_pk>/monitor/",
        center.api.agent_start_monitoring,
        name="examcenter-agent_start_monitoring"),
    path("<int:agent_pk>/exams/<int:assignment_pk>/unmonitor/",
        center.api.agent_end_monitoring,
        name="examcenter-agent_end_monitoring"),
    path("<int:agent_pk>/exams/<int:assignment_pk>/events/<str:event>/",
        center.api.agent_exam_event,
        name="examcenter-agent_exam_event"),
    ]

urlpatterns = [
    re_path(r"^api/", include(kiosk_urlpatterns)),
    re_path(r"^api/manage/", include(manage_urlpatterns)),
    re_path(r"^api/agents/", include(agent_urlpatterns)),

    re_path(r"^admin/", admin.site.urls),
    ]

# vim: foldmethod=marker
