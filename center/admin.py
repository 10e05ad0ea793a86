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
from django.utils.translation import gettext_lazy as _

from center.constants import device_status, login_session_status
from center.models import (
    Agent,
    ExamAssignment,
    ListeningPaper,
    LoginSession,
    MonitoringSession,
    ReadingPaper,
    Registration,
    SpeakingPaper,
    Student,
    WritingPaper,
)


# {{{ devices

@admin.register(Registration)
class RegistrationAdmin(admin.ModelAdmin):
    list_display = (
            "pc_name",
            "center_name",
            "mac_address",
            "hostname",
            "platform",
            "status",
            "student",
            "registered_at",
            )
    list_filter = ("status", "center_name", "platform")
    search_fields = (
            "pc_name",
            "center_name",
            "mac_address",
            "uuid",
            "hostname",
            )
    raw_id_fields = ("student",)
    date_hierarchy = "registered_at"

    @admin.action(description=_("Activate selected PCs"))
    def activate(self, request, queryset):
        queryset.update(status=device_status.active)

    @admin.action(description=_("Deactivate selected PCs"))
    def deactivate(self, request, queryset):
        queryset.update(status=device_status.inactive)

    actions = [activate, deactivate]

# }}}


# {{{ people

@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    list_display = (
            "student_id",
            "name",
            "email",
            "roll_no",
            "test_date",
            )
    search_fields = (
            "student_id",
            "name",
            "email",
            "roll_no",
            )
    exclude = ("password",)


@admin.register(Agent)
class AgentAdmin(admin.ModelAdmin):
    list_display = ("agent_id", "name", "status", "created_at")
    list_filter = ("status",)
    search_fields = ("agent_id", "name")
    exclude = ("password",)

# }}}


# {{{ papers

class PaperAdmin(admin.ModelAdmin):
    list_display = (
            "title",
            "status",
            "created_by",
            "estimated_minutes",
            "created_at",
            )
    list_filter = ("status",)
    search_fields = ("title", "description", "created_by")


admin.site.register(WritingPaper, PaperAdmin)
admin.site.register(SpeakingPaper, PaperAdmin)
admin.site.register(ListeningPaper, PaperAdmin)
admin.site.register(ReadingPaper, PaperAdmin)

# }}}


# {{{ assignments and sessions

@admin.register(ExamAssignment)
class ExamAssignmentAdmin(admin.ModelAdmin):
    list_display = (
            "title",
            "student",
            "exam_date",
            "exam_time",
            "status",
            "is_visible",
            "exam_started",
            "pc",
            "agent",
            )
    list_filter = ("status", "is_visible", "exam_started", "exam_date")
    search_fields = (
            "title",
            "student__student_id",
            "student__name",
            )
    raw_id_fields = ("student", "pc", "agent")
    readonly_fields = ("scheduled_start", "version")
    date_hierarchy = "exam_date"


@admin.register(LoginSession)
class LoginSessionAdmin(admin.ModelAdmin):
    list_display = (
            "student",
            "pc",
            "assignment",
            "status",
            "auto_login_time",
            "login_time",
            "created_at",
            )
    list_filter = ("status",)
    search_fields = (
            "student__student_id",
            "pc__pc_name",
            "pc__mac_address",
            )
    raw_id_fields = ("student", "pc", "assignment")
    readonly_fields = ("version",)
    date_hierarchy = "created_at"

    @admin.action(description=_("Mark selected sessions completed"))
    def mark_completed(self, request, queryset):
        queryset.update(status=login_session_status.completed)

    actions = [mark_completed]


@admin.register(MonitoringSession)
class MonitoringSessionAdmin(admin.ModelAdmin):
    list_display = ("agent", "assignment", "start_time", "end_time")
    raw_id_fields = ("agent", "assignment")
    date_hierarchy = "start_time"

# }}}

# vim: foldmethod=marker
