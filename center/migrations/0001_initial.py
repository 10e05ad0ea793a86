import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models

import center.models


DEVICE_STATUS_CHOICES = [("active", "Active"), ("inactive", "Inactive")]
PAPER_STATUS_CHOICES = [("draft", "Draft"), ("published", "Published")]


def paper_fields():
    return [
        ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
        ("title", models.CharField(max_length=200, verbose_name="Title")),
        ("description", models.TextField(blank=True, verbose_name="Description")),
        ("status", models.CharField(choices=PAPER_STATUS_CHOICES, default="draft", max_length=50, verbose_name="Paper status")),
        ("created_by", models.CharField(max_length=200, verbose_name="Created by")),
        ("estimated_minutes", models.PositiveIntegerField(default=60, verbose_name="Estimated time in minutes")),
        ("content", models.JSONField(blank=True, default=dict, help_text="Sections, passages, tasks and questions of the paper", verbose_name="Content")),
        ("created_at", models.DateTimeField(default=django.utils.timezone.now, verbose_name="Created at")),
        ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated at")),
        ]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name="Student",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200, verbose_name="Name")),
                ("student_id", models.CharField(max_length=100, unique=True, verbose_name="Student ID")),
                ("password", models.CharField(max_length=128, verbose_name="Password")),
                ("dob", models.DateField(blank=True, null=True, verbose_name="Date of birth")),
                ("photo_url", models.CharField(blank=True, max_length=500, verbose_name="Photo URL")),
                ("unr", models.CharField(blank=True, max_length=100, verbose_name="UNR")),
                ("email", models.EmailField(blank=True, max_length=254, verbose_name="Email")),
                ("phone", models.CharField(blank=True, max_length=50, verbose_name="Phone")),
                ("address", models.CharField(blank=True, max_length=500, verbose_name="Address")),
                ("nationality", models.CharField(blank=True, max_length=100, verbose_name="Nationality")),
                ("roll_no", models.CharField(blank=True, max_length=100, verbose_name="Roll number")),
                ("test_date", models.DateField(blank=True, null=True, verbose_name="Test date")),
                ("role", models.CharField(default="student", max_length=50, verbose_name="Role")),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now, verbose_name="Created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated at")),
            ],
            options={
                "verbose_name": "Student",
                "verbose_name_plural": "Students",
                "ordering": ("student_id",),
            },
            bases=(center.models.PasswordMixin, models.Model),
        ),
        migrations.CreateModel(
            name="Agent",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200, verbose_name="Name")),
                ("agent_id", models.CharField(help_text="Stored in upper case", max_length=100, unique=True, verbose_name="Agent ID")),
                ("password", models.CharField(max_length=128, verbose_name="Password")),
                ("status", models.CharField(choices=DEVICE_STATUS_CHOICES, default="active", max_length=50, verbose_name="Agent status")),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now, verbose_name="Created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated at")),
            ],
            options={
                "verbose_name": "Agent",
                "verbose_name_plural": "Agents",
                "ordering": ("-created_at",),
            },
            bases=(center.models.PasswordMixin, models.Model),
        ),
        migrations.CreateModel(
            name="Registration",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("center_name", models.CharField(max_length=200, verbose_name="Center name")),
                ("center_address", models.CharField(max_length=500, verbose_name="Center address")),
                ("pc_name", models.CharField(max_length=200, verbose_name="PC name")),
                ("mac_address", models.CharField(db_index=True, max_length=64, verbose_name="MAC address")),
                ("uuid", models.CharField(max_length=200, unique=True, verbose_name="UUID")),
                ("hostname", models.CharField(max_length=200, verbose_name="Host name")),
                ("platform", models.CharField(max_length=100, verbose_name="Platform")),
                ("registered_at", models.DateTimeField(default=django.utils.timezone.now, verbose_name="Registered at")),
                ("status", models.CharField(choices=DEVICE_STATUS_CHOICES, default="active", max_length=50, verbose_name="Device status")),
                ("student", models.ForeignKey(blank=True, help_text="Student this PC is currently dedicated to", null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="registrations", to="center.student", verbose_name="Student")),
            ],
            options={
                "verbose_name": "PC registration",
                "verbose_name_plural": "PC registrations",
                "ordering": ("center_name", "pc_name"),
            },
        ),
        migrations.CreateModel(
            name="WritingPaper",
            fields=paper_fields(),
            options={
                "verbose_name": "Writing paper",
                "verbose_name_plural": "Writing papers",
                "ordering": ("-created_at",),
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="SpeakingPaper",
            fields=paper_fields(),
            options={
                "verbose_name": "Speaking paper",
                "verbose_name_plural": "Speaking papers",
                "ordering": ("-created_at",),
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="ListeningPaper",
            fields=paper_fields(),
            options={
                "verbose_name": "Listening paper",
                "verbose_name_plural": "Listening papers",
                "ordering": ("-created_at",),
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="ReadingPaper",
            fields=paper_fields(),
            options={
                "verbose_name": "Reading paper",
                "verbose_name_plural": "Reading papers",
                "ordering": ("-created_at",),
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="ExamAssignment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("exam_types", models.JSONField(help_text="List of exam types, e.g. ['reading', 'writing']", verbose_name="Exam types")),
                ("exam_papers", models.JSONField(help_text="Mapping of exam type to paper ID", verbose_name="Exam papers")),
                ("exam_date", models.DateField(db_index=True, verbose_name="Exam date")),
                ("exam_time", models.CharField(help_text="Wall-clock start time in UTC, as HH:MM", max_length=5, validators=[django.core.validators.RegexValidator("^([01]\\d|2[0-3]):[0-5]\\d$")], verbose_name="Exam time")),
                ("scheduled_start", models.DateTimeField(db_index=True, editable=False, verbose_name="Scheduled start")),
                ("duration_minutes", models.PositiveIntegerField(default=60, verbose_name="Duration in minutes")),
                ("status", models.CharField(choices=[("assigned", "Assigned"), ("in_progress", "In progress"), ("completed", "Completed"), ("cancelled", "Cancelled")], default="assigned", max_length=50, verbose_name="Assignment status")),
                ("is_visible", models.BooleanField(default=True, help_text="Shown to the student when logging in", verbose_name="Visible")),
                ("title", models.CharField(max_length=200, verbose_name="Title")),
                ("bio", models.TextField(blank=True, verbose_name="Description")),
                ("exam_started", models.BooleanField(default=False, verbose_name="Exam started")),
                ("started_at", models.DateTimeField(blank=True, null=True, verbose_name="Started at")),
                ("auto_login_time", models.DateTimeField(blank=True, help_text="If set, the exam starts by itself on its PC at this time", null=True, verbose_name="Auto-login time")),
                ("version", models.PositiveIntegerField(default=0, verbose_name="Version")),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now, verbose_name="Created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated at")),
                ("agent", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="assignments", to="center.agent", verbose_name="Agent")),
                ("pc", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="assignments", to="center.registration", verbose_name="PC")),
                ("student", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="assignments", to="center.student", verbose_name="Student")),
            ],
            options={
                "verbose_name": "Exam assignment",
                "verbose_name_plural": "Exam assignments",
                "ordering": ("-created_at", "-pk"),
            },
        ),
        migrations.CreateModel(
            name="LoginSession",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("login_time", models.DateTimeField(blank=True, null=True, verbose_name="Login time")),
                ("auto_login_time", models.DateTimeField(blank=True, null=True, verbose_name="Auto-login time")),
                ("status", models.CharField(choices=[("scheduled", "Scheduled"), ("logged_in", "Logged in"), ("completed", "Completed")], default="scheduled", max_length=50, verbose_name="Login session status")),
                ("version", models.PositiveIntegerField(default=0, verbose_name="Version")),
                ("created_at", models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name="Created at")),
                ("assignment", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="login_sessions", to="center.examassignment", verbose_name="Exam assignment")),
                ("pc", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="login_sessions", to="center.registration", verbose_name="PC")),
                ("student", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="login_sessions", to="center.student", verbose_name="Student")),
            ],
            options={
                "verbose_name": "Login session",
                "verbose_name_plural": "Login sessions",
                "ordering": ("-created_at", "-pk"),
            },
        ),
        migrations.AddConstraint(
            model_name="loginsession",
            constraint=models.UniqueConstraint(condition=models.Q(("status", "logged_in")), fields=("student", "pc"), name="center_one_logged_in_session_per_student_pc"),
        ),
        migrations.CreateModel(
            name="MonitoringSession",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("start_time", models.DateTimeField(default=django.utils.timezone.now, verbose_name="Start time")),
                ("end_time", models.DateTimeField(blank=True, null=True, verbose_name="End time")),
                ("agent", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="monitoring_sessions", to="center.agent", verbose_name="Agent")),
                ("assignment", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="monitoring_sessions", to="center.examassignment", verbose_name="Exam assignment")),
            ],
            options={
                "verbose_name": "Monitoring session",
                "verbose_name_plural": "Monitoring sessions",
                "ordering": ("-start_time", "-pk"),
            },
        ),
    ]
