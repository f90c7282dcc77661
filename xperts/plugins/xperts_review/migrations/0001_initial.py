import django.db.models.deletion
import django.utils.timezone
import django_fsm
import model_utils.fields
from django.conf import settings
from django.db import migrations, models

STATE_CHOICES = [
    ("PENDING", "Pending"),
    ("CLAIMED", "Claimed"),
    ("ELIGIBLE", "Eligible"),
    ("TASK_SUBMITTED", "Task submitted"),
    ("IN_TESTING", "In testing"),
    ("TASK_SUBMITTED_TO_PLATFORM", "Task submitted to platform"),
    ("ELIGIBLE_FOR_MANUAL_REVIEW", "Eligible for manual review"),
    ("REWORK", "Rework"),
    ("REWORK_DONE", "Rework done"),
    ("PENDING_REVIEW", "Pending review"),
    ("CHANGES_REQUESTED", "Changes requested"),
    ("CHANGES_DONE", "Changes done"),
    ("FINAL_CHECKS", "Final checks"),
    ("APPROVED", "Approved"),
    ("REJECTED", "Rejected"),
]


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Submission",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "created",
                    model_utils.fields.AutoCreatedField(
                        default=django.utils.timezone.now,
                        editable=False,
                        verbose_name="created",
                    ),
                ),
                (
                    "modified",
                    model_utils.fields.AutoLastModifiedField(
                        default=django.utils.timezone.now,
                        editable=False,
                        verbose_name="modified",
                    ),
                ),
                (
                    "kind",
                    models.CharField(
                        choices=[("SIMPLE", "Simple review"), ("EXTENDED", "Extended review")],
                        default="SIMPLE",
                        max_length=10,
                        verbose_name="Kind",
                    ),
                ),
                (
                    "state",
                    django_fsm.FSMField(
                        choices=STATE_CHOICES,
                        db_index=True,
                        default="PENDING",
                        max_length=50,
                        verbose_name="State",
                    ),
                ),
                ("assigned_at", models.DateTimeField(blank=True, null=True, verbose_name="Assigned at")),
                ("latest_state_change", models.DateTimeField(blank=True, default=django.utils.timezone.now, null=True)),
                ("title", models.CharField(max_length=500, verbose_name="Title")),
                ("domain", models.CharField(blank=True, max_length=255, verbose_name="Domain")),
                ("language", models.CharField(blank=True, max_length=100, verbose_name="Language")),
                ("difficulty", models.CharField(blank=True, max_length=100, verbose_name="Difficulty")),
                ("description", models.TextField(blank=True, verbose_name="Description")),
                ("file_url", models.CharField(blank=True, max_length=1000, verbose_name="File")),
                ("test_patch_url", models.CharField(blank=True, max_length=1000, verbose_name="Test patch")),
                ("dockerfile_url", models.CharField(blank=True, max_length=1000, verbose_name="Dockerfile")),
                ("solution_patch_url", models.CharField(blank=True, max_length=1000, verbose_name="Solution patch")),
                ("github_repo", models.CharField(blank=True, max_length=500, verbose_name="GitHub repository")),
                ("commit_hash", models.CharField(blank=True, max_length=100, verbose_name="Commit hash")),
                ("issue_url", models.CharField(blank=True, max_length=1000, verbose_name="Issue URL")),
                ("submitted_account", models.CharField(blank=True, max_length=255, verbose_name="Submitted account")),
                (
                    "task_link_submitted",
                    models.CharField(blank=True, max_length=1000, verbose_name="Submitted task link"),
                ),
                ("task_link", models.CharField(blank=True, max_length=1000, verbose_name="Task link")),
                ("account_posted_in", models.CharField(blank=True, max_length=255, verbose_name="Account posted in")),
                ("rejection_reason", models.TextField(blank=True, verbose_name="Rejection reason")),
                (
                    "assignee",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="assigned_submissions",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Assignee",
                    ),
                ),
                (
                    "contributor",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="submissions",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Contributor",
                    ),
                ),
            ],
            options={
                "verbose_name": "Submission",
                "verbose_name_plural": "Submissions",
                "ordering": ("created", "pk"),
            },
        ),
        migrations.CreateModel(
            name="SubmissionAssignment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "role",
                    models.CharField(choices=[("TESTER", "Tester"), ("REVIEWER", "Reviewer")], max_length=20),
                ),
                ("date_assigned", models.DateTimeField(default=django.utils.timezone.now)),
                ("date_released", models.DateTimeField(blank=True, null=True)),
                (
                    "release_reason",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("completed", "Submission completed"),
                            ("phase_completed", "Moved to the next phase"),
                            ("orphaned", "Assignee no longer eligible"),
                            ("role_changed", "Assignee role changed"),
                            ("deactivated", "Assignee deactivated"),
                        ],
                        max_length=20,
                    ),
                ),
                (
                    "assignee",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "submission",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="assignments",
                        to="xperts_review.submission",
                    ),
                ),
            ],
            options={
                "verbose_name": "Submission assignment",
                "verbose_name_plural": "Submission assignments",
                "ordering": ("date_assigned", "pk"),
            },
        ),
        migrations.CreateModel(
            name="Feedback",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "created",
                    model_utils.fields.AutoCreatedField(
                        default=django.utils.timezone.now,
                        editable=False,
                        verbose_name="created",
                    ),
                ),
                (
                    "modified",
                    model_utils.fields.AutoLastModifiedField(
                        default=django.utils.timezone.now,
                        editable=False,
                        verbose_name="modified",
                    ),
                ),
                (
                    "kind",
                    models.CharField(
                        choices=[
                            ("reviewer_feedback", "Reviewer feedback"),
                            ("tester_feedback", "Tester feedback"),
                            ("changes_requested", "Changes requested"),
                            ("rejection_reason", "Rejection reason"),
                        ],
                        max_length=30,
                    ),
                ),
                ("text", models.TextField()),
                (
                    "author",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "submission",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="feedback",
                        to="xperts_review.submission",
                    ),
                ),
            ],
            options={
                "verbose_name": "Feedback",
                "verbose_name_plural": "Feedback",
                "ordering": ("created", "pk"),
            },
        ),
    ]
