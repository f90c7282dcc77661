from django.contrib import admin, messages
from django.utils.translation import gettext_lazy as _

from .logic__assignment import ReassignPending
from .models import Feedback, Submission, SubmissionAssignment


class SubmissionAssignmentInline(admin.TabularInline):
    model = SubmissionAssignment
    extra = 0
    readonly_fields = ["assignee", "role", "date_assigned", "date_released", "release_reason"]


class FeedbackInline(admin.TabularInline):
    model = Feedback
    extra = 0
    readonly_fields = ["author", "kind", "text", "created"]


@admin.register(Submission)
class SubmissionAdmin(admin.ModelAdmin):
    """Helper class to "admin" Submission."""

    list_display = ["id", "title", "kind", "state", "contributor", "assignee", "created"]
    list_filter = ["kind", "state"]
    search_fields = ["title", "contributor__username", "assignee__username"]
    readonly_fields = ["state", "latest_state_change"]
    inlines = [SubmissionAssignmentInline, FeedbackInline]
    actions = ["reassign_pending"]

    @admin.action(description=_("Reassign pending submissions"))
    def reassign_pending(self, request, queryset):
        result = ReassignPending().run()
        self.message_user(
            request,
            _("%(assigned)d submissions assigned, %(deferred)d still deferred.")
            % {"assigned": result.assigned_count, "deferred": result.deferred_count},
            messages.SUCCESS,
        )


@admin.register(Feedback)
class FeedbackAdmin(admin.ModelAdmin):
    """Helper class to "admin" Feedback."""

    list_display = ["submission", "author", "kind", "created"]
    list_filter = ["kind"]
