from django.contrib import admin, messages
from django.contrib.auth.admin import UserAdmin
from django.utils.translation import gettext_lazy as _

from .models import Account


@admin.register(Account)
class AccountAdmin(UserAdmin):
    """Helper class to "admin" Account."""

    list_display = ["username", "email", "role", "is_approved", "is_green_light", "is_active", "date_joined"]
    list_filter = ["role", "is_approved", "is_green_light", "is_active"]
    fieldsets = UserAdmin.fieldsets + ((_("Assignment"), {"fields": ("role", "is_approved", "is_green_light")}),)
    actions = ["toggle_availability"]

    @admin.action(description=_("Toggle green light"))
    def toggle_availability(self, request, queryset):
        from xperts.plugins.xperts_review.exceptions import Unauthorized, ValidationFailure
        from xperts.plugins.xperts_review.logic__availability import ToggleAvailability

        for account in queryset:
            try:
                result = ToggleAvailability(user=account, actor=request.user).run()
            except ValidationFailure as e:
                self.message_user(request, f"{account}: {e.message}", messages.ERROR)
                continue
            except Unauthorized as e:
                self.message_user(request, f"{account}: {e}", messages.ERROR)
                continue
            self.message_user(
                request,
                _("%(account)s: green light %(status)s, %(count)d submissions assigned.")
                % {
                    "account": account,
                    "status": _("on") if result.is_green_light else _("off"),
                    "count": result.assigned_count,
                },
                messages.SUCCESS,
            )
