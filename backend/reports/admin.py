from django.contrib import admin

from .models import Report


@admin.register(Report)
class ReportAdmin(admin.ModelAdmin):
    list_display = ("id", "listing", "reporter", "reason", "created_at")
    list_filter = ("reason",)
    search_fields = ("reason", "additional_info", "contact_info", "listing__title")
    raw_id_fields = ("listing", "reporter")
    readonly_fields = ("listing", "reporter", "reason", "additional_info", "contact_info", "created_at")

    def has_change_permission(self, request, obj=None):
        return False
