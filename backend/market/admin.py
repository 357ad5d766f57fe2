from django.contrib import admin, messages

from . import lifecycle
from .exceptions import ListingError
from .models import Listing, ListingStatus, Location, Province
from .policy import Principal


@admin.register(Province)
class ProvinceAdmin(admin.ModelAdmin):
    list_display = ("id", "code", "name", "country_code", "is_active")
    list_filter = ("country_code", "is_active")
    search_fields = ("code", "name")


@admin.register(Location)
class LocationAdmin(admin.ModelAdmin):
    list_display = ("id", "code", "name", "province", "department_name", "is_active")
    list_filter = ("province", "is_active")
    search_fields = ("code", "name", "department_name", "province__name")


@admin.register(Listing)
class ListingAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "title",
        "owner",
        "status",
        "reports",
        "is_deleted",
        "location",
        "valid_until",
        "created_at",
    )
    list_filter = ("status", "is_deleted", "use_whatsapp", "location__province")
    search_fields = ("title", "description", "owner__username")
    raw_id_fields = ("owner", "location")
    readonly_fields = ("status", "reports", "is_deleted", "created_at", "updated_at")

    actions = [
        "approve",
        "block",
        "mark_deleted",
        "restore",
    ]

    def _run(self, request, queryset, operation, *args):
        # Each row goes through the engine so policy, logging and
        # notifications match the API.
        principal = Principal.from_user(request.user)
        done = 0
        for listing_id in queryset.values_list("id", flat=True):
            try:
                operation(principal, listing_id, *args)
                done += 1
            except ListingError as exc:
                self.message_user(request, f"Listing {listing_id}: {exc.code}", level=messages.ERROR)
                return
        self.message_user(request, f"Updated {done} listing(s).", level=messages.SUCCESS)

    @admin.action(description="Approve selected listings")
    def approve(self, request, queryset):
        self._run(request, queryset, lifecycle.approve)

    @admin.action(description="Block selected listings")
    def block(self, request, queryset):
        self._run(request, queryset, lifecycle.update_status, ListingStatus.BLOCKED)

    @admin.action(description="Soft delete selected listings")
    def mark_deleted(self, request, queryset):
        self._run(request, queryset, lifecycle.admin_soft_delete)

    @admin.action(description="Restore selected listings")
    def restore(self, request, queryset):
        self._run(request, queryset, lifecycle.restore)
