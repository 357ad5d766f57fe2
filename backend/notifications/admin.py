from django.contrib import admin

from .models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "kind", "read_at", "created_at")
    list_filter = ("kind", "read_at")
    search_fields = ("user__username", "title", "body")
    raw_id_fields = ("user",)
