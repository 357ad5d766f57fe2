from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from .models import User


@admin.register(User)
class AccountAdmin(UserAdmin):
    list_display = ("id", "username", "email", "role", "is_staff", "date_joined")
    list_filter = ("role", "is_staff", "is_active")
    search_fields = ("username", "email", "profile_name")
    fieldsets = UserAdmin.fieldsets + (("Marketplace", {"fields": ("role", "profile_name", "phone")}),)
