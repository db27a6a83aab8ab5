from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ("username", "email", "name", "labels", "is_active", "is_staff")
    list_filter = ("is_active", "is_staff", "is_superuser")
    search_fields = ("username", "email", "name")
    ordering = ("username",)

    fieldsets = BaseUserAdmin.fieldsets + (
        ("Restaurant", {"fields": ("name", "labels")}),
    )
    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        ("Restaurant", {"fields": ("email", "name", "labels")}),
    )
