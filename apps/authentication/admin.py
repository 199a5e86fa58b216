from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from .models import Agent


@admin.register(Agent)
class AgentAdmin(BaseUserAdmin):
    list_display  = ("phone", "full_name", "role", "is_active", "created_at")
    list_filter   = ("role", "is_active")
    search_fields = ("phone", "full_name", "email")
    ordering      = ("-created_at",)
    fieldsets = (
        (None,          {"fields": ("phone", "password")}),
        ("Personal",    {"fields": ("full_name", "email")}),
        ("Role",        {"fields": ("role",)}),
        ("Permissions", {"fields": ("is_active", "is_staff", "is_superuser", "groups", "user_permissions")}),
    )
    add_fieldsets = (
        (None, {"classes": ("wide",), "fields": ("phone", "full_name", "role", "password1", "password2")}),
    )
