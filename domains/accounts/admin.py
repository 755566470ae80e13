# domains/accounts/admin.py
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ("email", "username", "name", "role", "anonymous", "is_staff", "created_at")
    list_filter = ("role", "anonymous", "is_staff", "is_superuser")
    search_fields = ("email", "username", "name", "external_id")
    ordering = ("-created_at",)

    readonly_fields = ("external_id", "created_at", "updated_at", "is_staff")

    fieldsets = (
        ("기본 정보", {"fields": ("email", "username", "password", "external_id")}),
        ("프로필", {"fields": ("name", "image")}),
        ("설정", {"fields": ("anonymous", "dark_mode")}),
        ("권한", {
            "fields": ("role", "is_active", "is_superuser", "groups", "user_permissions"),
            "description": "role을 바꾸면 저장 시 is_staff가 자동 동기화됩니다.",
        }),
        ("중요 일시", {"fields": ("last_login", "created_at", "updated_at")}),
    )

    add_fieldsets = (
        (None, {
            "classes": ("wide",),
            "fields": ("email", "username", "password1", "password2", "role", "is_active"),
        }),
    )
