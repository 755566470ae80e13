# shared/permissions.py
from __future__ import annotations

from typing import Optional

from rest_framework.permissions import SAFE_METHODS, BasePermission

from domains.accounts.services import is_admin

# ---- helpers ---------------------------------------------------------------


def _is_schema_generation(view) -> bool:
    """drf-spectacular 스키마 생성 시 True (권한을 널널하게 통과시켜 문서 생성 편의)."""
    return bool(getattr(view, "swagger_fake_view", False))


def _get_owner_id(obj) -> Optional[int | str]:
    """
    여러 도메인에서 통용되도록 owner id를 추정.
    우선순위: user_id, owner_id, author_id → user.pk, owner.pk, author.pk
    """
    id_keys = ("user_id", "owner_id", "author_id")
    obj_keys = ("user", "owner", "author")

    for k in id_keys:
        if hasattr(obj, k):
            return getattr(obj, k)

    for k in obj_keys:
        related = getattr(obj, k, None)
        if related is not None:
            return getattr(related, "pk", None)

    return None


def _is_owner(user, obj) -> bool:
    owner_id = _get_owner_id(obj)
    return owner_id is not None and owner_id == getattr(user, "pk", None)


# ---- owner-based permissions ----------------------------------------------


class IsOwner(BasePermission):
    """
    SAFE_METHODS 는 모두 허용.
    그 외 메서드는 obj 의 owner == 현재 유저만 허용 (관리자도 불가: 리뷰 수정).
    """

    def has_object_permission(self, request, view, obj):
        if request.method in SAFE_METHODS:
            return True
        if _is_schema_generation(view):
            return True
        user = request.user
        if not getattr(user, "is_authenticated", False):
            return False
        return _is_owner(user, obj)


class IsOwnerOrAdmin(BasePermission):
    """
    SAFE_METHODS(GET/HEAD/OPTIONS)은 모두 허용.
    그 외 메서드는 (관리자) 또는 (obj의 owner == 현재 유저)만 허용.
    """

    def has_object_permission(self, request, view, obj):
        if request.method in SAFE_METHODS:
            return True
        if _is_schema_generation(view):
            return True

        user = request.user
        if not getattr(user, "is_authenticated", False):
            return False
        if is_admin(user):
            return True
        return _is_owner(user, obj)


__all__ = [
    "IsOwner",
    "IsOwnerOrAdmin",
]
