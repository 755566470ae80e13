# domains/accounts/services.py
from __future__ import annotations

import logging
import uuid
from collections import Counter
from typing import Iterable

from django.conf import settings
from django.db import transaction
from django.utils.text import slugify

from .models import User, UserRole

logger = logging.getLogger(__name__)

UNKNOWN_NAME = "Unknown"
PLACEHOLDER_EMAIL_DOMAIN = "placeholder.com"


def admin_emails() -> set[str]:
    return {e.strip().lower() for e in getattr(settings, "ADMIN_EMAILS", []) if e.strip()}


def is_admin(user) -> bool:
    """
    관리자 판정 (익명 가림 무시 + 타인 리뷰 삭제 권한)
    - role == admin 또는 superuser
    - 또는 email 이 settings.ADMIN_EMAILS 허용 목록에 있음
    """
    if user is None or not getattr(user, "is_authenticated", False):
        return False
    if getattr(user, "is_superuser", False) or getattr(user, "role", None) == UserRole.ADMIN:
        return True
    email = (getattr(user, "email", "") or "").strip().lower()
    return bool(email) and email in admin_emails()


def placeholder_email(external_id: str) -> str:
    return f"{external_id}@{PLACEHOLDER_EMAIL_DOMAIN}"


def _username_for(provider: str, external_id: str) -> str:
    base = slugify(f"{provider}_{external_id}")[:120] or "user"
    if not User.objects.filter(username=base).exists():
        return base
    return f"{base}_{uuid.uuid4().hex[:6]}"


@transaction.atomic
def sync_user_from_profile(profile: dict) -> User:
    """
    IdP 프로필 → 계정 생성 또는 갱신 (로그인할 때마다 호출)
    profile: {"provider", "provider_uid", "email"?, "name"?, "picture"?}

    - external_id(provider_uid) 가 유일한 매핑 키
    - email 이 없으면 "<external_id>@placeholder.com"
    - name 이 없으면 "Unknown"
    - name/email/image 는 매번 덮어쓴다
    """
    external_id = str(profile.get("provider_uid") or "").strip()
    if not external_id:
        raise ValueError("identity profile has no subject id")

    provider = (profile.get("provider") or "idp").lower()
    defaults = {
        "name": profile.get("name") or UNKNOWN_NAME,
        "email": profile.get("email") or placeholder_email(external_id),
    }
    if profile.get("picture"):
        defaults["image"] = profile["picture"]

    user = User.objects.select_for_update().filter(external_id=external_id).first()
    if user is None:
        user = User(external_id=external_id, username=_username_for(provider, external_id), **defaults)
        user.set_unusable_password()
        user.save()
        logger.info("created user %s for %s subject %s", user.pk, provider, external_id)
        return user

    for k, v in defaults.items():
        setattr(user, k, v)
    user.save(update_fields=[*defaults.keys(), "updated_at"])
    return user


def review_stats(reviews: Iterable) -> dict:
    """
    프로필 통계
    - total: 리뷰 수
    - average_rating: 소수 첫째 자리 반올림 (없으면 0)
    - most_reviewed_location: 가장 많이 쓴 location (동률이면 먼저 나온 것)
    """
    reviews = list(reviews)
    if not reviews:
        return {"total": 0, "average_rating": 0, "most_reviewed_location": ""}
    ratings = [r.rating for r in reviews]
    location, _ = Counter(r.location for r in reviews).most_common(1)[0]
    return {
        "total": len(reviews),
        "average_rating": round(sum(ratings) / len(ratings), 1),
        "most_reviewed_location": location,
    }
