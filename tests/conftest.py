# tests/conftest.py
from datetime import timedelta
from uuid import uuid4

from django.conf import settings
from django.contrib.auth import get_user_model
from django.utils import timezone

import pytest
from rest_framework.test import APIClient

from domains.reviews.models import Review

User = get_user_model()


# ─────────────────────────────────────────────────────────────
# 전역 테스트 환경 최적화(해싱)
# ─────────────────────────────────────────────────────────────
@pytest.fixture(autouse=True, scope="session")
def _fast_password_hasher(django_db_setup, django_db_blocker):
    """해시 느린 기본 해셔 대신 MD5 해셔 사용"""
    with django_db_blocker.unblock():
        settings.PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]


# ─────────────────────────────────────────────────────────────
# 클라이언트 & 인증
# ─────────────────────────────────────────────────────────────
@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def user_factory(db):
    def _make(**kw):
        email = kw.pop("email", f"user{uuid4().hex[:6]}@example.com")
        password = kw.pop("password", "Test1234!A")

        if "username" not in kw:
            base = (email or "user").split("@")[0]
            kw["username"] = f"{base}_{uuid4().hex[:6]}"
        kw.setdefault("role", "user")
        kw.setdefault("name", kw["username"])

        u = User.objects.create_user(email=email, password=password, **kw)
        u.raw_password = password
        return u

    return _make


@pytest.fixture
def user(user_factory):
    """기본 로그인 사용자"""
    return user_factory(email="user@example.com", name="Jane Doe")


@pytest.fixture
def admin(user_factory):
    """관리자 (role=admin → is_staff 자동)"""
    return user_factory(email="admin@example.com", name="Site Admin", role="admin")


@pytest.fixture
def auth_client(user):
    c = APIClient()
    c.force_authenticate(user=user)
    return c


@pytest.fixture
def admin_api_client(admin):
    c = APIClient()
    c.force_authenticate(user=admin)
    return c


# ─────────────────────────────────────────────────────────────
# 리뷰
# ─────────────────────────────────────────────────────────────
@pytest.fixture
def review_factory(db, user_factory):
    """
    사용법: review_factory(user=u, location="...", rating=8, age_minutes=5)
    age_minutes 로 created_at 을 과거로 밀어 정렬을 고정한다.
    """

    def _make(**kw):
        author = kw.pop("user", None) or user_factory()
        age = kw.pop("age_minutes", None)
        kw.setdefault("location", "123 Main St, Ontario, Canada, A1A1A1")
        kw.setdefault("rating", 7)
        kw.setdefault("content", "Clean room and friendly staff.")
        review = Review.objects.create(user=author, **kw)
        if age is not None:
            created = timezone.now() - timedelta(minutes=age)
            Review.objects.filter(pk=review.pk).update(created_at=created)
            review.refresh_from_db()
        return review

    return _make
