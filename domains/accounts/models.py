# domains/accounts/models.py
from __future__ import annotations

import uuid
from django.db import models
from django.contrib.auth.models import AbstractUser


# ----- Enums -------------------------------------------------
class UserRole(models.TextChoices):
    USER  = "user", "User"
    ADMIN = "admin", "Admin"


# ----- Models ------------------------------------------------
class User(AbstractUser):
    """
    커스텀 유저 모델
    - PK: UUID (db_column='user_id')
    - external_id: 외부 인증(IdP) subject. 로그인 세션 ↔ 계정 매핑 키 (unique)
      (createsuperuser 로 만든 로컬 계정만 비어 있음)
    - anonymous: 전역 익명 설정. 새 리뷰의 기본값 + 모든 리뷰의 작성자 표시에 적용
    - role 'admin' 이면 장고 어드민 접근(is_staff=True) 자동 허용
    """
    Role = UserRole

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        db_column="user_id",
    )

    # AbstractUser 기본 필드:
    # username(Unique), first_name, last_name, email, is_staff, is_active, is_superuser 등
    external_id = models.CharField(max_length=128, unique=True, null=True, blank=True)
    name = models.CharField(max_length=150, blank=True)
    image = models.URLField(max_length=500, blank=True)

    anonymous = models.BooleanField(default=False)
    dark_mode = models.BooleanField(default=False)

    role = models.CharField(
        max_length=16,
        choices=UserRole.choices,
        default=UserRole.USER,
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "users"
        indexes = [
            models.Index(fields=["email"], name="users_email_idx"),
        ]

    @property
    def is_admin_role(self) -> bool:
        return self.role == UserRole.ADMIN

    def __str__(self) -> str:
        return self.email or self.username

    # ---- 역할 ↔ 장고 관리자 플래그 동기화 ----
    def save(self, *args, **kwargs):
        """
        - superuser 는 항상 is_staff=True (장고 규약)
        - role == admin 이면 is_staff=True, 그 외 False
        """
        should_staff = self.is_superuser or self.role == UserRole.ADMIN
        if self.is_staff != should_staff:
            self.is_staff = should_staff
            update_fields = kwargs.get("update_fields")
            if update_fields is not None and "is_staff" not in update_fields:
                kwargs["update_fields"] = [*update_fields, "is_staff"]
        super().save(*args, **kwargs)
