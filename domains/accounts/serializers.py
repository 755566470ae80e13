# domains/accounts/serializers.py
from __future__ import annotations

from django.contrib.auth import get_user_model
from drf_spectacular.utils import extend_schema_field
from rest_framework import serializers

from domains.reviews.visibility import resolve_visibility

from .services import is_admin

User = get_user_model()


class TokenResponseSerializer(serializers.Serializer):
    access = serializers.CharField()


class AuthCheckSerializer(serializers.Serializer):
    authenticated = serializers.BooleanField()


# ─────────────────────────────────────────────────────────────
# 내 정보
# ─────────────────────────────────────────────────────────────
class MeSerializer(serializers.ModelSerializer):
    """
    본인에게는 실제 이름/이메일을 그대로 보여주고,
    public_name/public_email 로 "다른 사람 눈에 보이는 모습"을 함께 내려준다.
    """
    id = serializers.UUIDField(read_only=True)
    public_name = serializers.SerializerMethodField()
    public_email = serializers.SerializerMethodField()
    is_admin = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            "id", "name", "email", "image", "anonymous", "dark_mode", "role",
            "public_name", "public_email", "is_admin", "created_at",
        ]
        read_only_fields = fields

    def _public(self, obj):
        # 제3자(비로그인) 시점으로 계산
        return resolve_visibility(
            review_anonymous=False,
            author_anonymous=obj.anonymous,
            viewer_id=None,
            author_id=obj.pk,
            author_name=obj.name,
            author_email=obj.email,
        )

    @extend_schema_field(serializers.CharField())
    def get_public_name(self, obj):
        return self._public(obj).display_name

    @extend_schema_field(serializers.CharField())
    def get_public_email(self, obj):
        return self._public(obj).display_email

    @extend_schema_field(serializers.BooleanField())
    def get_is_admin(self, obj):
        return is_admin(obj)


class MeUpdateSerializer(serializers.ModelSerializer):
    """이름/아바타 수정. 이름·이메일은 다음 로그인 때 IdP 값으로 다시 덮어써진다."""

    class Meta:
        model = User
        fields = ["name", "image"]


class SettingsSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["anonymous", "dark_mode"]


class ProfileStatsSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    average_rating = serializers.FloatField()
    most_reviewed_location = serializers.CharField()
