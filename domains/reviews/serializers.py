# domains/reviews/serializers.py
from __future__ import annotations

import json

from django.core.validators import URLValidator
from django.core.exceptions import ValidationError as DjangoValidationError
from drf_spectacular.utils import extend_schema_field
from rest_framework import serializers

from domains.reviews.models import CONTENT_MIN_LENGTH, RATING_MAX, RATING_MIN, Review
from domains.reviews.regions import format_location
from domains.reviews.services import PresentedReview


# ─────────────────────────────────────────────────────────────
# 읽기 (익명 처리 결과 포함)
# ─────────────────────────────────────────────────────────────
class LocationPartsSerializer(serializers.Serializer):
    address = serializers.CharField()
    state = serializers.CharField()
    country = serializers.CharField()
    postal_code = serializers.CharField()


class ReviewAuthorSerializer(serializers.Serializer):
    name = serializers.CharField()
    email = serializers.CharField()
    image = serializers.CharField(allow_null=True)
    hide_identity = serializers.BooleanField()


class ReviewReadSerializer(serializers.Serializer):
    """
    PresentedReview(review + VisibilityDecision) 직렬화.
    - 가려진 리뷰는 author 이름/이메일/아바타와 user_id 를 모두 숨긴다
    - flagged_anonymous 는 관리자 조회일 때만 포함 (익명 우회가 드러나도록)
    """
    review_id = serializers.UUIDField(source="review.review_id", read_only=True)
    user_id = serializers.SerializerMethodField()
    location = serializers.CharField(source="review.location", read_only=True)
    location_parts = LocationPartsSerializer(source="review.location_parts", read_only=True)
    rating = serializers.IntegerField(source="review.rating", read_only=True)
    content = serializers.CharField(source="review.content", read_only=True)
    images = serializers.ListField(source="review.image_list", child=serializers.CharField(), read_only=True)
    anonymous = serializers.BooleanField(source="review.anonymous", read_only=True)
    dynamic_fields = serializers.JSONField(source="review.dynamic_fields", read_only=True)
    author = serializers.SerializerMethodField()
    is_own_review = serializers.BooleanField(source="visibility.is_own_review", read_only=True)
    flagged_anonymous = serializers.BooleanField(source="visibility.flagged_anonymous", read_only=True)
    created_at = serializers.DateTimeField(source="review.created_at", read_only=True)
    updated_at = serializers.DateTimeField(source="review.updated_at", read_only=True)

    @extend_schema_field(serializers.UUIDField(allow_null=True))
    def get_user_id(self, obj: PresentedReview):
        return None if obj.visibility.hide_identity else str(obj.review.user_id)

    @extend_schema_field(ReviewAuthorSerializer)
    def get_author(self, obj: PresentedReview):
        v = obj.visibility
        return {
            "name": v.display_name,
            "email": v.display_email,
            "image": None if v.hide_identity else (obj.review.user.image or None),
            "hide_identity": v.hide_identity,
        }

    def to_representation(self, instance):
        data = super().to_representation(instance)
        if not instance.is_admin_view:
            data.pop("flagged_anonymous", None)
        return data


# ─────────────────────────────────────────────────────────────
# 쓰기
# ─────────────────────────────────────────────────────────────
_url = URLValidator(schemes=["http", "https"])


class ReviewWriteSerializer(serializers.ModelSerializer):
    """
    생성(POST)과 부분수정(PATCH) 공용 Serializer.
    - location 대신 address/state/country/postal_code 로 보내도 된다 (생성 시 조합)
    - anonymous 를 생략하면 작성자 전역 익명 설정을 따른다 (생성 시)
    - images: "url1,url2" 또는 ["url1", "url2"]
    - dynamic_fields: {str: str|number|bool} 또는 그 JSON 문자열
    - user 는 요청 사용자로 내부 주입
    """
    location = serializers.CharField(max_length=500, required=False)
    rating = serializers.IntegerField(min_value=RATING_MIN, max_value=RATING_MAX)
    content = serializers.CharField(min_length=CONTENT_MIN_LENGTH)
    anonymous = serializers.BooleanField(required=False)
    images = serializers.JSONField(required=False, allow_null=True)
    dynamic_fields = serializers.JSONField(required=False, allow_null=True)

    address = serializers.CharField(write_only=True, required=False, allow_blank=True)
    state = serializers.CharField(write_only=True, required=False, allow_blank=True)
    country = serializers.CharField(write_only=True, required=False, allow_blank=True)
    postal_code = serializers.CharField(write_only=True, required=False, allow_blank=True)

    _PARTS = ("address", "state", "country", "postal_code")

    class Meta:
        model = Review
        fields = [
            "location", "rating", "content", "anonymous", "images", "dynamic_fields",
            "address", "state", "country", "postal_code",
        ]

    def validate_images(self, value):
        if value in (None, ""):
            return ""
        if isinstance(value, str):
            urls = value.split(",")
        elif isinstance(value, list):
            urls = value
        else:
            raise serializers.ValidationError("images must be a comma separated string or a list")

        cleaned = []
        for u in urls:
            if not isinstance(u, str):
                raise serializers.ValidationError("image urls must be strings")
            u = u.strip()
            if not u:
                continue
            try:
                _url(u)
            except DjangoValidationError:
                raise serializers.ValidationError(f"invalid image url: {u}")
            cleaned.append(u)
        return ",".join(cleaned)

    def validate_dynamic_fields(self, value):
        if value in (None, "", {}):
            return None
        if isinstance(value, str):
            try:
                value = json.loads(value)
            except ValueError:
                raise serializers.ValidationError("dynamic_fields is not valid JSON")
        if not isinstance(value, dict):
            raise serializers.ValidationError("dynamic_fields must be an object")
        for k, v in value.items():
            if not isinstance(v, (str, int, float, bool)):
                raise serializers.ValidationError(
                    f"dynamic_fields['{k}'] must be a string, number or boolean"
                )
        return value or None

    def validate(self, attrs):
        parts = {k: attrs.pop(k) for k in self._PARTS if k in attrs}
        location = (attrs.get("location") or "").strip()

        if not location and parts:
            location = format_location(**parts)

        if location:
            attrs["location"] = location
        elif "location" in attrs or parts or not self.instance:
            raise serializers.ValidationError({"location": "Location is required"})

        # 업데이트(PATCH)는 소유권을 permission 에서 보장하므로 추가 검증 없음
        if self.instance:
            return attrs

        user = self.context["request"].user
        attrs["user"] = user
        # 생략 시 작성자 전역 설정
        attrs.setdefault("anonymous", user.anonymous)
        return attrs

    def create(self, validated_data):
        return Review.objects.create(**validated_data)
