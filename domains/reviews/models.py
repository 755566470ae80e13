import uuid
from django.core.validators import MaxValueValidator, MinLengthValidator, MinValueValidator
from django.db import models
from django.conf import settings

from .regions import parse_location

RATING_MIN = 1
RATING_MAX = 10
CONTENT_MIN_LENGTH = 10


class Review(models.Model):
    review_id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        db_column="user_id",
        related_name="reviews",
    )
    # "주소, 지역, 국가, 우편번호" 관례의 자유 문자열 (구조 검증 없음)
    location = models.CharField(max_length=500)
    rating = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(RATING_MIN), MaxValueValidator(RATING_MAX)]
    )  # 1~10
    content = models.TextField(validators=[MinLengthValidator(CONTENT_MIN_LENGTH)])
    images = models.TextField(blank=True, default="")  # 콤마로 이은 URL 목록
    anonymous = models.BooleanField(default=False)
    # {str: str | int | float | bool}
    dynamic_fields = models.JSONField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "reviews"
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(rating__gte=RATING_MIN, rating__lte=RATING_MAX),
                name="reviews_rating_range",
            ),
        ]
        indexes = [
            models.Index(fields=["user"], name="reviews_user_idx"),
            models.Index(fields=["-created_at"], name="reviews_created_desc_idx"),
        ]

    def __str__(self):
        return f"Review({self.review_id}) {self.user_id} @ {self.location}"

    @property
    def image_list(self) -> list[str]:
        return [u.strip() for u in (self.images or "").split(",") if u.strip()]

    @property
    def location_parts(self):
        return parse_location(self.location)
