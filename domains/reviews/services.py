# domains/reviews/services.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from django.db import DatabaseError

from .models import Review
from .query import CompiledQuery, ReviewQuery, compile_query
from .visibility import VisibilityDecision, resolve_for_review

logger = logging.getLogger(__name__)


class ReviewRetrievalError(Exception):
    """리뷰 저장소 조회 실패. 재시도/부분 결과 없이 그대로 올린다."""


@dataclass(frozen=True)
class PresentedReview:
    review: Review
    visibility: VisibilityDecision
    is_admin_view: bool = False


def base_queryset():
    return Review.objects.select_related("user").order_by("-created_at")


def fetch_reviews(query: CompiledQuery) -> list[Review]:
    """저장소 1회 조회. DB 오류는 ReviewRetrievalError 하나로 통일."""
    try:
        return list(query.apply(base_queryset()))
    except DatabaseError as e:
        logger.exception("review retrieval failed: %s", e)
        raise ReviewRetrievalError("review retrieval failed") from e


def present_review(review: Review, viewer=None, *, is_admin: bool = False) -> PresentedReview:
    return PresentedReview(
        review=review,
        visibility=resolve_for_review(review, viewer, is_admin=is_admin),
        is_admin_view=is_admin,
    )


def list_reviews(
    params: Optional[Mapping[str, Any]] = None,
    viewer=None,
    *,
    is_admin: bool = False,
    query: Optional[ReviewQuery] = None,
) -> list[PresentedReview]:
    """
    필터 입력 → 컴파일 → 조회(최신순) → 리뷰별 익명 처리
    - 잘못된 필터 값은 조건 없음으로 취급 (예외 없음)
    - 조회 실패는 ReviewRetrievalError
    """
    if query is None:
        query = ReviewQuery.from_params(params)
    reviews = fetch_reviews(compile_query(query))
    return [present_review(r, viewer, is_admin=is_admin) for r in reviews]


def average_rating(items: list[PresentedReview]) -> float:
    if not items:
        return 0
    return round(sum(p.review.rating for p in items) / len(items), 2)


def recent_reviews_for(user, limit: int = 3):
    return list(Review.objects.filter(user=user).select_related("user").order_by("-created_at")[:limit])
