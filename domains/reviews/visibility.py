# domains/reviews/visibility.py
"""
익명 리뷰 표시 규칙 (순수 함수, I/O 없음)

1) 본인 리뷰: viewer_id 가 있고 author_id 와 같음
2) 가림 여부: (리뷰 익명 OR 작성자 전역 익명) AND 관리자 아님 AND 본인 아님
3) 가리면 "Anonymous User" / "****@****.com", 아니면 작성자 실제 이름/이메일

관리자는 실명을 보지만 flagged_anonymous 로 "익명 설정된 리뷰"임을 따로 표시한다.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

ANONYMOUS_NAME = "Anonymous User"
ANONYMOUS_EMAIL = "****@****.com"


@dataclass(frozen=True)
class VisibilityDecision:
    hide_identity: bool
    display_name: str
    display_email: str
    is_own_review: bool
    flagged_anonymous: bool


def resolve_visibility(
    *,
    review_anonymous: bool,
    author_anonymous: bool,
    viewer_id: Optional[Any],
    author_id: Any,
    author_name: Optional[str] = "",
    author_email: Optional[str] = "",
    is_admin: bool = False,
) -> VisibilityDecision:
    is_own_review = viewer_id is not None and viewer_id == author_id
    flagged = bool(review_anonymous or author_anonymous)
    hide = flagged and not is_admin and not is_own_review

    if hide:
        return VisibilityDecision(True, ANONYMOUS_NAME, ANONYMOUS_EMAIL, is_own_review, flagged)
    return VisibilityDecision(
        False, author_name or "", author_email or "", is_own_review, flagged
    )


def resolve_for_review(review, viewer=None, is_admin: bool = False) -> VisibilityDecision:
    """Review(+user) 모델 인스턴스용 래퍼. viewer 는 User 또는 None(비로그인)."""
    author = review.user
    viewer_id = None
    if viewer is not None and getattr(viewer, "is_authenticated", False):
        viewer_id = viewer.pk
    return resolve_visibility(
        review_anonymous=review.anonymous,
        author_anonymous=author.anonymous,
        viewer_id=viewer_id,
        author_id=review.user_id,
        author_name=author.name,
        author_email=author.email,
        is_admin=is_admin,
    )
