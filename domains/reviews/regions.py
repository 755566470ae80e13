# domains/reviews/regions.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

# 필터 UI의 "전체 지역" 선택값. 조건을 만들지 않는다.
ALL_REGIONS = "all"

DEFAULT_COUNTRY = "Canada"

CANADIAN_PROVINCES: tuple[tuple[str, str], ...] = (
    ("AB", "Alberta"),
    ("BC", "British Columbia"),
    ("MB", "Manitoba"),
    ("NB", "New Brunswick"),
    ("NL", "Newfoundland and Labrador"),
    ("NS", "Nova Scotia"),
    ("NT", "Northwest Territories"),
    ("NU", "Nunavut"),
    ("ON", "Ontario"),
    ("PE", "Prince Edward Island"),
    ("QC", "Quebec"),
    ("SK", "Saskatchewan"),
    ("YT", "Yukon"),
)

_LABELS = dict(CANADIAN_PROVINCES)


def resolve_region(code: Optional[str]) -> Optional[str]:
    """
    지역 코드 → 라벨. 테이블에 정확히 있는 코드만 인정한다.
    (대소문자 보정/유사 매칭 없음, 앞뒤 공백만 제거)
    모르는 코드나 ALL_REGIONS 는 None.
    """
    if not code:
        return None
    return _LABELS.get(str(code).strip())


def get_province_label(code: str) -> str:
    """표시용: 라벨이 없으면 코드 그대로 돌려준다."""
    return resolve_region(code) or code


@dataclass(frozen=True)
class ParsedLocation:
    address: str
    state: str
    country: str
    postal_code: str


def parse_location(location: Optional[str]) -> ParsedLocation:
    """
    "주소, 지역, 국가, 우편번호" 관례의 location 문자열을 나눈다.
    구조 검증은 하지 않는다. 국가가 비어 있으면 Canada.
    """
    parts = [p.strip() for p in (location or "").split(",")]
    parts += [""] * (4 - len(parts))
    return ParsedLocation(
        address=parts[0],
        state=parts[1],
        country=parts[2] or DEFAULT_COUNTRY,
        postal_code=parts[3],
    )


def format_location(
    address: str = "",
    state: str = "",
    country: str = "",
    postal_code: str = "",
) -> str:
    """parse_location 의 역. 지역 코드는 라벨로 풀어 쓰고 빈 조각은 건너뛴다."""
    state = (state or "").strip()
    if state == ALL_REGIONS:
        state = ""
    parts = [
        (address or "").strip(),
        resolve_region(state) or state,
        (country or "").strip(),
        (postal_code or "").strip().upper(),
    ]
    return ", ".join(p for p in parts if p)
