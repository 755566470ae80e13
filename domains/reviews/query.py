# domains/reviews/query.py
"""
리뷰 필터 컴파일러

요청 파라미터(전부 선택, 느슨한 타입) → ReviewQuery(불변 입력) → CompiledQuery(조건 목록)

- 구조화 조건(지역/주소/우편번호/최소 평점)은 AND 로 결합
- 자유 검색어(filter)는 location OR content 한 묶음으로 AND 에 추가
- 비어 있거나 해석할 수 없는 입력은 조건을 만들지 않는다 (에러 아님)
- 조건이 하나도 없으면 모든 리뷰와 매칭

같은 CompiledQuery 를 ORM(apply)과 메모리(matches/filter) 양쪽에 쓸 수 있다.
"""
from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from functools import reduce
from operator import and_, or_
from typing import Any, Iterable, Mapping, Optional, Union

from django.db.models import Q
from django.db.models.functions import Lower

from .regions import ALL_REGIONS, resolve_region

logger = logging.getLogger(__name__)

# ---- 조건 종류 ----------------------------------------------------------
KIND_REGION = "region"
KIND_LOCATION = "location"
KIND_POSTAL_CODE = "postal_code"
KIND_RATING = "rating"
KIND_FREE_TEXT = "free_text"

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def _lower_alias(field_name: str) -> str:
    return f"{field_name}_lower"


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def parse_rating(value: Any) -> Optional[int]:
    """
    최소 평점 입력 해석. 앞쪽 정수만 읽는다 ("7", " 7 ", "7stars" → 7).
    숫자로 시작하지 않으면 None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    m = _LEADING_INT.match(str(value))
    return int(m.group(1)) if m else None


# ---- 조건 ---------------------------------------------------------------
@dataclass(frozen=True)
class Contains:
    """field 의 소문자 사본에 value(이미 소문자)가 포함되는지."""

    kind: str
    field: str
    value: str

    @property
    def lower_fields(self) -> frozenset:
        return frozenset([self.field])

    def matches(self, record) -> bool:
        stored = getattr(record, self.field, None) or ""
        return self.value in str(stored).lower()

    def to_q(self) -> Q:
        return Q(**{f"{_lower_alias(self.field)}__contains": self.value})


@dataclass(frozen=True)
class MinRating:
    threshold: int
    kind: str = KIND_RATING

    @property
    def lower_fields(self) -> frozenset:
        return frozenset()

    def matches(self, record) -> bool:
        rating = getattr(record, "rating", None)
        return rating is not None and rating >= self.threshold

    def to_q(self) -> Q:
        return Q(rating__gte=self.threshold)


@dataclass(frozen=True)
class AnyOf:
    kind: str
    conditions: tuple

    @property
    def lower_fields(self) -> frozenset:
        return frozenset().union(*(c.lower_fields for c in self.conditions))

    def matches(self, record) -> bool:
        return any(c.matches(record) for c in self.conditions)

    def to_q(self) -> Q:
        return reduce(or_, (c.to_q() for c in self.conditions))


Condition = Union[Contains, MinRating, AnyOf]


# ---- 입력 ---------------------------------------------------------------
@dataclass(frozen=True)
class ReviewQuery:
    free_text: str = ""
    location: str = ""
    address: str = ""
    region_code: str = ""
    postal_code: str = ""
    minimum_rating: Optional[int] = None

    @classmethod
    def from_params(cls, params: Optional[Mapping[str, Any]]) -> "ReviewQuery":
        """
        쿼리 파라미터(dict/QueryDict) → ReviewQuery
        인식하는 키: filter, location, address, state, postalCode(postal_code), rating
        """
        params = params or {}

        def get(*keys):
            for k in keys:
                v = params.get(k)
                if v not in (None, ""):
                    return v
            return None

        return cls(
            free_text=_text(get("filter")),
            location=_text(get("location")),
            address=_text(get("address")),
            region_code=_text(get("state")),
            postal_code=_text(get("postalCode", "postal_code")),
            minimum_rating=parse_rating(get("rating")),
        )


# ---- 결과 ---------------------------------------------------------------
@dataclass(frozen=True)
class CompiledQuery:
    conditions: tuple = ()

    @property
    def is_empty(self) -> bool:
        return not self.conditions

    @property
    def lower_fields(self) -> frozenset:
        return frozenset().union(*(c.lower_fields for c in self.conditions))

    def matches(self, record) -> bool:
        return all(c.matches(record) for c in self.conditions)

    def filter(self, records: Iterable) -> list:
        return [r for r in records if self.matches(r)]

    def to_q(self) -> Q:
        if self.is_empty:
            return Q()
        return reduce(and_, (c.to_q() for c in self.conditions))

    def apply(self, queryset):
        """
        ORM 적용. 저장값은 건드리지 않고 Lower(...) 별칭끼리 비교한다.
        (DB LIKE 가 대소문자를 구분하는 경우에도 동일 결과)
        """
        if self.is_empty:
            return queryset
        aliases = {_lower_alias(f): Lower(f) for f in sorted(self.lower_fields)}
        if aliases:
            queryset = queryset.alias(**aliases)
        return queryset.filter(self.to_q())


def compile_query(query: ReviewQuery) -> CompiledQuery:
    conditions: list[Condition] = []

    if query.region_code and query.region_code != ALL_REGIONS:
        label = resolve_region(query.region_code)
        if label:
            conditions.append(Contains(KIND_REGION, "location", label.lower()))

    for value in (query.location, query.address):
        if value:
            conditions.append(Contains(KIND_LOCATION, "location", value.lower()))

    if query.postal_code:
        conditions.append(
            Contains(KIND_POSTAL_CODE, "location", query.postal_code.lower())
        )

    if query.minimum_rating is not None and query.minimum_rating > 0:
        conditions.append(MinRating(query.minimum_rating))

    if query.free_text:
        needle = query.free_text.lower()
        conditions.append(
            AnyOf(
                KIND_FREE_TEXT,
                (
                    Contains(KIND_FREE_TEXT, "location", needle),
                    Contains(KIND_FREE_TEXT, "content", needle),
                ),
            )
        )

    compiled = CompiledQuery(tuple(conditions))
    logger.debug("compiled review query %s -> %s", query, compiled.conditions)
    return compiled
