"""
domains/reviews/query.py 테스트 (메모리 평가 + ORM 적용)
"""
import itertools
from types import SimpleNamespace

import pytest

from domains.reviews.filters import ReviewFilter
from domains.reviews.models import Review
from domains.reviews.query import (
    KIND_FREE_TEXT,
    KIND_LOCATION,
    KIND_POSTAL_CODE,
    KIND_RATING,
    KIND_REGION,
    ReviewQuery,
    compile_query,
    parse_rating,
)

TORONTO = "500 Queen St, Ontario, Canada, M5V2T6"
MONTREAL = "10 Rue Ste-Catherine, Quebec, Canada, H3B1A1"


def _rec(location, rating, content="Nice and quiet place to stay."):
    return SimpleNamespace(location=location, rating=rating, content=content)


@pytest.fixture
def records():
    return [
        _rec(TORONTO, 8),
        _rec(MONTREAL, 5),
        _rec("123 Main St, Ontario, Canada, A1A1A1", 10, "Loud street at night."),
        _rec("77 Beach Rd, British Columbia, Canada, V5K0A1", 2),
    ]


# ---- 입력 해석 ------------------------------------------------------------


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("7", 7),
        (" 7 ", 7),
        ("7stars", 7),
        ("-3", -3),
        ("abc", None),
        ("", None),
        (None, None),
        (9, 9),
        (7.9, 7),
        (float("nan"), None),
        (True, None),
    ],
)
def test_parse_rating(raw, expected):
    assert parse_rating(raw) == expected


def test_from_params_reads_known_keys():
    q = ReviewQuery.from_params(
        {
            "filter": "  quiet ",
            "location": "Main",
            "address": "123",
            "state": "ON",
            "postalCode": "m5v",
            "rating": "6",
            "unknown": "ignored",
        }
    )
    assert q == ReviewQuery(
        free_text="quiet",
        location="Main",
        address="123",
        region_code="ON",
        postal_code="m5v",
        minimum_rating=6,
    )


def test_from_params_postal_code_alias_and_empty():
    assert ReviewQuery.from_params({"postal_code": "H3B"}).postal_code == "H3B"
    assert ReviewQuery.from_params(None) == ReviewQuery()
    assert ReviewQuery.from_params({"rating": "abc", "state": ""}) == ReviewQuery()


def test_compiled_condition_order():
    q = ReviewQuery(
        free_text="quiet",
        location="queen",
        address="500",
        region_code="ON",
        postal_code="m5v",
        minimum_rating=3,
    )
    kinds = [c.kind for c in compile_query(q).conditions]
    assert kinds == [
        KIND_REGION,
        KIND_LOCATION,
        KIND_LOCATION,
        KIND_POSTAL_CODE,
        KIND_RATING,
        KIND_FREE_TEXT,
    ]


# ---- 성질 -----------------------------------------------------------------


def test_absent_inputs_match_everything(records):
    compiled = compile_query(ReviewQuery())
    assert compiled.is_empty
    assert compiled.filter(records) == records


def test_case_insensitive_location(records):
    upper = compile_query(ReviewQuery(location="MAIN ST")).filter(records)
    lower = compile_query(ReviewQuery(location="main st")).filter(records)
    assert upper == lower
    assert [r.location for r in upper] == ["123 Main St, Ontario, Canada, A1A1A1"]


def test_region_matches_label_not_code():
    ontario_only_label = _rec("1 Bay St, ontario, Canada, M5J2N8", 6)
    code_in_text = _rec("1 ON Street, Quebec, Canada, H2X1Y4", 6)
    compiled = compile_query(ReviewQuery(region_code="ON"))
    assert compiled.matches(ontario_only_label)
    assert not compiled.matches(code_in_text)


@pytest.mark.parametrize("code", ["ZZ", "all", "on"])
def test_unknown_region_is_no_filter(records, code):
    compiled = compile_query(ReviewQuery(region_code=code))
    assert compiled.is_empty
    assert compiled.filter(records) == records


def test_rating_boundary(records):
    top = compile_query(ReviewQuery(minimum_rating=10)).filter(records)
    assert [r.rating for r in top] == [10]

    assert compile_query(ReviewQuery(minimum_rating=0)).filter(records) == records
    assert compile_query(ReviewQuery(minimum_rating=-5)).filter(records) == records
    assert compile_query(ReviewQuery()).filter(records) == records


def test_and_composition_only_shrinks(records):
    options = {
        "region_code": [None, "ON"],
        "address": [None, "main"],
        "postal_code": [None, "a1a"],
        "minimum_rating": [None, 6],
    }
    keys = list(options)
    prev_sets = {}
    for combo in itertools.product(*options.values()):
        given = {k: v for k, v in zip(keys, combo) if v is not None}
        compiled = compile_query(ReviewQuery(**given))
        matched = compiled.filter(records)

        # 각 단일 조건을 모두 만족하는 것과 같다
        expected = [
            r
            for r in records
            if all(
                compile_query(ReviewQuery(**{k: v})).matches(r)
                for k, v in given.items()
            )
        ]
        assert matched == expected
        prev_sets[frozenset(given.items())] = {id(r) for r in matched}

    # 조건을 하나 더 붙이면 결과는 부분집합
    for bigger, ids in prev_sets.items():
        for item in bigger:
            smaller = bigger - {item}
            assert ids <= prev_sets[smaller]


def test_free_text_searches_location_or_content(records):
    by_content = compile_query(ReviewQuery(free_text="LOUD")).filter(records)
    assert [r.rating for r in by_content] == [10]

    by_location = compile_query(ReviewQuery(free_text="beach")).filter(records)
    assert [r.rating for r in by_location] == [2]


def test_scenario_region(records):
    two = records[:2]
    matched = compile_query(ReviewQuery(region_code="ON")).filter(two)
    assert [r.location for r in matched] == [TORONTO]


def test_scenario_minimum_rating(records):
    two = records[:2]
    matched = compile_query(ReviewQuery(minimum_rating=6)).filter(two)
    assert [r.location for r in matched] == [TORONTO]


# ---- ORM 적용 -------------------------------------------------------------


@pytest.mark.django_db
class TestApplyToQueryset:
    @pytest.fixture(autouse=True)
    def _seed(self, review_factory):
        self.toronto = review_factory(location=TORONTO, rating=8, age_minutes=3)
        self.montreal = review_factory(location=MONTREAL, rating=5, age_minutes=2)
        self.main = review_factory(
            location="123 Main St, Ontario, Canada, A1A1A1",
            rating=10,
            content="Loud street at night.",
            age_minutes=1,
        )

    def _ids(self, query):
        qs = compile_query(query).apply(Review.objects.all())
        return {r.pk for r in qs}

    def test_empty_query_returns_queryset_unchanged(self):
        qs = Review.objects.all()
        assert compile_query(ReviewQuery()).apply(qs) is qs

    def test_region(self):
        assert self._ids(ReviewQuery(region_code="ON")) == {self.toronto.pk, self.main.pk}

    def test_rating(self):
        assert self._ids(ReviewQuery(minimum_rating=6)) == {self.toronto.pk, self.main.pk}
        assert self._ids(ReviewQuery(minimum_rating=10)) == {self.main.pk}

    def test_case_insensitive_against_stored_mixed_case(self):
        assert self._ids(ReviewQuery(location="MAIN ST")) == {self.main.pk}
        assert self._ids(ReviewQuery(postal_code="h3b1a1")) == {self.montreal.pk}

    def test_free_text_or_group(self):
        assert self._ids(ReviewQuery(free_text="loud")) == {self.main.pk}
        assert self._ids(ReviewQuery(free_text="QUEEN")) == {self.toronto.pk}

    def test_stored_values_untouched(self):
        list(compile_query(ReviewQuery(location="main")).apply(Review.objects.all()))
        self.main.refresh_from_db()
        assert self.main.location == "123 Main St, Ontario, Canada, A1A1A1"

    def test_orm_and_memory_agree(self):
        query = ReviewQuery(region_code="ON", minimum_rating=9, free_text="street")
        compiled = compile_query(query)
        in_memory = {r.pk for r in compiled.filter(Review.objects.all())}
        assert self._ids(query) == in_memory == {self.main.pk}

    def test_filterset_delegates_to_compiler(self):
        fs = ReviewFilter(data={"state": "ON", "rating": "9stars"}, queryset=Review.objects.all())
        assert fs.to_query() == ReviewQuery(region_code="ON", minimum_rating=9)
        assert {r.pk for r in fs.qs} == {self.main.pk}

    def test_filterset_without_data_is_unfiltered(self):
        fs = ReviewFilter(queryset=Review.objects.all())
        assert fs.to_query() == ReviewQuery()

    def test_accented_capitals_match_like_in_memory(self, review_factory):
        quebec = review_factory(location="1 Rue X, QUÉBEC, Canada, H3B1A1", rating=6)
        query = ReviewQuery(location="québec")
        in_memory = {r.pk for r in compile_query(query).filter(Review.objects.all())}
        assert self._ids(query) == in_memory == {quebec.pk}
        assert self._ids(ReviewQuery(free_text="QUÉBEC")) == {quebec.pk}
