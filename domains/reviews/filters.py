# domains/reviews/filters.py
import django_filters as df

from .models import Review
from .query import ReviewQuery, compile_query


class ReviewFilter(df.FilterSet):
    """
    /reviews/ 쿼리 파라미터 입력면.
    값 해석/조건 생성은 전부 query.compile_query 에 맡긴다.
    (rating/state 도 CharFilter: 잘못된 값이 400 이 아니라 "조건 없음"이 되도록)
    """
    filter = df.CharFilter(label="location/content 통합 검색")
    location = df.CharFilter(label="location 부분 일치")
    address = df.CharFilter(label="주소 부분 일치")
    state = df.CharFilter(label="지역 코드 (예: ON, all)")
    postalCode = df.CharFilter(label="우편번호 부분 일치")
    postal_code = df.CharFilter(label="우편번호 부분 일치 (postalCode 별칭)")
    rating = df.CharFilter(label="최소 평점 (1~10)")

    class Meta:
        model = Review
        fields = []

    def to_query(self) -> ReviewQuery:
        data = self.form.cleaned_data if self.is_bound and self.is_valid() else {}
        return ReviewQuery.from_params(data)

    def filter_queryset(self, queryset):
        return compile_query(self.to_query()).apply(queryset)
