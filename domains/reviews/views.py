# domains/reviews/views.py
import logging

from drf_spectacular.utils import OpenApiParameter, OpenApiTypes, extend_schema
from rest_framework import generics, permissions, status
from rest_framework.response import Response

from domains.accounts.services import is_admin
from domains.reviews.filters import ReviewFilter
from domains.reviews.models import Review
from domains.reviews.serializers import ReviewReadSerializer, ReviewWriteSerializer
from domains.reviews.services import (
    ReviewRetrievalError,
    average_rating,
    list_reviews,
    present_review,
)
from shared.permissions import IsOwner, IsOwnerOrAdmin

logger = logging.getLogger(__name__)


def _present(request, review):
    viewer_is_admin = is_admin(request.user)
    return ReviewReadSerializer(present_review(review, request.user, is_admin=viewer_is_admin)).data


class ReviewListCreateAPI(generics.GenericAPIView):
    """
    GET  /api/v1/reviews/   필터 + 익명 처리된 목록 (공개)
    POST /api/v1/reviews/   리뷰 작성 (로그인)
    """

    queryset = Review.objects.none()

    def get_permissions(self):
        return (
            [permissions.IsAuthenticated()]
            if self.request.method == "POST"
            else [permissions.AllowAny()]
        )

    def get_serializer_class(self):
        return (
            ReviewWriteSerializer
            if self.request.method == "POST"
            else ReviewReadSerializer
        )

    @extend_schema(
        operation_id="ListReviews",
        parameters=[
            OpenApiParameter("filter", OpenApiTypes.STR, OpenApiParameter.QUERY, required=False, description="location/content 검색"),
            OpenApiParameter("location", OpenApiTypes.STR, OpenApiParameter.QUERY, required=False, description="location 부분 일치"),
            OpenApiParameter("address", OpenApiTypes.STR, OpenApiParameter.QUERY, required=False, description="주소 부분 일치"),
            OpenApiParameter("state", OpenApiTypes.STR, OpenApiParameter.QUERY, required=False, description="지역 코드 (ON, QC, ... / all)"),
            OpenApiParameter("postalCode", OpenApiTypes.STR, OpenApiParameter.QUERY, required=False, description="우편번호 부분 일치"),
            OpenApiParameter("postal_code", OpenApiTypes.STR, OpenApiParameter.QUERY, required=False, description="postalCode 별칭"),
            OpenApiParameter("rating", OpenApiTypes.STR, OpenApiParameter.QUERY, required=False, description="최소 평점. 앞쪽 정수만 읽음 (\"7stars\" → 7), 숫자로 시작하지 않거나 0 이하이면 무시"),
        ],
        # 실제 응답은 {"items": [...], "count": int, "avg_rating": float, "failed": bool}
        responses={200: ReviewReadSerializer(many=True)},
        tags=["reviews"],
    )
    def get(self, request, *args, **kwargs):
        query = ReviewFilter(data=request.query_params).to_query()
        try:
            items = list_reviews(query=query, viewer=request.user, is_admin=is_admin(request.user))
        except ReviewRetrievalError as e:
            # "0건 성공"과 구분되는 실패 응답
            return Response(
                {"items": [], "count": 0, "avg_rating": 0, "failed": True, "detail": str(e)},
                status=status.HTTP_503_SERVICE_UNAVAILABLE,
            )

        return Response(
            {
                "items": ReviewReadSerializer(items, many=True).data,
                "count": len(items),
                "avg_rating": average_rating(items),
                "failed": False,
            }
        )

    @extend_schema(
        operation_id="CreateReview",
        request=ReviewWriteSerializer,
        responses={201: ReviewReadSerializer},
        tags=["reviews"],
    )
    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        review = serializer.save()
        return Response(_present(request, review), status=status.HTTP_201_CREATED)


class ReviewDetailAPI(generics.RetrieveUpdateDestroyAPIView):
    """
    GET/PATCH/DELETE /api/v1/reviews/{review_id}
    - GET: 공개 (익명 처리)
    - PATCH: 작성자만
    - DELETE: 작성자 또는 관리자 (hard delete)
    """

    lookup_url_kwarg = "review_id"
    queryset = Review.objects.select_related("user")
    http_method_names = ["get", "patch", "delete", "options", "head"]

    def get_permissions(self):
        if self.request.method == "PATCH":
            return [permissions.IsAuthenticated(), IsOwner()]
        if self.request.method == "DELETE":
            return [permissions.IsAuthenticated(), IsOwnerOrAdmin()]
        return [permissions.AllowAny()]

    def get_serializer_class(self):
        return (
            ReviewWriteSerializer
            if self.request.method == "PATCH"
            else ReviewReadSerializer
        )

    @extend_schema(operation_id="GetReview", responses={200: ReviewReadSerializer}, tags=["reviews"])
    def get(self, request, *args, **kwargs):
        return Response(_present(request, self.get_object()))

    @extend_schema(
        operation_id="UpdateReview",
        request=ReviewWriteSerializer,
        responses={200: ReviewReadSerializer},
        tags=["reviews"],
    )
    def patch(self, request, *args, **kwargs):
        review = self.get_object()
        serializer = self.get_serializer(review, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        review = serializer.save()
        return Response(_present(request, review))

    @extend_schema(operation_id="DeleteReview", responses={204: None}, tags=["reviews"])
    def delete(self, *a, **kw):
        return super().delete(*a, **kw)

    def perform_destroy(self, instance):
        if instance.user_id != self.request.user.pk:
            logger.info(
                "admin %s deleted review %s by %s",
                self.request.user.pk, instance.review_id, instance.user_id,
            )
        instance.delete()
