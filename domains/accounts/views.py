# domains/accounts/views.py
from django.conf import settings

from rest_framework import generics, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from drf_spectacular.utils import extend_schema, OpenApiResponse

from domains.reviews.serializers import ReviewReadSerializer
from domains.reviews.services import present_review, recent_reviews_for

from .serializers import (
    AuthCheckSerializer,
    MeSerializer,
    MeUpdateSerializer,
    ProfileStatsSerializer,
    SettingsSerializer,
    TokenResponseSerializer,
)
from .services import is_admin, review_stats
from .utils import REFRESH_COOKIE, REFRESH_COOKIE_PATH


# ---------- 인증/토큰 ----------
class AuthCheckView(APIView):
    """GET /api/v1/auth/check/ → {"authenticated": bool}"""

    permission_classes = [permissions.AllowAny]

    @extend_schema(operation_id="AuthCheck", responses={200: AuthCheckSerializer}, tags=["Authentication"])
    def get(self, request):
        return Response({"authenticated": bool(request.user and request.user.is_authenticated)})


class RefreshView(APIView):
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    @extend_schema(operation_id="RefreshAccess", request=None, responses={200: TokenResponseSerializer}, tags=["Authentication"])
    def post(self, request):
        token = request.COOKIES.get(REFRESH_COOKIE)
        if not token:
            return Response({"detail": "No refresh cookie"}, status=400)
        try:
            refresh = RefreshToken(token)
        except TokenError:
            return Response({"detail": "Invalid refresh"}, status=401)
        # 새 access 만 발급 (refresh 쿠키는 그대로)
        return Response({"access": str(refresh.access_token)}, status=200)


class LogoutView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        operation_id="Logout",
        request=None,
        responses={204: OpenApiResponse(description="로그아웃 완료")},
        tags=["Authentication"],
    )
    def post(self, request):
        token = request.COOKIES.get(REFRESH_COOKIE)
        if token:
            try:
                RefreshToken(token).blacklist()
            except TokenError:
                # 이미 만료/블랙리스트된 토큰: 쿠키만 지운다
                pass
        resp = Response(status=204)
        resp.delete_cookie(REFRESH_COOKIE, path=REFRESH_COOKIE_PATH)
        return resp


# ---------- 내 프로필 ----------
class MeView(generics.RetrieveUpdateAPIView):
    """
    GET   /api/v1/users/me/   내 프로필 + 최근 리뷰 3개 + 통계
    PATCH /api/v1/users/me/   이름/아바타 수정
    """
    permission_classes = [permissions.IsAuthenticated]
    http_method_names = ["get", "patch", "head", "options"]

    def get_object(self):
        return self.request.user

    def get_serializer_class(self):
        return MeUpdateSerializer if self.request.method == "PATCH" else MeSerializer

    @extend_schema(operation_id="GetMe", responses={200: MeSerializer}, tags=["users"])
    def get(self, request, *args, **kwargs):
        user = self.get_object()
        viewer_is_admin = is_admin(user)
        recent = [present_review(r, user, is_admin=viewer_is_admin) for r in recent_reviews_for(user)]
        return Response(
            {
                "user": MeSerializer(user).data,
                "reviews": ReviewReadSerializer(recent, many=True).data,
                "stats": ProfileStatsSerializer(review_stats(user.reviews.all())).data,
            }
        )

    @extend_schema(operation_id="UpdateMe", request=MeUpdateSerializer, responses={200: MeSerializer}, tags=["users"])
    def patch(self, request, *args, **kwargs):
        ser = MeUpdateSerializer(self.get_object(), data=request.data, partial=True)
        ser.is_valid(raise_exception=True)
        user = ser.save()
        return Response(MeSerializer(user).data, status=status.HTTP_200_OK)


class SettingsView(generics.RetrieveUpdateAPIView):
    """
    GET       /api/v1/users/me/settings/   {"anonymous", "dark_mode"}
    PUT/PATCH /api/v1/users/me/settings/   전역 익명/다크모드 변경
    """
    permission_classes = [permissions.IsAuthenticated]
    serializer_class = SettingsSerializer

    def get_object(self):
        return self.request.user

    def update(self, request, *args, **kwargs):
        # PUT 도 부분 수정으로 취급 ({"anonymous": true} 만 보내는 프론트 호환)
        kwargs["partial"] = True
        return super().update(request, *args, **kwargs)

    @extend_schema(operation_id="GetSettings", tags=["users"])
    def get(self, *args, **kwargs):
        return super().get(*args, **kwargs)

    @extend_schema(operation_id="ReplaceSettings", tags=["users"])
    def put(self, *args, **kwargs):
        return super().put(*args, **kwargs)

    @extend_schema(operation_id="UpdateSettings", tags=["users"])
    def patch(self, *args, **kwargs):
        return super().patch(*args, **kwargs)
