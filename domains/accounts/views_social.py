from django.conf import settings
from django.http import HttpResponseRedirect
from urllib.parse import urlencode

from rest_framework import generics, permissions, renderers, serializers
from rest_framework.response import Response
from rest_framework_simplejwt.tokens import RefreshToken
from drf_spectacular.utils import extend_schema, OpenApiParameter

from .services import sync_user_from_profile
from .social import (
    SUPPORTED_PROVIDERS,
    SocialAuthError,
    exchange_code_for_tokens,
    fetch_userinfo,
    generate_authorize_url,
    get_provider_keys,
)
from .utils import REFRESH_COOKIE, refresh_cookie_kwargs


# ----- Serializer for POST /social/{provider}/login/ -----
class SocialLoginSerializer(serializers.Serializer):
    code = serializers.CharField()
    state = serializers.CharField(required=False, allow_blank=True)
    redirect_uri = serializers.CharField(required=False, allow_blank=True)


_provider_param = OpenApiParameter(
    name="provider",
    type=str,
    location=OpenApiParameter.PATH,
    enum=list(SUPPORTED_PROVIDERS),
    description="OAuth 제공자",
)


# ----- /social/{provider}/authorize/ -----
class SocialAuthorizeView(generics.GenericAPIView):
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    @extend_schema(
        operation_id="RedirectToSocialAuthorize",
        summary="외부 로그인 인가 페이지로 리다이렉트",
        tags=["Authentication"],
        parameters=[_provider_param],
        responses={302: {"description": "리다이렉트"}},
    )
    def get(self, request, provider: str):
        provider = (provider or "").lower()
        try:
            keys = get_provider_keys(provider)
            if not keys.get("client_id"):
                return Response({"detail": f"{provider} provider keys not configured"}, status=400)
            return HttpResponseRedirect(generate_authorize_url(provider, request))
        except SocialAuthError as e:
            return Response({"detail": f"{provider} authorize error: {e}"}, status=400)


# ----- /social/{provider}/callback/ -----
class SocialCallbackView(generics.GenericAPIView):
    """IdP → 백엔드 콜백. code/state 를 프론트 콜백 페이지로 넘긴다."""

    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    @extend_schema(
        operation_id="SocialCallback",
        tags=["Authentication"],
        parameters=[_provider_param],
        responses={302: {"description": "프론트 콜백으로 리다이렉트"}},
    )
    def get(self, request, provider: str):
        if (err := request.GET.get("error")):
            return Response({"detail": f"OAuth error: {err}"}, status=400)

        code = request.GET.get("code")
        if not code:
            return Response({"detail": "No authorization code"}, status=400)

        state = request.GET.get("state", "")
        p = (provider or "").lower()

        base = settings.FRONTEND_OAUTH_CALLBACK.rstrip("/")
        qs = urlencode({"provider": p, "code": code, "state": state})
        return HttpResponseRedirect(f"{base}/{p}?{qs}")


# ----- /social/{provider}/login/ -----
class SocialLoginView(generics.GenericAPIView):
    permission_classes = [permissions.AllowAny]
    authentication_classes = []
    serializer_class = SocialLoginSerializer
    renderer_classes = [renderers.JSONRenderer]

    @extend_schema(
        operation_id="SocialLogin",
        summary="외부 로그인 (코드 교환 → 계정 동기화 → JWT 발급)",
        description="authorization code 로 IdP 프로필을 받아 계정을 생성/갱신하고 refresh 쿠키를 굽습니다.",
        request=SocialLoginSerializer,
        parameters=[_provider_param],
        tags=["Authentication"],
        responses={200: {"type": "object"}},
    )
    def post(self, request, provider: str):
        provider = (provider or "").lower()
        ser = self.get_serializer(data=request.data)
        ser.is_valid(raise_exception=True)

        try:
            # 1) code -> provider access_token
            tokens = exchange_code_for_tokens(
                provider,
                ser.validated_data["code"],
                ser.validated_data.get("redirect_uri", ""),
            )
            # 2) provider access_token -> profile
            profile = fetch_userinfo(provider, tokens["access_token"])
        except SocialAuthError as e:
            return Response({"detail": f"{provider} login error: {e}"}, status=400)

        # 3) profile -> user 생성/갱신
        user = sync_user_from_profile(profile)

        # 4) JWT 발급 + refresh 쿠키 굽기
        refresh = RefreshToken.for_user(user)
        resp = Response({"access": str(refresh.access_token)}, status=200)
        resp.set_cookie(REFRESH_COOKIE, str(refresh), **refresh_cookie_kwargs(settings.DEBUG))
        return resp
