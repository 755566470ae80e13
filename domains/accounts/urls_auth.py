from django.urls import path

from .views import AuthCheckView, LogoutView, RefreshView
from .views_social import (
    SocialAuthorizeView,
    SocialCallbackView,
    SocialLoginView,
)

app_name = "accounts_auth"

urlpatterns = [
    # 로그인 여부
    path("check/", AuthCheckView.as_view(), name="check"),
    # 토큰 갱신
    path("refresh/", RefreshView.as_view(), name="refresh"),
    # 로그아웃
    path("logout/", LogoutView.as_view(), name="logout"),
    # 외부 IdP 로그인 (authorize → callback → login)
    path(
        "social/<str:provider>/authorize/",
        SocialAuthorizeView.as_view(),
        name="social-authorize",
    ),
    path(
        "social/<str:provider>/callback/",
        SocialCallbackView.as_view(),
        name="social-callback",
    ),
    path(
        "social/<str:provider>/login/", SocialLoginView.as_view(), name="social-login"
    ),
]
