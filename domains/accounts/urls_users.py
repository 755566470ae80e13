# domains/accounts/urls_users.py
from django.urls import path
from .views import MeView, SettingsView

app_name = "accounts_users"

urlpatterns = [
    # 내 정보
    path("me/", MeView.as_view(), name="me"),

    # 전역 익명/테마 설정
    path("me/settings/", SettingsView.as_view(), name="me-settings"),
]
