import logging
import os
import secrets
import urllib.parse

from django.conf import settings
from django.urls import reverse

import requests

logger = logging.getLogger(__name__)

SUPPORTED_PROVIDERS = ("kinde", "google")
TIMEOUT = 10


class SocialAuthError(Exception):
    pass


def _env(name: str, default: str = "") -> str:
    return os.getenv(name, getattr(settings, name, default))


def _provider_config(provider: str) -> dict:
    p = (provider or "").lower()
    if p not in SUPPORTED_PROVIDERS:
        raise SocialAuthError(f"Unsupported provider: {provider}")

    # settings.SOCIAL_OAUTH 우선 사용
    so = getattr(settings, "SOCIAL_OAUTH", {})
    cfg = (so.get(p) or {}).copy()
    if cfg.get("client_id"):
        return cfg

    # settings에 없거나 비어있으면 env로 폴백
    if p == "kinde":
        issuer = _env("KINDE_ISSUER_URL").rstrip("/")
        return {
            "client_id": _env("KINDE_CLIENT_ID"),
            "client_secret": _env("KINDE_CLIENT_SECRET"),
            "redirect_uri": _env("KINDE_REDIRECT_URI"),
            "authorize_url": f"{issuer}/oauth2/auth",
            "token_url": f"{issuer}/oauth2/token",
            "userinfo_url": f"{issuer}/oauth2/v2/user_profile",
        }
    return {
        "client_id": _env("GOOGLE_CLIENT_ID"),
        "client_secret": _env("GOOGLE_CLIENT_SECRET"),
        "redirect_uri": _env("GOOGLE_REDIRECT_URI"),
        "authorize_url": "https://accounts.google.com/o/oauth2/v2/auth",
        "token_url": "https://oauth2.googleapis.com/token",
        "userinfo_url": "https://openidconnect.googleapis.com/v1/userinfo",
    }


def get_provider_keys(provider: str) -> dict:
    return _provider_config(provider)


# -------------------------
# OAuth 인가 URL 생성
# -------------------------
def generate_authorize_url(provider: str, request) -> str:
    cfg = _provider_config(provider)
    callback_url = request.build_absolute_uri(
        reverse("accounts_auth:social-callback", kwargs={"provider": provider})
    )
    params = {
        "client_id": cfg["client_id"],
        "redirect_uri": cfg.get("redirect_uri") or callback_url,
        "response_type": "code",
        "scope": "openid email profile",
        # state 파라미터 (CSRF 보호)
        "state": secrets.token_urlsafe(32),
    }
    if provider == "google":
        params["access_type"] = "offline"
        params["prompt"] = "consent"
    return f"{cfg['authorize_url']}?{urllib.parse.urlencode(params)}"


def _json_or_raw(resp) -> dict:
    try:
        return resp.json()
    except ValueError:
        return {"_raw": resp.text}


# -------------------------
# 코드 → 토큰 교환
# -------------------------
def exchange_code_for_tokens(provider: str, code: str, redirect_uri: str = "") -> dict:
    cfg = _provider_config(provider)
    data = {
        "grant_type": "authorization_code",
        "code": code,
        "client_id": cfg["client_id"],
        "client_secret": cfg["client_secret"],
        "redirect_uri": redirect_uri or cfg["redirect_uri"],
    }
    try:
        resp = requests.post(cfg["token_url"], data=data, timeout=TIMEOUT)
    except requests.RequestException as e:
        raise SocialAuthError(f"{provider} token request failed: {e}") from e

    body = _json_or_raw(resp)
    if resp.status_code != 200 or "access_token" not in body:
        logger.warning(
            "%s token error: status=%s body=%s", provider, resp.status_code, body
        )
        # 가능한 한 원인 문구를 돌려보냄
        msg = body.get("error_description") or body.get("error") or body
        raise SocialAuthError(str(msg))
    return body


# -------------------------
# 유저 프로필 조회 → 표준화
# 반환: {"provider", "provider_uid", "email", "name", "picture"}
# -------------------------
def fetch_userinfo(provider: str, access_token: str) -> dict:
    cfg = _provider_config(provider)
    headers = {"Authorization": f"Bearer {access_token}"}
    try:
        r = requests.get(cfg["userinfo_url"], headers=headers, timeout=TIMEOUT)
    except requests.RequestException as e:
        raise SocialAuthError(f"{provider} userinfo request failed: {e}") from e

    data = _json_or_raw(r)
    subject = data.get("sub") or data.get("id")
    if r.status_code != 200 or not subject:
        logger.warning("%s userinfo error: status=%s body=%s", provider, r.status_code, data)
        raise SocialAuthError(f"{provider} userinfo error: {data}")

    return {
        "provider": provider,
        "provider_uid": str(subject),
        "email": data.get("email"),
        "name": data.get("given_name") or data.get("name"),
        "picture": data.get("picture"),
    }
