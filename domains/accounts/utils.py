from django.conf import settings

REFRESH_COOKIE = "refresh"
REFRESH_COOKIE_PATH = "/api/v1/auth/"


def refresh_cookie_kwargs(debug: bool = False) -> dict:
    """
    리프레시 쿠키 속성 통일:
    - Path: /api/v1/auth/ (refresh/logout 에만 전송)
    - SameSite: settings.AUTH_COOKIE_SAMESITE / 없으면 "Lax"
    - Secure: settings.AUTH_COOKIE_SECURE / 없으면 not debug
    - Domain: (선택) settings.AUTH_COOKIE_DOMAIN, 없으면 host-only
    - Max-Age: settings.AUTH_COOKIE_MAX_AGE(초) / 없으면 14일
    """
    return dict(
        httponly=True,
        secure=getattr(settings, "AUTH_COOKIE_SECURE", not debug),
        samesite=getattr(settings, "AUTH_COOKIE_SAMESITE", "Lax"),
        path=REFRESH_COOKIE_PATH,
        domain=getattr(settings, "AUTH_COOKIE_DOMAIN", None),
        max_age=getattr(settings, "AUTH_COOKIE_MAX_AGE", 14 * 24 * 3600),
    )
