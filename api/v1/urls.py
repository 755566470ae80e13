# api/v1/urls.py
from django.urls import include, path

urlpatterns = [
    # --- Auth ---
    path("auth/", include(("domains.accounts.urls_auth", "accounts_auth"))),
    # --- Users ---
    path("users/", include(("domains.accounts.urls_users", "accounts_users"))),
    # --- Reviews ---
    path("reviews/", include(("domains.reviews.urls", "reviews"))),
]
