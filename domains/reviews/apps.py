from django.apps import AppConfig
from django.db.backends.signals import connection_created


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def use_unicode_lower(sender, connection, **kwargs):
    """
    SQLite 내장 LOWER() 는 ASCII 만 바꾼다 ("QUÉBEC" → "quÉbec").
    필터의 Lower() 별칭이 파이썬 str.lower() 와 같은 결과를 내도록 교체한다.
    """
    if connection.vendor == "sqlite":
        connection.connection.create_function("lower", 1, _unicode_lower, deterministic=True)


class ReviewsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "domains.reviews"
    label = "reviews"

    def ready(self):
        connection_created.connect(use_unicode_lower, dispatch_uid="reviews_unicode_lower")
