# domains/reviews/admin.py
from django.contrib import admin

from .models import Review


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ("review_id", "user", "location", "rating", "anonymous", "created_at")
    list_filter = ("rating", "anonymous")
    search_fields = ("location", "content", "user__email")
    raw_id_fields = ("user",)
    readonly_fields = ("created_at", "updated_at")
    ordering = ("-created_at",)
