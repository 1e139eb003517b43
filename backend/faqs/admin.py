from django.contrib import admin

from .models import FAQ


@admin.register(FAQ)
class FAQAdmin(admin.ModelAdmin):
    list_display = ("id", "title", "category", "status", "is_pinned",
                    "views", "helpful", "updated_at")
    list_filter = ("status", "is_active", "category", "is_pinned")
    search_fields = ("title", "content", "tags")
    readonly_fields = ("views", "helpful", "moderator", "created_at", "updated_at")
