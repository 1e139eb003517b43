from django.contrib import admin

from .models import Comment, ScamAlert


class CommentInline(admin.TabularInline):
    model = Comment
    extra = 0
    readonly_fields = ("owner", "status", "moderator", "created_at")


@admin.register(ScamAlert)
class ScamAlertAdmin(admin.ModelAdmin):
    list_display = ("id", "title", "severity", "owner", "status",
                    "is_active", "expires_at", "created_at")
    list_filter = ("status", "is_active", "severity")
    search_fields = ("title", "description")
    readonly_fields = ("moderator", "created_at", "updated_at")
    inlines = [CommentInline]


@admin.register(Comment)
class CommentAdmin(admin.ModelAdmin):
    list_display = ("id", "alert", "owner", "status", "is_active", "created_at")
    list_filter = ("status", "is_active")
    search_fields = ("content",)
