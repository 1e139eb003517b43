from django.contrib import admin

from .models import ScamReport


@admin.register(ScamReport)
class ScamReportAdmin(admin.ModelAdmin):
    list_display = ("id", "title", "platform", "owner", "status",
                    "is_active", "created_at")
    list_filter = ("status", "is_active", "platform")
    search_fields = ("title", "description", "scammer_info")
    readonly_fields = ("moderator", "created_at", "updated_at")
