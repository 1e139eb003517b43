from django.contrib import admin

from .models import Checklist, ChecklistItem


class ChecklistItemInline(admin.TabularInline):
    model = ChecklistItem
    extra = 0


@admin.register(Checklist)
class ChecklistAdmin(admin.ModelAdmin):
    list_display = ("id", "title", "owner", "is_completed", "created_at")
    list_filter = ("is_completed",)
    search_fields = ("title", "description")
    inlines = [ChecklistItemInline]
