from django.contrib import admin

from .models import CaseDocument, Evidence


@admin.register(CaseDocument)
class CaseDocumentAdmin(admin.ModelAdmin):
    list_display = ("id", "file_name", "file_type", "file_size", "case",
                    "uploaded_by", "created_at")
    search_fields = ("file_name",)
    list_filter = ("file_type",)


@admin.register(Evidence)
class EvidenceAdmin(admin.ModelAdmin):
    list_display = ("id", "title", "case", "added_by", "created_at")
    search_fields = ("title", "description")
