from django.contrib import admin

from evidence.models import CaseDocument, Evidence

from .models import LegalCase


class CaseDocumentInline(admin.TabularInline):
    model = CaseDocument
    extra = 0


class EvidenceInline(admin.TabularInline):
    model = Evidence
    extra = 0


@admin.register(LegalCase)
class LegalCaseAdmin(admin.ModelAdmin):
    list_display = ("id", "case_number", "title", "priority", "owner",
                    "status", "is_active", "created_at")
    list_filter = ("status", "priority", "is_active")
    search_fields = ("case_number", "title", "description")
    readonly_fields = ("moderator", "created_at", "updated_at")
    inlines = [CaseDocumentInline, EvidenceInline]
