from django.contrib import admin

from mp_core.exams.models import Exam


@admin.register(Exam)
class ExamAdmin(admin.ModelAdmin):
    list_display = ("exam_name", "patient", "exam_type", "exam_category", "exam_date", "status")
    list_filter = ("status", "exam_type", "exam_category")
    search_fields = ("exam_name", "patient__full_name")
    readonly_fields = ("id", "created_at", "updated_at")
    date_hierarchy = "exam_date"
