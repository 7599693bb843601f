from django.contrib import admin

from mp_core.notes.models import Note


@admin.register(Note)
class NoteAdmin(admin.ModelAdmin):
    list_display = ("note_title", "patient", "note_type", "is_important", "view_count", "last_modified")
    list_filter = ("note_type", "is_important")
    search_fields = ("note_title", "note_text", "patient__full_name")
    readonly_fields = ("id", "view_count", "last_modified", "modified_by", "created_at", "updated_at")
