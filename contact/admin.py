"""
Contact Registration Django Admin Configuration
"""
from django.contrib import admin
from .models import ContactRecord


@admin.register(ContactRecord)
class ContactRecordAdmin(admin.ModelAdmin):
    """Read-only admin interface for contact records."""

    list_display = [
        'id', 'external_id', 'name', 'email', 'phone', 'created_at'
    ]

    list_filter = [
        'created_at'
    ]

    search_fields = [
        'external_id', 'name', 'email', 'phone'
    ]

    readonly_fields = [
        'id', 'external_id', 'name', 'email', 'phone', 'created_at'
    ]

    date_hierarchy = 'created_at'
    ordering = ['-created_at']

    # Records are written by the API only
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
