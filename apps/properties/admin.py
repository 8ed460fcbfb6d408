"""Admin registrations for properties domain."""

from __future__ import annotations

from django.contrib import admin  # type: ignore

from .models import Property


@admin.register(Property)
class PropertyAdmin(admin.ModelAdmin):
    list_display = (
        "title",
        "city",
        "property_type",
        "total_rooms",
        "available_rooms",
        "is_active",
        "is_verified",
        "is_rented",
        "owner",
    )
    list_filter = ("is_active", "is_verified", "is_rented", "property_type", "city")
    search_fields = ("title", "city", "owner__email")
    readonly_fields = ("available_rooms", "is_rented", "created_at", "updated_at")

    def save_model(self, request, obj, form, change):  # type: ignore
        if change:
            # room counters move under the inventory ledger while the form is open
            obj.save(update_fields=[*form.changed_data, "updated_at"])
        else:
            super().save_model(request, obj, form, change)
