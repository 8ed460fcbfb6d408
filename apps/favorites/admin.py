"""Admin registration for favorites."""

from __future__ import annotations

from django.contrib import admin  # type: ignore

from .models import Favorite


@admin.register(Favorite)
class FavoriteAdmin(admin.ModelAdmin):
    list_display = ("user", "property", "created_at")
    search_fields = ("user__email", "property__title")
