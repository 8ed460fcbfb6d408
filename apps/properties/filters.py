"""FilterSet definitions for property listing."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import Property


class PropertyFilterSet(django_filters.FilterSet):
    """Filters used by the public listing and the admin moderation list."""

    city = django_filters.CharFilter(field_name="city", lookup_expr="icontains")
    property_type = django_filters.ChoiceFilter(choices=Property.PropertyType.choices)
    price_min = django_filters.NumberFilter(field_name="base_price", lookup_expr="gte")
    price_max = django_filters.NumberFilter(field_name="base_price", lookup_expr="lte")
    rooms_min = django_filters.NumberFilter(field_name="available_rooms", lookup_expr="gte")
    available_by = django_filters.DateFilter(field_name="available_from", lookup_expr="lte")
    is_verified = django_filters.BooleanFilter(field_name="is_verified")

    class Meta:
        model = Property
        fields = ["city", "property_type", "is_verified"]
