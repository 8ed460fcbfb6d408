"""FilterSet definitions for booking listings."""

from __future__ import annotations

import django_filters  # type: ignore

from .domain.entities import BookingStatus
from .models import Booking


class BookingStatusFilterSet(django_filters.FilterSet):
    """
    Optional ``status`` filter shared by the tenant and property listings

    Unknown status values are ignored rather than rejected.
    """

    status = django_filters.CharFilter(method="filter_status")

    class Meta:
        model = Booking
        fields = ["status"]

    def filter_status(self, queryset, name, value):  # type: ignore
        if value not in BookingStatus.values:
            return queryset
        return queryset.filter(status=value)
