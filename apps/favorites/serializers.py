"""Serializers for the favorites domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Favorite


class PropertyShortSerializer(serializers.Serializer):
    """Listing summary shown in the favorites list."""

    id = serializers.IntegerField()
    title = serializers.CharField()
    city = serializers.CharField()
    property_type = serializers.CharField()
    base_price = serializers.DecimalField(max_digits=10, decimal_places=2)
    available_rooms = serializers.IntegerField()
    is_rented = serializers.BooleanField()


class FavoriteSerializer(serializers.ModelSerializer):
    property_id = serializers.ReadOnlyField(source='property.id')
    property = PropertyShortSerializer(read_only=True)

    class Meta:
        model = Favorite
        fields = ['id', 'property_id', 'property', 'created_at']
