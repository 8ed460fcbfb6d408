"""Serializers for the properties domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.users.serializers import UserShortSerializer

from .models import Property


class PropertySerializer(serializers.ModelSerializer):
    """Listing representation. Inventory fields are always read-only."""

    owner = UserShortSerializer(read_only=True)

    class Meta:
        model = Property
        fields = [
            "id",
            "owner",
            "title",
            "description",
            "property_type",
            "city",
            "address_line",
            "base_price",
            "bill_type",
            "total_rooms",
            "available_rooms",
            "available_from",
            "is_active",
            "is_verified",
            "is_rented",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "id",
            "owner",
            "available_rooms",
            "is_verified",
            "is_rented",
            "created_at",
            "updated_at",
        ]

    def validate_total_rooms(self, value: int) -> int:
        if self.instance is not None and value != self.instance.total_rooms:
            raise serializers.ValidationError("Total rooms cannot be changed once the property is listed.")
        return value

    def update(self, instance: Property, validated_data):  # type: ignore
        """Write only the submitted columns; room counters belong to the inventory ledger."""
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        instance.save(update_fields=[*validated_data, "updated_at"])
        return instance


class PropertyVerificationSerializer(serializers.Serializer):
    is_verified = serializers.BooleanField()
