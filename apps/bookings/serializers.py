"""Serializers for the booking domain."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from rest_framework import serializers  # type: ignore

from apps.users.serializers import UserShortSerializer

from .domain.entities import RELEASING_STATUSES, BookingStatus, BookingType, MoveInStatus
from .models import Booking

STATUS_UPDATE_CHOICES = [
    BookingStatus.CONFIRMED,
    BookingStatus.CANCELLED,
    BookingStatus.COMPLETED,
    BookingStatus.REJECTED,
]


class BookingCreateSerializer(serializers.Serializer):
    """Booking request made by a tenant."""

    property_id = serializers.IntegerField(min_value=1)
    start_date = serializers.DateField()
    end_date = serializers.DateField(required=False, allow_null=True)
    booking_type = serializers.ChoiceField(choices=BookingType.choices)
    room_count = serializers.IntegerField(min_value=1, default=1)

    def validate(self, attrs):  # type: ignore
        end_date = attrs.get("end_date")
        if end_date is not None and end_date < attrs["start_date"]:
            raise serializers.ValidationError({"end_date": "End date cannot be before start date."})
        return attrs


class BookingStatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=STATUS_UPDATE_CHOICES)
    reason = serializers.CharField(required=False, allow_blank=True, max_length=255)
    scheduled_date = serializers.DateField(required=False, allow_null=True)


class MoveInUpdateSerializer(serializers.Serializer):
    scheduled_date = serializers.DateField(required=False)
    status = serializers.ChoiceField(choices=MoveInStatus.choices, required=False)
    notes = serializers.CharField(required=False, allow_blank=True, max_length=500)


class ContractUpdateSerializer(serializers.Serializer):
    """Accepts JSON or multipart; the uploaded file goes in ``contract_document``."""

    contract_document = serializers.FileField(required=False)
    document_url = serializers.URLField(required=False, max_length=500)
    signed_by_tenant = serializers.BooleanField(required=False)
    signed_by_owner = serializers.BooleanField(required=False)

    def validate_contract_document(self, value):  # type: ignore
        max_size = settings.CONTRACT_UPLOAD_MAX_SIZE
        if value.size > max_size:
            raise serializers.ValidationError(
                f"File is too large. Maximum {max_size / 1024 / 1024:.1f} MB"
            )
        return value


class BookingPropertySerializer(serializers.Serializer):
    id = serializers.IntegerField()
    title = serializers.CharField()
    city = serializers.CharField()
    address_line = serializers.CharField()


class MoveInDetailsSerializer(serializers.Serializer):
    scheduled_date = serializers.DateField(source="move_in_scheduled_date")
    status = serializers.CharField(source="move_in_status")
    notes = serializers.CharField(source="move_in_notes")
    updated_by = serializers.IntegerField(source="move_in_updated_by_id", allow_null=True)


class BookingSerializer(serializers.ModelSerializer):
    """Full booking representation returned by every booking endpoint."""

    property = BookingPropertySerializer(read_only=True)
    tenant = UserShortSerializer(read_only=True)
    owner = UserShortSerializer(read_only=True)
    move_in_details = MoveInDetailsSerializer(source="*", read_only=True)
    cancellation_details = serializers.SerializerMethodField()
    contract_details = serializers.SerializerMethodField()

    class Meta:
        model = Booking
        fields = [
            "id",
            "property",
            "tenant",
            "owner",
            "start_date",
            "end_date",
            "booking_type",
            "room_count",
            "status",
            "move_in_details",
            "cancellation_details",
            "contract_details",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_cancellation_details(self, obj: Booking):  # type: ignore
        if obj.status not in RELEASING_STATUSES:
            return None
        return {
            "cancelled_by": obj.cancelled_by_id,
            "cancelled_at": obj.cancelled_at.isoformat() if obj.cancelled_at else None,
            "reason": obj.cancellation_reason,
        }

    def get_contract_details(self, obj: Booking):  # type: ignore
        if not (obj.contract_document_url or obj.contract_signed_by_tenant or obj.contract_signed_by_owner):
            return None
        return {
            "document_url": obj.contract_document_url or None,
            "signed_by_tenant": obj.contract_signed_by_tenant,
            "signed_by_owner": obj.contract_signed_by_owner,
            "signed_at": obj.contract_signed_at.isoformat() if obj.contract_signed_at else None,
        }
