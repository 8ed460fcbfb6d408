"""API views for the booking domain.

Views validate request shape, build a command and dispatch it on the
message bus. All rule checks live in the command handlers; their errors
reach the client through the shared exception handler.
"""

from __future__ import annotations

from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore

from shared.application.message_bus import message_bus
from shared.infrastructure.api import success_response

from .application import queries
from .application.command_handlers import (
    CreateBookingCommand,
    UpdateBookingStatusCommand,
    UpdateContractDetailsCommand,
    UpdateMoveInDetailsCommand,
)
from .serializers import (
    BookingCreateSerializer,
    BookingSerializer,
    BookingStatusUpdateSerializer,
    ContractUpdateSerializer,
    MoveInUpdateSerializer,
)


class BookingViewSet(viewsets.ViewSet):
    """Create bookings and drive them through their lifecycle."""

    permission_classes = [permissions.IsAuthenticated]
    lookup_value_regex = r"\d+"

    def _render(self, booking) -> dict:
        return BookingSerializer(booking, context={"request": self.request}).data

    def _render_list(self, message: str, bookings):
        data = BookingSerializer(bookings, many=True, context={"request": self.request}).data
        return success_response(message, data, count=len(data))

    def create(self, request):  # type: ignore
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = message_bus.handle_command(
            CreateBookingCommand(actor_id=request.user.pk, **serializer.validated_data)
        )
        return success_response(
            "Booking created successfully",
            self._render(booking),
            status_code=status.HTTP_201_CREATED,
        )

    def retrieve(self, request, pk=None):  # type: ignore
        booking = queries.get_booking_by_id(request.user, pk)
        return success_response("Booking fetched successfully", self._render(booking))

    @action(detail=False, methods=["get"], url_path="user")
    def user_bookings(self, request):  # type: ignore
        bookings = queries.list_bookings_for_tenant(request.user, request.query_params.get("status"))
        return self._render_list("Bookings fetched successfully", bookings)

    @action(detail=False, methods=["get"], url_path=r"property/(?P<property_id>[^/.]+)")
    def property_bookings(self, request, property_id=None):  # type: ignore
        bookings = queries.list_bookings_for_property(
            request.user,
            property_id,
            request.query_params.get("status"),
        )
        return self._render_list("Property bookings fetched successfully", bookings)

    @action(detail=True, methods=["patch"], url_path="status")
    def update_status(self, request, pk=None):  # type: ignore
        serializer = BookingStatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        booking = message_bus.handle_command(
            UpdateBookingStatusCommand(
                actor_id=request.user.pk,
                booking_id=pk,
                new_status=data["status"],
                reason=data.get("reason"),
                scheduled_date=data.get("scheduled_date"),
            )
        )
        return success_response(f"Booking {booking.status} successfully", self._render(booking))

    @action(detail=True, methods=["patch"], url_path="move-in")
    def move_in(self, request, pk=None):  # type: ignore
        serializer = MoveInUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = message_bus.handle_command(
            UpdateMoveInDetailsCommand(
                actor_id=request.user.pk,
                booking_id=pk,
                **serializer.validated_data,
            )
        )
        return success_response("Move-in details updated successfully", self._render(booking))

    @action(detail=True, methods=["patch"], url_path="contract")
    def contract(self, request, pk=None):  # type: ignore
        serializer = ContractUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        booking = message_bus.handle_command(
            UpdateContractDetailsCommand(
                actor_id=request.user.pk,
                booking_id=pk,
                document=data.get("contract_document"),
                document_url=data.get("document_url"),
                signed_by_tenant=data.get("signed_by_tenant"),
                signed_by_owner=data.get("signed_by_owner"),
            )
        )
        return success_response("Contract details updated successfully", self._render(booking))
