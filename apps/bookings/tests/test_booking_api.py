"""Integration tests for booking API endpoints."""

from __future__ import annotations

from datetime import date
from unittest import mock

from django.core import mail
from django.core.files.uploadedfile import SimpleUploadedFile
from django.db import DatabaseError
from django.test import override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.domain.entities import BookingStatus, BookingType, MoveInStatus
from apps.bookings.domain.inventory import InventoryLedger
from apps.bookings.models import Booking
from apps.notifications.models import Notification
from apps.properties.models import Property
from apps.users.models import User

from apps.bookings.tests.factories import make_booking, make_property, make_user


class BookingAPITestCase(APITestCase):
    def setUp(self) -> None:
        self.owner = make_user("owner")
        self.tenant = make_user("tenant")
        self.property = make_property(self.owner, total_rooms=2)
        self.list_url = reverse("bookings:booking-list")

    def _payload(self, **overrides) -> dict:
        payload = {
            "property_id": self.property.pk,
            "start_date": "2024-06-01",
            "end_date": "2024-06-30",
            "booking_type": BookingType.FIXED_TERM,
            "room_count": 1,
        }
        payload.update(overrides)
        return payload

    def _create(self, user: User | None = None, **overrides):
        self.client.force_authenticate(user or self.tenant)
        return self.client.post(self.list_url, self._payload(**overrides), format="json")

    def _patch(self, user: User, booking: Booking, action: str, data, fmt: str = "json"):
        self.client.force_authenticate(user)
        return self.client.patch(reverse(f"bookings:booking-{action}", args=[booking.pk]), data, format=fmt)

    def _available_rooms(self) -> int:
        self.property.refresh_from_db()
        return self.property.available_rooms


class CreateBookingTests(BookingAPITestCase):
    def test_tenant_can_create_booking(self) -> None:
        response = self._create()

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertTrue(response.data["success"])
        data = response.data["data"]
        self.assertEqual(data["status"], BookingStatus.PENDING)
        self.assertEqual(data["tenant"]["id"], self.tenant.pk)
        self.assertEqual(data["owner"]["id"], self.owner.pk)
        self.assertEqual(data["move_in_details"]["status"], MoveInStatus.SCHEDULED)
        self.assertEqual(data["move_in_details"]["scheduled_date"], "2024-06-01")
        self.assertIsNone(data["cancellation_details"])

        booking = Booking.objects.get()
        self.assertTrue(booking.rooms_reserved)
        self.assertEqual(self._available_rooms(), 1)

    def test_overlapping_request_beyond_total_rooms_is_rejected(self) -> None:
        first = self._create()
        self.assertEqual(first.status_code, status.HTTP_201_CREATED, first.data)

        second = self._create(user=make_user("tenant"), room_count=2)
        # only one room left, so the running counter refuses first
        self.assertEqual(second.status_code, status.HTTP_409_CONFLICT, second.data)
        self.assertEqual(second.data["code"], "insufficient_inventory")
        self.assertEqual(self._available_rooms(), 1)
        self.assertEqual(Booking.objects.count(), 1)

    def test_capacity_check_counts_overlapping_bookings(self) -> None:
        # rooms were handed back outside the ledger, overlap sum still blocks
        make_booking(self.property, make_user("tenant"), room_count=2)

        response = self._create()

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT, response.data)
        self.assertEqual(response.data["code"], "capacity_exceeded")
        self.assertEqual(self._available_rooms(), 2)

    def test_non_overlapping_dates_do_not_count(self) -> None:
        make_booking(
            self.property,
            make_user("tenant"),
            room_count=2,
            start_date=date(2024, 1, 1),
            end_date=date(2024, 1, 31),
        )

        response = self._create()
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)

    def test_cancelled_bookings_do_not_count(self) -> None:
        make_booking(self.property, make_user("tenant"), room_count=2, status=BookingStatus.CANCELLED)

        response = self._create(room_count=2)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.property.refresh_from_db()
        self.assertTrue(self.property.is_rented)

    def test_open_ended_month_to_month_blocks_later_requests(self) -> None:
        make_booking(
            self.property,
            make_user("tenant"),
            room_count=2,
            booking_type=BookingType.MONTH_TO_MONTH,
            start_date=date(2024, 3, 1),
            end_date=None,
        )

        response = self._create(start_date="2024-09-01", end_date="2024-09-30")
        self.assertEqual(response.data["code"], "capacity_exceeded")

    def test_unverified_property_is_unavailable(self) -> None:
        Property.objects.filter(pk=self.property.pk).update(is_verified=False)

        response = self._create()
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["code"], "property_unavailable")

    def test_start_before_available_from(self) -> None:
        response = self._create(start_date="2023-12-31")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["code"], "before_availability")

    def test_missing_property(self) -> None:
        response = self._create(property_id=999999)
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["code"], "not_found")

    def test_end_before_start_fails_validation(self) -> None:
        response = self._create(end_date="2024-05-01")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data["success"])
        self.assertIn("end_date", response.data["errors"])

    def test_anonymous_user_cannot_book(self) -> None:
        response = self.client.post(self.list_url, self._payload(), format="json")
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_rooms_run_out_after_exactly_k_bookings(self) -> None:
        self.property = make_property(self.owner, total_rooms=3)
        results = [self._create(user=make_user("tenant")) for _ in range(5)]

        created = [r for r in results if r.status_code == status.HTTP_201_CREATED]
        failed = [r for r in results if r.status_code == status.HTTP_409_CONFLICT]
        self.assertEqual(len(created), 3)
        self.assertEqual(len(failed), 2)
        for response in failed:
            self.assertIn(response.data["code"], {"insufficient_inventory", "capacity_exceeded"})
        self.property.refresh_from_db()
        self.assertEqual(self.property.available_rooms, 0)
        self.assertTrue(self.property.is_rented)

    def test_failure_inside_transaction_rolls_back_booking(self) -> None:
        with mock.patch.object(InventoryLedger, "reserve", side_effect=DatabaseError("disk full")):
            response = self._create()

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data["code"], "internal")
        self.assertFalse(Booking.objects.exists())
        self.assertEqual(self._available_rooms(), 2)

    def test_tenant_and_owner_are_notified_after_commit(self) -> None:
        with self.captureOnCommitCallbacks(execute=True):
            response = self._create()

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        recipients = sorted(message.to[0] for message in mail.outbox)
        self.assertEqual(recipients, sorted([self.tenant.email, self.owner.email]))
        self.assertTrue(Notification.objects.filter(user=self.owner, kind="NEW_BOOKING_NOTIFICATION").exists())
        self.assertTrue(Notification.objects.filter(user=self.tenant, kind="BOOKING_CONFIRMATION").exists())

    def test_notification_failure_does_not_undo_booking(self) -> None:
        failing = mock.Mock()
        failing.send.side_effect = ConnectionError("smtp down")
        with mock.patch("apps.notifications.handlers.get_notification_sender", return_value=failing):
            with self.captureOnCommitCallbacks(execute=True):
                response = self._create()

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(failing.send.call_count, 2)
        self.assertEqual(Booking.objects.count(), 1)
        self.assertEqual(self._available_rooms(), 1)


class BookingStatusTests(BookingAPITestCase):
    def _reserved_booking(self, **overrides) -> Booking:
        response = self._create(**overrides)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        return Booking.objects.get(pk=response.data["data"]["id"])

    def test_owner_confirms_with_move_in_date(self) -> None:
        booking = self._reserved_booking()

        with self.captureOnCommitCallbacks(execute=True):
            response = self._patch(
                self.owner, booking, "update-status", {"status": "confirmed", "scheduled_date": "2024-06-03"}
            )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        booking.refresh_from_db()
        self.assertEqual(booking.status, BookingStatus.CONFIRMED)
        self.assertEqual(booking.move_in_scheduled_date, date(2024, 6, 3))
        self.assertEqual([m.to[0] for m in mail.outbox], [self.tenant.email])
        self.assertIn("confirmed", mail.outbox[0].subject)

    def test_tenant_cannot_confirm_or_reject(self) -> None:
        booking = self._reserved_booking()

        for new_status in ("confirmed", "rejected"):
            response = self._patch(self.tenant, booking, "update-status", {"status": new_status})
            self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN, response.data)
            self.assertEqual(response.data["code"], "forbidden")

        booking.refresh_from_db()
        self.assertEqual(booking.status, BookingStatus.PENDING)

    def test_stranger_cannot_touch_booking(self) -> None:
        booking = self._reserved_booking()

        response = self._patch(make_user("stranger"), booking, "update-status", {"status": "cancelled"})
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(self._available_rooms(), 1)

    def test_admin_can_reject(self) -> None:
        booking = self._reserved_booking()
        admin = make_user("admin", role=User.RoleChoices.ADMIN)

        response = self._patch(admin, booking, "update-status", {"status": "rejected", "reason": "Duplicate"})

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        details = response.data["data"]["cancellation_details"]
        self.assertEqual(details["cancelled_by"], admin.pk)
        self.assertEqual(details["reason"], "Duplicate")
        self.assertEqual(self._available_rooms(), 2)

    def test_cancel_releases_every_reserved_room(self) -> None:
        booking = self._reserved_booking(room_count=2)
        self.property.refresh_from_db()
        self.assertEqual(self.property.available_rooms, 0)
        self.assertTrue(self.property.is_rented)

        response = self._patch(self.tenant, booking, "update-status", {"status": "cancelled"})

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.property.refresh_from_db()
        self.assertEqual(self.property.available_rooms, 2)
        self.assertFalse(self.property.is_rented)
        booking.refresh_from_db()
        self.assertEqual(booking.cancellation_reason, "No reason provided")
        self.assertEqual(booking.cancelled_by, self.tenant)
        self.assertIsNotNone(booking.cancelled_at)
        self.assertFalse(booking.rooms_reserved)

    def test_cancel_by_tenant_notifies_owner(self) -> None:
        booking = self._reserved_booking()

        with self.captureOnCommitCallbacks(execute=True):
            self._patch(self.tenant, booking, "update-status", {"status": "cancelled"})

        self.assertEqual([m.to[0] for m in mail.outbox], [self.owner.email])

    def test_cancel_by_owner_notifies_tenant(self) -> None:
        booking = self._reserved_booking()

        with self.captureOnCommitCallbacks(execute=True):
            self._patch(self.owner, booking, "update-status", {"status": "cancelled", "reason": "Repairs"})

        self.assertEqual([m.to[0] for m in mail.outbox], [self.tenant.email])
        self.assertIn("Repairs", mail.outbox[0].body)

    def test_terminal_booking_cannot_move_and_keeps_inventory(self) -> None:
        booking = self._reserved_booking()
        self._patch(self.owner, booking, "update-status", {"status": "rejected"})
        rooms_after_reject = self._available_rooms()

        for new_status in ("confirmed", "cancelled", "completed", "rejected"):
            response = self._patch(self.owner, booking, "update-status", {"status": new_status})
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
            self.assertEqual(response.data["code"], "invalid_transition")

        self.assertEqual(self._available_rooms(), rooms_after_reject)

    def test_pending_cannot_complete(self) -> None:
        booking = self._reserved_booking()

        response = self._patch(self.owner, booking, "update-status", {"status": "completed"})
        self.assertEqual(response.data["code"], "invalid_transition")

    def test_pending_is_not_a_valid_target(self) -> None:
        booking = self._reserved_booking()

        response = self._patch(self.owner, booking, "update-status", {"status": "pending"})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("status", response.data["errors"])

    def test_missing_booking(self) -> None:
        self.client.force_authenticate(self.owner)
        response = self.client.patch(
            reverse("bookings:booking-update-status", args=[424242]), {"status": "cancelled"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class MoveInTests(BookingAPITestCase):
    def setUp(self) -> None:
        super().setUp()
        self.booking = make_booking(self.property, self.tenant, status=BookingStatus.CONFIRMED)

    def test_tenant_reschedules_move_in_and_owner_is_told(self) -> None:
        with self.captureOnCommitCallbacks(execute=True):
            response = self._patch(
                self.tenant, self.booking, "move-in", {"scheduled_date": "2024-06-05", "notes": "Arriving late"}
            )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        details = response.data["data"]["move_in_details"]
        self.assertEqual(details["scheduled_date"], "2024-06-05")
        self.assertEqual(details["notes"], "Arriving late")
        self.assertEqual(details["updated_by"], self.tenant.pk)
        self.assertEqual([m.to[0] for m in mail.outbox], [self.owner.email])
        self.assertIn("Move-in details updated", mail.outbox[0].body)

    def test_completed_move_in_completes_booking(self) -> None:
        with self.captureOnCommitCallbacks(execute=True):
            response = self._patch(self.owner, self.booking, "move-in", {"status": "completed"})

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.booking.refresh_from_db()
        self.assertEqual(self.booking.status, BookingStatus.COMPLETED)
        self.assertEqual(self.booking.move_in_status, MoveInStatus.COMPLETED)
        subjects = [m.subject for m in mail.outbox if m.to == [self.tenant.email]]
        self.assertTrue(any("Welcome" in subject for subject in subjects))

        again = self._patch(self.owner, self.booking, "move-in", {"notes": "Keys returned"})
        self.assertEqual(again.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(again.data["code"], "invalid_state")

    def test_pending_booking_has_no_move_in_updates(self) -> None:
        pending = make_booking(self.property, self.tenant)

        response = self._patch(self.tenant, pending, "move-in", {"notes": "Hi"})
        self.assertEqual(response.data["code"], "invalid_state")

    def test_empty_update_is_noop(self) -> None:
        response = self._patch(self.tenant, self.booking, "move-in", {})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["code"], "no_op")

    def test_stranger_is_forbidden(self) -> None:
        response = self._patch(make_user("stranger"), self.booking, "move-in", {"notes": "Hi"})
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class ContractTests(BookingAPITestCase):
    def setUp(self) -> None:
        super().setUp()
        self.booking = make_booking(self.property, self.tenant, status=BookingStatus.CONFIRMED)

    def _document(self) -> SimpleUploadedFile:
        return SimpleUploadedFile("lease.pdf", b"%PDF-1.4 lease", content_type="application/pdf")

    def test_tenant_cannot_sign_without_document(self) -> None:
        response = self._patch(self.tenant, self.booking, "contract", {"signed_by_tenant": True})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["code"], "missing_document")

    def test_owner_uploads_and_signs_in_one_call(self) -> None:
        with self.captureOnCommitCallbacks(execute=True):
            response = self._patch(
                self.owner,
                self.booking,
                "contract",
                {"contract_document": self._document(), "signed_by_owner": "true"},
                fmt="multipart",
            )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        contract = response.data["data"]["contract_details"]
        self.assertIn("contracts/contract-", contract["document_url"])
        self.assertTrue(contract["document_url"].endswith(".pdf"))
        self.assertTrue(contract["signed_by_owner"])
        self.assertFalse(contract["signed_by_tenant"])
        self.assertIsNone(contract["signed_at"])
        self.assertEqual([m.to[0] for m in mail.outbox], [self.tenant.email])
        self.assertIn("Contract", mail.outbox[0].subject)

    def test_both_signatures_stamp_signed_at_and_notify_both(self) -> None:
        Booking.objects.filter(pk=self.booking.pk).update(
            contract_document_url="https://files.example.com/lease.pdf",
            contract_signed_by_owner=True,
        )

        with self.captureOnCommitCallbacks(execute=True):
            response = self._patch(self.tenant, self.booking, "contract", {"signed_by_tenant": True})

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertIsNotNone(response.data["data"]["contract_details"]["signed_at"])
        recipients = sorted(m.to[0] for m in mail.outbox)
        self.assertEqual(recipients, sorted([self.tenant.email, self.owner.email]))
        for message in mail.outbox:
            self.assertIn("Contract signed by both parties", message.body)

    def test_signing_again_does_not_restamp(self) -> None:
        Booking.objects.filter(pk=self.booking.pk).update(
            contract_document_url="https://files.example.com/lease.pdf",
            contract_signed_by_owner=True,
            contract_signed_by_tenant=True,
        )

        with self.captureOnCommitCallbacks(execute=True):
            response = self._patch(self.tenant, self.booking, "contract", {"signed_by_tenant": True})

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertIsNone(response.data["data"]["contract_details"]["signed_at"])
        self.assertEqual(len(mail.outbox), 0)

    def test_tenant_cannot_upload_document(self) -> None:
        response = self._patch(
            self.tenant, self.booking, "contract", {"document_url": "https://files.example.com/lease.pdf"}
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_owner_cannot_sign_for_tenant(self) -> None:
        Booking.objects.filter(pk=self.booking.pk).update(
            contract_document_url="https://files.example.com/lease.pdf"
        )
        response = self._patch(self.owner, self.booking, "contract", {"signed_by_tenant": True})
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_false_flags_only_is_noop(self) -> None:
        response = self._patch(self.owner, self.booking, "contract", {"signed_by_owner": False})
        self.assertEqual(response.data["code"], "no_op")

    def test_contract_requires_confirmed_booking(self) -> None:
        pending = make_booking(self.property, self.tenant)
        response = self._patch(
            self.owner, pending, "contract", {"document_url": "https://files.example.com/lease.pdf"}
        )
        self.assertEqual(response.data["code"], "invalid_state")

    @override_settings(CONTRACT_UPLOAD_MAX_SIZE=4)
    def test_oversized_upload_is_rejected(self) -> None:
        response = self._patch(
            self.owner, self.booking, "contract", {"contract_document": self._document()}, fmt="multipart"
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.booking.refresh_from_db()
        self.assertEqual(self.booking.contract_document_url, "")

    def test_storage_failure_is_internal_and_writes_nothing(self) -> None:
        with mock.patch(
            "django.core.files.storage.InMemoryStorage.save", side_effect=OSError("bucket gone")
        ):
            response = self._patch(
                self.owner,
                self.booking,
                "contract",
                {"contract_document": self._document(), "signed_by_owner": "true"},
                fmt="multipart",
            )

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.booking.refresh_from_db()
        self.assertFalse(self.booking.contract_signed_by_owner)


class BookingQueryTests(BookingAPITestCase):
    def setUp(self) -> None:
        super().setUp()
        self.pending = make_booking(self.property, self.tenant)
        self.confirmed = make_booking(self.property, self.tenant, status=BookingStatus.CONFIRMED)
        self.other = make_booking(self.property, make_user("tenant"), status=BookingStatus.CANCELLED)

    def test_tenant_lists_own_bookings_newest_first(self) -> None:
        self.client.force_authenticate(self.tenant)
        response = self.client.get(reverse("bookings:booking-user-bookings"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["count"], 2)
        self.assertEqual([b["id"] for b in response.data["data"]], [self.confirmed.pk, self.pending.pk])

    def test_status_filter_and_unknown_status(self) -> None:
        self.client.force_authenticate(self.tenant)
        url = reverse("bookings:booking-user-bookings")

        confirmed = self.client.get(url, {"status": "confirmed"})
        self.assertEqual([b["id"] for b in confirmed.data["data"]], [self.confirmed.pk])

        unknown = self.client.get(url, {"status": "teleported"})
        self.assertEqual(unknown.data["count"], 2)

    def test_owner_lists_property_bookings(self) -> None:
        self.client.force_authenticate(self.owner)
        url = reverse("bookings:booking-property-bookings", kwargs={"property_id": self.property.pk})

        response = self.client.get(url)
        self.assertEqual(response.data["count"], 3)

        cancelled = self.client.get(url, {"status": "cancelled"})
        self.assertEqual([b["id"] for b in cancelled.data["data"]], [self.other.pk])

    def test_tenant_cannot_list_property_bookings(self) -> None:
        self.client.force_authenticate(self.tenant)
        url = reverse("bookings:booking-property-bookings", kwargs={"property_id": self.property.pk})

        response = self.client.get(url)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_property_listing_for_missing_property(self) -> None:
        self.client.force_authenticate(self.owner)
        url = reverse("bookings:booking-property-bookings", kwargs={"property_id": 987654})

        response = self.client.get(url)
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_get_booking_by_id_permissions(self) -> None:
        url = reverse("bookings:booking-detail", args=[self.pending.pk])

        for user in (self.tenant, self.owner, make_user("admin", role=User.RoleChoices.ADMIN)):
            self.client.force_authenticate(user)
            response = self.client.get(url)
            self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
            self.assertEqual(response.data["data"]["id"], self.pending.pk)

        self.client.force_authenticate(make_user("stranger"))
        self.assertEqual(self.client.get(url).status_code, status.HTTP_403_FORBIDDEN)

        missing = self.client.get(reverse("bookings:booking-detail", args=[555555]))
        self.assertEqual(missing.status_code, status.HTTP_404_NOT_FOUND)
