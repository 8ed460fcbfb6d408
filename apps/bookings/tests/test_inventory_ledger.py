"""Tests for the room inventory ledger."""

from __future__ import annotations

import pytest

from apps.bookings.domain.exceptions import InsufficientInventory
from apps.bookings.domain.inventory import InventoryLedger
from shared.domain.exceptions import Internal

from apps.bookings.tests.factories import make_booking, make_property, make_user


@pytest.fixture
def ledger():
    return InventoryLedger()


@pytest.fixture
def property_obj():
    return make_property(make_user("owner"), total_rooms=3)


@pytest.mark.django_db
def test_new_property_starts_with_every_room_free(property_obj):
    assert property_obj.available_rooms == 3
    assert not property_obj.is_rented


@pytest.mark.django_db
def test_reserve_decrements_and_marks_rented_at_zero(ledger, property_obj):
    ledger.reserve(property_obj.pk, 2)
    property_obj.refresh_from_db()
    assert property_obj.available_rooms == 1
    assert not property_obj.is_rented

    ledger.reserve(property_obj.pk, 1)
    property_obj.refresh_from_db()
    assert property_obj.available_rooms == 0
    assert property_obj.is_rented


@pytest.mark.django_db
def test_reserve_more_than_available_changes_nothing(ledger, property_obj):
    with pytest.raises(InsufficientInventory):
        ledger.reserve(property_obj.pk, 4)

    property_obj.refresh_from_db()
    assert property_obj.available_rooms == 3


@pytest.mark.django_db
def test_release_is_capped_at_total_rooms(ledger, property_obj):
    ledger.reserve(property_obj.pk, 3)
    ledger.release(property_obj.pk, 5)

    property_obj.refresh_from_db()
    assert property_obj.available_rooms == 3
    assert not property_obj.is_rented


@pytest.mark.django_db
def test_release_for_booking_is_idempotent(ledger, property_obj):
    booking = make_booking(property_obj, make_user("tenant"), room_count=2, rooms_reserved=True)
    ledger.reserve(property_obj.pk, 2)

    assert ledger.release_for(booking) is True
    assert ledger.release_for(booking) is False

    booking.refresh_from_db()
    property_obj.refresh_from_db()
    assert booking.rooms_reserved is False
    assert property_obj.available_rooms == 3


@pytest.mark.django_db(transaction=True)
def test_ledger_refuses_to_run_outside_a_transaction(ledger, property_obj):
    with pytest.raises(Internal):
        ledger.reserve(property_obj.pk, 1)

    property_obj.refresh_from_db()
    assert property_obj.available_rooms == 3
