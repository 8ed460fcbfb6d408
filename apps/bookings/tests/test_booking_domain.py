"""Unit tests for booking rules that need no database."""

from __future__ import annotations

from datetime import date
from types import SimpleNamespace

import pytest

from apps.bookings.domain.availability import ensure_capacity, overlapping_bookings_q, overlaps
from apps.bookings.domain.entities import (
    ALLOWED_TRANSITIONS,
    BookingParties,
    BookingStatus,
    BookingType,
    can_transition,
    ensure_transition,
)
from apps.bookings.domain.exceptions import CapacityExceeded, InvalidTransition
from shared.domain.value_objects import DateRange


JUNE = DateRange(date(2024, 6, 1), date(2024, 6, 30))


@pytest.mark.parametrize(
    "current,new",
    [
        (BookingStatus.PENDING, BookingStatus.CONFIRMED),
        (BookingStatus.PENDING, BookingStatus.CANCELLED),
        (BookingStatus.PENDING, BookingStatus.REJECTED),
        (BookingStatus.CONFIRMED, BookingStatus.COMPLETED),
        (BookingStatus.CONFIRMED, BookingStatus.CANCELLED),
    ],
)
def test_allowed_transitions(current, new):
    assert can_transition(current, new)
    ensure_transition(current, new)


def test_every_other_transition_is_rejected():
    allowed = {(current, new) for current, targets in ALLOWED_TRANSITIONS.items() for new in targets}
    for current in BookingStatus.values:
        for new in BookingStatus.values:
            if (current, new) in allowed:
                continue
            assert not can_transition(current, new)
            with pytest.raises(InvalidTransition):
                ensure_transition(current, new)


def test_terminal_states_have_no_way_out():
    for terminal in (BookingStatus.CANCELLED, BookingStatus.COMPLETED, BookingStatus.REJECTED):
        assert ALLOWED_TRANSITIONS[terminal] == frozenset()


def test_date_range_rejects_end_before_start():
    with pytest.raises(ValueError):
        DateRange(date(2024, 6, 2), date(2024, 6, 1))


def test_open_range_contains_nothing():
    open_range = DateRange(date(2024, 6, 1))
    assert open_range.is_open_ended
    assert not open_range.contains(date(2024, 6, 1))


@pytest.mark.parametrize(
    "requested,expected",
    [
        (DateRange(date(2024, 6, 15), date(2024, 7, 15)), True),   # start inside
        (DateRange(date(2024, 5, 15), date(2024, 6, 1)), True),    # end on existing start
        (DateRange(date(2024, 5, 1), date(2024, 7, 31)), True),    # encloses
        (DateRange(date(2024, 6, 30)), True),                      # open, starts on last day
        (DateRange(date(2024, 7, 1), date(2024, 7, 31)), False),   # after
        (DateRange(date(2024, 5, 1), date(2024, 5, 31)), False),   # before
        (DateRange(date(2024, 5, 1)), False),                      # open, starts before
    ],
)
def test_overlaps_bounded_booking(requested, expected):
    assert overlaps(requested, JUNE, BookingType.FIXED_TERM) is expected


def test_open_month_to_month_blocks_later_starts_only():
    existing = DateRange(date(2024, 6, 1))
    later = DateRange(date(2024, 9, 1), date(2024, 9, 30))
    earlier = DateRange(date(2024, 5, 1), date(2024, 5, 20))

    assert overlaps(later, existing, BookingType.MONTH_TO_MONTH)
    assert not overlaps(earlier, existing, BookingType.MONTH_TO_MONTH)
    # open-ended fixed-term rows are not matched by the open-ended rule
    assert not overlaps(later, existing, BookingType.FIXED_TERM)


def test_overlap_query_drops_end_rules_for_open_request():
    bounded = str(overlapping_bookings_q(JUNE))
    open_ended = str(overlapping_bookings_q(DateRange(date(2024, 6, 1))))

    assert bounded.count("start_date__lte") == 3
    assert open_ended.count("start_date__lte") == 2
    assert "end_date__isnull" in open_ended


def test_ensure_capacity():
    ensure_capacity(2, [1], 1)
    with pytest.raises(CapacityExceeded):
        ensure_capacity(2, [1], 2)
    with pytest.raises(CapacityExceeded):
        ensure_capacity(3, [1, 2], 1)


def test_booking_parties():
    admin = SimpleNamespace(pk=9, is_admin=lambda: True)
    tenant = SimpleNamespace(pk=1, is_admin=lambda: False)
    stranger = SimpleNamespace(pk=5, is_admin=lambda: False)

    assert BookingParties.resolve(admin, 1, 2).can_moderate
    tenant_parties = BookingParties.resolve(tenant, 1, 2)
    assert tenant_parties.is_party and not tenant_parties.can_moderate
    assert not BookingParties.resolve(stranger, 1, 2).is_party
