"""Bookings app package.

The booking lifecycle and the room inventory ledger. Bookings are
created pending, confirmed or rejected by the owner, and end cancelled,
rejected or completed. Every status change that affects rooms runs in
one transaction together with the property's inventory counter.
"""
