"""Properties app package.

Property listings with a room inventory. Owners list and edit their
properties, administrators verify them, and the booking engine reserves
and releases rooms through the inventory ledger.
"""
