"""Favorites app package.

Bookmarks users keep on property listings. Toggled from the property
endpoint and listed under ``/api/v1/favorites/``.
"""
