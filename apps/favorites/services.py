"""Favorite toggling."""

from __future__ import annotations

import logging

from shared.domain.exceptions import NotFound

from .models import Favorite

logger = logging.getLogger(__name__)


def toggle_favorite(user, property_obj) -> bool:
    """
    Add the property to the user's favorites, or remove it if already there.

    Only bookable listings can be added; removing always works so a user
    can clear a listing that has since been hidden.

    Returns:
        True when the property is now a favorite
    """
    deleted, _ = Favorite.objects.filter(user=user, property=property_obj).delete()
    if deleted:
        logger.info(f"User {user.pk} removed property {property_obj.pk} from favorites")
        return False

    if not property_obj.is_bookable:
        raise NotFound("Property not found")

    Favorite.objects.get_or_create(user=user, property=property_obj)
    logger.info(f"User {user.pk} added property {property_obj.pk} to favorites")
    return True
