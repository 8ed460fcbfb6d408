"""Tests for the favorites list."""

from __future__ import annotations

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.favorites.models import Favorite
from apps.properties.models import Property

from apps.bookings.tests.factories import make_property, make_user


class FavoriteListTests(APITestCase):
    def setUp(self) -> None:
        self.owner = make_user("owner")
        self.tenant = make_user("tenant")
        self.property = make_property(self.owner, title="Sunny rooms")
        self.other = make_property(self.owner, title="Garden flat")
        self.url = reverse("favorites:favorite-list")

    def test_lists_only_own_favorites(self) -> None:
        Favorite.objects.create(user=self.tenant, property=self.property)
        Favorite.objects.create(user=make_user("stranger"), property=self.other)
        self.client.force_authenticate(self.tenant)

        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["count"], 1)
        self.assertEqual(response.data["data"][0]["property_id"], self.property.pk)
        self.assertEqual(response.data["data"][0]["property"]["title"], "Sunny rooms")

    def test_deactivated_listings_drop_out(self) -> None:
        Favorite.objects.create(user=self.tenant, property=self.property)
        Favorite.objects.create(user=self.tenant, property=self.other)
        Property.objects.filter(pk=self.other.pk).update(is_active=False)
        self.client.force_authenticate(self.tenant)

        response = self.client.get(self.url)

        self.assertEqual([row["property_id"] for row in response.data["data"]], [self.property.pk])
        self.assertEqual(Favorite.objects.filter(user=self.tenant).count(), 2)

    def test_toggle_through_property_shows_in_list(self) -> None:
        self.client.force_authenticate(self.tenant)
        self.client.post(reverse("properties:property-favorite", args=[self.other.pk]))

        response = self.client.get(self.url)

        self.assertEqual(response.data["count"], 1)
        self.assertEqual(response.data["data"][0]["property"]["available_rooms"], 2)

    def test_requires_authentication(self) -> None:
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
