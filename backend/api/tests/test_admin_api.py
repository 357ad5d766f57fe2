from django.contrib.auth import get_user_model
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from accounts.models import Role
from market.models import Listing, ListingStatus, Location, Province
from notifications.models import NotificationKind

User = get_user_model()


class AdminListingApiTests(APITestCase):
    def setUp(self):
        self.owner = User.objects.create_user(username="owner", password="pass1234")
        self.moderator = User.objects.create_user(username="mod", password="pass1234", role=Role.MODERATOR)
        self.admin = User.objects.create_user(username="boss", password="pass1234", role=Role.ADMIN)

        province = Province.objects.create(code="AR-05", name="Córdoba")
        self.city = Location.objects.create(code="gn-3", name="Córdoba", province=province)

    def _listing(self, **extra):
        values = {"title": "Item", "age": "Usado", "price": 10, "phone": "351000000", "status": ListingStatus.UNDER_REVIEW}
        values.update(extra)
        return Listing.objects.create(owner=self.owner, location=self.city, **values)

    def test_moderator_approves_reported_listing(self):
        listing = self._listing(status=ListingStatus.BLOCKED, reports=7)
        self.client.force_authenticate(self.moderator)

        r = self.client.post(reverse("admin-listing-approve", kwargs={"pk": listing.id}))

        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(r.data["message"], "SUCCESS_LISTING_APPROVED")
        self.assertEqual(r.data["listing"]["status"], ListingStatus.PUBLISHED)
        self.assertEqual(r.data["listing"]["reports"], 7)

    def test_owner_cannot_approve(self):
        listing = self._listing()
        self.client.force_authenticate(self.owner)

        r = self.client.post(reverse("admin-listing-approve", kwargs={"pk": listing.id}))

        self.assertEqual(r.status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_sets_status(self):
        listing = self._listing()
        self.client.force_authenticate(self.admin)
        url = reverse("admin-listing-set-status", kwargs={"pk": listing.id})

        r = self.client.post(url, {"status": "blocked"}, format="json")
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(r.data["listing"]["status"], ListingStatus.BLOCKED)
        self.assertTrue(self.owner.notifications.filter(kind=NotificationKind.LISTING_BLOCKED).exists())

        r = self.client.post(url, {"status": "archived"}, format="json")
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(r.data["error"]["code"], "ERROR_INVALID_STATUS")

    def test_moderator_cannot_set_status(self):
        listing = self._listing()
        self.client.force_authenticate(self.moderator)

        r = self.client.post(reverse("admin-listing-set-status", kwargs={"pk": listing.id}), {"status": "paused"}, format="json")

        self.assertEqual(r.status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_search_and_soft_delete(self):
        keep = self._listing()
        gone = self._listing(status=ListingStatus.PAUSED)
        self.client.force_authenticate(self.admin)

        r = self.client.delete(reverse("admin-listing-detail", kwargs={"pk": gone.id}))
        self.assertEqual(r.status_code, status.HTTP_200_OK)

        r = self.client.get(reverse("admin-listing-list"))
        self.assertEqual([row["id"] for row in r.data["results"]], [keep.id])

        r = self.client.get(reverse("admin-listing-list"), {"include_deleted": "true"})
        self.assertEqual(r.data["total"], 2)
        deleted_row = next(row for row in r.data["results"] if row["id"] == gone.id)
        self.assertTrue(deleted_row["is_deleted"])
        self.assertEqual(deleted_row["status"], ListingStatus.PAUSED)

    def test_stats(self):
        self._listing()
        self._listing(status=ListingStatus.PUBLISHED, reports=2)
        self.client.force_authenticate(self.admin)

        r = self.client.get(reverse("admin-listing-stats"))

        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(r.data["total"], 2)
        self.assertEqual(r.data["reported"], 1)
        self.assertEqual(r.data["by_status"]["underReview"], 1)

    def test_stats_is_admin_only(self):
        self.client.force_authenticate(self.moderator)
        self.assertEqual(self.client.get(reverse("admin-listing-stats")).status_code, status.HTTP_403_FORBIDDEN)
