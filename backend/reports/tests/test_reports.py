import pytest

from market import codes, lifecycle
from market.exceptions import ListingNotFound, ListingValidationError
from market.models import Listing, ListingStatus
from market.policy import Principal
from notifications.models import Notification, NotificationKind
from reports.models import Report


@pytest.mark.django_db
class TestReportListing:
    def test_anonymous_report_is_recorded(self, owner, make_listing):
        listing = make_listing(owner)

        entry = lifecycle.report(listing.id, "spam", additional_info="same ad x10", contact_info="a@b.c")

        assert entry.listing_id == listing.id
        assert entry.reporter_id is None
        assert entry.reason == "spam"
        assert entry.additional_info == "same ad x10"
        listing.refresh_from_db()
        assert listing.reports == 1
        assert listing.status == ListingStatus.PUBLISHED

    def test_reporter_is_kept_when_authenticated(self, owner, other_user, make_listing):
        listing = make_listing(owner)

        entry = lifecycle.report(listing.id, "fraud", principal=Principal.from_user(other_user))

        assert entry.reporter_id == other_user.id

    def test_fifth_report_blocks(self, owner, make_listing):
        listing = make_listing(owner)

        for n in range(4):
            lifecycle.report(listing.id, f"reason {n}")
        listing.refresh_from_db()
        assert listing.status == ListingStatus.PUBLISHED
        assert listing.reports == 4

        lifecycle.report(listing.id, "last straw")

        listing.refresh_from_db()
        assert listing.reports == 5
        assert listing.status == ListingStatus.BLOCKED
        assert Report.objects.filter(listing=listing).count() == 5

    def test_block_notifies_owner_once(self, owner, make_listing):
        listing = make_listing(owner, reports=4)

        lifecycle.report(listing.id, "one")
        lifecycle.report(listing.id, "two")

        assert Notification.objects.filter(user=owner, kind=NotificationKind.LISTING_BLOCKED).count() == 1

    @pytest.mark.parametrize("start", [ListingStatus.PAUSED, ListingStatus.UNDER_REVIEW, ListingStatus.EXPIRED])
    def test_threshold_applies_to_any_status(self, owner, make_listing, start):
        listing = make_listing(owner, status=start, reports=4)

        lifecycle.report(listing.id, "bad")

        listing.refresh_from_db()
        assert listing.status == ListingStatus.BLOCKED

    def test_counter_never_goes_below_threshold_once_blocked(self, owner, make_listing):
        listing = make_listing(owner)
        for _ in range(7):
            lifecycle.report(listing.id, "again")

        listing.refresh_from_db()
        assert listing.reports == 7
        assert listing.status == ListingStatus.BLOCKED

    def test_reason_is_required(self, owner, make_listing):
        listing = make_listing(owner)

        with pytest.raises(ListingValidationError) as exc:
            lifecycle.report(listing.id, "   ")

        assert exc.value.code == codes.ERROR_REASON_REQUIRED
        assert Report.objects.count() == 0

    def test_missing_or_deleted_listing(self, owner, make_listing):
        deleted = make_listing(owner, is_deleted=True)

        with pytest.raises(ListingNotFound):
            lifecycle.report(deleted.id, "spam")
        with pytest.raises(ListingNotFound):
            lifecycle.report(987654, "spam")

        assert Report.objects.count() == 0
        assert Listing.objects.get(pk=deleted.pk).reports == 0

    def test_threshold_is_configurable(self, owner, make_listing, settings):
        settings.LISTING_REPORT_THRESHOLD = 2
        listing = make_listing(owner)

        lifecycle.report(listing.id, "a")
        lifecycle.report(listing.id, "b")

        listing.refresh_from_db()
        assert listing.status == ListingStatus.BLOCKED
