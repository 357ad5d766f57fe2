from decimal import Decimal

import pytest

from market import codes
from market.exceptions import AccessDenied, ListingNotFound, ListingValidationError
from market.locations import list_cities_by_province, list_provinces, resolve_by_text
from market.models import ListingStatus
from market.policy import Principal
from market.search import (
    SearchFilters,
    SearchPage,
    SearchScope,
    fetch_listing,
    listing_stats,
    parse_page_params,
    search_listings,
)


def as_principal(user):
    return Principal.from_user(user)


@pytest.mark.parametrize(
    "page,limit,expected",
    [
        (None, None, (1, 10)),
        ("2", "5", (2, 5)),
        ("0", "-3", (1, 10)),
        ("abc", "x", (1, 10)),
        (3, 1000, (3, 100)),
    ],
)
def test_parse_page_params(page, limit, expected):
    assert parse_page_params(page, limit) == expected


def test_total_pages():
    assert SearchPage(total=25, limit=10).total_pages == 3
    assert SearchPage(total=20, limit=10).total_pages == 2
    assert SearchPage(total=0, limit=10).total_pages == 0


@pytest.mark.django_db
class TestPublicSearch:
    def test_buenos_aires_second_page(self, owner, make_listing, locations):
        for i in range(25):
            make_listing(owner, location=locations["laplata" if i % 2 else "mardel"], title=f"Item {i}")
        for i in range(4):
            make_listing(owner, location=locations["cordoba"], title=f"Other {i}")

        page = search_listings(None, SearchScope.PUBLIC, SearchFilters(location="Buenos Aires"), page=2, limit=10)

        assert len(page.items) == 10
        assert page.total == 25
        assert page.total_pages == 3
        assert page.page == 2

    def test_pages_cover_every_match_once(self, owner, make_listing):
        ids = {make_listing(owner).id for _ in range(23)}

        seen = []
        for n in range(1, 4):
            page = search_listings(None, SearchScope.PUBLIC, page=n, limit=10)
            assert page.total == 23
            seen.extend(item.id for item in page.items)

        assert len(seen) == len(set(seen))
        assert set(seen) == ids

    def test_newest_first(self, owner, make_listing):
        first = make_listing(owner)
        second = make_listing(owner)

        items = search_listings(None, SearchScope.PUBLIC).items

        assert [item.id for item in items] == [second.id, first.id]

    def test_only_published_and_not_deleted(self, owner, make_listing):
        visible = make_listing(owner)
        make_listing(owner, is_deleted=True)
        for status in (ListingStatus.PAUSED, ListingStatus.UNDER_REVIEW, ListingStatus.BLOCKED, ListingStatus.EXPIRED):
            make_listing(owner, status=status)

        page = search_listings(None, SearchScope.PUBLIC, SearchFilters(status=ListingStatus.PAUSED))

        assert [item.id for item in page.items] == [visible.id]

    def test_text_and_attribute_filters(self, owner, make_listing, locations, provinces):
        bike = make_listing(owner, title="Bicicleta", price=Decimal("100"), use_whatsapp=True, age="Usado")
        make_listing(owner, title="Mesa", description="de bicicleta no tiene nada", price=Decimal("900"))
        make_listing(owner, title="Silla", location=locations["cordoba"], price=Decimal("50"), use_whatsapp=True)

        assert search_listings(None, SearchScope.PUBLIC, SearchFilters(query="BICI")).total == 2
        assert [i.id for i in search_listings(None, SearchScope.PUBLIC, SearchFilters(query="bici", only_whatsapp=True)).items] == [bike.id]
        assert search_listings(None, SearchScope.PUBLIC, SearchFilters(price_min=Decimal("60"), price_max=Decimal("500"))).total == 1
        assert search_listings(None, SearchScope.PUBLIC, SearchFilters(price=Decimal("50"))).total == 1
        assert search_listings(None, SearchScope.PUBLIC, SearchFilters(age="Usado")).total == 3
        assert search_listings(None, SearchScope.PUBLIC, SearchFilters(province=provinces["cba"].code)).total == 1

    def test_unknown_location_text_matches_nothing(self, owner, make_listing):
        make_listing(owner)

        assert search_listings(None, SearchScope.PUBLIC, SearchFilters(location="Atlantis")).total == 0


@pytest.mark.django_db
class TestOwnerSearch:
    def test_only_own_non_deleted_listings(self, owner, other_user, make_listing):
        mine = make_listing(owner, status=ListingStatus.PAUSED)
        make_listing(owner, is_deleted=True)
        make_listing(other_user)

        page = search_listings(as_principal(owner), SearchScope.OWNER)

        assert [item.id for item in page.items] == [mine.id]

    def test_status_filter(self, owner, make_listing):
        make_listing(owner, status=ListingStatus.PAUSED)
        published = make_listing(owner, status=ListingStatus.PUBLISHED)

        page = search_listings(as_principal(owner), SearchScope.OWNER, SearchFilters(status="published"))

        assert [item.id for item in page.items] == [published.id]

    def test_invalid_status_filter(self, owner):
        with pytest.raises(ListingValidationError) as exc:
            search_listings(as_principal(owner), SearchScope.OWNER, SearchFilters(status="gone"))
        assert exc.value.code == codes.ERROR_INVALID_STATUS

    def test_anonymous_has_no_listings(self):
        with pytest.raises(AccessDenied):
            search_listings(None, SearchScope.OWNER)


@pytest.mark.django_db
class TestAdminSearch:
    def test_sees_every_status_but_not_deleted_by_default(self, owner, admin_user, make_listing):
        for status in ListingStatus:
            make_listing(owner, status=status)
        make_listing(owner, is_deleted=True)

        assert search_listings(as_principal(admin_user), SearchScope.ADMIN).total == len(ListingStatus)
        assert (
            search_listings(as_principal(admin_user), SearchScope.ADMIN, SearchFilters(include_deleted=True)).total
            == len(ListingStatus) + 1
        )

    def test_filter_by_user(self, owner, other_user, admin_user, make_listing):
        make_listing(owner)
        theirs = make_listing(other_user)

        page = search_listings(as_principal(admin_user), SearchScope.ADMIN, SearchFilters(user_id=other_user.id))

        assert [item.id for item in page.items] == [theirs.id]

    def test_moderator_cannot_use_admin_search(self, moderator):
        with pytest.raises(AccessDenied):
            search_listings(as_principal(moderator), SearchScope.ADMIN)


@pytest.mark.django_db
class TestFetch:
    def test_public_fetch(self, owner, make_listing):
        listing = make_listing(owner)
        assert fetch_listing(None, listing.id).id == listing.id

    def test_deleted_is_not_found_for_public_and_owner(self, owner, make_listing):
        listing = make_listing(owner, is_deleted=True)

        with pytest.raises(ListingNotFound):
            fetch_listing(None, listing.id)
        with pytest.raises(ListingNotFound):
            fetch_listing(as_principal(owner), listing.id)

    def test_unpublished_visible_to_owner_only(self, owner, other_user, make_listing):
        listing = make_listing(owner, status=ListingStatus.UNDER_REVIEW)

        assert fetch_listing(as_principal(owner), listing.id).id == listing.id
        with pytest.raises(ListingNotFound):
            fetch_listing(as_principal(other_user), listing.id)

    def test_privileged_see_everything(self, owner, moderator, admin_user, make_listing):
        listing = make_listing(owner, status=ListingStatus.BLOCKED, is_deleted=True)

        assert fetch_listing(as_principal(moderator), listing.id).id == listing.id
        assert fetch_listing(as_principal(admin_user), listing.id).id == listing.id


@pytest.mark.django_db
def test_stats(owner, admin_user, make_listing):
    make_listing(owner)
    make_listing(owner, status=ListingStatus.PAUSED, reports=1)
    make_listing(owner, is_deleted=True)

    stats = listing_stats(as_principal(admin_user))

    assert stats["total"] == 2
    assert stats["deleted"] == 1
    assert stats["reported"] == 1
    assert stats["by_status"][ListingStatus.PUBLISHED] == 1
    assert stats["by_status"][ListingStatus.PAUSED] == 1
    assert stats["by_status"][ListingStatus.BLOCKED] == 0


@pytest.mark.django_db
class TestLocations:
    def test_resolve_by_city_or_province_name(self, locations):
        assert set(resolve_by_text("plata")) == {locations["laplata"].id, locations["mardel"].id}
        assert set(resolve_by_text("buenos aires")) == {locations["laplata"].id, locations["mardel"].id}
        assert resolve_by_text("córdoba") == [locations["cordoba"].id]

    def test_blank_text_matches_all_active(self, locations):
        assert locations["inactive"].id not in resolve_by_text("  ")
        assert len(resolve_by_text(None)) == 3

    def test_provinces_and_cities(self, locations, provinces):
        assert [p.name for p in list_provinces()] == ["Buenos Aires", "Córdoba"]
        assert [c.name for c in list_cities_by_province(provinces["ba"].code)] == ["La Plata", "Mar del Plata"]
        assert list(list_cities_by_province("AR-99")) == []
