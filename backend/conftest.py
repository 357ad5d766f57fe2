import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from rest_framework.test import APIClient

from accounts.models import Role
from clasificados_backend.celery import celery_app
from market.models import Listing, ListingStatus, Location, Province

User = get_user_model()


@pytest.fixture(autouse=True)
def _clear_throttle_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture(autouse=True)
def _eager_tasks():
    # Side effects run inline so tests never need a broker.
    celery_app.conf.task_always_eager = True
    yield


@pytest.fixture
def make_user(db):
    def _make(username, role=Role.USER, **extra):
        return User.objects.create_user(username=username, password="pass1234", role=role, **extra)

    return _make


@pytest.fixture
def owner(make_user):
    return make_user("owner")


@pytest.fixture
def other_user(make_user):
    return make_user("other")


@pytest.fixture
def admin_user(make_user):
    return make_user("boss", role=Role.ADMIN)


@pytest.fixture
def moderator(make_user):
    return make_user("mod", role=Role.MODERATOR)


@pytest.fixture
def guest(make_user):
    return make_user("visitor", role=Role.GUEST)


@pytest.fixture
def provinces(db):
    return {
        "ba": Province.objects.create(code="AR-01", name="Buenos Aires"),
        "cba": Province.objects.create(code="AR-05", name="Córdoba"),
    }


@pytest.fixture
def locations(provinces):
    return {
        "laplata": Location.objects.create(code="gn-1", name="La Plata", province=provinces["ba"]),
        "mardel": Location.objects.create(code="gn-2", name="Mar del Plata", province=provinces["ba"]),
        "cordoba": Location.objects.create(code="gn-3", name="Córdoba", province=provinces["cba"]),
        "inactive": Location.objects.create(
            code="gn-4", name="Pueblo Viejo", province=provinces["cba"], is_active=False
        ),
    }


@pytest.fixture
def listing_fields(locations):
    return {
        "title": "Bicicleta rodado 29",
        "age": "Usado",
        "description": "Poco uso",
        "location": locations["laplata"].id,
        "price": "150000",
        "phone": "1122334455",
        "use_whatsapp": True,
    }


@pytest.fixture
def make_listing(locations):
    def _make(owner, *, location=None, status=ListingStatus.PUBLISHED, **extra):
        values = {
            "title": "Item",
            "age": "Usado",
            "price": 100,
            "phone": "1122334455",
        }
        values.update(extra)
        return Listing.objects.create(
            owner=owner,
            location=location or locations["laplata"],
            status=status,
            **values,
        )

    return _make


@pytest.fixture
def api_client():
    return APIClient()
