from __future__ import annotations

import random
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from accounts.models import Role
from market.models import Listing, ListingStatus, Location

User = get_user_model()

DEMO_USERS = (
    ("demo_admin", Role.ADMIN),
    ("demo_moderator", Role.MODERATOR),
    ("demo_seller", Role.USER),
)

TITLES = (
    "Bicicleta rodado 29",
    "Heladera con freezer",
    "Departamento 2 ambientes",
    "Clases de guitarra",
    "Notebook 15 pulgadas",
    "Cachorros en adopción",
    "Juego de living",
    "Auto usado 2015",
)

AGES = ("Nuevo", "Usado", "18-25", "26-35", "36+")


class Command(BaseCommand):
    help = "Create demo users and listings spread over existing locations."

    def add_arguments(self, parser):
        parser.add_argument("--count", type=int, default=40, help="Number of listings to create")
        parser.add_argument("--seed", type=int, default=1, help="Random seed for repeatable output")

    def handle(self, *args, **options):
        count = max(0, int(options.get("count") or 0))
        rnd = random.Random(int(options.get("seed") or 1))

        locations = list(Location.objects.filter(is_active=True).values_list("id", flat=True)[:500])
        if not locations:
            raise CommandError("No active locations. Run load_locations first.")

        statuses = [
            ListingStatus.PUBLISHED,
            ListingStatus.PUBLISHED,
            ListingStatus.PUBLISHED,
            ListingStatus.UNDER_REVIEW,
            ListingStatus.PAUSED,
        ]

        with transaction.atomic():
            users = {}
            for username, role in DEMO_USERS:
                user, created = User.objects.get_or_create(
                    username=username,
                    defaults={"role": role, "is_staff": role == Role.ADMIN},
                )
                if created:
                    user.set_password("demo12345")
                    user.save(update_fields=["password"])
                users[role] = user

            seller = users[Role.USER]
            listings = [
                Listing(
                    owner=seller,
                    location_id=rnd.choice(locations),
                    title=rnd.choice(TITLES),
                    age=rnd.choice(AGES),
                    description="Publicación de ejemplo.",
                    price=Decimal(rnd.randint(1, 500) * 1000),
                    phone="11" + "".join(str(rnd.randint(0, 9)) for _ in range(8)),
                    use_whatsapp=rnd.random() < 0.6,
                    status=rnd.choice(statuses),
                )
                for _ in range(count)
            ]
            Listing.objects.bulk_create(listings)

        self.stdout.write(self.style.SUCCESS(f"users={len(users)} listings={len(listings)}"))
