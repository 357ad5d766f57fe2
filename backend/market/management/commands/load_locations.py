from __future__ import annotations

from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from market.geonames import import_places


class Command(BaseCommand):
    help = "Load Argentine provinces and cities from a GeoNames AR.txt dump."

    def add_arguments(self, parser):
        parser.add_argument("path", help="Path to the GeoNames country file (AR.txt)")

    def handle(self, *args, **options):
        path = Path(options["path"])
        if not path.is_file():
            raise CommandError(f"File not found: {path}")

        with path.open(encoding="utf-8") as fh:
            counts = import_places(fh)

        self.stdout.write(f"created={counts.created.get('location', 0)}")
        self.stdout.write(f"updated={counts.updated.get('location', 0)}")
        self.stdout.write(f"skipped={counts.skipped}")
