from __future__ import annotations

from django.core.management.base import BaseCommand

from market.lifecycle import expire_overdue


class Command(BaseCommand):
    help = "Mark listings past their validity date as expired."

    def handle(self, *args, **options):
        count = expire_overdue()
        self.stdout.write(self.style.SUCCESS(f"expired={count}"))
