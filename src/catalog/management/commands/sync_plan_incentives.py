"""Recompute plan incentive amounts from the MR bands."""
from django.core.management.base import BaseCommand

from catalog.services import sync_plan_incentives


class Command(BaseCommand):
    help = "Set Plan.incentive_amount from the MR band matching each plan's SKU and tenure"

    def handle(self, *args, **options):
        result = sync_plan_incentives()
        self.stdout.write(self.style.SUCCESS(
            f"Plans updated: {result['updated']} (skipped {result['skipped']})"
        ))
