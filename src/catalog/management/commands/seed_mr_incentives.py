"""Load MR incentive price bands from the MR price list workbook."""
from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from catalog.services import import_mr_incentives_from_excel
from core.exceptions import DomainError


class Command(BaseCommand):
    help = "Import MR incentive bands (category, price range, 1-4 year incentives) from an .xlsx file"

    def add_arguments(self, parser):
        parser.add_argument("path", help="Path to the MR price list .xlsx file")
        parser.add_argument("--flush", action="store_true", help="Delete existing bands first")

    def handle(self, *args, **options):
        path = Path(options["path"])
        if not path.exists():
            raise CommandError(f"File not found: {path}")

        with path.open("rb") as handle:
            try:
                result = import_mr_incentives_from_excel(handle, flush=options["flush"])
            except DomainError as exc:
                raise CommandError(f"{exc.message}: {path}") from exc

        self.stdout.write(self.style.SUCCESS(
            f"MR incentives imported: {result['bands']} bands "
            f"({result['created']} created, {result['updated']} updated)"
        ))
