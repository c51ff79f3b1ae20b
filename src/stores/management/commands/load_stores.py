"""Import stores from a showroom list ("NAME - (CODE)" labels)."""
import csv
from pathlib import Path

import openpyxl
from django.core.management.base import BaseCommand, CommandError

from stores.services import upsert_stores


class Command(BaseCommand):
    help = "Create or update stores from the first column of an .xlsx or .csv showroom list"

    def add_arguments(self, parser):
        parser.add_argument("path", help="Path to the .xlsx or .csv file")
        parser.add_argument(
            "--canvassers",
            type=int,
            default=1,
            help="Number of canvassers assigned to newly created stores",
        )

    def handle(self, *args, **options):
        path = Path(options["path"])
        if not path.exists():
            raise CommandError(f"File not found: {path}")

        labels = list(self._read_labels(path))
        if not labels:
            raise CommandError("No store rows found")

        result = upsert_stores(labels, default_canvassers=options["canvassers"])
        self.stdout.write(self.style.SUCCESS(
            f"Stores: {result['created']} created, {result['updated']} updated, "
            f"{result['skipped']} skipped"
        ))

    def _read_labels(self, path):
        if path.suffix.lower() == ".csv":
            with path.open(newline="", encoding="utf-8-sig") as handle:
                reader = csv.reader(handle)
                next(reader, None)
                for row in reader:
                    if row and row[0].strip():
                        yield row[0]
            return

        wb = openpyxl.load_workbook(path, read_only=True, data_only=True)
        for row in wb.worksheets[0].iter_rows(min_row=2, values_only=True):
            if row and row[0] not in (None, ""):
                yield str(row[0])
        wb.close()
