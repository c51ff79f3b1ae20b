"""Replace the claim procedure PDF from a file on disk."""
from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from claims.services import replace_pdf
from core.exceptions import DomainError


class Command(BaseCommand):
    help = "Upload a claim procedure PDF, replacing the existing ones"

    def add_arguments(self, parser):
        parser.add_argument("path", help="Path to the PDF file")
        parser.add_argument("--title", default="Claim Procedure")
        parser.add_argument("--description", default="")
        parser.add_argument("--category", default="GENERAL")

    def handle(self, *args, **options):
        path = Path(options["path"])
        if not path.is_file():
            raise CommandError(f"File not found: {path}")
        if path.suffix.lower() != ".pdf":
            raise CommandError("Only PDF files are allowed")
        try:
            pdf = replace_pdf(
                content=path.read_bytes(),
                file_name=path.name,
                title=options["title"],
                description=options["description"],
                category=options["category"],
            )
        except DomainError as exc:
            raise CommandError(exc.message) from exc
        self.stdout.write(self.style.SUCCESS(f"Imported {pdf.file_name} ({pdf.file_size} bytes) as {pdf.pk}"))
