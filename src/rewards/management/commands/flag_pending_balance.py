"""Mark sent rewards that Benepik parked on insufficient balance."""
from django.core.management.base import BaseCommand

from rewards.services import flag_pending_balance


class Command(BaseCommand):
    help = "Flag reports whose Benepik batch response reported insufficient balance (code 1012)"

    def add_arguments(self, parser):
        parser.add_argument("--dry-run", action="store_true", help="Only count matching reports")

    def handle(self, *args, **options):
        result = flag_pending_balance(dry_run=options["dry_run"])
        verb = "Would flag" if options["dry_run"] else "Flagged"
        self.stdout.write(self.style.SUCCESS(
            f"{verb} {result['flagged']} report(s) out of {result['scanned']} scanned"
        ))
