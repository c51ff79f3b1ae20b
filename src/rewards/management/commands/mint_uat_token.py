"""Print a bearer token for the UAT reward proxy."""
from datetime import timedelta

from django.core.management.base import BaseCommand, CommandError

from core.exceptions import DomainError
from rewards.uat import mint_uat_token


class Command(BaseCommand):
    help = "Mint a token for POST /api/uat/benepik/"

    def add_arguments(self, parser):
        parser.add_argument("--client-id", default=None, help="Defaults to UAT_CLIENT_ID")
        parser.add_argument("--hours", type=int, default=1)

    def handle(self, *args, **options):
        try:
            token = mint_uat_token(options["client_id"], ttl=timedelta(hours=options["hours"]))
        except DomainError as exc:
            raise CommandError(exc.message) from exc
        self.stdout.write(token)
