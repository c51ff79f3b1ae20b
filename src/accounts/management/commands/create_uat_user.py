"""Create the administrator account used by the rewards provider during UAT."""
from django.core.management.base import BaseCommand

from accounts.models import User


class Command(BaseCommand):
    help = "Create (or flag) an approved ZOPPER_ADMINISTRATOR restricted to UAT endpoints"

    def add_arguments(self, parser):
        parser.add_argument("username")
        parser.add_argument("--password", default=None, help="Optional password for admin login")

    def handle(self, *args, **options):
        user, created = User.objects.get_or_create(
            username=options["username"],
            defaults={
                "role": User.Role.ZOPPER_ADMINISTRATOR,
                "validation": User.Validation.APPROVED,
                "full_name": "UAT User",
            },
        )
        user.metadata = {**(user.metadata or {}), "isUatUser": True}
        if options["password"]:
            user.set_password(options["password"])
        elif created:
            user.set_unusable_password()
        user.save()

        verb = "Created" if created else "Updated"
        self.stdout.write(self.style.SUCCESS(f"{verb} UAT user {user.username}"))
