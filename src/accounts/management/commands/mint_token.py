"""Print a JWT pair for a user, creating the user if needed."""
from django.core.management.base import BaseCommand, CommandError
from rest_framework_simplejwt.tokens import RefreshToken

from accounts.models import User


class Command(BaseCommand):
    help = "Create or load a user and print an access/refresh token pair"

    def add_arguments(self, parser):
        parser.add_argument("username")
        parser.add_argument(
            "--role",
            default=User.Role.ZOPPER_ADMINISTRATOR,
            choices=User.Role.values,
            help="Role given to a newly created user (default: ZOPPER_ADMINISTRATOR)",
        )

    def handle(self, *args, **options):
        user, created = User.objects.get_or_create(
            username=options["username"],
            defaults={"role": options["role"], "validation": User.Validation.APPROVED},
        )
        if created:
            user.set_unusable_password()
            user.save(update_fields=["password"])
            self.stdout.write(f"Created {user.role} user {user.username}")
        elif not user.is_approved:
            raise CommandError(f"User {user.username} is not approved ({user.validation})")

        refresh = RefreshToken.for_user(user)
        self.stdout.write(f"access:  {refresh.access_token}")
        self.stdout.write(f"refresh: {refresh}")
