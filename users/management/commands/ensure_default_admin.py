import logging

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from users.models import User

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Create the default admin account if it does not exist yet."

    def add_arguments(self, parser):
        parser.add_argument("--username", default=None)
        parser.add_argument("--password", default=None)
        parser.add_argument("--name", default=None)

    def handle(self, *args, **options):
        username = options["username"] or settings.DEFAULT_ADMIN_USERNAME
        password = options["password"] or settings.DEFAULT_ADMIN_PASSWORD
        name = options["name"] or settings.DEFAULT_ADMIN_NAME

        if User.objects.filter(username=username).exists():
            self.stdout.write(f"Admin account '{username}' already exists.")
            return

        if not password:
            raise CommandError("No password given. Pass --password or set DEFAULT_ADMIN_PASSWORD.")

        User.objects.create_user(username=username, password=password, name=name, role="admin")
        logger.info("Created default admin account %s", username)
        self.stdout.write(self.style.SUCCESS(f"Created admin account '{username}'."))
