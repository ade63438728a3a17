from django.core.management.base import BaseCommand
from django.utils.timezone import now

from registry.models import Role
from registry.services import REQUIRED_ROLES, seed_required_roles


class Command(BaseCommand):
    help = "Create the required roles (Donor, Admin) if missing. Safe to run repeatedly; run once after migrate."

    def add_arguments(self, parser):
        parser.add_argument("--dry-run", action="store_true", help="Only report which roles would be created.")

    def handle(self, *args, **opts):
        self.stdout.write(self.style.HTTP_INFO(f"[{now().isoformat()}] Seeding roles {', '.join(REQUIRED_ROLES)}…"))

        if opts["dry_run"]:
            missing = [n for n in REQUIRED_ROLES if not Role.objects.filter(name__iexact=n).exists()]
            for name in missing:
                self.stdout.write(self.style.WARNING(f"[DRY] Would create role: {name}"))
            if not missing:
                self.stdout.write(self.style.WARNING("[DRY] Nothing to create."))
            return

        created = seed_required_roles()
        for name in REQUIRED_ROLES:
            if name in created:
                self.stdout.write(f"-> Created role: {name}")
            else:
                self.stdout.write(f"-> Role already exists: {name}")

        self.stdout.write(self.style.SUCCESS(f"Done. created={len(created)}"))
