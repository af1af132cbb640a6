from asset_requests.models import IdempotencyKey
from django.core.management.base import BaseCommand
from django.utils import timezone


class Command(BaseCommand):
    help = "Delete expired idempotency key records based on expires_at"

    def add_arguments(self, parser):
        parser.add_argument("--dry-run", action="store_true", help="Only report how many keys would be deleted")

    def handle(self, *args, **options):
        qs = IdempotencyKey.objects.filter(expires_at__lt=timezone.now())
        count = qs.count()
        if options["dry_run"]:
            self.stdout.write(f"{count} expired idempotency keys would be deleted.")
            return
        qs.delete()
        self.stdout.write(self.style.SUCCESS(f"Deleted {count} expired idempotency keys."))
