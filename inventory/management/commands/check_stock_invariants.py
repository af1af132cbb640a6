from asset_requests.models import AssetRequest
from assignments.models import AssignmentLedgerEntry
from common.choices import AssignmentStatus, RequestStatus
from django.core.management.base import BaseCommand, CommandError
from django.db.models import Sum
from inventory.models import InventoryItem


class Command(BaseCommand):
    help = (
        "Recompute each item's expected availability from active assignments and approved requests "
        "and report any drift. Exits non-zero when drift is found."
    )

    def add_arguments(self, parser):
        parser.add_argument("--item", type=int, help="Only check this item id")

    def handle(self, *args, **options):
        items = InventoryItem.objects.order_by("id")
        if options.get("item"):
            items = items.filter(pk=options["item"])

        held = dict(
            AssignmentLedgerEntry.objects.filter(status=AssignmentStatus.ASSIGNED, item__isnull=False)
            .values_list("item_id")
            .annotate(total=Sum("quantity"))
        )
        reserved = dict(
            AssetRequest.objects.filter(status=RequestStatus.APPROVED, item__isnull=False)
            .values_list("item_id")
            .annotate(total=Sum("quantity"))
        )

        problems = 0
        checked = 0
        for item in items.iterator():
            checked += 1
            expected = item.total_quantity - held.get(item.id, 0) - reserved.get(item.id, 0)
            if not 0 <= item.available_quantity <= item.total_quantity:
                problems += 1
                self.stdout.write(
                    self.style.ERROR(
                        f"Item {item.id} '{item.name}': available {item.available_quantity} "
                        f"outside [0, {item.total_quantity}]"
                    )
                )
            elif item.available_quantity != expected:
                problems += 1
                self.stdout.write(
                    self.style.WARNING(
                        f"Item {item.id} '{item.name}': available {item.available_quantity}, expected {expected}"
                    )
                )

        if problems:
            raise CommandError(f"Stock drift on {problems} of {checked} item(s).")
        self.stdout.write(self.style.SUCCESS(f"Stock consistent for {checked} item(s)."))
