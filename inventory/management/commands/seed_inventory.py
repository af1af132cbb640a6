"""Seed development data: an admin, a couple of employees and a starter catalog.

Re-running is idempotent; users are reused by username and items by name.
"""

from common.choices import Department, ItemCategory, Role
from django.core.management.base import BaseCommand
from django.db import transaction
from inventory.models import InventoryItem
from users.models import User

ITEMS = [
    {
        "name": "MacBook Pro 14",
        "category": ItemCategory.LAPTOP,
        "total_quantity": 5,
        "specifications": {"model": "MacBook Pro 14 M3", "ram": "16GB", "storage": "512GB SSD", "company": "Apple"},
    },
    {
        "name": "Dell OptiPlex 7090",
        "category": ItemCategory.DESKTOP,
        "total_quantity": 3,
        "specifications": {"model": "OptiPlex 7090", "processor": "Core i7-11700", "ram": "16GB", "company": "Dell"},
    },
    {
        "name": "Logitech MX Master 3S",
        "category": ItemCategory.ACCESSORIES,
        "total_quantity": 10,
        "specifications": {"type": "Mouse", "company": "Logitech", "connectionType": "Bluetooth"},
    },
    {
        "name": "Ergonomic Office Chair",
        "category": ItemCategory.FURNITURE,
        "total_quantity": 8,
        "specifications": {"type": "Chair", "color": "Black", "brand": "Herman Miller"},
    },
]

EMPLOYEES = [
    ("ada", "ada@example.com", "Ada", "Lovelace", Department.MERN_STACK),
    ("grace", "grace@example.com", "Grace", "Hopper", Department.UI_UX),
]


class Command(BaseCommand):
    help = "Seed development users and inventory items"

    def add_arguments(self, parser):
        parser.add_argument("--password", default="ChangeMe123!", help="Password for newly created users")

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write("Seeding inventory data...")
        password = options["password"]

        admin, created = User.objects.get_or_create(
            username="admin",
            defaults={"email": "admin@example.com", "role": Role.ADMIN, "is_staff": True, "first_name": "Admin"},
        )
        if created:
            admin.set_password(password)
            admin.save()

        for username, email, first, last, department in EMPLOYEES:
            user, created = User.objects.get_or_create(
                username=username,
                defaults={"email": email, "first_name": first, "last_name": last, "department": department},
            )
            if created:
                user.set_password(password)
                user.save()

        for row in ITEMS:
            specs = {**row["specifications"], "condition": "Good"}
            InventoryItem.objects.get_or_create(
                name=row["name"],
                defaults={
                    "category": row["category"],
                    "total_quantity": row["total_quantity"],
                    "available_quantity": row["total_quantity"],
                    "specifications": specs,
                    "created_by": admin,
                },
            )

        self.stdout.write(self.style.SUCCESS("Inventory seed complete."))
