import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("asset_requests", "0001_initial"),
        ("inventory", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="AssignmentLedgerEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("item_name", models.CharField(max_length=200)),
                ("quantity", models.IntegerField()),
                (
                    "status",
                    models.CharField(
                        choices=[("assigned", "Assigned"), ("returned", "Returned")],
                        default="assigned",
                        max_length=16,
                    ),
                ),
                ("assigned_date", models.DateTimeField(default=django.utils.timezone.now)),
                ("notes", models.TextField(blank=True)),
                (
                    "issued_condition",
                    models.CharField(choices=[("Good", "Good"), ("Damaged", "Damaged")], default="Good", max_length=16),
                ),
                (
                    "return_condition",
                    models.CharField(blank=True, choices=[("Good", "Good"), ("Damaged", "Damaged")], max_length=16),
                ),
                ("returned_on", models.DateField(blank=True, null=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "employee",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="assignments",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "item",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="assignments",
                        to="inventory.inventoryitem",
                    ),
                ),
                (
                    "request",
                    models.OneToOneField(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="assignment",
                        to="asset_requests.assetrequest",
                    ),
                ),
                (
                    "assigned_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-assigned_date", "-id"],
                "indexes": [
                    models.Index(fields=["employee", "status"], name="assign_employee_status_idx"),
                    models.Index(fields=["item", "status"], name="assign_item_status_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(check=models.Q(quantity__gt=0), name="assignment_positive_qty"),
                ],
            },
        ),
    ]
