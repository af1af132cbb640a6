import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="InventoryItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=200)),
                (
                    "category",
                    models.CharField(
                        choices=[
                            ("Laptop", "Laptop"),
                            ("Desktop", "Desktop"),
                            ("Accessories", "Accessories"),
                            ("Furniture", "Furniture"),
                            ("Other", "Other"),
                        ],
                        db_index=True,
                        max_length=32,
                    ),
                ),
                ("description", models.TextField(blank=True)),
                ("total_quantity", models.IntegerField(default=0)),
                ("available_quantity", models.IntegerField(default=0)),
                ("specifications", models.JSONField(blank=True, default=dict)),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="created_items",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at", "id"],
                "indexes": [
                    models.Index(fields=["category", "available_quantity"], name="item_category_avail_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(check=models.Q(total_quantity__gte=0), name="item_total_non_negative"),
                    models.CheckConstraint(
                        check=models.Q(available_quantity__gte=0), name="item_available_non_negative"
                    ),
                    models.CheckConstraint(
                        check=models.Q(available_quantity__lte=models.F("total_quantity")),
                        name="item_available_le_total",
                    ),
                ],
            },
        ),
    ]
