"""Inventory models (single pool of physical assets).

Each item tracks how many units were ever provisioned (`total_quantity`) and
how many are not held by anyone (`available_quantity`). Only
`inventory.stock` writes `available_quantity`.
"""

from common.choices import ItemCategory
from django.conf import settings
from django.db import models


class TimeStampedModel(models.Model):
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class InventoryItem(TimeStampedModel):
    CATEGORY_CHOICES = ItemCategory.choices

    name = models.CharField(max_length=200)
    category = models.CharField(max_length=32, choices=CATEGORY_CHOICES, db_index=True)
    description = models.TextField(blank=True)
    total_quantity = models.IntegerField(default=0)
    available_quantity = models.IntegerField(default=0)
    # string -> string map; category fields plus derived `condition` and `returned_at`
    specifications = models.JSONField(default=dict, blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="created_items",
    )

    class Meta:
        ordering = ["-created_at", "id"]
        constraints = [
            models.CheckConstraint(name="item_total_non_negative", check=models.Q(total_quantity__gte=0)),
            models.CheckConstraint(name="item_available_non_negative", check=models.Q(available_quantity__gte=0)),
            models.CheckConstraint(
                name="item_available_le_total",
                check=models.Q(available_quantity__lte=models.F("total_quantity")),
            ),
        ]
        indexes = [
            models.Index(fields=["category", "available_quantity"], name="item_category_avail_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.name} ({self.available_quantity}/{self.total_quantity})"

    @property
    def committed_quantity(self) -> int:
        return int(self.total_quantity) - int(self.available_quantity)

    @property
    def condition(self) -> str | None:
        return (self.specifications or {}).get("condition")


# EOF
