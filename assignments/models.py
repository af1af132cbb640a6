"""Assignment ledger: who holds how many units of which item.

One row per allocation event. Rows are never deleted; a return flips the
status to `returned` and records the condition.
"""

from common.choices import AssignmentStatus, ItemCondition
from django.conf import settings
from django.db import models
from django.utils import timezone


class AssignmentLedgerEntry(models.Model):
    STATUS_ASSIGNED = AssignmentStatus.ASSIGNED
    STATUS_RETURNED = AssignmentStatus.RETURNED
    STATUS_CHOICES = AssignmentStatus.choices

    employee = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="assignments")
    item = models.ForeignKey(
        "inventory.InventoryItem",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="assignments",
    )
    item_name = models.CharField(max_length=200)
    request = models.OneToOneField(
        "asset_requests.AssetRequest",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="assignment",
    )
    quantity = models.IntegerField()
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_ASSIGNED)
    assigned_date = models.DateTimeField(default=timezone.now)
    assigned_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="+",
    )
    notes = models.TextField(blank=True)
    issued_condition = models.CharField(max_length=16, choices=ItemCondition.choices, default=ItemCondition.GOOD)
    return_condition = models.CharField(max_length=16, choices=ItemCondition.choices, blank=True)
    returned_on = models.DateField(null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-assigned_date", "-id"]
        constraints = [
            models.CheckConstraint(name="assignment_positive_qty", check=models.Q(quantity__gt=0)),
        ]
        indexes = [
            models.Index(fields=["employee", "status"], name="assign_employee_status_idx"),
            models.Index(fields=["item", "status"], name="assign_item_status_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.item_name} x{self.quantity} -> {self.employee_id} ({self.status})"

    @property
    def is_active(self) -> bool:
        return self.status == self.STATUS_ASSIGNED


# EOF
