"""Audit trail models.

A `HistoryEntry` is written once per lifecycle transition and never edited.
Its foreign keys are nulled when the referenced employee or item is deleted;
rendering falls back to placeholder labels.
"""

from common.choices import HistoryAction
from common.exceptions import InvariantViolation
from django.conf import settings
from django.db import models

SYSTEM_LABEL = "System"
DELETED_ITEM_LABEL = "Deleted Item"


class HistoryEntry(models.Model):
    ACTION_CHOICES = HistoryAction.choices

    action_type = models.CharField(max_length=16, choices=ACTION_CHOICES, db_index=True)
    employee = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="history_entries",
    )
    item = models.ForeignKey(
        "inventory.InventoryItem",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="history_entries",
    )
    performed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="+",
    )
    quantity = models.IntegerField(default=0)
    notes = models.TextField(blank=True)
    # e.g. "request:12", "assignment:7"
    reference = models.CharField(max_length=64, blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        verbose_name_plural = "history entries"
        indexes = [
            models.Index(fields=["employee", "created_at"], name="history_employee_created_idx"),
            models.Index(fields=["item", "created_at"], name="history_item_created_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.action_type} {self.item_label} x{self.quantity} ({self.employee_label})"

    def save(self, *args, **kwargs):
        if self.pk is not None and not self._state.adding:
            raise InvariantViolation("History entries are append-only.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise InvariantViolation("History entries are append-only.")

    @property
    def employee_label(self) -> str:
        return self.employee.display_name if self.employee_id else SYSTEM_LABEL

    @property
    def item_label(self) -> str:
        return self.item.name if self.item_id else DELETED_ITEM_LABEL


# EOF
