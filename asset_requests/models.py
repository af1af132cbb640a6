"""Asset request models.

`AssetRequest.status` only moves forward:
pending -> approved -> completed, or pending -> rejected.
Transitions are applied by guarded UPDATEs in `asset_requests.services`.
"""

from common.choices import ItemCategory, RequestStatus, Urgency
from django.conf import settings
from django.db import models


class TimeStampedModel(models.Model):
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class AssetRequest(TimeStampedModel):
    STATUS_PENDING = RequestStatus.PENDING
    STATUS_APPROVED = RequestStatus.APPROVED
    STATUS_REJECTED = RequestStatus.REJECTED
    STATUS_COMPLETED = RequestStatus.COMPLETED
    STATUS_CHOICES = RequestStatus.choices

    employee = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="asset_requests")
    # null for free-text requests naming something not yet in the catalog
    item = models.ForeignKey(
        "inventory.InventoryItem",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="requests",
    )
    item_name = models.CharField(max_length=200)
    category = models.CharField(max_length=32, choices=ItemCategory.choices, blank=True)
    quantity = models.IntegerField(default=1)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)
    urgency = models.CharField(max_length=16, choices=Urgency.choices, default=Urgency.NORMAL)
    notes = models.TextField()
    brand = models.CharField(max_length=100, blank=True)
    expected_date = models.DateField(null=True, blank=True)
    admin_comment = models.TextField(blank=True)
    reject_reason = models.TextField(blank=True)
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="+",
    )
    reviewed_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        constraints = [
            models.CheckConstraint(name="request_quantity_positive", check=models.Q(quantity__gte=1)),
            models.CheckConstraint(
                name="rejected_request_has_reason",
                check=~models.Q(status=RequestStatus.REJECTED) | ~models.Q(reject_reason=""),
            ),
        ]
        indexes = [
            models.Index(fields=["employee", "status"], name="request_employee_status_idx"),
            models.Index(fields=["item", "status"], name="request_item_status_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"Request<{self.id}> {self.item_name} x{self.quantity} ({self.status})"

    @property
    def is_terminal(self) -> bool:
        return self.status in (self.STATUS_REJECTED, self.STATUS_COMPLETED)


class IdempotencyKey(TimeStampedModel):
    """Stores idempotent request results to prevent duplicate processing."""

    key = models.CharField(max_length=128)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.CASCADE)
    scope = models.CharField(max_length=128)
    path = models.CharField(max_length=255)
    method = models.CharField(max_length=16)
    request_hash = models.CharField(max_length=64, null=True, blank=True)
    response_code = models.IntegerField(null=True, blank=True)
    response_json = models.JSONField(null=True, blank=True)
    expires_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["key", "scope", "path", "method"], name="uniq_idem_scope_path_method"),
        ]
        indexes = [
            models.Index(fields=["expires_at"], name="idem_expires_at_idx"),
        ]


# EOF
