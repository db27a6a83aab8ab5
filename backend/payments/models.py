import uuid

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class Payment(models.Model):
    """
    Receipt of one settlement. The orders it settled point back to it
    through ``Order.payment``.
    """

    class DiscountType(models.TextChoices):
        PERCENTAGE = "percentage", _("Percentage")
        FIXED = "fixed", _("Fixed amount")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    subtotal = models.DecimalField(max_digits=10, decimal_places=2)
    discount_type = models.CharField(
        max_length=20, choices=DiscountType.choices, blank=True
    )
    discount_value = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    discount_reason = models.CharField(max_length=255, blank=True)
    discount_amount = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    total = models.DecimalField(max_digits=10, decimal_places=2)
    tip_amount = models.DecimalField(max_digits=10, decimal_places=2, default=0)

    # [{"method": "cash", "amount": "10.00"}, ...]
    methods = models.JSONField(default=list)
    cash_received = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    change_amount = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    # [{"value": "10.00", "count": 1, "kind": "note"}, ...]
    change_breakdown = models.JSONField(default=list, blank=True)

    table_ids = models.JSONField(default=list)
    customer_name = models.CharField(max_length=255, blank=True)
    notes = models.TextField(blank=True)
    processed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="payments_processed",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"Payment {self.id} ({self.total})"

    @property
    def method_names(self):
        return [entry.get("method") for entry in self.methods or []]
