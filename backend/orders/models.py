import uuid
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _


class Order(models.Model):
    """
    One menu item ordered against one or more tables.

    ``status == PAID`` is the only record of settlement; the settlement
    engine is the only writer of that value.
    """

    class Status(models.TextChoices):
        PENDING = "pendente", _("Pending")
        ACCEPTED = "aceite", _("Accepted")
        READY = "pronto", _("Ready")
        OUT_FOR_DELIVERY = "a ser entregue", _("Out for delivery")
        DELIVERED = "entregue", _("Delivered")
        COMPLETED = "completo", _("Completed")
        CANCELLED = "cancelado", _("Cancelled")
        PAID = "pago", _("Paid")

    # Labels staff may set through an update. PAID is reserved for settlement.
    UPDATABLE_STATUSES = (
        Status.PENDING,
        Status.ACCEPTED,
        Status.READY,
        Status.OUT_FOR_DELIVERY,
        Status.DELIVERED,
        Status.COMPLETED,
        Status.CANCELLED,
    )

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    tables = models.ManyToManyField(
        "tables.Table", through="OrderTable", related_name="orders"
    )
    menu_item = models.ForeignKey(
        "menu.MenuItem", on_delete=models.PROTECT, related_name="orders"
    )
    status = models.CharField(
        _("status"), max_length=20, choices=Status.choices, default=Status.PENDING
    )
    notes = models.TextField(_("notes"), blank=True)
    price = models.DecimalField(
        _("price"),
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders_created",
    )

    # Per-stage staff tracking
    accepted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders_accepted",
    )
    accepted_at = models.DateTimeField(null=True, blank=True)
    prepared_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders_prepared",
    )
    prepared_at = models.DateTimeField(null=True, blank=True)
    dispatched_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders_dispatched",
    )
    dispatched_at = models.DateTimeField(null=True, blank=True)
    delivered_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders_delivered",
    )
    delivered_at = models.DateTimeField(null=True, blank=True)

    payment = models.ForeignKey(
        "payments.Payment",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
    )
    paid_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status", "created_at"], name="orders_status_created_idx"),
        ]

    def __str__(self):
        return f"Order {self.id} ({self.status})"

    @property
    def is_paid(self):
        return self.status == self.Status.PAID

    @property
    def table_ids(self):
        """Table ids in the order they were given at creation."""
        return [link.table_id for link in self.table_links.all()]


class OrderTable(models.Model):
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="table_links")
    table = models.ForeignKey("tables.Table", on_delete=models.PROTECT, related_name="order_links")
    position = models.PositiveSmallIntegerField(default=0)

    class Meta:
        ordering = ["position"]
        constraints = [
            models.UniqueConstraint(fields=["order", "table"], name="unique_table_per_order"),
        ]

    def __str__(self):
        return f"{self.order_id} @ {self.table_id}"
