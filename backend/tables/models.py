import uuid

from django.db import models
from django.utils.translation import gettext_lazy as _


class Layout(models.Model):
    """A floor plan (room, terrace, ...) grouping a set of tables."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(_("name"), max_length=120)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name


class Table(models.Model):
    class Status(models.TextChoices):
        FREE = "free", _("Free")
        OCCUPIED = "occupied", _("Occupied")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    layout = models.ForeignKey(Layout, on_delete=models.CASCADE, related_name="tables")
    table_number = models.PositiveIntegerField(_("table number"))
    seats = models.PositiveSmallIntegerField(_("seats"), default=4)
    status = models.CharField(
        _("status"), max_length=20, choices=Status.choices, default=Status.FREE
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["table_number"]
        constraints = [
            models.UniqueConstraint(
                fields=["layout", "table_number"],
                name="unique_table_number_per_layout",
            ),
        ]

    def __str__(self):
        return f"Table {self.table_number}"
