import uuid

from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils.translation import gettext_lazy as _


class User(AbstractUser):
    """
    Staff member operating a terminal.

    Role membership is kept as a list of free-form labels (e.g. ["manager"])
    so the floor app can attach extra labels without a schema change; the
    labels that carry meaning are enumerated in users.capabilities.Role.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(_("email address"), unique=True)
    name = models.CharField(_("display name"), max_length=150, blank=True)
    labels = models.JSONField(
        _("role labels"),
        default=list,
        blank=True,
        help_text=_("Role labels such as 'manager', 'waiter' or 'kitchen'."),
    )
    updated_at = models.DateTimeField(_("updated at"), auto_now=True)

    REQUIRED_FIELDS = ["email"]

    def __str__(self):
        return self.name or self.username

    @property
    def display_name(self):
        return self.name or self.get_full_name() or self.username
