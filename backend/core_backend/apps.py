import logging

from django.apps import AppConfig
from django.conf import settings

logger = logging.getLogger(__name__)


class CoreBackendConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "core_backend"

    def ready(self):
        restaurant = getattr(settings, "RESTAURANT", {})
        logger.debug(
            f"Restaurant backend ready (currency={restaurant.get('CURRENCY')}, "
            f"payment methods={restaurant.get('PAYMENT_METHODS')})"
        )
