import logging
from django.apps import AppConfig
from django.conf import settings

logger = logging.getLogger(__name__)


class PaymentsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'payments'

    def ready(self):
        """Warn once per process when the gateway key is absent (debug/test runs only; production refuses to start)."""
        if not getattr(settings, 'KHALTI_SECRET_KEY', None):
            logger.warning("KHALTI_SECRET_KEY not found in settings; Khalti calls will be rejected upstream.")
