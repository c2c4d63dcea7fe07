import requests
import logging
from django.conf import settings

logger = logging.getLogger(__name__)

# Lookup statuses reported by Khalti
STATUS_COMPLETED = 'Completed'
STATUS_PENDING = 'Pending'
STATUS_INITIATED = 'Initiated'
STATUS_REFUNDED = 'Refunded'
STATUS_EXPIRED = 'Expired'
STATUS_USER_CANCELED = 'User canceled'
STATUS_PARTIALLY_REFUNDED = 'Partially Refunded'


class KhaltiError(Exception):
    """The gateway could not be reached or answered with something that isn't JSON."""


class KhaltiTimeout(KhaltiError):
    """The gateway did not answer within KHALTI_TIMEOUT seconds."""


class KhaltiResponse:
    """Upstream status code and decoded JSON body, relayed as-is to the caller."""

    def __init__(self, status_code, data):
        self.status_code = status_code
        self.data = data

    @property
    def ok(self):
        return 200 <= self.status_code < 300

    def __repr__(self):
        return f"<KhaltiResponse {self.status_code}>"


class KhaltiService:
    """
    Thin client for the Khalti e-payment API.
    Credentials, base URL and timeout come from settings, resolved once at start-up.
    """

    def __init__(self, secret_key=None, base_url=None, timeout=None):
        # A missing key is reported once, at start-up (see PaymentsConfig.ready)
        self.secret_key = secret_key or getattr(settings, 'KHALTI_SECRET_KEY', None)

        self.base_url = base_url or getattr(settings, 'KHALTI_BASE_URL', 'https://dev.khalti.com/api/v2/epayment/')
        if not self.base_url.endswith('/'):
            self.base_url += '/'
        self.timeout = timeout if timeout is not None else getattr(settings, 'KHALTI_TIMEOUT', 10)

        self.headers = {
            "Authorization": f"Key {self.secret_key}",
            "Content-Type": "application/json"
        }

    def _post(self, endpoint, payload):
        url = f"{self.base_url}{endpoint}/"

        try:
            response = requests.post(url, json=payload, headers=self.headers, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            logger.warning(f"Khalti {endpoint} timed out after {self.timeout}s")
            raise KhaltiTimeout(str(e)) from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Khalti {endpoint} request failed: {e}", exc_info=True)
            raise KhaltiError(str(e)) from e

        logger.info(f"Khalti {endpoint} responded with status {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Khalti {endpoint} returned a non-JSON body ({response.status_code}): {response.text[:200]}")
            raise KhaltiError(f"Invalid JSON from gateway: {e}") from e

        return KhaltiResponse(response.status_code, data)

    def initiate(self, payload):
        """Forwards an initiate payload unmodified."""
        return self._post('initiate', payload)

    def lookup(self, pidx):
        """Looks up a payment; only the pidx is sent."""
        return self._post('lookup', {'pidx': pidx})
