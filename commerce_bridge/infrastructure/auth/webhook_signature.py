import base64
import hashlib
import hmac
from typing import Mapping, Optional, Union

from commerce_bridge.core.exceptions import AuthenticationError, ConfigError
from commerce_bridge.core.logging import get_logger

logger = get_logger(__name__)

SIGNATURE_HEADERS = ("x-webhook-signature", "x-wc-webhook-signature")


def compute_signature(secret: str, payload: Union[bytes, str]) -> str:
    """
    Compute the signature a store attaches to a webhook delivery.

    Args:
        secret: Shared webhook secret
        payload: Raw request body

    Returns:
        Base64 encoded HMAC-SHA256 of the body
    """
    if isinstance(payload, str):
        payload = payload.encode("utf-8")
    digest = hmac.new(secret.encode("utf-8"), payload, hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


class WebhookSignatureVerifier:
    """Verifies inbound webhook deliveries against a shared secret."""

    def __init__(self, secret: Optional[str]):
        if not secret:
            raise ConfigError("WEBHOOK_SECRET is required to receive webhooks", context={"setting": "WEBHOOK_SECRET"})
        self.secret = secret

    @staticmethod
    def extract_signature(headers: Mapping[str, str]) -> Optional[str]:
        """Return the first signature header present, header names compared case-insensitively."""
        lowered = {k.lower(): v for k, v in headers.items()}
        for name in SIGNATURE_HEADERS:
            if lowered.get(name):
                return lowered[name]
        return None

    def verify(self, payload: bytes, signature: Optional[str]) -> None:
        """
        Check a delivery signature in constant time.

        Args:
            payload: Raw request body exactly as received
            signature: Value of the signature header

        Raises:
            AuthenticationError: If the signature is missing or does not match
        """
        if not signature:
            logger.warning("Received webhook without signature")
            raise AuthenticationError("Missing webhook signature", code="missing_signature")

        expected = compute_signature(self.secret, payload)
        if not hmac.compare_digest(expected.encode("ascii"), signature.strip().encode("utf-8")):
            logger.warning("Received webhook with invalid signature")
            raise AuthenticationError("Invalid webhook signature", code="invalid_signature")
