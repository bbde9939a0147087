"""Authentication handlers for the upstream APIs and inbound webhooks."""

from commerce_bridge.infrastructure.auth.basic_auth import BasicAuthHandler
from commerce_bridge.infrastructure.auth.oauth import OAuth1Signer
from commerce_bridge.infrastructure.auth.webhook_signature import (
    WebhookSignatureVerifier,
    compute_signature,
)

__all__ = ["BasicAuthHandler", "OAuth1Signer", "WebhookSignatureVerifier", "compute_signature"]
