import secrets
import time
from typing import Callable, Dict, Optional

import httpx
from oauthlib.common import Request
from oauthlib.oauth1 import SIGNATURE_HMAC_SHA256, SIGNATURE_TYPE_AUTH_HEADER, Client
from oauthlib.oauth1.rfc5849 import signature

from commerce_bridge.core.exceptions import ConfigError
from commerce_bridge.core.logging import get_logger

logger = get_logger(__name__)


class OAuth1Signer:
    """
    Signs requests with OAuth 1.0a one-legged HMAC-SHA256.

    Used by the commerce client when credentials cannot travel in the query
    string, i.e. when the store is reached over plain HTTP.
    """

    def __init__(
        self,
        consumer_key: str,
        consumer_secret: str,
        nonce_factory: Optional[Callable[[], str]] = None,
        clock: Optional[Callable[[], float]] = None
    ):
        """
        Initialize the signer.

        Args:
            consumer_key: REST API consumer key
            consumer_secret: REST API consumer secret
            nonce_factory: Produces a fresh nonce per request
            clock: Returns the current UNIX time in seconds
        """
        if not consumer_key or not consumer_secret:
            logger.error("Missing consumer credentials for OAuth 1.0a signing")
            raise ConfigError("Consumer key and secret are required for OAuth 1.0a signing")

        self.consumer_key = consumer_key
        self.consumer_secret = consumer_secret
        self.nonce_factory = nonce_factory or (lambda: secrets.token_hex(16))
        self.clock = clock or time.time

    def client(self) -> Client:
        """oauthlib client for one request, with a fresh nonce and timestamp."""
        return Client(
            self.consumer_key,
            client_secret=self.consumer_secret,
            signature_method=SIGNATURE_HMAC_SHA256,
            signature_type=SIGNATURE_TYPE_AUTH_HEADER,
            nonce=self.nonce_factory(),
            timestamp=str(int(self.clock())),
        )

    def base_string(self, method: str, url: httpx.URL) -> str:
        """Signature base string the next request to url would be signed over."""
        oauth_params = self.client().get_oauth_params(Request(str(url), method.upper()))
        params = list(url.params.multi_items()) + list(oauth_params)
        return signature.signature_base_string(
            method.upper(),
            signature.base_string_uri(str(url)),
            signature.normalize_parameters(params),
        )

    def authorization_header(self, method: str, url: httpx.URL) -> Dict[str, str]:
        """
        Generate an Authorization header for a request.

        Every query parameter already present on the URL is included in the
        signature.

        Args:
            method: HTTP method
            url: Full request URL including query parameters

        Returns:
            Authorization header dict
        """
        _, headers, _ = self.client().sign(str(url), http_method=method.upper())
        logger.debug(f"Signed {method.upper()} {url.scheme}://{url.host}{url.path} with OAuth 1.0a")
        return {"Authorization": headers["Authorization"]}
