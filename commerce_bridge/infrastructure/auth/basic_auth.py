import base64
from typing import Dict, Optional

from commerce_bridge.core.exceptions import ConfigError
from commerce_bridge.core.logging import get_logger

logger = get_logger(__name__)


class BasicAuthHandler:
    """Handles HTTP Basic authentication for the content API (application passwords)."""

    def __init__(self, username: Optional[str] = None, password: Optional[str] = None):
        """
        Initialize the basic authentication handler.

        Args:
            username: WordPress username
            password: WordPress application password
        """
        self.username = username
        self.password = password

    def generate_header(self) -> Dict[str, str]:
        """
        Generate an Authorization header for basic authentication.

        Returns:
            Authorization header dict

        Raises:
            ConfigError: If credentials are missing
        """
        if not self.username or not self.password:
            logger.error("Missing credentials for basic authentication")
            raise ConfigError("Username and password are required for basic authentication")

        encoded = self.encode_credentials(self.username, self.password)
        return {"Authorization": f"Basic {encoded}"}

    @staticmethod
    def encode_credentials(username: str, password: str) -> str:
        """
        Encode credentials to base64 for basic authentication.

        Args:
            username: Username
            password: Password

        Returns:
            Base64 encoded credentials
        """
        credentials = f"{username}:{password}".encode("utf-8")
        return base64.b64encode(credentials).decode("ascii")
