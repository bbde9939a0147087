import os
import sys
from enum import Enum
from functools import lru_cache
from typing import Optional
from urllib.parse import urlparse

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from commerce_bridge.core.exceptions import ConfigError


class AuthMode(str, Enum):
    """How the commerce client authenticates its requests."""
    AUTO = "auto"
    QUERY_STRING = "query_string"
    OAUTH1 = "oauth1"


class WooCommerceConfig(BaseModel):
    """Immutable connection settings for the commerce REST API."""

    model_config = ConfigDict(frozen=True)

    base_url: str
    consumer_key: str
    consumer_secret: str
    api_version: str = "wc/v3"
    auth_mode: AuthMode = AuthMode.AUTO
    timeout: float = 30.0


class WordPressConfig(BaseModel):
    """Immutable connection settings for the content REST API."""

    model_config = ConfigDict(frozen=True)

    base_url: str
    username: str
    password: str
    timeout: float = 30.0


class Settings(BaseSettings):
    """Application configuration settings loaded from environment variables."""

    # Server identity
    SERVER_NAME: str = "woocommerce-mcp-server"
    SERVER_VERSION: str = "1.0.0"

    # Commerce API settings
    WOOCOMMERCE_URL: str = ""
    WOOCOMMERCE_KEY: str = ""
    WOOCOMMERCE_SECRET: str = ""
    WOOCOMMERCE_API_VERSION: str = "wc/v3"
    WOOCOMMERCE_AUTH_MODE: AuthMode = AuthMode.AUTO

    # Content API settings, the URL defaults to WOOCOMMERCE_URL
    WORDPRESS_URL: Optional[str] = None
    WORDPRESS_USERNAME: Optional[str] = None
    WORDPRESS_PASSWORD: Optional[str] = None

    # Cache settings
    USE_REDIS: bool = False
    REDIS_URL: str = "redis://localhost:6379"
    CACHE_PREFIX: str = "commerce_bridge"
    CACHE_DEFAULT_TTL: int = 300  # seconds
    CACHE_ENABLED: bool = True

    # External API timeout and retry settings
    REQUEST_TIMEOUT: float = 30.0  # seconds
    MAX_RETRIES: int = 3
    RETRY_INITIAL_DELAY: float = 0.3  # seconds
    RETRY_BACKOFF_FACTOR: float = 2.0
    RETRY_MAX_DELAY: float = 10.0  # seconds

    # Webhook settings
    WEBHOOK_SECRET: Optional[str] = None
    WEBHOOK_DELIVERY_URL: Optional[str] = None
    WEBHOOK_HOST: str = "0.0.0.0"
    WEBHOOK_PORT: int = 8080

    # Logging settings
    LOG_LEVEL: str = "INFO"
    ENABLE_STRUCTURED_LOGGING: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("WOOCOMMERCE_URL", "WORDPRESS_URL", "WEBHOOK_DELIVERY_URL")
    @classmethod
    def strip_trailing_slash(cls, v: Optional[str]) -> Optional[str]:
        """Store base URLs without a trailing slash."""
        if isinstance(v, str):
            return v.strip().rstrip("/")
        return v

    @property
    def has_wordpress_credentials(self) -> bool:
        return bool(self.WORDPRESS_USERNAME and self.WORDPRESS_PASSWORD)

    def woocommerce_config(self) -> WooCommerceConfig:
        """
        Build the commerce connection record.

        Returns:
            WooCommerceConfig: Validated, immutable connection settings

        Raises:
            ConfigError: If the URL or the consumer credentials are missing or malformed
        """
        validate_base_url(self.WOOCOMMERCE_URL, "WOOCOMMERCE_URL")
        if not self.WOOCOMMERCE_KEY or not self.WOOCOMMERCE_SECRET:
            raise ConfigError(
                "WOOCOMMERCE_KEY and WOOCOMMERCE_SECRET are required",
                context={"setting": "WOOCOMMERCE_KEY"}
            )

        return WooCommerceConfig(
            base_url=self.WOOCOMMERCE_URL,
            consumer_key=self.WOOCOMMERCE_KEY,
            consumer_secret=self.WOOCOMMERCE_SECRET,
            api_version=self.WOOCOMMERCE_API_VERSION.strip("/"),
            auth_mode=self.WOOCOMMERCE_AUTH_MODE,
            timeout=self.REQUEST_TIMEOUT,
        )

    def wordpress_config(self) -> WordPressConfig:
        """
        Build the content connection record.

        Raises:
            ConfigError: If the WordPress credentials are not configured
        """
        base_url = self.WORDPRESS_URL or self.WOOCOMMERCE_URL
        validate_base_url(base_url, "WORDPRESS_URL")
        if not self.has_wordpress_credentials:
            raise ConfigError(
                "WORDPRESS_USERNAME and WORDPRESS_PASSWORD are required",
                context={"setting": "WORDPRESS_USERNAME"}
            )

        return WordPressConfig(
            base_url=base_url,
            username=self.WORDPRESS_USERNAME,
            password=self.WORDPRESS_PASSWORD,
            timeout=self.REQUEST_TIMEOUT,
        )


def validate_base_url(url: Optional[str], setting: str) -> None:
    """
    Check that a base URL is absolute and uses HTTP or HTTPS.

    Args:
        url: The URL to validate
        setting: Name of the setting, reported in the error

    Raises:
        ConfigError: If the URL is missing or malformed
    """
    if not url:
        raise ConfigError(f"{setting} is required", context={"setting": setting})

    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigError(
            f"{setting} must be an absolute http(s) URL, got '{url}'",
            context={"setting": setting}
        )


def load_env_file(env_file: str = ".env") -> None:
    """
    Load environment variables from specified .env file.

    Args:
        env_file: Path to the .env file. Defaults to ".env".
    """
    env_path = os.path.join(os.getcwd(), env_file)
    if os.path.exists(env_path):
        load_dotenv(env_path)
    else:
        # stdout carries the JSON-RPC stream
        print(f"Warning: Environment file {env_path} not found", file=sys.stderr)


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings with caching for efficiency.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
