"""Carrier gateway configuration."""

from __future__ import annotations

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

FEDEX_PRODUCTION_URL = "https://apis.fedex.com"


class GatewayConfig(BaseSettings):
    """Runtime config for the carrier gateway.

    Reads from environment variables with CARRIER_GATEWAY_ prefix.
    """

    model_config = SettingsConfigDict(env_prefix="CARRIER_GATEWAY_")

    default_carrier: str = "fedex"
    request_timeout_seconds: float = 30.0

    # Retry settings (token fetch and rate quotes only)
    retry_max_attempts: int = 3
    retry_backoff_seconds: float = 0.5

    # Token cache settings
    token_cache_enabled: bool = True
    token_refresh_margin_seconds: float = 60.0

    # Fallbacks for fields the caller or carrier leaves out
    default_country_code: str = "GB"
    default_currency: str = "GBP"


class FedExSettings(BaseSettings):
    """FedEx API credentials and endpoint.

    Reads from environment variables with FEDEX_ prefix.
    """

    model_config = SettingsConfigDict(env_prefix="FEDEX_")

    api_key: str = ""
    secret_key: SecretStr = SecretStr("")
    account_number: str = ""
    base_url: str = FEDEX_PRODUCTION_URL
