"""Carrier credential loading."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field

from litestar_carrier_gateway.config import FedExSettings
from litestar_carrier_gateway.exceptions import ConfigurationError


@dataclass(frozen=True, slots=True)
class Credentials:
    """Client credential pair plus the billing account number."""

    client_id: str
    client_secret: str = field(repr=False)
    account_number: str

    @property
    def fingerprint(self) -> str:
        """Stable cache key that does not expose the secret."""
        raw = f"{self.client_id}:{self.client_secret}".encode()
        return hashlib.sha256(raw).hexdigest()


def load_credentials(settings: FedExSettings | None = None) -> Credentials:
    """Resolve carrier credentials from process configuration.

    Raises:
        ConfigurationError: If any of the three values is empty or unset.
    """
    settings = settings if settings is not None else FedExSettings()
    client_id = settings.api_key
    client_secret = settings.secret_key.get_secret_value()
    account_number = settings.account_number

    if not (client_id and client_secret and account_number):
        raise ConfigurationError("missing carrier credentials")

    return Credentials(
        client_id=client_id,
        client_secret=client_secret,
        account_number=account_number,
    )
