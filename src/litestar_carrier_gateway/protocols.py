"""Carrier capability protocol."""

from __future__ import annotations

from typing import ClassVar, Protocol, runtime_checkable

from litestar_carrier_gateway.credentials import Credentials
from litestar_carrier_gateway.schemas import (
    RateOffer,
    RateRequest,
    ShipmentRequest,
    ShipmentResult,
)
from litestar_carrier_gateway.tokens import AccessToken

__all__ = [
    "CarrierClient",
]


@runtime_checkable
class CarrierClient(Protocol):
    """What the dispatcher needs from a carrier integration.

    Full lifecycle: fetch_token -> get_rates / create_shipment.
    """

    slug: ClassVar[str]
    display_name: ClassVar[str]

    async def fetch_token(self, credentials: Credentials) -> AccessToken:
        """Exchange client credentials for a bearer token."""
        ...

    async def get_rates(
        self, token: AccessToken, request: RateRequest
    ) -> list[RateOffer]:
        """Quote a package, cheapest offer first."""
        ...

    async def create_shipment(
        self, token: AccessToken, request: ShipmentRequest
    ) -> ShipmentResult:
        """Create a shipment and return its tracking number and label."""
        ...
