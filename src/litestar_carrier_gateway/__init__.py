"""Litestar carrier gateway: OAuth, rate quotes and shipments."""

from typing import TYPE_CHECKING

__version__ = "0.1.0"

__all__ = [
    "AuthenticationError",
    "CarrierClient",
    "CarrierGateway",
    "CarrierGatewayError",
    "CarrierRegistry",
    "ConfigurationError",
    "FedExSettings",
    "GatewayConfig",
    "RateOffer",
    "RateQuoteError",
    "RateRequest",
    "ShipmentCreationError",
    "ShipmentRequest",
    "ShipmentResult",
    "TransportError",
    "UnknownActionError",
    "__version__",
    "create_carrier_router",
]

if TYPE_CHECKING:
    from litestar_carrier_gateway.config import FedExSettings, GatewayConfig
    from litestar_carrier_gateway.exceptions import (
        AuthenticationError,
        CarrierGatewayError,
        ConfigurationError,
        RateQuoteError,
        ShipmentCreationError,
        TransportError,
        UnknownActionError,
    )
    from litestar_carrier_gateway.gateway import CarrierGateway
    from litestar_carrier_gateway.plugin import create_carrier_router
    from litestar_carrier_gateway.protocols import CarrierClient
    from litestar_carrier_gateway.registry import CarrierRegistry
    from litestar_carrier_gateway.schemas import (
        RateOffer,
        RateRequest,
        ShipmentRequest,
        ShipmentResult,
    )


def __getattr__(name: str):
    # Lazy imports to avoid loading all submodules on package import.
    if name in ("GatewayConfig", "FedExSettings"):
        from litestar_carrier_gateway import config

        return getattr(config, name)
    if name == "create_carrier_router":
        from litestar_carrier_gateway.plugin import create_carrier_router

        return create_carrier_router
    if name == "CarrierGateway":
        from litestar_carrier_gateway.gateway import CarrierGateway

        return CarrierGateway
    if name == "CarrierRegistry":
        from litestar_carrier_gateway.registry import CarrierRegistry

        return CarrierRegistry
    if name == "CarrierClient":
        from litestar_carrier_gateway.protocols import CarrierClient

        return CarrierClient
    if name in (
        "AuthenticationError",
        "CarrierGatewayError",
        "ConfigurationError",
        "RateQuoteError",
        "ShipmentCreationError",
        "TransportError",
        "UnknownActionError",
    ):
        from litestar_carrier_gateway import exceptions

        return getattr(exceptions, name)
    if name in (
        "RateOffer",
        "RateRequest",
        "ShipmentRequest",
        "ShipmentResult",
    ):
        from litestar_carrier_gateway import schemas

        return getattr(schemas, name)
    raise AttributeError(
        f"module 'litestar_carrier_gateway' has no attribute {name!r}"
    )
