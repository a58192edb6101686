"""Router factory for litestar-carrier-gateway."""

from __future__ import annotations

from litestar import Router
from litestar.di import Provide

from litestar_carrier_gateway.config import FedExSettings, GatewayConfig
from litestar_carrier_gateway.exceptions import EXCEPTION_HANDLERS
from litestar_carrier_gateway.gateway import CarrierGateway
from litestar_carrier_gateway.registry import CarrierRegistry
from litestar_carrier_gateway.routes.carrier import CarrierController


def create_carrier_router(
    *,
    config: GatewayConfig | None = None,
    settings: FedExSettings | None = None,
    gateway: CarrierGateway | None = None,
    registry: CarrierRegistry | None = None,
) -> Router:
    """Create a configured Litestar router.

    Args:
        config: Gateway configuration. Read from the environment if not
            provided.
        settings: Carrier credentials and endpoint.
        gateway: Prebuilt gateway. Creates one from the other arguments
            if not provided.
        registry: Carrier registry used when building the gateway.

    Returns:
        A Litestar Router with the carrier endpoints.
    """
    actual_gateway = gateway or CarrierGateway(
        config,
        settings=settings,
        registry=registry,
    )

    return Router(
        path="/",
        route_handlers=[CarrierController],
        dependencies={
            "gateway": Provide(lambda: actual_gateway, sync_to_thread=False),
        },
        exception_handlers=EXCEPTION_HANDLERS,
    )
