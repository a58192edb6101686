"""Carrier gateway endpoints."""

from __future__ import annotations

import logging
from typing import Annotated, Any, ClassVar

from litestar import Controller, get, post
from litestar.params import Dependency

from litestar_carrier_gateway.gateway import (
    CREATE_SHIPMENT,
    GET_RATES,
    CarrierGateway,
)
from litestar_carrier_gateway.schemas import DispatchRequest

logger = logging.getLogger(__name__)


class CarrierController(Controller):
    """Rate quote and shipment endpoints backed by the gateway."""

    path = "/carrier"
    tags: ClassVar[list[str]] = ["carrier"]

    @get("/health")
    async def carrier_health(self) -> dict[str, str]:
        """Healthcheck endpoint for carrier routes."""
        return {"status": "ok"}

    @post("/", status_code=200)
    async def dispatch(
        self,
        data: DispatchRequest,
        gateway: Annotated[CarrierGateway, Dependency(skip_validation=True)],
    ) -> Any:
        """Run ``{action, ...payload}`` through the gateway dispatcher."""
        return await gateway.dispatch(data.action, data.payload())

    @post("/rates", status_code=200)
    async def get_rates(
        self,
        data: dict[str, Any],
        gateway: Annotated[CarrierGateway, Dependency(skip_validation=True)],
    ) -> Any:
        """Quote a package, cheapest offer first."""
        return await gateway.dispatch(GET_RATES, data)

    @post("/shipments", status_code=201)
    async def create_shipment(
        self,
        data: dict[str, Any],
        gateway: Annotated[CarrierGateway, Dependency(skip_validation=True)],
    ) -> Any:
        """Create a shipment with a URL-only PDF label."""
        return await gateway.dispatch(CREATE_SHIPMENT, data)
