"""Litestar example app exposing the FedEx carrier gateway.

Credentials come from FEDEX_API_KEY, FEDEX_SECRET_KEY and
FEDEX_ACCOUNT_NUMBER. Run with::

    litestar --app examples.app:app run
"""

from __future__ import annotations

import logging

from litestar import Litestar

from litestar_carrier_gateway.carriers.fedex import FedExCarrier
from litestar_carrier_gateway.config import FedExSettings, GatewayConfig
from litestar_carrier_gateway.plugin import create_carrier_router

DEFAULT_CARRIER = FedExCarrier.slug

logging.basicConfig(level=logging.INFO)

app = Litestar(
    route_handlers=[
        create_carrier_router(
            config=GatewayConfig(default_carrier=DEFAULT_CARRIER),
            settings=FedExSettings(),
        )
    ]
)
