"""Shared fixtures for litestar-carrier-gateway tests."""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterator
from typing import Any

import httpx
import pytest
import respx
from litestar import Litestar
from litestar.testing import TestClient

from litestar_carrier_gateway.config import FedExSettings, GatewayConfig
from litestar_carrier_gateway.credentials import Credentials
from litestar_carrier_gateway.gateway import CarrierGateway
from litestar_carrier_gateway.plugin import create_carrier_router

BASE_URL = "https://apis.fedex.test"
TOKEN_PATH = "/oauth/token"
RATES_PATH = "/rate/v1/rates/quotes"
SHIPMENTS_PATH = "/ship/v1/shipments"

RATE_PAYLOAD = {
    "weight": 2,
    "width": 10,
    "height": 10,
    "depth": 10,
    "originPostcode": "SW1A1AA",
    "destPostcode": "EC1A1BB",
}

SHIPPER = {
    "contact": {"personName": "Sender", "phoneNumber": "02070000000"},
    "address": {
        "streetLines": ["1 Sender Street"],
        "city": "London",
        "postalCode": "SW1A1AA",
        "countryCode": "GB",
    },
}

RECIPIENT = {
    "contact": {"personName": "Receiver", "phoneNumber": "02071111111"},
    "address": {
        "streetLines": ["2 Receiver Road"],
        "city": "London",
        "postalCode": "EC1A1BB",
        "countryCode": "GB",
    },
}

SHIPMENT_PAYLOAD = {
    "serviceType": "FEDEX_GROUND",
    "shipmentDetails": {
        "shipper": SHIPPER,
        "recipient": RECIPIENT,
        "weight": 3,
        "width": 20,
        "height": 15,
        "depth": 30,
    },
}


def token_response(
    token: str = "test-token", expires_in: int | None = 3600
) -> httpx.Response:
    body: dict[str, Any] = {
        "access_token": token,
        "token_type": "bearer",
        "scope": "CXS",
    }
    if expires_in is not None:
        body["expires_in"] = expires_in
    return httpx.Response(200, json=body)


def rate_detail(
    service_type: str,
    charge: float | None,
    currency: str | None = "GBP",
) -> dict[str, Any]:
    rated: dict[str, Any] = {"rateType": "ACCOUNT"}
    if charge is not None:
        rated["totalNetCharge"] = charge
    if currency is not None:
        rated["currency"] = currency
    return {"serviceType": service_type, "ratedShipmentDetails": [rated]}


def rates_response(*details: dict[str, Any]) -> httpx.Response:
    return httpx.Response(
        200,
        json={
            "transactionId": "rate-tx-1",
            "output": {"rateReplyDetails": list(details)},
        },
    )


def shipment_response(
    tracking_number: str = "794999999999",
    label_url: str = "https://labels.fedex.test/794999999999.pdf",
) -> httpx.Response:
    return httpx.Response(
        200,
        json={
            "transactionId": "ship-tx-1",
            "output": {
                "transactionShipments": [
                    {
                        "serviceType": "FEDEX_GROUND",
                        "pieceResponses": [
                            {
                                "trackingNumber": tracking_number,
                                "packageDocuments": [
                                    {
                                        "contentType": "LABEL",
                                        "docType": "PDF",
                                        "url": label_url,
                                    }
                                ],
                            }
                        ],
                    }
                ]
            },
        },
    )


@pytest.fixture()
def settings() -> FedExSettings:
    return FedExSettings(
        api_key="client-id",
        secret_key="client-secret",
        account_number="740561073",
        base_url=BASE_URL,
    )


@pytest.fixture()
def empty_settings() -> FedExSettings:
    return FedExSettings(
        api_key="",
        secret_key="",
        account_number="",
        base_url=BASE_URL,
    )


@pytest.fixture()
def credentials() -> Credentials:
    return Credentials(
        client_id="client-id",
        client_secret="client-secret",
        account_number="740561073",
    )


@pytest.fixture()
def config() -> GatewayConfig:
    return GatewayConfig(retry_max_attempts=3, retry_backoff_seconds=0)


@pytest.fixture()
def carrier_api() -> Iterator[respx.MockRouter]:
    """Mocked carrier API; every request outside it fails the test."""
    with respx.mock(
        base_url=BASE_URL,
        assert_all_called=False,
        assert_all_mocked=True,
    ) as router:
        yield router


@pytest.fixture()
async def http_client() -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient() as client:
        yield client


@pytest.fixture()
def gateway(config: GatewayConfig, settings: FedExSettings) -> CarrierGateway:
    return CarrierGateway(config, settings=settings)


@pytest.fixture()
def test_app(gateway: CarrierGateway) -> Litestar:
    return Litestar(route_handlers=[create_carrier_router(gateway=gateway)])


@pytest.fixture()
def client(test_app: Litestar) -> Iterator[TestClient]:
    with TestClient(app=test_app) as tc:
        yield tc
