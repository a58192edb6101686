"""FedEx REST API client: OAuth, rate quotes and shipments.

Implements the :class:`~litestar_carrier_gateway.protocols.CarrierClient`
capabilities against the FedEx JSON APIs:

- OAuth 2.0 client-credentials token (``/oauth/token``)
- Rate quotes (``/rate/v1/rates/quotes``)
- Shipment creation with a URL-only PDF label (``/ship/v1/shipments``)

Responses are normalized into :class:`RateOffer` and
:class:`ShipmentResult`; every failure is raised as one of the gateway
error classes.
"""

from __future__ import annotations

import logging
import re
from decimal import Decimal, InvalidOperation
from typing import Any, ClassVar

import httpx
from pydantic import ValidationError
from sendparcel.enums import LabelFormat

from litestar_carrier_gateway.config import FEDEX_PRODUCTION_URL, GatewayConfig
from litestar_carrier_gateway.credentials import Credentials
from litestar_carrier_gateway.exceptions import (
    AuthenticationError,
    RateQuoteError,
    ShipmentCreationError,
    TransportError,
)
from litestar_carrier_gateway.schemas import (
    RateOffer,
    RateRequest,
    ShipmentRequest,
    ShipmentResult,
)
from litestar_carrier_gateway.tokens import AccessToken

logger = logging.getLogger(__name__)

OAUTH_TOKEN_PATH = "/oauth/token"
RATE_QUOTES_PATH = "/rate/v1/rates/quotes"
SHIPMENTS_PATH = "/ship/v1/shipments"

CARRIER_NAME = "FedEx"
PICKUP_TYPE = "DROPOFF_AT_FEDEX_LOCATION"
RATE_REQUEST_TYPES = ["ACCOUNT"]
LABEL_STOCK_TYPE = "PAPER_4X6"
ETA_PLACEHOLDER = "Calculated at checkout"

DEFAULT_WEIGHT_KG = 1
DEFAULT_DIMENSION_CM = 10


def format_service_name(service_type: str) -> str:
    """Turn a service code into a label: ``FEDEX_GROUND`` -> ``Fedex Ground``."""
    words = service_type.replace("_", " ").lower()
    return re.sub(r"\b\w", lambda match: match.group().upper(), words)


def _dig(data: Any, *path: str | int) -> Any:
    """Walk nested dicts/lists, returning None at the first missing step."""
    current = data
    for key in path:
        if isinstance(key, int):
            if not isinstance(current, list) or len(current) <= key:
                return None
        elif not isinstance(current, dict):
            return None
        current = current[key] if isinstance(key, int) else current.get(key)
        if current is None:
            return None
    return current


class FedExCarrier:
    """FedEx integration bound to one HTTP client and billing account."""

    slug: ClassVar[str] = "fedex"
    display_name: ClassVar[str] = CARRIER_NAME

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        account_number: str,
        base_url: str = FEDEX_PRODUCTION_URL,
        config: GatewayConfig | None = None,
    ) -> None:
        self.http_client = http_client
        self.account_number = account_number
        self.base_url = base_url.rstrip("/")
        self.config = config or GatewayConfig()
        # Bounds every request, whatever timeout the client was built with.
        self.timeout = httpx.Timeout(self.config.request_timeout_seconds)

    async def _post(self, path: str, **kwargs: Any) -> httpx.Response:
        url = f"{self.base_url}{path}"
        try:
            response = await self.http_client.post(
                url, timeout=self.timeout, **kwargs
            )
        except httpx.TimeoutException as exc:
            raise TransportError(f"Timed out calling {url}") from exc
        except httpx.RequestError as exc:
            raise TransportError(f"Network error calling {url}: {exc}") from exc
        logger.debug("FedEx POST %s -> %s", path, response.status_code)
        return response

    # ==================== OAuth ====================

    async def fetch_token(self, credentials: Credentials) -> AccessToken:
        """Exchange the client credential pair for a bearer token."""
        response = await self._post(
            OAUTH_TOKEN_PATH,
            data={
                "grant_type": "client_credentials",
                "client_id": credentials.client_id,
                "client_secret": credentials.client_secret,
            },
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
        if not response.is_success:
            raise AuthenticationError(response.status_code, response.text)

        try:
            data = response.json()
        except ValueError as exc:
            raise AuthenticationError(
                response.status_code, "token response is not JSON"
            ) from exc

        access_token = _dig(data, "access_token")
        if not access_token:
            raise AuthenticationError(
                response.status_code, "no access_token in token response"
            )

        expires_in = _dig(data, "expires_in")
        try:
            lifetime = float(expires_in) if expires_in is not None else None
        except (TypeError, ValueError):
            lifetime = None

        logger.info("FedEx OAuth token obtained, expires in %ss", expires_in)
        return AccessToken(token=str(access_token), expires_in=lifetime)

    def _auth_headers(self, token: AccessToken) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }

    # ==================== Rating ====================

    def build_rate_body(self, request: RateRequest) -> dict[str, Any]:
        default_country = self.config.default_country_code
        return {
            "accountNumber": {"value": self.account_number},
            "requestedShipment": {
                "shipper": {
                    "address": {
                        "postalCode": request.origin_postcode,
                        "countryCode": request.origin_country_code
                        or default_country,
                    }
                },
                "recipient": {
                    "address": {
                        "postalCode": request.dest_postcode,
                        "countryCode": request.dest_country_code
                        or default_country,
                    }
                },
                "pickupType": PICKUP_TYPE,
                "rateRequestType": RATE_REQUEST_TYPES,
                "requestedPackageLineItems": [
                    {
                        "weight": {"units": "KG", "value": request.weight},
                        "dimensions": {
                            "length": request.depth,
                            "width": request.width,
                            "height": request.height,
                            "units": "CM",
                        },
                    }
                ],
            },
        }

    def parse_rates(self, data: Any) -> list[RateOffer]:
        """Normalize a rate reply into offers sorted by price.

        Missing levels anywhere in the reply yield defaults, not errors.
        """
        details = _dig(data, "output", "rateReplyDetails")
        if not isinstance(details, list):
            details = []
        offers = []
        for detail in details:
            service_type = str(_dig(detail, "serviceType") or "")
            rated = _dig(detail, "ratedShipmentDetails", 0)
            charge = _dig(rated, "totalNetCharge")
            try:
                price = Decimal(str(charge)) if charge is not None else Decimal(0)
            except InvalidOperation as exc:
                raise RateQuoteError(
                    f"Invalid charge {charge!r} for service {service_type}"
                ) from exc
            if not price.is_finite():
                raise RateQuoteError(
                    f"Invalid charge {charge!r} for service {service_type}"
                )

            try:
                offer = RateOffer(
                    id=service_type,
                    carrier=CARRIER_NAME,
                    service=format_service_name(service_type),
                    price=price,
                    currency=_dig(rated, "currency")
                    or self.config.default_currency,
                    eta=ETA_PLACEHOLDER,
                )
            except ValidationError as exc:
                raise RateQuoteError(
                    f"Invalid rate for service {service_type}: "
                    f"{exc.error_count()} invalid field(s)"
                ) from exc
            offers.append(offer)

        # sorted() is stable: equal prices keep the carrier's order
        return sorted(offers, key=lambda offer: offer.price)

    async def get_rates(
        self, token: AccessToken, request: RateRequest
    ) -> list[RateOffer]:
        """Quote one package between two postcodes."""
        response = await self._post(
            RATE_QUOTES_PATH,
            json=self.build_rate_body(request),
            headers=self._auth_headers(token),
        )
        if not response.is_success:
            raise RateQuoteError(
                f"Rate quote failed: {response.text}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise RateQuoteError(
                "Rate quote failed: response is not JSON",
                status_code=response.status_code,
            ) from exc

        return self.parse_rates(data)

    # ==================== Shipping ====================

    def build_shipment_body(self, request: ShipmentRequest) -> dict[str, Any]:
        details = request.shipment_details
        return {
            "labelResponseOptions": "URL_ONLY",
            "requestedShipment": {
                "shipper": details.shipper,
                "recipient": details.recipient,
                "serviceType": request.service_type,
                "pickupType": PICKUP_TYPE,
                "shippingChargesPayment": {
                    "paymentType": "SENDER",
                    "payor": {
                        "responsibleParty": {
                            "accountNumber": {"value": self.account_number}
                        }
                    },
                },
                "labelSpecification": {
                    "imageType": str(LabelFormat.PDF),
                    "labelStockType": LABEL_STOCK_TYPE,
                },
                "requestedPackageLineItems": [
                    {
                        "weight": {
                            "units": "KG",
                            "value": details.weight or DEFAULT_WEIGHT_KG,
                        },
                        "dimensions": {
                            "length": details.depth or DEFAULT_DIMENSION_CM,
                            "width": details.width or DEFAULT_DIMENSION_CM,
                            "height": details.height or DEFAULT_DIMENSION_CM,
                            "units": "CM",
                        },
                    }
                ],
            },
            "accountNumber": {"value": self.account_number},
        }

    def parse_shipment(
        self, data: Any, request: ShipmentRequest
    ) -> ShipmentResult:
        """Extract tracking number and label URL from a shipment reply."""
        completed = _dig(data, "output", "transactionShipments", 0)
        if completed is None:
            raise ShipmentCreationError("no shipment output returned")

        piece = _dig(completed, "pieceResponses", 0)
        tracking_number = _dig(piece, "trackingNumber")
        if not tracking_number:
            raise ShipmentCreationError("no tracking number returned")

        label_url = _dig(piece, "packageDocuments", 0, "url")
        if not label_url:
            raise ShipmentCreationError("no label document returned")

        logger.info(
            "FedEx shipment created: tracking=%s transaction=%s",
            tracking_number,
            _dig(data, "transactionId"),
        )
        return ShipmentResult(
            tracking_number=str(tracking_number),
            label_url=str(label_url),
            carrier=CARRIER_NAME,
            service=request.service_type,
            format=str(LabelFormat.PDF),
        )

    async def create_shipment(
        self, token: AccessToken, request: ShipmentRequest
    ) -> ShipmentResult:
        """Create a shipment and a URL-only PDF label."""
        response = await self._post(
            SHIPMENTS_PATH,
            json=self.build_shipment_body(request),
            headers=self._auth_headers(token),
        )
        if not response.is_success:
            raise ShipmentCreationError(
                f"Shipment creation failed: {response.text}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise ShipmentCreationError(
                "Shipment creation failed: response is not JSON",
                status_code=response.status_code,
            ) from exc

        return self.parse_shipment(data, request)
