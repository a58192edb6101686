"""Normalized request/response shapes shared by all carriers."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RateRequest(_CamelModel):
    """Package and route to quote.

    Country codes are optional and fall back to the configured default.
    """

    weight: float
    width: float
    height: float
    depth: float
    origin_postcode: str
    dest_postcode: str
    origin_country_code: str | None = None
    dest_country_code: str | None = None


class RateOffer(_CamelModel):
    """One priced service option."""

    id: str
    carrier: str
    service: str
    price: Decimal
    currency: str
    eta: str


class ShipmentDetails(_CamelModel):
    """Parties and package for a shipment.

    ``shipper`` and ``recipient`` are sent to the carrier verbatim.
    """

    shipper: dict[str, Any]
    recipient: dict[str, Any]
    weight: float | None = None
    width: float | None = None
    height: float | None = None
    depth: float | None = None


class ShipmentRequest(_CamelModel):
    service_type: str
    shipment_details: ShipmentDetails


class ShipmentResult(_CamelModel):
    """Created shipment with its tracking number and label reference."""

    tracking_number: str
    label_url: str
    carrier: str
    service: str
    format: str


class DispatchRequest(BaseModel):
    """Gateway invocation body: an action plus its payload fields."""

    model_config = ConfigDict(extra="allow")

    action: str

    def payload(self) -> dict[str, Any]:
        return dict(self.model_extra or {})
