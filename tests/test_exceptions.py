"""Tests for the error taxonomy and its HTTP mapping."""

import pytest
from litestar import Litestar, get
from litestar.testing import TestClient
from sendparcel.exceptions import CommunicationError, SendParcelException

from litestar_carrier_gateway.exceptions import (
    EXCEPTION_HANDLERS,
    FALLBACK_MESSAGE,
    AuthenticationError,
    CarrierGatewayError,
    ConfigurationError,
    ErrorKind,
    RateQuoteError,
    ShipmentCreationError,
    TransportError,
    UnknownActionError,
)


def _raise_through_app(exc: Exception):
    @get("/test")
    async def handler() -> None:
        raise exc

    app = Litestar(
        route_handlers=[handler],
        exception_handlers=EXCEPTION_HANDLERS,
    )
    with TestClient(app) as client:
        return client.get("/test")


@pytest.mark.parametrize(
    ("exc", "status", "code"),
    [
        (ConfigurationError("missing carrier credentials"), 500, "configuration"),
        (AuthenticationError(401, "bad client"), 502, "authentication"),
        (RateQuoteError("Rate quote failed: nope"), 422, "rate_quote"),
        (
            ShipmentCreationError("no shipment output returned"),
            422,
            "shipment_creation",
        ),
        (UnknownActionError("trackParcel"), 400, "unknown_action"),
        (TransportError("Timed out"), 504, "transport"),
        (CarrierGatewayError("boom"), 500, "internal"),
    ],
)
def test_errors_map_to_status_codes(exc, status, code):
    resp = _raise_through_app(exc)
    assert resp.status_code == status
    data = resp.json()
    assert data["code"] == code
    assert data["detail"] == str(exc)


def test_all_errors_are_sendparcel_exceptions():
    for exc_type in EXCEPTION_HANDLERS:
        assert issubclass(exc_type, SendParcelException)


def test_transport_error_is_communication_error():
    """Transport failures stay recognisable to sendparcel-aware callers."""
    exc = TransportError("gateway down")
    assert isinstance(exc, CommunicationError)
    assert exc.kind is ErrorKind.TRANSPORT
    assert exc.retryable is True


def test_only_transport_errors_are_retryable():
    assert not ConfigurationError("x").retryable
    assert not AuthenticationError(401, "x").retryable
    assert not RateQuoteError("x").retryable
    assert not ShipmentCreationError("x").retryable
    assert not UnknownActionError("x").retryable


def test_authentication_error_carries_status_and_body():
    exc = AuthenticationError(401, '{"errors":[{"code":"NOT.AUTHORIZED"}]}')
    assert exc.status == 401
    assert "401" in str(exc)
    assert "NOT.AUTHORIZED" in str(exc)
    assert exc.context == {"status": 401}


def test_unknown_action_names_the_action():
    exc = UnknownActionError("trackParcel")
    assert exc.action == "trackParcel"
    assert str(exc) == "Unknown action: trackParcel"


def test_empty_message_falls_back():
    assert str(CarrierGatewayError("")) == FALLBACK_MESSAGE


def test_to_dict_flattens_kind_and_message():
    exc = RateQuoteError("Rate quote failed: bad postcode", status_code=400)
    assert exc.to_dict() == {
        "kind": "rate_quote",
        "message": "Rate quote failed: bad postcode",
    }
    assert exc.status_code == 400


def test_exception_handlers_is_dict():
    """EXCEPTION_HANDLERS is a dict of exception types to callables."""
    assert isinstance(EXCEPTION_HANDLERS, dict)
    assert len(EXCEPTION_HANDLERS) == 7
    for exc_type, handler in EXCEPTION_HANDLERS.items():
        assert isinstance(exc_type, type)
        assert issubclass(exc_type, Exception)
        assert callable(handler)
