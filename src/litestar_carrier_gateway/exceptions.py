"""Error taxonomy and HTTP mapping for the carrier gateway."""

from __future__ import annotations

from enum import StrEnum
from typing import Any, ClassVar

from litestar import Request, Response
from sendparcel.exceptions import CommunicationError, SendParcelException

FALLBACK_MESSAGE = "Internal carrier gateway error"


class ErrorKind(StrEnum):
    """Classification carried by every gateway error."""

    CONFIGURATION = "configuration"
    AUTHENTICATION = "authentication"
    RATE_QUOTE = "rate_quote"
    SHIPMENT_CREATION = "shipment_creation"
    UNKNOWN_ACTION = "unknown_action"
    TRANSPORT = "transport"
    INTERNAL = "internal"


class CarrierGatewayError(SendParcelException):
    """Base class for all errors raised by the gateway."""

    kind: ClassVar[ErrorKind] = ErrorKind.INTERNAL
    retryable: ClassVar[bool] = False

    def __init__(
        self,
        message: str = FALLBACK_MESSAGE,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message or FALLBACK_MESSAGE, context)

    @property
    def message(self) -> str:
        return str(self)

    def to_dict(self) -> dict[str, str]:
        """Flattened view for display."""
        return {"kind": str(self.kind), "message": self.message}


class ConfigurationError(CarrierGatewayError):
    """Gateway is missing required configuration."""

    kind = ErrorKind.CONFIGURATION


class AuthenticationError(CarrierGatewayError):
    """Carrier token endpoint refused the client credentials."""

    kind = ErrorKind.AUTHENTICATION

    def __init__(self, status: int, body: str) -> None:
        self.status = status
        self.body = body
        super().__init__(
            f"Carrier authentication failed: {status} {body}".rstrip(),
            {"status": status},
        )


class RateQuoteError(CarrierGatewayError):
    """Rate quote was rejected or could not be read."""

    kind = ErrorKind.RATE_QUOTE

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message, {"status": status_code})


class ShipmentCreationError(CarrierGatewayError):
    """Shipment was rejected or the carrier response was incomplete."""

    kind = ErrorKind.SHIPMENT_CREATION

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message, {"status": status_code})


class UnknownActionError(CarrierGatewayError):
    """Dispatcher was asked for an action it does not implement."""

    kind = ErrorKind.UNKNOWN_ACTION

    def __init__(self, action: Any) -> None:
        self.action = action
        super().__init__(f"Unknown action: {action}")


class TransportError(CarrierGatewayError, CommunicationError):
    """Carrier could not be reached (network failure or timeout)."""

    kind = ErrorKind.TRANSPORT
    retryable = True


def _error_response(
    request: Request, exc: CarrierGatewayError, status_code: int
) -> Response:
    return Response(
        content={"detail": exc.message, "code": str(exc.kind)},
        status_code=status_code,
    )


def handle_configuration_error(
    request: Request, exc: ConfigurationError
) -> Response:
    """Map ConfigurationError to 500."""
    return _error_response(request, exc, 500)


def handle_authentication_error(
    request: Request, exc: AuthenticationError
) -> Response:
    """Map AuthenticationError to 502."""
    return _error_response(request, exc, 502)


def handle_rate_quote_error(
    request: Request, exc: RateQuoteError
) -> Response:
    """Map RateQuoteError to 422."""
    return _error_response(request, exc, 422)


def handle_shipment_creation_error(
    request: Request, exc: ShipmentCreationError
) -> Response:
    """Map ShipmentCreationError to 422."""
    return _error_response(request, exc, 422)


def handle_unknown_action(
    request: Request, exc: UnknownActionError
) -> Response:
    """Map UnknownActionError to 400."""
    return _error_response(request, exc, 400)


def handle_transport_error(
    request: Request, exc: TransportError
) -> Response:
    """Map TransportError to 504."""
    return _error_response(request, exc, 504)


def handle_gateway_error(
    request: Request, exc: CarrierGatewayError
) -> Response:
    """Map any other CarrierGatewayError to 500."""
    return _error_response(request, exc, 500)


EXCEPTION_HANDLERS = {
    ConfigurationError: handle_configuration_error,
    AuthenticationError: handle_authentication_error,
    RateQuoteError: handle_rate_quote_error,
    ShipmentCreationError: handle_shipment_creation_error,
    UnknownActionError: handle_unknown_action,
    TransportError: handle_transport_error,
    CarrierGatewayError: handle_gateway_error,
}
