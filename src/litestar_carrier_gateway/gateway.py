"""Gateway dispatcher: the single entry point for carrier calls."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError
from sendparcel.exceptions import ProviderNotFoundError

from litestar_carrier_gateway.config import FedExSettings, GatewayConfig
from litestar_carrier_gateway.credentials import Credentials, load_credentials
from litestar_carrier_gateway.exceptions import (
    CarrierGatewayError,
    ConfigurationError,
    RateQuoteError,
    ShipmentCreationError,
    UnknownActionError,
)
from litestar_carrier_gateway.protocols import CarrierClient
from litestar_carrier_gateway.registry import CarrierRegistry
from litestar_carrier_gateway.retry import call_with_retries
from litestar_carrier_gateway.schemas import (
    RateOffer,
    RateRequest,
    ShipmentRequest,
    ShipmentResult,
)
from litestar_carrier_gateway.tokens import AccessToken, TokenCache

logger = logging.getLogger(__name__)

GET_RATES = "getRates"
CREATE_SHIPMENT = "createShipment"

ModelT = TypeVar("ModelT", bound=BaseModel)


def _validation_message(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )


def _parse(
    model: type[ModelT],
    payload: Any,
    error: Callable[[str], CarrierGatewayError],
) -> ModelT:
    if isinstance(payload, model):
        return payload
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise error(_validation_message(exc)) from exc


class CarrierGateway:
    """Authenticate, then quote or ship through the configured carrier.

    Each invocation loads credentials, obtains a bearer token (reused from
    the token cache when possible) and performs exactly one business call.
    Errors keep their kind; anything unexpected is re-raised as a plain
    :class:`CarrierGatewayError` with the original message.

    Args:
        config: Gateway configuration.
        settings: Carrier credentials and endpoint. Read from the
            environment on every invocation when not provided.
        http_client: Shared HTTP client. Never closed by the gateway.
            A short-lived client is opened per invocation if omitted.
        registry: Carrier registry. Creates one with built-in carriers
            if not provided.
        token_cache: Token cache. Creates one if not provided and the
            cache is enabled in ``config``.
    """

    def __init__(
        self,
        config: GatewayConfig | None = None,
        *,
        settings: FedExSettings | None = None,
        http_client: httpx.AsyncClient | None = None,
        registry: CarrierRegistry | None = None,
        token_cache: TokenCache | None = None,
    ) -> None:
        self.config = config or GatewayConfig()
        self.settings = settings
        self._http_client = http_client
        self.registry = registry or CarrierRegistry()
        self.registry.discover()
        if token_cache is None and self.config.token_cache_enabled:
            token_cache = TokenCache(
                refresh_margin_seconds=self.config.token_refresh_margin_seconds
            )
        self.token_cache = token_cache

    def _resolve_settings(self) -> FedExSettings:
        if self.settings is not None:
            return self.settings
        return FedExSettings()

    @asynccontextmanager
    async def _client(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._http_client is not None:
            yield self._http_client
            return
        timeout = httpx.Timeout(self.config.request_timeout_seconds)
        async with httpx.AsyncClient(timeout=timeout) as client:
            yield client

    def _carrier(
        self,
        http_client: httpx.AsyncClient,
        credentials: Credentials,
        base_url: str,
    ) -> CarrierClient:
        slug = self.config.default_carrier
        try:
            carrier_class: type[Any] = self.registry.get_by_slug(slug)
        except ProviderNotFoundError as exc:
            raise ConfigurationError(
                f"Carrier {slug!r} is not registered"
            ) from exc
        return carrier_class(
            http_client,
            account_number=credentials.account_number,
            base_url=base_url,
            config=self.config,
        )

    async def _acquire_token(
        self, carrier: CarrierClient, credentials: Credentials
    ) -> AccessToken:
        async def fetch() -> AccessToken:
            return await call_with_retries(
                lambda: carrier.fetch_token(credentials),
                name=f"{carrier.slug} token",
                max_attempts=self.config.retry_max_attempts,
                backoff_seconds=self.config.retry_backoff_seconds,
            )

        if self.token_cache is None:
            return await fetch()
        return await self.token_cache.get(credentials, fetch)

    def _forget_rejected_token(
        self, exc: CarrierGatewayError, credentials: Credentials
    ) -> None:
        if self.token_cache is None:
            return
        if getattr(exc, "status_code", None) == 401:
            logger.info("Carrier rejected cached token, dropping it")
            self.token_cache.invalidate(credentials)

    async def _run(
        self,
        action: str,
        call: Callable[[CarrierClient, AccessToken], Awaitable[Any]],
        *,
        credentials: Credentials,
        base_url: str,
        retry: bool,
    ) -> Any:
        async with self._client() as http_client:
            carrier = self._carrier(http_client, credentials, base_url)
            token = await self._acquire_token(carrier, credentials)
            try:
                if not retry:
                    return await call(carrier, token)
                return await call_with_retries(
                    lambda: call(carrier, token),
                    name=f"{carrier.slug} {action}",
                    max_attempts=self.config.retry_max_attempts,
                    backoff_seconds=self.config.retry_backoff_seconds,
                )
            except CarrierGatewayError as exc:
                self._forget_rejected_token(exc, credentials)
                raise

    async def _invoke(
        self,
        action: str,
        payload: Any,
    ) -> Any:
        try:
            # Missing credentials abort before anything touches the network.
            settings = self._resolve_settings()
            credentials = load_credentials(settings)

            if action == GET_RATES:
                rate_request = _parse(RateRequest, payload, RateQuoteError)
                return await self._run(
                    action,
                    lambda carrier, token: carrier.get_rates(
                        token, rate_request
                    ),
                    credentials=credentials,
                    base_url=settings.base_url,
                    retry=True,
                )
            if action == CREATE_SHIPMENT:
                shipment_request = _parse(
                    ShipmentRequest, payload, ShipmentCreationError
                )
                # Never retried: no idempotency key protects against
                # creating the shipment twice.
                return await self._run(
                    action,
                    lambda carrier, token: carrier.create_shipment(
                        token, shipment_request
                    ),
                    credentials=credentials,
                    base_url=settings.base_url,
                    retry=False,
                )
            raise UnknownActionError(action)
        except CarrierGatewayError as exc:
            logger.error(
                "Carrier gateway %s failed (%s): %s", action, exc.kind, exc
            )
            raise
        except Exception as exc:
            logger.exception("Carrier gateway %s failed unexpectedly", action)
            raise CarrierGatewayError(str(exc)) from exc

    async def get_rates(
        self, request: RateRequest | dict[str, Any]
    ) -> list[RateOffer]:
        """Quote a package, cheapest offer first."""
        return await self._invoke(GET_RATES, request)

    async def create_shipment(
        self, request: ShipmentRequest | dict[str, Any]
    ) -> ShipmentResult:
        """Create a shipment and return its tracking number and label URL."""
        return await self._invoke(CREATE_SHIPMENT, request)

    async def dispatch(
        self, action: str, payload: dict[str, Any] | None = None
    ) -> list[dict[str, Any]] | dict[str, Any]:
        """Run ``action`` with ``payload`` and return plain data.

        ``getRates`` returns a list of offer dicts, ``createShipment`` a
        shipment dict, both keyed in camelCase.
        """
        result = await self._invoke(action, payload or {})
        if isinstance(result, list):
            return [offer.model_dump(by_alias=True) for offer in result]
        return result.model_dump(by_alias=True)
