"""Carrier registry."""

from sendparcel.registry import PluginRegistry


class CarrierRegistry(PluginRegistry):
    """Plugin registry holding carrier integrations instead of providers."""

    def _discover_unlocked(self) -> None:
        from litestar_carrier_gateway.carriers import BUILTIN_CARRIERS

        for carrier_class in BUILTIN_CARRIERS:
            self._register_provider(carrier_class)  # type: ignore[arg-type]
        self._discovered = True
