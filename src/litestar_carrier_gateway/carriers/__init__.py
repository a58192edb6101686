"""Built-in carrier integrations."""

from litestar_carrier_gateway.carriers.fedex import FedExCarrier

BUILTIN_CARRIERS = [FedExCarrier]

__all__ = ["BUILTIN_CARRIERS", "FedExCarrier"]
