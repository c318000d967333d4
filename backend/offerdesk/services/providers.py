"""Base-price providers for offer composition.

There is no live GDS/NDC or inventory integration; each provider returns the
configured placeholder price. Swap an implementation in via OfferComposer's
constructor.
"""

from offerdesk.config import settings


class FareSourceProvider:
    """Base fare when no negotiated fare matches the route."""

    def __init__(self, base_fare: float | None = None):
        self.base_fare = base_fare if base_fare is not None else settings.placeholder_base_fare

    async def get_base_fare(self, search_params: dict) -> float:
        return float(self.base_fare)


class AncillaryPriceProvider:
    def __init__(self, base_price: float | None = None):
        self.base_price = base_price if base_price is not None else settings.placeholder_ancillary_price

    async def get_base_price(self, ancillary_code: str) -> float:
        return float(self.base_price)


class BundlePriceProvider:
    def __init__(self, base_price: float | None = None):
        self.base_price = base_price if base_price is not None else settings.placeholder_bundle_price

    async def get_base_price(self, bundle_code: str) -> float:
        return float(self.base_price)
