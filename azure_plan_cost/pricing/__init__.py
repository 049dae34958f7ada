from .retail_api import NOT_FOUND, PriceQuote, PricingEngine, RetailPriceClient
from .selection import PriceCatalogEntry
from .units import monthly_cost

__all__ = [
    "NOT_FOUND",
    "PriceQuote",
    "PricingEngine",
    "RetailPriceClient",
    "PriceCatalogEntry",
    "monthly_cost",
]
