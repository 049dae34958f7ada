# azure_plan_cost/pricing/retail_api.py
"""Azure Retail Prices API lookup with a tiered, paginated fallback."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, List, NamedTuple, Optional, Protocol, Sequence, Tuple
from urllib.parse import quote_plus

import httpx

from ..config import FALLTHROUGH_ON_TRANSPORT_ERROR, REQUEST_TIMEOUT_SECONDS, RETAIL_API_URL
from ..errors import DecodeFailure, PriceLookupError, TransportFailure
from .filters import DEFAULT_TIERS, FilterTier, build_filters
from .selection import (
    PriceCatalogEntry,
    SelectionPolicyRegistry,
    build_default_registry,
    select_entry,
)

_LOGGER = logging.getLogger(__name__)


class PriceQuote(NamedTuple):
    unit_price: float
    unit_of_measure: str
    found: bool


NOT_FOUND = PriceQuote(0.0, "", False)


class PricingEngine(Protocol):
    """Cloud-agnostic price lookup."""

    def fetch_price(self, service: str, region: str, sku: str) -> PriceQuote: ...


def build_filter_url(filter_str: str, base_url: str = RETAIL_API_URL) -> str:
    return f"{base_url}?$filter={quote_plus(filter_str)}"


class RetailPriceClient:
    """PricingEngine backed by the Azure Retail Prices API.

    Stateless between calls apart from the underlying HTTP connection pool.
    Tiers from ``filters.DEFAULT_TIERS`` are tried in order; each tier's
    pages are followed through ``NextPageLink`` until an entry is accepted
    by the service's selection policy.
    """

    def __init__(
        self,
        *,
        base_url: str = RETAIL_API_URL,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        fallthrough_on_error: bool = FALLTHROUGH_ON_TRANSPORT_ERROR,
        tiers: Sequence[FilterTier] = DEFAULT_TIERS,
        policies: Optional[SelectionPolicyRegistry] = None,
        client: Any = None,
    ) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self.fallthrough_on_error = fallthrough_on_error
        self.tiers = tuple(tiers)
        self.policies = policies or build_default_registry()
        self._client = client
        self._owns_client = client is None

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = httpx.Client(timeout=httpx.Timeout(self.timeout))
        return self._client

    def close(self) -> None:
        if self._owns_client and self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> "RetailPriceClient":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Paging
    # ------------------------------------------------------------------
    def fetch_page(self, url: str) -> Tuple[List[Dict[str, Any]], str]:
        """GET one catalog page; return its items and the next page URL ("" at the end)."""
        try:
            resp = self.client.get(url)
            resp.raise_for_status()
        except httpx.HTTPError as ex:
            raise TransportFailure(f"catalog request failed: {ex}") from ex
        try:
            data = resp.json()
        except ValueError as ex:
            raise DecodeFailure(f"catalog response is not JSON: {ex}") from ex
        if not isinstance(data, dict):
            raise DecodeFailure("catalog response is not a JSON object")
        items = data.get("Items") or []
        if not isinstance(items, list):
            raise DecodeFailure("catalog response 'Items' is not a list")
        next_url = data.get("NextPageLink") or ""
        return items, str(next_url)

    def iter_pages(self, filter_str: str) -> Iterator[List[Dict[str, Any]]]:
        url = build_filter_url(filter_str, self.base_url)
        page = 0
        while url:
            page += 1
            _LOGGER.debug("Retail API page %d: %s", page, url)
            items, url = self.fetch_page(url)
            yield items

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------
    def find_entry(self, service: str, region: str, sku: str) -> Optional[PriceCatalogEntry]:
        if not service:
            return None
        policy = self.policies.get(service)

        for tier_name, filter_str in build_filters(service, region, sku, self.tiers):
            try:
                for items in self.iter_pages(filter_str):
                    entry = select_entry(items, policy, region, sku)
                    if entry is not None:
                        _LOGGER.debug(
                            "Matched %s/%s/%s at tier %s: meter=%r price=%s",
                            service, region, sku, tier_name, entry.meter_name, entry.retail_price,
                        )
                        return entry
            except PriceLookupError as ex:
                _LOGGER.warning(
                    "Price lookup for %s/%s/%s failed at tier %s: %s",
                    service, region, sku, tier_name, ex,
                )
                if not self.fallthrough_on_error:
                    return None
        return None

    def fetch_price(self, service: str, region: str, sku: str) -> PriceQuote:
        entry = self.find_entry(service, region, sku)
        if entry is None:
            return NOT_FOUND
        return PriceQuote(entry.retail_price, entry.unit_of_measure, True)
