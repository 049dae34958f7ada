"""Catalog filter tiers, most specific first.

Each tier is data: a name and a builder returning the OData ``$filter``
expression for a (service, region, sku) triple, or None when the tier does
not apply (e.g. no region known). New tiers are added to ``DEFAULT_TIERS``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

FilterBuilder = Callable[[str, str, str], Optional[str]]


def odata_quote(value: str) -> str:
    """Quote a string literal for an OData filter (single quotes doubled)."""
    return "'" + (value or "").replace("'", "''") + "'"


@dataclass(frozen=True)
class FilterTier:
    name: str
    build: FilterBuilder


def _service_region_sku(service: str, region: str, sku: str) -> Optional[str]:
    if not region or not sku:
        return None
    # The catalog carries the SKU under two near-duplicate fields.
    return (
        f"serviceName eq {odata_quote(service)} and armRegionName eq {odata_quote(region)}"
        f" and (skuName eq {odata_quote(sku)} or armSkuName eq {odata_quote(sku)})"
    )


def _service_region(service: str, region: str, sku: str) -> Optional[str]:
    if not region:
        return None
    return f"serviceName eq {odata_quote(service)} and armRegionName eq {odata_quote(region)}"


def _service_only(service: str, region: str, sku: str) -> Optional[str]:
    return f"serviceName eq {odata_quote(service)}"


DEFAULT_TIERS: Tuple[FilterTier, ...] = (
    FilterTier("service+region+sku", _service_region_sku),
    FilterTier("service+region", _service_region),
    FilterTier("service", _service_only),
)


def build_filters(
    service: str,
    region: str,
    sku: str,
    tiers: Sequence[FilterTier] = DEFAULT_TIERS,
) -> List[Tuple[str, str]]:
    """Return ``(tier_name, filter_expr)`` for every tier that applies."""
    out: List[Tuple[str, str]] = []
    for tier in tiers:
        expr = tier.build(service, region, sku)
        if expr:
            out.append((tier.name, expr))
    return out
