"""Per-service rules for picking one catalog entry out of a page.

The catalog data is inconsistent across services (meter names, units, SKU
aliases), so "does this entry price the resource" is a policy. The generic
policy covers most services; services that need an exact meter register
their own policy in the registry.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol

from ..config import PRIVATE_ENDPOINT_METER, PRIVATE_LINK_SERVICE


@dataclass(frozen=True)
class PriceCatalogEntry:
    retail_price: float
    unit_of_measure: str = ""
    meter_name: str = ""
    sku_name: str = ""
    arm_sku_name: str = ""
    arm_region_name: str = ""

    @classmethod
    def from_item(cls, item: Dict[str, Any]) -> "PriceCatalogEntry":
        try:
            price = float(item.get("retailPrice") or 0.0)
        except (TypeError, ValueError):
            price = 0.0
        return cls(
            retail_price=price,
            unit_of_measure=str(item.get("unitOfMeasure") or ""),
            meter_name=str(item.get("meterName") or ""),
            sku_name=str(item.get("skuName") or ""),
            arm_sku_name=str(item.get("armSkuName") or ""),
            arm_region_name=str(item.get("armRegionName") or ""),
        )


class SelectionPolicy(Protocol):
    def accepts(self, entry: PriceCatalogEntry, region: str, sku: str) -> bool: ...


class GenericPolicy:
    """First positive-priced entry that matches the SKU, is per-operation, or any if no SKU."""

    def accepts(self, entry: PriceCatalogEntry, region: str, sku: str) -> bool:
        if entry.retail_price <= 0:
            return False
        if sku and (entry.arm_sku_name == sku or entry.sku_name == sku or sku in entry.meter_name):
            return True
        # consumption-metered services have no SKU concept
        if "operation" in entry.unit_of_measure.lower() or "operation" in entry.meter_name.lower():
            return True
        return not sku


class ExactMeterPolicy:
    """Only an hourly entry with the given meter name in the requested region."""

    def __init__(self, meter_name: str) -> None:
        self.meter_name = meter_name.lower()

    def accepts(self, entry: PriceCatalogEntry, region: str, sku: str) -> bool:
        return (
            entry.retail_price > 0
            and entry.meter_name.lower() == self.meter_name
            and entry.arm_region_name.lower() == (region or "").lower()
            and "hour" in entry.unit_of_measure.lower()
        )


@dataclass
class SelectionPolicyRegistry:
    """Lookup of selection policies by Retail ``serviceName``."""

    policies: Dict[str, SelectionPolicy] = field(default_factory=dict)
    default: SelectionPolicy = field(default_factory=GenericPolicy)

    def register(self, service_name: str, policy: SelectionPolicy) -> None:
        self.policies[service_name] = policy

    def get(self, service_name: str) -> SelectionPolicy:
        return self.policies.get(service_name, self.default)


def build_default_registry() -> SelectionPolicyRegistry:
    reg = SelectionPolicyRegistry()
    reg.register(PRIVATE_LINK_SERVICE, ExactMeterPolicy(PRIVATE_ENDPOINT_METER))
    return reg


def select_entry(
    items: Any, policy: SelectionPolicy, region: str, sku: str
) -> Optional[PriceCatalogEntry]:
    """First entry in catalog order the policy accepts."""
    if not isinstance(items, list):
        return None
    for item in items:
        if not isinstance(item, dict):
            continue
        entry = PriceCatalogEntry.from_item(item)
        if policy.accepts(entry, region, sku):
            return entry
    return None
