"""Plan -> priced resources.

Strictly sequential: every resource is extracted first (so references to
later siblings resolve), then each one is resolved, priced and costed in
plan order. Per-resource problems are logged and recorded on the
resource's line; they never stop the run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from .config import (
    HOURS_PER_MONTH,
    PRIVATE_ENDPOINT_FALLBACK_PRICE,
    PRIVATE_ENDPOINT_FALLBACK_UNIT,
    PRIVATE_ENDPOINT_RESOURCE_TYPE,
)
from .errors import CyclicReference
from .plan.model import Resource
from .plan.resolver import resolve
from .plan.variables import build_variable_table
from .plan.walker import extract_resources, root_module
from .pricing.pricing_map import PricingMap, build_default_pricing_map
from .pricing.retail_api import PricingEngine
from .pricing.units import monthly_cost
from .utils.trace import NULL_TRACE, TraceLogger

_LOGGER = logging.getLogger(__name__)

NODE_POOL_TYPE = "azurerm_kubernetes_cluster_node_pool"
CLUSTER_TYPE = "azurerm_kubernetes_cluster"


@dataclass
class PricedResource:
    resource: Resource
    service_name: str
    region: str
    sku: str
    unit_cost: float
    unit_of_measure: str
    quantity: float
    usage_description: str
    monthly_cost: float
    found: bool
    notes: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.resource.type,
            "name": self.resource.name,
            "address": self.resource.address,
            "service_name": self.service_name,
            "region": self.region,
            "sku": self.sku,
            "unit_cost": self.unit_cost,
            "unit_of_measure": self.unit_of_measure,
            "quantity": self.quantity,
            "usage": self.usage_description,
            "monthly_cost": round(self.monthly_cost, 2),
            "found": self.found,
            "notes": list(self.notes),
        }


@dataclass
class CostEstimate:
    items: List[PricedResource] = field(default_factory=list)
    total: float = 0.0

    def add(self, item: PricedResource) -> None:
        self.items.append(item)
        if item.found:
            self.total += item.monthly_cost

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_monthly_cost": round(self.total, 2),
            "resources": [item.to_dict() for item in self.items],
        }


class PlanEstimator:
    """Prices every resource of one plan against a PricingEngine."""

    def __init__(
        self,
        engine: PricingEngine,
        *,
        pricing_map: Optional[PricingMap] = None,
        provider: str = "",
        trace: TraceLogger = NULL_TRACE,
    ) -> None:
        self.engine = engine
        self.pricing_map = pricing_map or build_default_pricing_map()
        self.provider = provider or ""
        self.trace = trace

    def estimate(self, plan: Dict[str, Any]) -> CostEstimate:
        variables = build_variable_table(plan)
        index: Dict[str, Resource] = {}
        resources = extract_resources(root_module(plan), index)

        cluster_regions = self._cluster_regions(resources, variables, index)

        result = CostEstimate()
        for resource in resources:
            if self.provider and not resource.type.startswith(self.provider):
                continue
            result.add(self.price_resource(resource, variables, index, cluster_regions))

        _LOGGER.info(
            "Estimated %d resources (%d priced), total %.2f/month",
            len(result.items), sum(1 for i in result.items if i.found), result.total,
        )
        self.trace.log("summary", {"resources": len(result.items), "total": round(result.total, 2)})
        return result

    def _resolve(
        self,
        resource: Resource,
        key: str,
        variables: Mapping[str, str],
        index: Mapping[str, Resource],
        notes: Optional[List[str]] = None,
    ) -> str:
        try:
            return resolve(resource, key, variables, index)
        except CyclicReference as ex:
            _LOGGER.warning("%s: %s", resource.address, ex)
            if notes is not None:
                notes.append(str(ex))
            return ""

    def _cluster_regions(
        self,
        resources: List[Resource],
        variables: Mapping[str, str],
        index: Mapping[str, Resource],
    ) -> Dict[str, str]:
        """Cluster name -> region, for node pools that do not set their own."""
        regions: Dict[str, str] = {}
        for r in resources:
            if r.type != CLUSTER_TYPE:
                continue
            name = self._resolve(r, "name", variables, index)
            region = self._resolve(r, "location", variables, index)
            if name and region:
                regions[name] = region
        return regions

    def price_resource(
        self,
        resource: Resource,
        variables: Mapping[str, str],
        index: Mapping[str, Resource],
        cluster_regions: Optional[Mapping[str, str]] = None,
    ) -> PricedResource:
        definition = self.pricing_map.lookup(resource.type)
        notes: List[str] = []

        region = self._resolve(resource, definition.region_key, variables, index, notes) or resource.region
        if not region and resource.type == NODE_POOL_TYPE and cluster_regions:
            cluster_name = self._resolve(resource, "cluster_name", variables, index, notes)
            region = cluster_regions.get(cluster_name, "")
        resource.region = region

        sku = ""
        for key in definition.sku_keys:
            sku = self._resolve(resource, key, variables, index, notes)
            if sku:
                break

        quantity, usage = 1.0, "-"
        if definition.usage_extractor is not None:
            quantity, usage = definition.usage_extractor(resource.values)
            if quantity == 0:
                quantity = 1.0

        unit_cost, unit, found = self.engine.fetch_price(definition.service_name, region, sku)

        if resource.type == PRIVATE_ENDPOINT_RESOURCE_TYPE and not found:
            _LOGGER.warning(
                "No catalog price for private endpoint %s, using fallback %.2f per hour",
                resource.address, PRIVATE_ENDPOINT_FALLBACK_PRICE,
            )
            unit_cost, unit, found = PRIVATE_ENDPOINT_FALLBACK_PRICE, PRIVATE_ENDPOINT_FALLBACK_UNIT, True
            usage = f"{quantity:.0f} x {HOURS_PER_MONTH} hours"
            notes.append("fallback price")

        cost = 0.0
        if found:
            cost = monthly_cost(unit_cost, unit, quantity)
            if "hour" in unit.lower() and usage == "-":
                usage = f"{quantity:.0f} x {HOURS_PER_MONTH} hours"
        else:
            _LOGGER.warning(
                "Price not found for %s (service=%r region=%r sku=%r)",
                resource.address, definition.service_name, region, sku,
            )
            notes.append("price not found")

        item = PricedResource(
            resource=resource,
            service_name=definition.service_name,
            region=region,
            sku=sku,
            unit_cost=unit_cost,
            unit_of_measure=unit,
            quantity=quantity,
            usage_description=usage,
            monthly_cost=cost,
            found=found,
            notes=notes,
        )
        self.trace.log(
            "resource_priced",
            {
                "service_name": item.service_name,
                "region": region,
                "sku": sku,
                "found": found,
                "unit_cost": unit_cost,
                "unit_of_measure": unit,
                "monthly_cost": round(cost, 2),
            },
            address=resource.address,
        )
        return item


def estimate_plan(
    plan: Dict[str, Any],
    engine: PricingEngine,
    *,
    pricing_map: Optional[PricingMap] = None,
    provider: str = "",
    trace: TraceLogger = NULL_TRACE,
) -> CostEstimate:
    return PlanEstimator(engine, pricing_map=pricing_map, provider=provider, trace=trace).estimate(plan)
