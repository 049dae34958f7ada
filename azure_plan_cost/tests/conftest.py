import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1].parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from azure_plan_cost.pricing.retail_api import NOT_FOUND, PriceQuote


class FakeEngine:
    """PricingEngine answering from a {(service, region, sku): PriceQuote} table."""

    def __init__(self, prices=None):
        self.prices = dict(prices or {})
        self.calls = []

    def fetch_price(self, service, region, sku):
        self.calls.append((service, region, sku))
        return self.prices.get((service, region, sku), NOT_FOUND)


@pytest.fixture
def fake_engine():
    return FakeEngine()


def make_plan(resources=None, child_modules=None, variables=None, variable_values=None):
    root = {"resources": list(resources or [])}
    if child_modules is not None:
        root["child_modules"] = child_modules
    plan = {"planned_values": {"root_module": root}}
    if variables is not None:
        plan["variables"] = variables
    if variable_values is not None:
        plan["variable_values"] = variable_values
    return plan


def make_resource(rtype, name, values, address=None):
    return {
        "type": rtype,
        "name": name,
        "address": address or f"{rtype}.{name}",
        "values": values,
    }


__all__ = ["FakeEngine", "PriceQuote", "make_plan", "make_resource"]
