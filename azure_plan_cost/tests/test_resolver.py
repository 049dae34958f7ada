import sys

import pytest

from azure_plan_cost.errors import CyclicReference
from azure_plan_cost.plan.model import Literal, Resource, ResourceRef, VariableRef
from azure_plan_cost.plan.resolver import resolve
from azure_plan_cost.plan.walker import extract_resources, root_module

from .conftest import make_plan, make_resource


def _index(*entries):
    index = {}
    resources = extract_resources(root_module(make_plan(resources=list(entries))), index)
    return resources, index


def test_literal_is_returned_unchanged():
    (vm,), index = _index(make_resource("azurerm_linux_virtual_machine", "vm", {"size": "Standard_B2s"}))
    assert resolve(vm, "size", {}, index) == "Standard_B2s"


def test_absent_or_null_attribute_is_empty():
    (vm,), index = _index(make_resource("azurerm_linux_virtual_machine", "vm", {"size": None}))
    assert resolve(vm, "size", {}, index) == ""
    assert resolve(vm, "location", {}, index) == ""


def test_variable_reference_is_looked_up():
    (vm,), index = _index(
        make_resource("azurerm_linux_virtual_machine", "vm", {"location": {"references": ["var.location"]}})
    )
    assert resolve(vm, "location", {"location": "northeurope"}, index) == "northeurope"


def test_first_matching_variable_wins_over_later_references():
    resources, index = _index(
        make_resource("azurerm_resource_group", "rg", {"location": "westus"}, "azurerm_resource_group.rg.main"),
        make_resource(
            "azurerm_linux_virtual_machine",
            "vm",
            {
                "location": {
                    "references": [
                        "var.missing",
                        "var.location",
                        "azurerm_resource_group.rg.main.location",
                    ]
                }
            },
        ),
    )
    assert resolve(resources[1], "location", {"location": "eastus"}, index) == "eastus"


def test_resource_reference_with_explicit_field():
    resources, index = _index(
        make_resource("azurerm_resource_group", "rg", {"location": "westeurope"}, "azurerm_resource_group.rg.main"),
        make_resource(
            "azurerm_public_ip",
            "ip",
            {"region": {"references": ["azurerm_resource_group.rg.main.location"]}},
        ),
    )
    assert resolve(resources[1], "region", {}, index) == "westeurope"


def test_resource_reference_defaults_to_same_field():
    resources, index = _index(
        make_resource("azurerm_resource_group", "rg", {"location": "uksouth"}, "azurerm_resource_group.rg.main"),
        make_resource("azurerm_public_ip", "ip", {"location": {"references": ["azurerm_resource_group.rg.main"]}}),
    )
    assert resolve(resources[1], "location", {}, index) == "uksouth"


def test_reference_to_later_sibling_resolves():
    resources, index = _index(
        make_resource("azurerm_public_ip", "ip", {"location": {"references": ["azurerm_resource_group.rg.main"]}}),
        make_resource("azurerm_resource_group", "rg", {"location": "uksouth"}, "azurerm_resource_group.rg.main"),
    )
    assert resolve(resources[0], "location", {}, index) == "uksouth"


def test_transitive_chain_resolves_to_final_literal():
    resources, index = _index(
        make_resource("t", "a", {"location": {"references": ["t.b.0.location"]}}, "t.a.0"),
        make_resource("t", "b", {"location": {"references": ["t.c.0"]}}, "t.b.0"),
        make_resource("t", "c", {"location": "francecentral"}, "t.c.0"),
    )
    assert resolve(resources[0], "location", {}, index) == "francecentral"


def test_chain_ending_in_variable():
    resources, index = _index(
        make_resource("t", "a", {"location": {"references": ["t.b.0.location"]}}, "t.a.0"),
        make_resource("t", "b", {"location": {"references": ["var.region"]}}, "t.b.0"),
    )
    assert resolve(resources[0], "location", {"region": "swedencentral"}, index) == "swedencentral"


def test_unresolvable_references_fall_back_to_constant():
    (vm,), index = _index(
        make_resource(
            "t",
            "a",
            {
                "location": {
                    "references": ["var.unknown", "t.missing.0", "local.region", "short.ref"],
                    "constant_value": "westeurope",
                }
            },
        )
    )
    assert resolve(vm, "location", {}, index) == "westeurope"


def test_target_without_field_is_skipped():
    resources, index = _index(
        make_resource("t", "b", {"other": "x"}, "t.b.0"),
        make_resource("t", "a", {"location": {"references": ["t.b.0"], "constant_value": "eastus2"}}, "t.a.0"),
    )
    assert resolve(resources[1], "location", {}, index) == "eastus2"


def test_nothing_resolvable_is_empty():
    (vm,), index = _index(make_resource("t", "a", {"location": {"references": ["var.nope"]}}))
    assert resolve(vm, "location", {}, index) == ""


def test_cycle_between_two_resources_is_detected():
    resources, index = _index(
        make_resource("t", "a", {"location": {"references": ["t.b.0"]}}, "t.a.0"),
        make_resource("t", "b", {"location": {"references": ["t.a.0"]}}, "t.b.0"),
    )
    with pytest.raises(CyclicReference) as excinfo:
        resolve(resources[0], "location", {}, index)
    assert excinfo.value.chain == (
        ("t.a.0", "location"),
        ("t.b.0", "location"),
        ("t.a.0", "location"),
    )


def test_self_reference_is_detected():
    (a,), index = _index(make_resource("t", "a", {"location": {"references": ["t.a.0"]}}, "t.a.0"))
    with pytest.raises(CyclicReference):
        resolve(a, "location", {}, index)


def test_depth_bound_is_enforced():
    entries = []
    for i in range(10):
        entries.append(make_resource("t", f"r{i}", {"location": {"references": [f"t.r{i + 1}.0"]}}, f"t.r{i}.0"))
    entries.append(make_resource("t", "r10", {"location": "westeurope"}, "t.r10.0"))
    resources, index = _index(*entries)

    assert resolve(resources[0], "location", {}, index) == "westeurope"
    with pytest.raises(CyclicReference, match="exceeds 3 steps"):
        resolve(resources[0], "location", {}, index, max_depth=3)


def test_same_address_with_different_fields_is_not_a_cycle():
    resources, index = _index(
        make_resource(
            "t", "a", {"location": {"references": ["t.b.0.region"]}, "fallback": "centralus"}, "t.a.0"
        ),
        make_resource("t", "b", {"region": {"references": ["t.a.0.fallback"]}}, "t.b.0"),
    )
    assert resolve(resources[0], "location", {}, index) == "centralus"


def test_bare_variable_attribute():
    vm = Resource("t", "a", "t.a.0", {"location": "x"}, {"location": VariableRef("region")})

    assert resolve(vm, "location", {"region": "norwayeast"}, {}) == "norwayeast"
    assert resolve(vm, "location", {}, {}) == ""


def test_bare_resource_reference_attribute():
    rg = Resource("t", "rg", "t.rg.0", {"location": "japaneast"}, {"location": Literal("japaneast")})
    vm = Resource("t", "a", "t.a.0", {"location": "x"}, {"location": ResourceRef("t.rg.0")})

    assert resolve(vm, "location", {}, {"t.rg.0": rg}) == "japaneast"


def test_depth_is_capped_below_recursion_limit():
    count = sys.getrecursionlimit()
    entries = [
        make_resource("t", f"r{i}", {"location": {"references": [f"t.r{i + 1}.0"]}}, f"t.r{i}.0")
        for i in range(count)
    ]
    entries.append(make_resource("t", f"r{count}", {"location": "westeurope"}, f"t.r{count}.0"))
    resources, index = _index(*entries)

    with pytest.raises(CyclicReference, match="exceeds"):
        resolve(resources[0], "location", {}, index, max_depth=count * 10)
