"""Typed view of resources and attribute values in a Terraform JSON plan.

A plan attribute is either a direct value or an object describing how the
value is computed::

    "location": "westeurope"
    "location": {"references": ["var.location"]}
    "location": {"references": ["azurerm_resource_group.rg.main.location"]}
    "location": {"constant_value": "westeurope"}

``parse_attribute`` turns each shape into one of the closed set of variants
below so the resolver never has to poke at untyped nested dicts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, Union

from ..errors import MalformedResource

VARIABLE_PREFIX = "var."


def to_text(value: Any) -> str:
    """Render a scalar plan value as text (``true``/``false``, ``2`` not ``2.0``)."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True)
class Literal:
    value: str


@dataclass(frozen=True)
class VariableRef:
    name: str


@dataclass(frozen=True)
class ResourceRef:
    """Pointer to another resource's attribute.

    ``field`` is None when the reference names only the resource address, in
    which case the attribute being resolved is looked up under its own key.
    """

    target_address: str
    field: Optional[str] = None


@dataclass(frozen=True)
class Computed:
    """A value known only through references and/or a constant."""

    references: Tuple[Union[VariableRef, ResourceRef], ...] = ()
    constant: Optional[str] = None


@dataclass(frozen=True)
class Unknown:
    pass


AttributeValue = Union[Literal, VariableRef, ResourceRef, Computed, Unknown]


def parse_reference(ref: str) -> Optional[Union[VariableRef, ResourceRef]]:
    """Classify one entry of a ``references`` list.

    ``var.<name>`` is a variable. Anything with at least three dot-separated
    parts is a resource path whose address is the first three parts; a
    fourth part, when present, names the target field. Other shapes
    (``local.x``, bare ``type.name``) cannot be followed and yield None.
    """
    if not isinstance(ref, str) or not ref:
        return None
    if ref.startswith(VARIABLE_PREFIX):
        return VariableRef(ref[len(VARIABLE_PREFIX):])
    parts = ref.split(".")
    if len(parts) < 3:
        return None
    target_field = parts[3] if len(parts) > 3 else None
    return ResourceRef(".".join(parts[:3]), target_field)


def parse_attribute(raw: Any) -> AttributeValue:
    if raw is None:
        return Unknown()
    if isinstance(raw, (str, bool, int, float)):
        return Literal(to_text(raw))
    if isinstance(raw, dict):
        refs = raw.get("references")
        parsed = []
        if isinstance(refs, list):
            for ref in refs:
                candidate = parse_reference(ref)
                if candidate is not None:
                    parsed.append(candidate)
        constant = None
        if "constant_value" in raw and raw["constant_value"] is not None:
            constant = to_text(raw["constant_value"])
        if parsed or constant is not None:
            return Computed(tuple(parsed), constant)
    return Unknown()


@dataclass
class Resource:
    """One resource from ``planned_values``.

    ``values`` keeps the raw plan attributes (usage extractors read them);
    ``attributes`` is the parsed view used for resolution. ``region`` starts
    empty and is filled once the estimator has resolved it.
    """

    type: str
    name: str
    address: str
    values: Dict[str, Any] = field(default_factory=dict)
    attributes: Dict[str, AttributeValue] = field(default_factory=dict)
    region: str = ""

    def has_attribute(self, key: str) -> bool:
        return self.values.get(key) is not None

    def attribute(self, key: str) -> AttributeValue:
        value = self.attributes.get(key)
        return value if value is not None else Unknown()

    @classmethod
    def from_plan_entry(cls, entry: Any) -> "Resource":
        if not isinstance(entry, dict):
            raise MalformedResource(f"resource entry is {type(entry).__name__}, not an object")
        values = entry.get("values")
        if not isinstance(values, dict):
            raise MalformedResource(
                f"resource {entry.get('address') or '<unnamed>'} has no 'values' object"
            )
        return cls(
            type=to_text(entry.get("type")),
            name=to_text(entry.get("name")),
            address=to_text(entry.get("address")),
            values=values,
            attributes={key: parse_attribute(raw) for key, raw in values.items()},
        )
