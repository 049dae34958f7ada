"""Variable table built from the two places a plan records variable values."""

from __future__ import annotations

import json
from types import MappingProxyType
from typing import Any, Dict, Mapping

from .model import to_text


def _variable_text(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return json.dumps(value, sort_keys=True)
    return to_text(value)


def build_variable_table(plan: Dict[str, Any]) -> Mapping[str, str]:
    """Flatten ``variables`` and ``variable_values`` into name -> text.

    ``variables`` holds ``{name: {"value": ...}}``; ``variable_values`` holds
    ``{name: value}`` and wins when both define a name. Null values are left
    out so a null never masquerades as a real region or SKU.
    """
    table: Dict[str, str] = {}

    declared = plan.get("variables")
    if isinstance(declared, dict):
        for name, body in declared.items():
            if isinstance(body, dict) and body.get("value") is not None:
                table[name] = _variable_text(body["value"])

    resolved = plan.get("variable_values")
    if isinstance(resolved, dict):
        for name, value in resolved.items():
            if value is not None:
                table[name] = _variable_text(value)

    return MappingProxyType(table)
