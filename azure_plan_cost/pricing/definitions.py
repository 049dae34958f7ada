"""Pricing-map overrides loaded from a YAML or JSON file.

Expected shape (YAML shown)::

    azurerm_container_app:
      service_name: Azure Container Apps
      sku_keys: [workload_profile_type, sku]
      region_key: location
    azurerm_lb:
      service_name: Load Balancer
      sku_key: sku

Invalid files raise ValueError with a readable message, so a bad override
fails the run up front instead of silently mispricing resources.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

import yaml

from ..config import DEFAULT_REGION_KEY
from .pricing_map import PricingDefinition


def _as_list(x: Any) -> List[Any]:
    if x is None:
        return []
    if isinstance(x, list):
        return x
    return [x]


def _require(obj: Dict[str, Any], key: str, *, ctx: str) -> Any:
    if key not in obj:
        raise ValueError(f"Missing required key '{key}' in {ctx}")
    return obj[key]


def _load_document(path: Path) -> Dict[str, Any]:
    raw = path.read_text(encoding="utf-8")
    suffix = path.suffix.lower()
    if suffix not in (".yaml", ".yml", ".json"):
        raise ValueError(f"Unsupported pricing map file type: {path}")
    try:
        if suffix == ".json":
            data = json.loads(raw)
        else:
            data = yaml.safe_load(raw) or {}
    except (yaml.YAMLError, ValueError) as ex:
        raise ValueError(f"Malformed pricing map document: {ex}") from ex
    if not isinstance(data, dict):
        raise ValueError(f"Top-level pricing map must be a mapping in {path}")
    return data


def parse_definition(body: Any, *, ctx: str) -> PricingDefinition:
    if not isinstance(body, dict):
        raise ValueError(f"definition must be an object in {ctx}")
    service_name = str(_require(body, "service_name", ctx=ctx) or "").strip()
    if not service_name:
        raise ValueError(f"service_name cannot be empty in {ctx}")
    keys = _as_list(body.get("sku_keys")) or _as_list(body.get("sku_key"))
    sku_keys = tuple(str(k).strip() for k in keys if str(k).strip())
    region_key = str(body.get("region_key") or DEFAULT_REGION_KEY).strip()
    return PricingDefinition(service_name, sku_keys, region_key)


def load_pricing_overrides(path: Path | str) -> Dict[str, PricingDefinition]:
    p = Path(path)
    data = _load_document(p)
    out: Dict[str, PricingDefinition] = {}
    for resource_type, body in data.items():
        out[str(resource_type)] = parse_definition(
            body, ctx=f"pricing_map({p.name}).{resource_type}"
        )
    return out
