"""Plan loading and module-tree flattening."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, MutableMapping, Optional

from ..errors import MalformedResource, PlanParseFailure
from .model import Resource

_LOGGER = logging.getLogger(__name__)


def parse_plan(text: str) -> Dict[str, Any]:
    """Decode a plan document and check it has ``planned_values.root_module``."""
    try:
        plan = json.loads(text)
    except ValueError as ex:
        raise PlanParseFailure(f"plan is not valid JSON: {ex}") from ex
    if not isinstance(plan, dict):
        raise PlanParseFailure("plan must be a JSON object")
    root_module(plan)
    return plan


def load_plan(path: Path | str) -> Dict[str, Any]:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as ex:
        raise PlanParseFailure(f"failed to read plan {path}: {ex}") from ex
    return parse_plan(text)


def root_module(plan: Dict[str, Any]) -> Dict[str, Any]:
    planned = plan.get("planned_values")
    if not isinstance(planned, dict):
        raise PlanParseFailure("plan has no 'planned_values' object")
    root = planned.get("root_module")
    if not isinstance(root, dict):
        raise PlanParseFailure("plan has no 'planned_values.root_module' object")
    return root


def extract_resources(
    module: Dict[str, Any],
    index: Optional[MutableMapping[str, Resource]] = None,
) -> List[Resource]:
    """Flatten a module tree depth-first, parents before children.

    Every extracted resource is also stored in ``index`` by address; a later
    resource with the same address replaces the earlier entry. Entries that
    are not well-formed resources are logged and skipped.
    """
    if index is None:
        index = {}
    out: List[Resource] = []

    entries = module.get("resources")
    if isinstance(entries, list):
        for entry in entries:
            try:
                resource = Resource.from_plan_entry(entry)
            except MalformedResource as ex:
                _LOGGER.warning("Skipping malformed resource: %s", ex)
                continue
            if resource.address in index:
                _LOGGER.debug("Duplicate resource address %s, keeping the later one", resource.address)
            index[resource.address] = resource
            out.append(resource)

    children = module.get("child_modules")
    if isinstance(children, list):
        for child in children:
            if not isinstance(child, dict):
                _LOGGER.warning("Skipping child module that is not an object")
                continue
            out.extend(extract_resources(child, index))

    return out
