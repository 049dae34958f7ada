"""Attribute resolution across variables and other resources' attributes.

``resolve`` answers "what concrete string is configured for this attribute",
following ``var.*`` references into the variable table and resource-path
references into other resources, to any depth. Each step of a resolution
chain is recorded as an ``(address, field)`` pair; meeting a pair already on
the chain, or exceeding ``MAX_REFERENCE_DEPTH``, raises CyclicReference.
"""

from __future__ import annotations

import logging
import sys
from typing import Mapping, Optional, Tuple

from ..config import MAX_REFERENCE_DEPTH
from ..errors import CyclicReference
from .model import Computed, Literal, Resource, ResourceRef, VariableRef

_LOGGER = logging.getLogger(__name__)

Chain = Tuple[Tuple[str, str], ...]


def resolve(
    resource: Resource,
    key: str,
    variables: Mapping[str, str],
    index: Mapping[str, Resource],
    *,
    max_depth: Optional[int] = None,
) -> str:
    """Return the concrete value of ``resource.<key>``, or "" if unknown.

    Raises:
        CyclicReference: the references form a loop or nest deeper than
            ``max_depth`` (defaults to ``MAX_REFERENCE_DEPTH``, never more than
            half the interpreter recursion limit).
    """
    limit = MAX_REFERENCE_DEPTH if max_depth is None else max_depth
    limit = min(limit, sys.getrecursionlimit() // 2)
    return _resolve(resource, key, variables, index, ((resource.address, key),), limit)


def _resolve(
    resource: Resource,
    key: str,
    variables: Mapping[str, str],
    index: Mapping[str, Resource],
    chain: Chain,
    limit: int,
) -> str:
    value = resource.attribute(key)

    if isinstance(value, Literal):
        return value.value
    if isinstance(value, VariableRef):
        return variables.get(value.name, "")
    if isinstance(value, ResourceRef):
        value = Computed((value,))
    if not isinstance(value, Computed):
        return ""

    for ref in value.references:
        if isinstance(ref, VariableRef):
            if ref.name in variables:
                return variables[ref.name]
            continue

        target = index.get(ref.target_address)
        if target is None:
            continue
        target_field = ref.field or key
        if not target.has_attribute(target_field):
            continue

        step = (target.address, target_field)
        if step in chain:
            raise CyclicReference(chain + (step,))
        if len(chain) > limit:
            raise CyclicReference(
                chain + (step,),
                f"Attribute reference chain exceeds {limit} steps at {target.address}.{target_field}",
            )
        _LOGGER.debug("Following %s.%s -> %s.%s", resource.address, key, target.address, target_field)
        return _resolve(target, target_field, variables, index, chain + (step,), limit)

    if value.constant is not None:
        return value.constant
    return ""
