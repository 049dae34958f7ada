"""Exception taxonomy for plan cost estimation.

Only ``PlanParseFailure`` is fatal to a run. The others are raised close to
where the problem is detected and handled per resource (or per price
lookup) so a single bad entry never stops the batch.
"""

from __future__ import annotations

from typing import Sequence, Tuple


class PlanCostError(Exception):
    """Base class for all estimator errors."""


class PlanParseFailure(PlanCostError):
    """The plan document is not JSON or lacks ``planned_values.root_module``."""


class MalformedResource(PlanCostError):
    """A resource entry in the plan does not have the expected shape."""


class CyclicReference(PlanCostError):
    """Attribute references loop back on themselves (or nest too deeply)."""

    def __init__(self, chain: Sequence[Tuple[str, str]], message: str = "") -> None:
        self.chain = tuple(chain)
        rendered = " -> ".join(f"{address}.{field}" for address, field in self.chain)
        super().__init__(message or f"Cyclic attribute reference: {rendered}")


class PriceLookupError(PlanCostError):
    """A catalog page could not be fetched or understood."""


class TransportFailure(PriceLookupError):
    """Network error, timeout or non-2xx response from the catalog."""


class DecodeFailure(PriceLookupError):
    """Catalog response body is not the expected JSON document."""


__all__ = [
    "PlanCostError",
    "PlanParseFailure",
    "MalformedResource",
    "CyclicReference",
    "PriceLookupError",
    "TransportFailure",
    "DecodeFailure",
]
