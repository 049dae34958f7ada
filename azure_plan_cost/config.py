#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
config.py

Configuration constants and defaults for the plan cost estimator.

Values that an operator may reasonably want to change without editing code
(API endpoint, timeout, recursion bound, log level) can be overridden by
AZURECOST_* environment variables. They are read once, at import time.
"""

import os
import sys


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


# ---------------------------------------------------------------------
# Azure Retail Prices API
# ---------------------------------------------------------------------
# Public, unauthenticated endpoint. Responses are paginated through
# "NextPageLink".
RETAIL_API_URL = os.getenv(
    "AZURECOST_RETAIL_API_URL", "https://prices.azure.com/api/retail/prices"
)

# REQUEST_TIMEOUT_SECONDS:
# - Per-request timeout for a single catalog page.
# - No retries: a timed-out page ends the lookup.
REQUEST_TIMEOUT_SECONDS = float(os.getenv("AZURECOST_REQUEST_TIMEOUT", "10.0"))

# FALLTHROUGH_ON_TRANSPORT_ERROR:
# - False (default): a failed page fetch ends the whole lookup as not-found.
# - True: a failed page fetch only ends the current filter tier and the
#   next, less specific tier is tried.
FALLTHROUGH_ON_TRANSPORT_ERROR = _env_bool("AZURECOST_FALLTHROUGH_ON_ERROR", False)

# ---------------------------------------------------------------------
# Cost calculation
# ---------------------------------------------------------------------
# 730 = 365 * 24 / 12 (average hours in a month)
HOURS_PER_MONTH = 730

# ---------------------------------------------------------------------
# Reference resolution
# ---------------------------------------------------------------------
# Longest chain of attribute indirections followed before giving up with
# CyclicReference. Capped at half the interpreter recursion limit.
MAX_REFERENCE_DEPTH = min(
    int(os.getenv("AZURECOST_MAX_REFERENCE_DEPTH", "64")),
    sys.getrecursionlimit() // 2,
)

# ---------------------------------------------------------------------
# Private endpoints
# ---------------------------------------------------------------------
# Retail serviceName for private endpoints. Its meters are selected by the
# exact "Private Endpoint" meter name rather than by SKU.
PRIVATE_LINK_SERVICE = "Private Link"
PRIVATE_ENDPOINT_METER = "Private Endpoint"
PRIVATE_ENDPOINT_RESOURCE_TYPE = "azurerm_private_endpoint"

# Used when the catalog yields nothing for a private endpoint, so the
# resource still shows up in the total.
PRIVATE_ENDPOINT_FALLBACK_PRICE = 0.01
PRIVATE_ENDPOINT_FALLBACK_UNIT = "1 Hour"

# ---------------------------------------------------------------------
# Pricing map defaults (resource types with no explicit definition)
# ---------------------------------------------------------------------
DEFAULT_SKU_KEYS = ("sku", "sku_name", "size")
DEFAULT_REGION_KEY = "location"

# ---------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------
DEFAULT_LOG_LEVEL = os.getenv("AZURECOST_LOG_LEVEL", "WARNING")
