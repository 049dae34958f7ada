#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Azure plan cost estimator – CLI

Flow:
- Reads a Terraform JSON plan (`terraform show -json plan.out`).
- Flattens the module tree, resolves region/SKU for every resource.
- Looks up each resource in the Azure Retail Prices API.
- Prints a table (or JSON / Markdown) and the monthly total.
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from rich.console import Console
from rich.markup import escape

from .config import DEFAULT_LOG_LEVEL, FALLTHROUGH_ON_TRANSPORT_ERROR
from .errors import PlanParseFailure
from .estimate import estimate_plan
from .plan.walker import load_plan
from .pricing.definitions import load_pricing_overrides
from .pricing.pricing_map import build_default_pricing_map
from .pricing.retail_api import RetailPriceClient
from .reporting.tables import build_rich_table, render_markdown, total_line
from .utils.trace import build_trace_logger

console = Console()


# --------------------------------------------------------------------
# Argument parsing
# --------------------------------------------------------------------
def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="azure-plan-cost",
        description=(
            "Azure Infra Cost Estimator\n\n"
            "Parse a Terraform JSON plan and output a monthly cost breakdown "
            "using the Azure Retail Prices API."
        ),
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    est = sub.add_parser("estimate", help="Estimate costs from a Terraform JSON plan")
    est.add_argument("-p", "--plan", required=True, help="Path to Terraform JSON plan")
    est.add_argument(
        "--provider",
        default="",
        help="Only estimate resource types with this prefix (e.g. azurerm)",
    )
    est.add_argument(
        "--format",
        choices=["table", "json", "markdown"],
        default="table",
        help="Output format",
    )
    est.add_argument(
        "--pricing-map",
        default=None,
        help="YAML/JSON file overriding resource type -> service/SKU keys",
    )
    est.add_argument(
        "--fallthrough-on-error",
        action="store_true",
        default=FALLTHROUGH_ON_TRANSPORT_ERROR,
        help=(
            "On a failed catalog request, try the next (less specific) filter "
            "instead of giving up on the resource. Changes results compared "
            "to the default fail-fast lookup."
        ),
    )
    est.add_argument("--trace-path", default=None, help="Write a JSONL run trace here")
    est.add_argument(
        "--log-level",
        choices=["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"],
        default=DEFAULT_LOG_LEVEL.upper(),
        help="Logging level for internal messages",
    )
    return parser.parse_args(argv)


# --------------------------------------------------------------------
# Commands
# --------------------------------------------------------------------
def run_estimate(args: argparse.Namespace) -> int:
    logger = logging.getLogger("azure_plan_cost")

    try:
        plan = load_plan(args.plan)
    except PlanParseFailure as ex:
        console.print(f"[red]❌ {escape(str(ex))}[/red]")
        return 1

    pricing_map = build_default_pricing_map()
    if args.pricing_map:
        try:
            pricing_map.update(load_pricing_overrides(args.pricing_map))
        except (OSError, ValueError) as ex:
            console.print(f"[red]❌ Invalid pricing map {escape(args.pricing_map)}: {escape(str(ex))}[/red]")
            return 1
        logger.info("Loaded pricing map overrides from %s", args.pricing_map)

    trace = build_trace_logger(args.trace_path)

    with RetailPriceClient(fallthrough_on_error=args.fallthrough_on_error) as engine:
        estimate = estimate_plan(
            plan,
            engine,
            pricing_map=pricing_map,
            provider=args.provider,
            trace=trace,
        )

    if args.format == "json":
        console.print_json(json.dumps(estimate.to_dict()))
    elif args.format == "markdown":
        console.print(render_markdown(estimate), markup=False, highlight=False, soft_wrap=True)
    else:
        console.print(build_rich_table(estimate))
        console.print(f"\n💰 {total_line(estimate)}")
    return 0


# --------------------------------------------------------------------
# Main
# --------------------------------------------------------------------
def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    if args.command == "estimate":
        sys.exit(run_estimate(args))


if __name__ == "__main__":
    main()
