"""Command line interface for classifying lead files and dispatching actions."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .classification import sort_by_score
from .config import load_configuration
from .dispatch import DispatchError
from .ingestion import export_classified_leads, load_raw_leads
from .models import ACTION_EMAIL, ACTIONS
from .orchestrator import LeadWorkflow

_GROUPS = ["all", "hot", "warm", "cold", "ready_to_call", "no_website"]


def build_parser(prog: str | None = None) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=prog,
        description="Score lead files, export a tier, and optionally dispatch an action on it",
    )
    parser.add_argument("input", help="Path to the raw lead file (CSV, XLSX, or JSON)")
    parser.add_argument("output", help="Path where the classified leads should be written (CSV or XLSX)")
    parser.add_argument(
        "--config",
        default=None,
        help="Path to the engine configuration file (YAML or JSON)",
    )
    parser.add_argument(
        "--group",
        choices=_GROUPS,
        default="all",
        help="Which group of leads to select and export",
    )
    parser.add_argument(
        "--sort-by-score",
        action="store_true",
        help="Order the exported leads by score, highest first",
    )
    parser.add_argument(
        "--action",
        choices=list(ACTIONS),
        default=None,
        help="Dispatch this action on the selected group",
    )
    parser.add_argument(
        "--credits",
        type=int,
        default=None,
        help="Override the starting credit balance from the configuration",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (e.g. DEBUG, INFO, WARNING)",
    )
    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO))

    config = dict(load_configuration(args.config)) if args.config else {}
    if args.credits is not None:
        config["credits"] = {**(config.get("credits") or {}), "balance": args.credits}

    workflow = LeadWorkflow.from_config(config)
    errors = workflow.ingest(load_raw_leads(args.input))
    if errors:
        logging.warning("Skipped %s invalid leads", len(errors))

    chosen = workflow.select_group(args.group)
    if args.sort_by_score:
        chosen = sort_by_score(chosen)
    export_classified_leads(chosen, args.output)
    logging.info("Lead groups: %s", workflow.groups.counts())
    logging.info("Wrote %s %s leads to %s", len(chosen), args.group, Path(args.output).resolve())

    if args.action is None:
        return 0

    if args.action == ACTION_EMAIL:
        for slot in workflow.recommend_send_times():
            logging.info(
                "Send slot %s: score %s (%s leads prefer it)", slot.label, slot.final_score, slot.matched_lead_count
            )

    decision = workflow.dispatch_selected(args.action)
    try:
        decision.raise_for_status()
    except DispatchError as exc:
        logging.error("%s", exc)
        return 1
    logging.info(
        "Dispatch '%s' finished as %s; %s credits remain",
        args.action,
        decision.state.value,
        decision.balance,
    )
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
