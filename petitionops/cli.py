# Copyright 2026 PetitionOps
# SPDX-License-Identifier: MIT
"""PetitionOps eligibility CLI.

Usage:
    petitionops-eligibility --list
    petitionops-eligibility --category EB-1A --select major-awards media-coverage judging
    petitionops-eligibility --category "EB-2 NIW" --select advanced-degree beneficial --verbose

Exit codes: 0 eligible, 1 not eligible, 2 unknown category.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

from petitionops.core.catalog import get_catalog
from petitionops.core.eligibility import evaluate, selected_criteria
from petitionops.core.selection import SelectionState
from petitionops.core.settings import get_config

logger = logging.getLogger(__name__)

EXIT_ELIGIBLE = 0
EXIT_NOT_ELIGIBLE = 1
EXIT_UNKNOWN_CATEGORY = 2


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="PetitionOps: check a criteria selection against a visa category",
    )
    parser.add_argument("--category", "-c", default=None, help="Visa category (default from config)")
    parser.add_argument("--select", "-s", nargs="*", default=[], help="Selected criterion ids")
    parser.add_argument("--list", action="store_true", help="List categories and their criteria")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)
    catalog = get_catalog()

    if args.list:
        print(json.dumps([d.to_dict() for d in catalog], indent=2))
        return EXIT_ELIGIBLE

    category_id = args.category or get_config().selection.default_category
    lookup = catalog.lookup(category_id)
    if lookup.definition is None:
        known = ", ".join(c.value for c in catalog.categories())
        print(f"Unknown visa category: {category_id!r} (known: {known})", file=sys.stderr)
        return EXIT_UNKNOWN_CATEGORY

    state = SelectionState(lookup.definition)
    # --select lists a set; a repeated id must not toggle itself back off
    for criterion_id in dict.fromkeys(args.select):
        result = state.toggle(criterion_id)
        if not result.accepted:
            print(f"Ignoring unknown criterion for {category_id}: {criterion_id}", file=sys.stderr)

    result = evaluate(state.definition, state)
    out = result.to_dict()
    out["review"] = [c.to_dict() for c in selected_criteria(state.definition, state)]
    print(json.dumps(out, indent=2))
    return EXIT_ELIGIBLE if result.eligible else EXIT_NOT_ELIGIBLE


if __name__ == "__main__":
    sys.exit(main())
