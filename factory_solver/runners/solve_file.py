"""
Command-line runner: solve every machine of an input file.

This script parses the machine file, runs both variants on each machine
and prints the two aggregate totals. Failing machines are logged and
appended to a JSONL failure log.

Usage:
    # Default input (inputs/day10.txt)
    python -m factory_solver.runners.solve_file

    # Custom input, verify every answer against the ILP
    python -m factory_solver.runners.solve_file inputs/day10_example.txt --cross-check

    # Bound the search
    python -m factory_solver.runners.solve_file --max-nodes 100000 --time-limit 5

Output:
    Part 1: <sum of minimum toggle presses>
    Part 2: <sum of minimum joltage presses>

Exit status: 0 when every machine solved, 1 when any machine failed,
2 when the input could not be read or parsed, or an option value is
invalid.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from factory_solver.config import (
    DEFAULT_FAILURE_LOG,
    DEFAULT_INPUT_PATH,
    DEFAULT_MAX_SEARCH_NODES,
    DEFAULT_TIME_LIMIT_S,
    SolverConfig,
)
from factory_solver.core.machine_io import ParseError, load_machines
from factory_solver.runners.kernel import solve_machines
from factory_solver.runners.results import RunSummary, diagnostics_to_record


# Logger for this module
logger = logging.getLogger(__name__)


def write_failure_log(summary: RunSummary, failure_log_path: Path) -> int:
    """
    Append one JSON line per failed machine.

    Returns:
        Number of records written
    """
    failures = summary.failures
    if not failures:
        return 0
    failure_log_path.parent.mkdir(parents=True, exist_ok=True)
    with failure_log_path.open("a", encoding="utf-8") as f:
        for diag in failures:
            f.write(json.dumps(diagnostics_to_record(diag)) + "\n")
    return len(failures)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Minimum button presses for every factory machine in a file."
    )
    parser.add_argument(
        "input",
        type=Path,
        nargs="?",
        default=DEFAULT_INPUT_PATH,
        help="Path to the machine description file.",
    )
    parser.add_argument(
        "--max-nodes",
        type=int,
        default=DEFAULT_MAX_SEARCH_NODES,
        help="Search nodes allowed per machine (0 = unbounded).",
    )
    parser.add_argument(
        "--time-limit",
        type=float,
        default=DEFAULT_TIME_LIMIT_S,
        help="Seconds allowed per machine search.",
    )
    parser.add_argument(
        "--cross-check",
        action="store_true",
        help="Also solve each machine with the ILP and compare the totals.",
    )
    parser.add_argument(
        "--failure-log",
        type=Path,
        default=DEFAULT_FAILURE_LOG,
        help="Path to JSONL file where failed machines will be appended.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    args = parser.parse_args(argv)

    if args.max_nodes is not None and args.max_nodes < 0:
        parser.error(f"--max-nodes must be >= 0, got {args.max_nodes}")
    if args.time_limit is not None and args.time_limit <= 0:
        parser.error(f"--time-limit must be positive, got {args.time_limit}")

    return args


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entrypoint."""
    args = parse_args(argv)

    # Configure logging
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s"
    )

    config = SolverConfig(
        max_search_nodes=args.max_nodes or None,
        time_limit_s=args.time_limit,
        cross_check=args.cross_check,
    )

    try:
        machines = load_machines(args.input)
    except FileNotFoundError:
        logger.error("Input file not found: %s", args.input)
        return 2
    except ParseError as e:
        logger.error("Failed to parse %s: %s", args.input, e)
        return 2

    logger.info("Loaded %d machines from %s", len(machines), args.input)
    summary = solve_machines(machines, config)

    num_logged = write_failure_log(summary, args.failure_log)

    logger.info("")
    logger.info("=" * 70)
    logger.info("RUN SUMMARY")
    logger.info("=" * 70)
    logger.info("Machines: %d", len(summary.diagnostics))
    logger.info("  OK: %d", len(summary.diagnostics) - len(summary.failures))
    logger.info("  Failures: %d", len(summary.failures))
    if num_logged:
        logger.info("  Failure records appended to %s", args.failure_log)
    logger.info("=" * 70)

    print(f"Part 1: {summary.part1_total}")
    print(f"Part 2: {summary.part2_total}")

    return 0 if summary.all_ok else 1


if __name__ == "__main__":
    sys.exit(main())
