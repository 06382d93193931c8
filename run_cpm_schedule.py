#!/usr/bin/env python3
"""CLI entry point for CPM schedule computation."""

import argparse
import dataclasses
import json
import sys
from pathlib import Path

import yaml

from sitesched.cpm import (
    EngineConfig,
    ScheduleEngine,
    ScheduleError,
    ScheduleReport,
    compression_risks,
    find_bottlenecks,
    load_network,
    verify_schedule,
)
from sitesched.logger import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Compute the critical path schedule of a task network",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--network",
        type=str,
        default="tasks.json",
        help="Path to task network JSON file",
    )

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to YAML or JSON config file",
    )

    parser.add_argument(
        "--near-critical-threshold",
        type=int,
        default=None,
        help="Largest float (days) reported as near-critical; overrides the config file",
    )

    parser.add_argument(
        "--strict-references",
        action="store_true",
        help="Reject predecessors that name no task instead of ignoring them",
    )

    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output directory for results (JSON and CSV). If not specified, no files are written.",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        help="Logging level",
    )

    return parser


def load_engine_config(args) -> EngineConfig:
    """Engine settings from the config file with CLI overrides applied."""
    config = EngineConfig.from_file(args.config) if args.config else EngineConfig()
    overrides = {}
    if args.near_critical_threshold is not None:
        overrides["near_critical_threshold"] = args.near_critical_threshold
    if args.strict_references:
        overrides["strict_references"] = True
    return dataclasses.replace(config, **overrides) if overrides else config


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    try:
        configure_logging(args.log_level)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    # Validate input files exist
    for path_arg, name in [(args.network, "network"), (args.config, "config")]:
        if path_arg and not Path(path_arg).exists():
            print(f"Error: {name} file not found: {path_arg}", file=sys.stderr)
            return 1

    try:
        config = load_engine_config(args)
        tasks, _ = load_network(args.network)
        engine = ScheduleEngine(config)
        network = engine.build_network(tasks)
    except (ScheduleError, ValueError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    result = engine.compute(network)
    if not result.ok:
        print(f"Error: {result.error}", file=sys.stderr)
        print(json.dumps(result.error.to_dict(), default=str), file=sys.stderr)
        return 1

    snapshot = result.snapshot
    report = ScheduleReport(snapshot, network)
    report.print_summary()

    bottlenecks = find_bottlenecks(network, snapshot)
    if bottlenecks:
        print("\nBOTTLENECKS:")
        for bottleneck in bottlenecks:
            print(f"  [{bottleneck.risk_level}] {bottleneck.task_id}: {bottleneck.reason}")

    risks = compression_risks(network, snapshot, config.compression_min_duration)
    if risks:
        print("\nCOMPRESSION RISKS:")
        for risk in risks:
            print(f"  {risk.name} ({risk.duration}d): {risk.risk}")

    # Verify dependency constraints
    print("\nVERIFICATION:")
    violations = verify_schedule(network, snapshot)
    if violations:
        print(f"  WARNING: {len(violations)} constraint violations found!")
        for v in violations[:5]:  # Show first 5
            print(f"    - {v}")
        if len(violations) > 5:
            print(f"    ... and {len(violations) - 5} more")
    else:
        print("  All task dependencies respected.")

    if args.output:
        summary = report.get_summary()
        summary["input_files"] = {"network": args.network, "config": args.config}
        json_path = f"{args.output}/schedule.json"
        report.export_json(json_path, summary)
        print(f"Exported JSON results to {json_path}")

        csv_path = f"{args.output}/schedule.csv"
        report.export_csv(csv_path)
        print(f"Exported CSV schedule to {csv_path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
