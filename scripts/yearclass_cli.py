#!/usr/bin/env python3
"""
Device year class CLI utilities.

Usage:
    python scripts/yearclass_cli.py classify
    python scripts/yearclass_cli.py metrics --json
    python scripts/yearclass_cli.py diagnostics
"""

from __future__ import annotations

import argparse
import json
import logging

from yearclass_backend.config import get_settings, reset_settings_cache
from yearclass_backend.services.device_info import UNKNOWN, create_device_probe
from yearclass_backend.services.year_class import CombinationStrategy, classify, component_years
from yearclass_backend.services.year_class_service import YearClassService


def human_value(value: int, unit: str = "") -> str:
    if value == UNKNOWN:
        return "unknown"
    return f"{value}{unit}"


def _strategy(args: argparse.Namespace) -> CombinationStrategy:
    if args.strategy:
        return CombinationStrategy(args.strategy)
    return CombinationStrategy(get_settings().combination_strategy)


def cmd_classify(args: argparse.Namespace) -> None:
    reset_settings_cache()
    settings = get_settings()
    service = YearClassService(create_device_probe(settings), _strategy(args))
    year_class = service.get()
    if args.json:
        print(json.dumps({"year_class": int(year_class), "strategy": service.strategy.value}))
        return
    print(f"Year class: {human_value(int(year_class))} ({service.strategy.value})")


def cmd_metrics(args: argparse.Namespace) -> None:
    reset_settings_cache()
    metrics = create_device_probe(get_settings()).snapshot()
    if args.json:
        print(
            json.dumps(
                {
                    "core_count": metrics.core_count,
                    "max_clock_khz": metrics.max_clock_khz,
                    "total_ram_bytes": metrics.total_ram_bytes,
                }
            )
        )
        return
    print("Hardware Signals")
    print("-" * 40)
    print(f"CPU cores: {human_value(metrics.core_count)}")
    print(f"Max clock: {human_value(metrics.max_clock_khz, ' kHz')}")
    print(f"Total RAM: {human_value(metrics.total_ram_bytes, ' bytes')}")


def cmd_diagnostics(args: argparse.Namespace) -> None:
    reset_settings_cache()
    settings = get_settings()
    metrics = create_device_probe(settings).snapshot()
    report = {}
    for strategy in CombinationStrategy:
        components = component_years(metrics, strategy)
        report[strategy.value] = {
            "components": {name: int(year) for name, year in components.items()},
            "year_class": int(classify(metrics, strategy)),
        }
    if args.json:
        print(json.dumps({"configured": settings.combination_strategy, "strategies": report}, indent=2))
        return
    print("Configuration")
    print("-" * 40)
    print(f"Strategy: {settings.combination_strategy}")
    print(f"CPU dir: {settings.cpu_dir}")
    print(f"Native memory query: {settings.use_native_memory}")
    print()
    print(f"{'Strategy':<12} {'Cores':>6} {'Clock':>6} {'RAM':>6} {'Result':>7}")
    print("-" * 42)
    for name, entry in report.items():
        components = entry["components"]
        print(
            f"{name:<12} "
            f"{components['cores']:>6} "
            f"{components['clock']:>6} "
            f"{components['ram']:>6} "
            f"{entry['year_class']:>7}"
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Device year class utility CLI")
    parser.add_argument("--verbose", action="store_true", help="Log probe fallbacks")
    sub = parser.add_subparsers(dest="command", required=True)
    classify_parser = sub.add_parser("classify", help="Print the device year class")
    classify_parser.add_argument(
        "--strategy",
        choices=[strategy.value for strategy in CombinationStrategy],
        help="Override YEARCLASS_COMBINATION_STRATEGY",
    )
    classify_parser.add_argument("--json", action="store_true", help="Emit JSON")
    metrics_parser = sub.add_parser("metrics", help="Print raw hardware signals")
    metrics_parser.add_argument("--json", action="store_true", help="Emit JSON")
    diagnostics_parser = sub.add_parser("diagnostics", help="Compare every combination strategy")
    diagnostics_parser.add_argument("--json", action="store_true", help="Emit JSON")
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    if args.command == "classify":
        cmd_classify(args)
    elif args.command == "metrics":
        cmd_metrics(args)
    elif args.command == "diagnostics":
        cmd_diagnostics(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
