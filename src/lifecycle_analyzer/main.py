from __future__ import annotations

import argparse
import logging
from typing import Any, Dict

from lifecycle_analyzer.pipeline.orchestrator import Orchestrator
from lifecycle_analyzer.reporting.console import render_summary
from lifecycle_analyzer.telemetry import init_telemetry
from lifecycle_analyzer.utils.config import load_settings


def _apply_overrides(settings: Dict[str, Any], args: argparse.Namespace) -> None:
    analysis = settings.setdefault("analysis", {})
    if args.catalog:
        analysis["catalog"] = args.catalog
    if args.out:
        analysis["artifacts_dir"] = args.out
    if args.workers:
        analysis["workers"] = args.workers
    if args.include_tests:
        analysis["skip_test_files"] = False
    if args.scope:
        analysis["scope"] = args.scope


def main() -> None:
    parser = argparse.ArgumentParser(description="HarmonyOS ArkTS lifecycle analyzer")
    parser.add_argument("--model", required=True, help="Path to the program model JSON export")
    parser.add_argument("--catalog", help="Catalog version (v1-minimal, v2-framework, v3-framework) or path")
    parser.add_argument("--settings", default="config/settings.yaml", help="Settings YAML path")
    parser.add_argument("--out", help="Artifacts output directory")
    parser.add_argument("--workers", type=int, help="Worker threads for classification and scanning")
    parser.add_argument("--include-tests", action="store_true", help="Analyze files under test paths too")
    parser.add_argument(
        "--scope",
        choices=("lifecycle", "project"),
        help="Undefined-value sweep over lifecycle methods only, or over every project method",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args()
    if args.workers is not None and args.workers < 1:
        parser.error("--workers must be at least 1.")
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    settings = load_settings(args.settings)
    _apply_overrides(settings, args)
    init_telemetry(settings)

    orchestrator = Orchestrator(settings)
    report = orchestrator.run(model_path=args.model)
    print(render_summary(report), end="")


if __name__ == "__main__":
    main()
