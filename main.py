#!/usr/bin/env python
"""
Planning agent command line.

Examples:
  python main.py create "Build a personal portfolio website"
  python main.py --count 8 create "Build a personal portfolio website" --update 0 2
  python main.py update plan-build-a-personal-portfolio-website.md 0 2
  python main.py show plan-build-a-personal-portfolio-website.md

Task indices are 0-based.
"""
import argparse
import logging
import sys
from dataclasses import replace
from typing import List, Optional

import config
from core.generator import TaskGenerator
from core.llm import create_provider_from_config
from core.planner import PlanResult, PlanService
from utils.logging_setup import setup_logging, set_library_log_levels

logger = logging.getLogger("Planner")


def _index(value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid task index: {value!r}") from None


def _positive_count(value: str) -> int:
    try:
        count = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid task count: {value!r}") from None
    if count <= 0:
        raise argparse.ArgumentTypeError(f"task count must be positive, got {count}")
    return count


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate and track LLM-written project plans.")
    parser.add_argument("--output-dir", help="Directory for plan files (default: PLAN_OUTPUT_DIR or .)")
    parser.add_argument("--log-level", help="Log level (default: LOG_LEVEL or INFO)")
    parser.add_argument(
        "--count", type=_positive_count,
        help="Number of tasks to request when creating a plan (default: TASK_COUNT)"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    create = sub.add_parser("create", help="Generate a new plan for a goal")
    create.add_argument("goal", help="High-level goal to plan")
    create.add_argument(
        "--update", nargs="+", type=_index, metavar="INDEX",
        help="Mark these tasks complete right after creating the plan"
    )

    update = sub.add_parser("update", help="Mark tasks of an existing plan complete")
    update.add_argument("path", help="Plan file to update")
    update.add_argument("indices", nargs="*", type=_index, metavar="INDEX", help="0-based task indices")

    show = sub.add_parser("show", help="Print the progress of a plan")
    show.add_argument("path", help="Plan file to inspect")
    return parser


def _report(result: PlanResult) -> int:
    if result.success:
        print(result.message)
        return 0
    print(f"Error: {result.message}", file=sys.stderr)
    return 1


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        cfg = config.load_config(require_api_key=args.command == "create")
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    overrides = {}
    if args.output_dir:
        overrides["output_dir"] = args.output_dir
    if args.log_level:
        overrides["log_level"] = args.log_level.upper()
    if args.count:
        overrides["task_count"] = args.count
    if overrides:
        cfg = replace(cfg, **overrides)

    setup_logging(log_dir=cfg.log_dir, level=cfg.log_level)
    set_library_log_levels()

    if args.command == "create":
        generator = TaskGenerator(create_provider_from_config(cfg), cfg.task_count)
        service = PlanService(cfg, generator)
        logger.info(f"Running planning agent for goal: {args.goal!r}")
        result = service.create_plan(args.goal)
        code = _report(result)
        if code == 0 and args.update:
            code = _report(service.update_plan(result.path, args.update))
        return code

    service = PlanService(cfg)
    if args.command == "update":
        return _report(service.update_plan(args.path, args.indices))
    return _report(service.show_plan(args.path))


if __name__ == "__main__":
    sys.exit(main())
