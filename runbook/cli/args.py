from __future__ import annotations

import argparse


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="runbook",
        description="Run a task and everything it depends on",
    )

    parser.add_argument(
        "--config",
        default="runbook.yml",
        help="Path to config file",
    )

    parser.add_argument(
        "task",
        nargs="?",
        default=None,
        help="Task to run (defaults to the configured default task)",
    )

    # list / graph replace a run
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--list",
        action="store_true",
        help="List tasks",
    )
    mode.add_argument(
        "--graph",
        action="store_true",
        help="Show dependency graph",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the commands that would run without running them",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Don't echo commands before running them",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    return parser
