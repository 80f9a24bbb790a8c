from __future__ import annotations

import argparse
import sys

from runbook.config import ConfigError, load_registry
from runbook.executor import Executor, RunResult
from runbook.graph import GraphError, TaskGraph
from runbook.logging import set_verbose
from runbook.runner import EXIT_FAILURE, RunOutcome, Runner

from .args import build_parser

EXIT_USAGE = 2
EXIT_INTERRUPTED = 130


def run_cli(argv: list[str] | None = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
        set_verbose(args.verbose)

        if args.list:
            return cmd_list(args)
        if args.graph:
            return cmd_graph(args)
        return cmd_run(args)

    except ConfigError as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_USAGE

    except GraphError as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_FAILURE

    except KeyboardInterrupt:
        return EXIT_INTERRUPTED


def main() -> None:
    sys.exit(run_cli())


def cmd_run(args: argparse.Namespace) -> int:
    registry = load_registry(args.config)
    executor = Executor(registry, dry_run=args.dry_run, echo=not args.quiet)
    outcome = Runner(registry, executor).run(args.task)
    _print_outcome(outcome)
    return outcome.exit_status


def cmd_list(args: argparse.Namespace) -> int:
    registry = load_registry(args.config)
    for tid in registry.tasks_ids():
        print(tid)
    return 0


def cmd_graph(args: argparse.Namespace) -> int:
    registry = load_registry(args.config)
    graph = TaskGraph.from_registry(registry)
    for tid in registry.declared_ids():
        deps = " ".join(graph.deps_of(tid))
        print(f"{tid}: {deps}".rstrip())
    return 0


def _print_outcome(outcome: RunOutcome) -> None:
    if outcome.error is not None:
        print(str(outcome.error), file=sys.stderr)
        return

    if outcome.result is not None:
        _print_result(outcome.result)


def _print_result(rr: RunResult) -> None:
    for tid in rr.order:
        if tid in rr.results:
            result = rr.results[tid]
            if rr.failure is not None and rr.failure.task_id == tid:
                print(
                    f"FAIL {tid}, {result.duration_s:.3f}s, exit code = {result.returncode}"
                )
            else:
                print(f"OK {tid}, {result.duration_s:.3f}s")
        else:
            print(f"SKIP {tid}")

    if rr.failure is not None:
        print(str(rr.failure), file=sys.stderr)
