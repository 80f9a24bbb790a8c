import os
import subprocess
import sys
import time
from typing import Sequence

from runbook.config import Registry, Task
from runbook.logging import get_logger

from .types import CommandFailure, CommandResult, RunResult, TaskResult, TaskStatus

logger = get_logger(__name__)


class Executor:
    """Runs an execution plan task by task, stopping at the first failing command."""

    def __init__(self, registry: Registry, *, dry_run: bool = False, echo: bool = True):
        self.registry = registry
        self.dry_run = dry_run
        self.echo = echo

    def run(self, plan: Sequence[str]) -> RunResult:
        order = list(plan)
        results: dict[str, TaskResult] = {}
        failure: CommandFailure | None = None

        for tid in order:
            task = self.registry.lookup(tid)
            result, failure = self._run_task(task)
            results[tid] = result
            if failure is not None:
                break

        skipped = [tid for tid in order if tid not in results]
        return RunResult(order, results, skipped, failure)

    def _run_task(self, task: Task) -> tuple[TaskResult, CommandFailure | None]:
        start = time.monotonic()
        done: list[CommandResult] = []
        failure = None

        for index, command in enumerate(task.commands):
            cr = self._run_command(task, index, command)
            done.append(cr)
            if not cr.ok:
                failure = CommandFailure(task.name, index, command, cr.returncode)
                break

        duration = time.monotonic() - start
        status = TaskStatus.SUCCEEDED if failure is None else TaskStatus.FAILED
        return TaskResult(task.name, status, tuple(done), duration), failure

    def _run_command(self, task: Task, index: int, command: str) -> CommandResult:
        if self.echo or self.dry_run:
            print(command, file=sys.stderr, flush=True)

        if self.dry_run:
            return CommandResult(task.name, index, command, 0, 0.0)

        # Flush our own buffered output so it stays ordered with the child's
        sys.stdout.flush()

        start = time.monotonic()
        try:
            proc = subprocess.run(
                command,
                shell=True,
                cwd=task.working_dir or None,
                env={**os.environ, **task.env},
            )
            returncode: int | None = proc.returncode
        except OSError as exc:
            logger.warning("%s: could not start %r: %s", task.name, command, exc)
            returncode = None
        duration = time.monotonic() - start

        logger.debug("%s[%d] exited %s after %.3fs", task.name, index, returncode, duration)
        return CommandResult(task.name, index, command, returncode, duration)
