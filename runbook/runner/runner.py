from __future__ import annotations

from runbook.config import NoDefaultTaskError, Registry, UnknownTaskError
from runbook.executor import Executor
from runbook.graph import GraphError, TaskGraph
from runbook.logging import get_logger

from .types import RunOutcome, RunState

logger = get_logger(__name__)


class Runner:
    """Drives one run: resolve the requested task, then execute its plan.

    ``state`` walks IDLE -> RESOLVING -> EXECUTING -> DONE, or drops to
    FAILED on a resolution error or a failing command. Resolution errors are
    reported on the outcome, never raised.
    """

    def __init__(self, registry: Registry, executor: Executor | None = None):
        registry.freeze()
        self.registry = registry
        self.graph = TaskGraph.from_registry(registry)
        self.executor = executor or Executor(registry)
        self.state = RunState.IDLE

    def _enter(self, state: RunState) -> None:
        logger.debug("%s -> %s", self.state.name, state.name)
        self.state = state

    def run(self, target: str | None = None) -> RunOutcome:
        self.state = RunState.IDLE

        if target is None:
            target = self.registry.default_task()

        self._enter(RunState.RESOLVING)
        try:
            if target is None:
                raise NoDefaultTaskError()
            plan = self.graph.resolve(target)
        except (UnknownTaskError, GraphError) as exc:
            self._enter(RunState.FAILED)
            return RunOutcome(RunState.FAILED, target, error=exc)

        self._enter(RunState.EXECUTING)
        result = self.executor.run(plan)

        if result.failure is not None:
            self._enter(RunState.FAILED)
            return RunOutcome(RunState.FAILED, target, plan, result)

        self._enter(RunState.DONE)
        return RunOutcome(RunState.DONE, target, plan, result)
