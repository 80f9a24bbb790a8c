from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator

from runbook.config.types import Registry, UnknownTaskError
from runbook.logging import get_logger

from .types import CycleError

logger = get_logger(__name__)


class _Visit(Enum):
    UNVISITED = auto()
    VISITING = auto()
    VISITED = auto()


@dataclass(frozen=True)
class TaskGraph:
    """Name-keyed adjacency of a registry, dependencies in declared order."""

    registry: Registry
    _deps: dict[str, tuple[str, ...]]

    @classmethod
    def from_registry(cls, registry: Registry) -> TaskGraph:
        deps = {}
        for name in registry.declared_ids():
            deps[name] = registry.lookup(name).deps

        return cls(registry, deps)

    def deps_of(self, name: str) -> tuple[str, ...]:
        if name not in self._deps:
            raise UnknownTaskError(name)

        return self._deps[name]

    def resolve(self, target: str) -> list[str]:
        """Execution plan for ``target``.

        Depth-first from the target, dependencies first and in declared
        order. Each task lands in the plan the first time it is fully
        resolved, so shared dependencies run once, at their earliest slot.
        """
        if target not in self._deps:
            raise UnknownTaskError(target)

        state: dict[str, _Visit] = {target: _Visit.VISITING}
        out: list[str] = []
        stack: list[str] = [target]
        pos: dict[str, int] = {target: 0}
        # One pending-deps iterator per entry of ``stack``
        frames: list[Iterator[str]] = [iter(self._deps[target])]

        while frames:
            tid = stack[-1]
            dep = next(frames[-1], None)

            if dep is None:
                frames.pop()
                stack.pop()
                pos.pop(tid)
                state[tid] = _Visit.VISITED
                out.append(tid)
                continue

            current = state.get(dep, _Visit.UNVISITED)
            if current == _Visit.VISITING:
                start = pos[dep]
                raise CycleError(stack[start:] + [dep])
            if current == _Visit.VISITED:
                continue

            if dep not in self._deps:
                raise UnknownTaskError(dep, required_by=tid)

            state[dep] = _Visit.VISITING
            pos[dep] = len(stack)
            stack.append(dep)
            frames.append(iter(self._deps[dep]))

        logger.debug("Resolved %s -> %s", target, out)
        return out
