from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping


@dataclass(frozen=True)
class Task:
    name: str
    deps: tuple[str, ...] = ()
    commands: tuple[str, ...] = ()
    env: dict[str, str] = field(default_factory=dict)
    working_dir: str | None = None

    # Names are unique within a registry
    def __hash__(self) -> int:
        return hash(self.name)


@dataclass
class Registry:
    tasks: dict[str, Task] = field(default_factory=dict)
    default: str | None = None
    _frozen: bool = field(default=False, init=False, repr=False)

    def __setattr__(self, name: str, value: object) -> None:
        if getattr(self, "_frozen", False):
            raise FrozenRegistryError(f"Can't set '{name}': registry is frozen")
        super().__setattr__(name, value)

    def __iter__(self):
        for name in sorted(self.tasks):
            yield self.tasks[name]

    def __len__(self):
        return len(self.tasks)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        if self._frozen:
            return
        self.tasks = MappingProxyType(dict(self.tasks))
        self._frozen = True

    def register(
        self,
        name: str,
        deps: Iterable[str] = (),
        commands: Iterable[str] = (),
        *,
        env: Mapping[str, str] | None = None,
        working_dir: str | None = None,
    ) -> Task:
        if self._frozen:
            raise FrozenRegistryError(f"Can't register '{name}': registry is frozen")

        name = name.strip()
        if len(name) < 1:
            raise ConfigError("A task name can't be empty")

        if name in self.tasks:
            raise DuplicateTaskError(name)

        # Repeated dependencies collapse onto their first occurrence
        unique_deps = tuple(dict.fromkeys(deps))

        task = Task(name, unique_deps, tuple(commands), dict(env or {}), working_dir)
        self.tasks[name] = task
        return task

    def has_task(self, name: str) -> bool:
        return name in self.tasks

    def lookup(self, name: str) -> Task:
        if not self.has_task(name):
            raise UnknownTaskError(name)

        return self.tasks[name]

    def tasks_ids(self) -> list[str]:
        return sorted(self.tasks.keys())

    def declared_ids(self) -> list[str]:
        return list(self.tasks.keys())

    def default_task(self) -> str | None:
        """Name of the task to run when none is requested.

        An explicit ``default`` wins; otherwise the first declared task is
        used, the way recipe files treat their first recipe.
        """
        if self.default is not None:
            return self.default
        for name in self.tasks:
            return name
        return None


class ConfigError(Exception):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


class UnsupportedConfigFormatError(ConfigError):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


class FrozenRegistryError(ConfigError):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


class DuplicateTaskError(ConfigError):
    def __init__(self, name: str):
        super().__init__(f"Duplicate task: {name}")
        self.name = name


class UnknownTaskError(ConfigError):
    def __init__(self, name: str, required_by: str | None = None):
        if required_by is None:
            msg = f"Unknown task: {name}"
        else:
            msg = f"Task '{required_by}' has unknown dependency '{name}'"
        super().__init__(msg)
        self.name = name
        self.required_by = required_by


class NoDefaultTaskError(UnknownTaskError):
    def __init__(self) -> None:
        ConfigError.__init__(self, "No task given and no default task configured")
        self.name = None
        self.required_by = None
