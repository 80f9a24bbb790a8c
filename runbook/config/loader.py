import json
import tomllib
from pathlib import Path
from typing import Any, Mapping

import yaml

from .types import ConfigError, Registry, UnsupportedConfigFormatError

_TASK_KEYS = {"command", "commands", "deps", "env", "working_dir"}


def load_registry(path: str | Path) -> Registry:
    pure_path = Path(path).expanduser().resolve()

    if not pure_path.exists():
        raise ConfigError(f"Config file not found: {pure_path}")

    if not pure_path.is_file():
        raise ConfigError(f"Config path is not a file: {pure_path}")

    fmt = _detect_format(pure_path)
    raw_file = _parse_file(pure_path, fmt)
    registry = _build_registry(raw_file)
    registry.freeze()
    return registry


def _detect_format(path: Path) -> str:
    fmt = path.suffix
    match fmt:
        case ".yaml" | ".yml":
            return "yaml"
        case ".toml":
            return "toml"
        case ".json":
            return "json"
        case _:
            raise UnsupportedConfigFormatError(
                f"Non supported file extension: {fmt}\n Expected format: .yml/.yaml, .toml, .json"
            )


def _parse_file(path: Path, fmt: str) -> Mapping[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"{path}: cannot read file") from exc

    match fmt:
        case "yaml":
            try:
                raw_file = yaml.safe_load(text)
            except yaml.YAMLError as exc:
                raise ConfigError(f"{path}: invalid YAML") from exc
        case "toml":
            try:
                raw_file = tomllib.loads(text)
            except tomllib.TOMLDecodeError as exc:
                raise ConfigError(f"{path}: invalid TOML") from exc
        case "json":
            try:
                raw_file = json.loads(text)
            except json.JSONDecodeError as exc:
                raise ConfigError(f"{path}: invalid JSON") from exc
        case _:
            raise AssertionError("Unreachable")

    if not isinstance(raw_file, Mapping):
        raise ConfigError(
            f"{path}: {fmt.upper()} parsed successfully but top-level value is not an object: {type(raw_file)}"
        )

    return raw_file


def _build_registry(raw: Mapping[str, Any]) -> Registry:
    registry = Registry()

    if "tasks" not in raw:
        raise ConfigError("Missing 'tasks' field")

    if not isinstance(raw["tasks"], Mapping):
        raise ConfigError(f"'tasks' must be a mapping, got {type(raw['tasks'])}")

    if len(raw["tasks"]) < 1:
        raise ConfigError("There must be at least one task in the config file")

    for name, fields in raw["tasks"].items():
        if not isinstance(name, str):
            raise ConfigError(f"Task name must be a string, got {type(name)}")

        name_norm = name.strip()

        if len(name_norm) < 1:
            raise ConfigError("A task name can't be empty")

        # A task with nothing but a name is a valid no-op
        if fields is None:
            fields = {}

        if not isinstance(fields, Mapping):
            raise ConfigError(f"{name_norm} must be a mapping")

        _register_task(registry, name_norm, fields)

    if "default" in raw:
        default = raw["default"]
        if not isinstance(default, str) or len(default.strip()) < 1:
            raise ConfigError("'default' must be a non-empty task name")

        default = default.strip()
        if not registry.has_task(default):
            raise ConfigError(f"Default task '{default}' is not defined")

        registry.default = default

    return registry


def _register_task(registry: Registry, name: str, fields: Mapping[str, Any]) -> None:
    for field in fields.keys():
        if field not in _TASK_KEYS:
            raise ConfigError(f"{name}: Can't process: {field}")

    commands = _commands(name, fields)
    deps = _deps(name, fields)
    env = _env(name, fields)
    working_dir = None

    if "working_dir" in fields:
        if not isinstance(fields["working_dir"], str):
            raise ConfigError(f"{name}: The working_dir should be a string")

        if len(fields["working_dir"].strip()) < 1:
            raise ConfigError(f"{name}: Please provide a string or remove this field")

        working_dir = fields["working_dir"].strip()

    registry.register(name, deps, commands, env=env, working_dir=working_dir)


def _commands(name: str, fields: Mapping[str, Any]) -> list[str]:
    if "command" in fields and "commands" in fields:
        raise ConfigError(f"{name}: use either 'command' or 'commands', not both")

    if "command" in fields:
        raw_commands = [fields["command"]]
    elif "commands" in fields:
        if not isinstance(fields["commands"], list):
            raise ConfigError(f"{name}: Commands should be in a list.")
        raw_commands = fields["commands"]
    else:
        return []

    commands = []
    for item in raw_commands:
        if not isinstance(item, str):
            raise ConfigError(f"{name}: The command should be a string")

        if len(item.strip()) < 1:
            raise ConfigError(f"{name}: Command missing")

        commands.append(item.strip())

    return commands


def _deps(name: str, fields: Mapping[str, Any]) -> list[str]:
    deps = []

    if "deps" not in fields:
        return deps

    if not isinstance(fields["deps"], list):
        raise ConfigError(f"{name}: Dependencies should be in a list.")

    for item in fields["deps"]:
        if not isinstance(item, str):
            raise ConfigError(f"{name}: {item} should be a string in the dependency list")

        dep = item.strip()

        if len(dep) < 1:
            raise ConfigError(f"{name}: A dependency is empty")

        deps.append(dep)

    return deps


def _env(name: str, fields: Mapping[str, Any]) -> dict[str, str]:
    env = {}

    if "env" not in fields:
        return env

    if not isinstance(fields["env"], Mapping):
        raise ConfigError(f"{name}: Env should be a mapping")

    for key, item in fields["env"].items():
        if not isinstance(key, str):
            raise ConfigError(f"{name}: {key} should be a string")

        if len(key.strip()) < 1:
            raise ConfigError(f"{name}: A key can't be empty")

        if not isinstance(item, str):
            raise ConfigError(f"{name}: {item} should be a string")

        env[key.strip()] = item

    return env
