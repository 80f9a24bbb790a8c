from .loader import load_registry
from .types import (
    ConfigError,
    DuplicateTaskError,
    FrozenRegistryError,
    NoDefaultTaskError,
    Registry,
    Task,
    UnknownTaskError,
    UnsupportedConfigFormatError,
)

__all__ = [
    "load_registry",
    "Registry",
    "Task",
    "ConfigError",
    "DuplicateTaskError",
    "FrozenRegistryError",
    "NoDefaultTaskError",
    "UnknownTaskError",
    "UnsupportedConfigFormatError",
]
