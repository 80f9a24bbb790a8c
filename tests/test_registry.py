import pytest

from runbook.config.types import (
    ConfigError,
    DuplicateTaskError,
    FrozenRegistryError,
    Registry,
    UnknownTaskError,
)


def test_register_and_lookup():
    registry = Registry()
    task = registry.register("fmt", [], ["cargo fmt"])

    assert registry.lookup("fmt") is task
    assert task.deps == ()
    assert task.commands == ("cargo fmt",)
    assert task.env == {}
    assert task.working_dir is None


def test_register_duplicate_raises():
    registry = Registry()
    registry.register("fmt")

    with pytest.raises(DuplicateTaskError) as e:
        registry.register("fmt")

    assert e.value.name == "fmt"


def test_register_strips_name_before_duplicate_check():
    registry = Registry()
    registry.register("fmt")

    with pytest.raises(DuplicateTaskError):
        registry.register(" fmt ")


def test_register_empty_name_raises():
    with pytest.raises(ConfigError):
        Registry().register("   ")


def test_register_after_freeze_raises():
    registry = Registry()
    registry.register("a")
    registry.freeze()

    with pytest.raises(FrozenRegistryError):
        registry.register("b")

    assert registry.frozen
    assert registry.tasks_ids() == ["a"]


def test_lookup_unknown_raises():
    with pytest.raises(UnknownTaskError):
        Registry().lookup("deploy")


def test_repeated_deps_keep_first_occurrence():
    registry = Registry()
    task = registry.register("a", ["b", "c", "b"])
    assert task.deps == ("b", "c")


def test_ids_sorted_and_declared():
    registry = Registry()
    for name in ["default", "lint", "fmt"]:
        registry.register(name)

    assert registry.tasks_ids() == ["default", "fmt", "lint"]
    assert registry.declared_ids() == ["default", "lint", "fmt"]
    assert [t.name for t in registry] == ["default", "fmt", "lint"]
    assert len(registry) == 3


def test_default_task_falls_back_to_first_declared():
    registry = Registry()
    registry.register("b")
    registry.register("a")
    assert registry.default_task() == "b"

    registry.default = "a"
    assert registry.default_task() == "a"


def test_default_task_of_empty_registry_is_none():
    assert Registry().default_task() is None


def test_frozen_registry_rejects_attribute_changes():
    registry = Registry()
    registry.register("a")
    registry.freeze()

    with pytest.raises(FrozenRegistryError):
        registry.default = "a"

    with pytest.raises(TypeError):
        registry.tasks["b"] = registry.lookup("a")

    assert registry.default is None
    assert registry.tasks_ids() == ["a"]


def test_freeze_is_idempotent():
    registry = Registry()
    registry.register("a")
    registry.freeze()
    registry.freeze()
    assert registry.frozen


def test_tasks_are_hashable():
    registry = Registry()
    a = registry.register("a", [], ["echo a"], env={"K": "v"})
    b = registry.register("b")

    assert {a, b, a} == {a, b}
    assert hash(a) == hash(registry.lookup("a"))
