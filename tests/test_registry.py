"""Tests for task registration and merging."""

import logging

import pytest

import gofer
from gofer.core.errors import BadLabelError, RegistrationFailureError
from gofer.core.registry import TaskRegistry
from gofer.core.task import TaskDefinition


def _noop(*args: str) -> None:
    return None


class TestRegister:
    """Tests for TaskRegistry.register."""

    def test_register_root_task(self, registry: TaskRegistry) -> None:
        task = registry.register(TaskDefinition(label="build", description="Build it"))

        assert registry.get("build") is task
        assert task.namespace == ""
        assert task.description == "Build it"
        assert registry.manual.roots == [task]

    def test_register_namespaced_task(self, registry: TaskRegistry) -> None:
        task = registry.register(
            TaskDefinition(namespace="go:build", label="release", action=_noop)
        )

        assert registry.get("go:build:release") is task
        assert registry.get("go").action is None
        assert registry.get("go:build").action is None
        assert task.path == "go:build:release"

    def test_register_under_existing_namespace(self, registry: TaskRegistry) -> None:
        registry.register(TaskDefinition(label="go"))
        registry.register(TaskDefinition(namespace="go", label="fmt"))
        registry.register(TaskDefinition(namespace="go", label="vet"))

        go = registry.get("go")
        assert [child.label for child in go.children] == ["fmt", "vet"]
        assert len(registry.manual.roots) == 1

    def test_namespace_task_defined_later(self, registry: TaskRegistry) -> None:
        registry.register(TaskDefinition(namespace="go", label="fmt"))
        go = registry.register(
            TaskDefinition(label="go", description="Go tasks", action=_noop)
        )

        assert registry.get("go") is go
        assert go.action is _noop
        assert go.description == "Go tasks"
        assert len(registry) == 2

    def test_bad_label_rejected(self, registry: TaskRegistry) -> None:
        with pytest.raises(BadLabelError):
            registry.register(TaskDefinition(label="build:release"))

        assert len(registry) == 0

    def test_empty_label_rejected(self, registry: TaskRegistry) -> None:
        with pytest.raises(BadLabelError):
            registry.register(TaskDefinition(namespace="go", label=""))

        assert len(registry) == 0

    def test_unusable_namespace(self, registry: TaskRegistry) -> None:
        with pytest.raises(RegistrationFailureError):
            registry.register(TaskDefinition(namespace="go::build", label="release"))

        assert len(registry) == 0

    def test_paths_stay_unique(self, registry: TaskRegistry) -> None:
        for _ in range(3):
            registry.register(TaskDefinition(namespace="a:b", label="c"))
            registry.register(TaskDefinition(namespace="a", label="b"))
            registry.register(TaskDefinition(label="a"))

        paths = [task.path for task in registry.list_tasks()]
        assert sorted(paths) == ["a", "a:b", "a:b:c"]

    def test_origin_defaults_to_calling_module(self, registry: TaskRegistry) -> None:
        task = registry.register(TaskDefinition(label="build"))

        assert task.origin == __name__

    def test_contains(self, registry: TaskRegistry) -> None:
        registry.register(TaskDefinition(namespace="go", label="build"))

        assert "go:build" in registry
        assert "go" in registry
        assert "go:test" not in registry


class TestRedefinition:
    """Tests for merging a task registered twice."""

    def test_same_origin_appends_dependencies(self, registry: TaskRegistry) -> None:
        registry.register(TaskDefinition(label="d", dependencies=["a", "b"], origin="pkg.one"))
        registry.register(TaskDefinition(label="d", dependencies=["b", "c"], origin="pkg.one"))

        assert registry.get("d").dependencies == ["a", "b", "b", "c"]

    def test_different_origin_replaces_dependencies(self, registry: TaskRegistry) -> None:
        registry.register(TaskDefinition(label="d", dependencies=["a", "b"], origin="pkg.one"))
        registry.register(TaskDefinition(label="d", dependencies=["c"], origin="pkg.two"))

        assert registry.get("d").dependencies == ["c"]

    def test_replacement_is_logged(self, registry: TaskRegistry, caplog) -> None:
        registry.register(TaskDefinition(label="d", origin="pkg.one"))

        with caplog.at_level(logging.WARNING, logger="gofer.core.registry"):
            registry.register(TaskDefinition(label="d", origin="pkg.two"))

        assert "redefined by pkg.two" in caplog.text

    def test_node_without_origin_appends(self, registry: TaskRegistry) -> None:
        # "go" is created as a bare namespace with no origin
        registry.register(TaskDefinition(namespace="go", label="fmt", origin="pkg.one"))
        registry.register(TaskDefinition(label="go", dependencies=["x"], origin="pkg.one"))
        registry.register(TaskDefinition(label="go", dependencies=["y"], origin="pkg.two"))

        go = registry.get("go")
        assert go.dependencies == ["x", "y"]
        assert go.origin is None

    def test_description_and_action_overwritten(self, registry: TaskRegistry) -> None:
        def first(*args: str) -> None:
            pass

        def second(*args: str) -> None:
            pass

        registry.register(TaskDefinition(label="t", description="one", action=first, origin="m"))
        task = registry.register(
            TaskDefinition(label="t", description="two", action=second, origin="m")
        )

        assert task.description == "two"
        assert task.action is second

    def test_redefinition_keeps_single_node(self, registry: TaskRegistry) -> None:
        first = registry.register(TaskDefinition(namespace="go", label="build", origin="m"))
        second = registry.register(TaskDefinition(namespace="go", label="build", origin="m"))

        assert first is second
        assert len(registry) == 2


class TestTaskDecorator:
    """Tests for the @task decorator."""

    def test_registers_function(self, registry: TaskRegistry) -> None:
        @registry.task("build", namespace="go", dependencies=["go:fmt"])
        def build(*args: str) -> None:
            """Compile the project."""

        task = registry.get("go:build")
        assert task.action is build
        assert task.description == "Compile the project."
        assert task.dependencies == ["go:fmt"]
        assert task.origin == __name__

    def test_explicit_description_wins(self, registry: TaskRegistry) -> None:
        @registry.task("fmt", description="Format sources")
        def fmt(*args: str) -> None:
            """Docstring."""

        assert registry.get("fmt").description == "Format sources"

    def test_single_dependency_string(self, registry: TaskRegistry) -> None:
        registry.register(TaskDefinition(label="b", dependencies="a"))

        assert registry.get("b").dependencies == ["a"]


class TestDefaultRegistry:
    """Tests for the module-level API."""

    def test_register_uses_default_registry(self, default_registry: TaskRegistry) -> None:
        task = gofer.register(TaskDefinition(label="build"))

        assert default_registry.get("build") is task
        assert task.origin == __name__

    def test_decorator_and_perform(self, default_registry: TaskRegistry) -> None:
        calls = []

        @gofer.task("greet")
        def greet(*args: str) -> None:
            calls.append(args)

        result = gofer.perform("greet", "world")

        assert calls == [("world",)]
        assert result.performed == ["greet"]

    def test_get_default_registry_is_stable(self, default_registry: TaskRegistry) -> None:
        assert gofer.get_default_registry() is default_registry
        assert gofer.get_default_registry() is gofer.get_default_registry()
