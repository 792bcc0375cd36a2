"""Task registry: registration, lookup and the process-wide default.

Example:
    from gofer import TaskRegistry

    registry = TaskRegistry()

    @registry.task("fmt", namespace="go", description="Format sources")
    def fmt(*args):
        ...

    @registry.task("build", namespace="go", dependencies=["go:fmt"])
    def build(*args):
        ...

    registry.perform("go:build")
"""

from __future__ import annotations

import logging
import sys
import threading
from contextlib import contextmanager
from typing import TYPE_CHECKING, Callable, Iterable, Iterator

from gofer.core.dependencies import Dependencies
from gofer.core.errors import BadLabelError, RegistrationFailureError
from gofer.core.manual import Manual
from gofer.core.resolver import resolve
from gofer.core.task import DELIMITER, Action, Task, TaskDefinition

if TYPE_CHECKING:
    from gofer.core.executor import PerformResult

logger = logging.getLogger(__name__)


class TaskRegistry:
    """Registry of tasks organised by namespace.

    Registration, lookup and resolution share a reentrant lock, so tasks
    registered from another thread never appear half-inserted. Actions run
    outside the lock.
    """

    def __init__(self) -> None:
        self.manual = Manual()
        self._lock = threading.RLock()

    def register(self, definition: TaskDefinition, *, stacklevel: int = 1) -> Task:
        """Register a task, merging it into an existing one with the same path.

        Args:
            definition: The task to register.
            stacklevel: Frames above this call whose module is recorded as
                the origin when the definition has none.

        Returns:
            The node now holding the task.

        Raises:
            BadLabelError: The label is empty or contains the delimiter.
            RegistrationFailureError: The namespace could not be created.
        """
        if not definition.label or DELIMITER in definition.label:
            raise BadLabelError(definition.label)

        if definition.origin is None:
            definition = definition.model_copy(
                update={"origin": _caller_module(stacklevel + 1)}
            )

        path = definition.path

        with self._lock:
            defined = self.manual.index(path)
            if defined is not None:
                if defined.origin and defined.origin != definition.origin:
                    logger.warning(
                        f"Task {path} from {defined.origin} redefined by "
                        f"{definition.origin}, replacing its dependencies"
                    )
                defined.rewrite(definition)
                logger.debug(f"Merged redefinition of task {path}")
                return defined

            task = Task.from_definition(definition)

            if not definition.namespace:
                self.manual.add_root(task)
            else:
                parent = self.manual.sectionalize(definition.namespace)
                if parent is None:
                    raise RegistrationFailureError(definition.namespace, definition.label)
                parent.children.append(task)

        logger.debug(f"Registered task {path} from {definition.origin}")
        return task

    def task(
        self,
        label: str,
        namespace: str = "",
        description: str = "",
        dependencies: Iterable[str] = (),
    ) -> Callable[[Action], Action]:
        """Decorator registering the decorated function as a task's action.

        The function's module is recorded as the origin.
        """
        def decorator(action: Action) -> Action:
            self.register(
                TaskDefinition(
                    namespace=namespace,
                    label=label,
                    description=description or (action.__doc__ or "").strip(),
                    dependencies=dependencies,
                    action=action,
                    origin=action.__module__,
                )
            )
            return action
        return decorator

    def get(self, definition: str) -> Task | None:
        """Look up a task by its full path."""
        with self._lock:
            return self.manual.index(definition)

    def resolve(self, definition: str) -> Dependencies:
        """Running order for ``definition``; see :func:`gofer.core.resolver.resolve`."""
        with self._lock:
            return resolve(self.manual, definition)

    def perform(self, definition: str, *arguments: str) -> PerformResult:
        """Perform ``definition`` after its dependencies."""
        from gofer.core.executor import perform

        return perform(self, definition, *arguments)

    def list_tasks(self) -> list[Task]:
        """All tasks, grouping nodes included, parents before children."""
        with self._lock:
            return list(self.manual.walk())

    def __contains__(self, definition: object) -> bool:
        return isinstance(definition, str) and self.get(definition) is not None

    def __iter__(self) -> Iterator[Task]:
        return iter(self.list_tasks())

    def __len__(self) -> int:
        with self._lock:
            return len(self.manual)


def _caller_module(stacklevel: int) -> str | None:
    try:
        frame = sys._getframe(stacklevel)
    except ValueError:
        return None
    return frame.f_globals.get("__name__")


# Default registry instance (lazy-loaded)
_default_registry: TaskRegistry | None = None


def get_default_registry() -> TaskRegistry:
    """Get the process-wide registry used by task modules.

    Returns:
        The default TaskRegistry (lazily created)
    """
    global _default_registry
    if _default_registry is None:
        _default_registry = TaskRegistry()
    return _default_registry


@contextmanager
def use_registry(registry: TaskRegistry) -> Iterator[TaskRegistry]:
    """Make ``registry`` the default registry inside a ``with`` block.

    Task modules imported inside the block register with ``registry``.
    The previous default is restored on exit.
    """
    global _default_registry
    previous = _default_registry
    _default_registry = registry
    try:
        yield registry
    finally:
        _default_registry = previous


def register(definition: TaskDefinition) -> Task:
    """Register ``definition`` with the default registry."""
    return get_default_registry().register(definition, stacklevel=2)


def task(
    label: str,
    namespace: str = "",
    description: str = "",
    dependencies: Iterable[str] = (),
) -> Callable[[Action], Action]:
    """Decorator registering a task with the default registry."""
    return get_default_registry().task(label, namespace, description, dependencies)


def perform(definition: str, *arguments: str) -> PerformResult:
    """Perform ``definition`` using the default registry."""
    return get_default_registry().perform(definition, *arguments)
