"""Error types raised by the task registry, resolver and executor.

Every error derives from :class:`GoferError` so callers can catch the whole
family at the presentation boundary while still telling the kinds apart.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from gofer.core.executor import TaskOutcome


class GoferError(Exception):
    """Base class for all gofer errors."""


class BadLabelError(GoferError):
    """A task label is empty or contains the namespace delimiter."""

    def __init__(self, label: str) -> None:
        self.label = label
        super().__init__(f"Bad label for task, unexpected section delimiter: {label!r}")


class RegistrationFailureError(GoferError):
    """The namespace for a task could not be established."""

    def __init__(self, namespace: str, label: str) -> None:
        self.namespace = namespace
        self.label = label
        super().__init__(
            f"Registration for task {label!r} failed: "
            f"unable to create namespace {namespace!r}"
        )


class UnknownTaskError(GoferError):
    """The requested task is not in the registry."""

    def __init__(self, definition: str) -> None:
        self.definition = definition
        super().__init__(f"Unable to look up task: {definition}")


class UnresolvableDependenciesError(GoferError):
    """A dependency names a task that is not registered."""

    def __init__(self, definition: str, required_by: str | None = None) -> None:
        self.definition = definition
        self.required_by = required_by
        if required_by:
            message = f"Unable to resolve dependency {definition} (required by {required_by})"
        else:
            message = f"Unable to resolve dependency {definition}"
        super().__init__(message)


class CyclicDependencyError(GoferError):
    """A task depends on itself, directly or transitively."""

    def __init__(self, definition: str, cycle: Sequence[str]) -> None:
        self.definition = definition
        self.cycle = list(cycle)
        super().__init__(f"Cyclic dependency detected: {' -> '.join(self.cycle)}")


class ActionFailureError(GoferError):
    """A task's action raised while being performed.

    The original exception is available as ``error`` and ``__cause__``.
    """

    def __init__(
        self,
        definition: str,
        error: BaseException,
        completed: Sequence[TaskOutcome] = (),
    ) -> None:
        self.definition = definition
        self.error = error
        self.completed = list(completed)
        super().__init__(f"Task {definition} failed to execute: {error}")


class TaskLoadError(GoferError):
    """Task modules could not be discovered or imported."""
