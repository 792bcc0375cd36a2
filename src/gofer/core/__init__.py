"""Core task engine: registry, resolution and execution."""

from gofer.core.dependencies import Dependencies
from gofer.core.errors import (
    ActionFailureError,
    BadLabelError,
    CyclicDependencyError,
    GoferError,
    RegistrationFailureError,
    TaskLoadError,
    UnknownTaskError,
    UnresolvableDependenciesError,
)
from gofer.core.executor import PerformResult, TaskOutcome, perform
from gofer.core.manual import Manual
from gofer.core.registry import TaskRegistry, get_default_registry, use_registry
from gofer.core.resolver import resolve
from gofer.core.task import DELIMITER, Task, TaskDefinition

__all__ = [
    # Model
    "DELIMITER",
    "Dependencies",
    "Task",
    "TaskDefinition",
    "Manual",
    # Registry
    "TaskRegistry",
    "get_default_registry",
    "use_registry",
    # Resolution and execution
    "resolve",
    "perform",
    "PerformResult",
    "TaskOutcome",
    # Errors
    "GoferError",
    "BadLabelError",
    "RegistrationFailureError",
    "UnknownTaskError",
    "UnresolvableDependenciesError",
    "CyclicDependencyError",
    "ActionFailureError",
    "TaskLoadError",
]
