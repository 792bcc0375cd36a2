"""gofer - a namespaced task runner with dependency resolution."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("gofer")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

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
from gofer.core.executor import PerformResult, TaskOutcome
from gofer.core.registry import (
    TaskRegistry,
    get_default_registry,
    perform,
    register,
    task,
    use_registry,
)
from gofer.core.task import DELIMITER, Task, TaskDefinition

__all__ = [
    "__version__",
    # Registering and performing
    "task",
    "register",
    "perform",
    "get_default_registry",
    "use_registry",
    "TaskRegistry",
    "TaskDefinition",
    "Task",
    "DELIMITER",
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
