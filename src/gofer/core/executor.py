"""Performing a task and its dependencies.

A perform call moves through validation, resolution and execution. Tasks
run one at a time in resolved order; the first failing action stops the
run and nothing after it is executed.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field

from gofer.core.errors import ActionFailureError, UnknownTaskError
from gofer.core.registry import TaskRegistry

logger = logging.getLogger(__name__)


@dataclass
class TaskOutcome:
    """Result of performing a single task.

    Attributes:
        definition: Full path of the task.
        skipped: True when the task has no action (grouping node).
        duration_ms: Time spent in the action in milliseconds.
    """

    definition: str
    skipped: bool = False
    duration_ms: float = 0


@dataclass
class PerformResult:
    """Result of a successful perform call.

    Attributes:
        definition: The requested task.
        order: Resolved running order, ending with ``definition``.
        outcomes: One entry per task in ``order``.
    """

    definition: str
    order: list[str] = field(default_factory=list)
    outcomes: list[TaskOutcome] = field(default_factory=list)

    @property
    def performed(self) -> list[str]:
        """Tasks whose action actually ran."""
        return [outcome.definition for outcome in self.outcomes if not outcome.skipped]


def perform(registry: TaskRegistry, definition: str, *arguments: str) -> PerformResult:
    """Perform ``definition`` after all of its dependencies.

    Args:
        registry: Registry holding the tasks.
        definition: Full path of the task to perform.
        *arguments: Passed to every action.

    Returns:
        The resolved order and per-task outcomes.

    Raises:
        UnknownTaskError: ``definition`` is not registered.
        CyclicDependencyError: The dependency graph loops.
        UnresolvableDependenciesError: A dependency is not registered.
        ActionFailureError: An action raised or exited with a non-zero
            status; later tasks did not run.
    """
    if registry.get(definition) is None:
        raise UnknownTaskError(definition)

    order = registry.resolve(definition)
    result = PerformResult(definition=definition, order=list(order))

    for current in order:
        task = registry.get(current)

        if task is None or task.action is None:
            logger.debug(f"Task {current} has no action, skipping")
            result.outcomes.append(TaskOutcome(definition=current, skipped=True))
            continue

        start = time.perf_counter()
        try:
            task.action(*arguments)
        except SystemExit as e:
            # sys.exit() or sys.exit(0) inside an action counts as success
            if e.code not in (None, 0):
                logger.error(f"Task {current} exited with status {e.code}")
                raise ActionFailureError(current, e, result.outcomes) from e
        except Exception as e:
            logger.error(f"Task {current} failed to execute: {e}")
            raise ActionFailureError(current, e, result.outcomes) from e

        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(f"Successfully performed task {current} in {duration_ms:.0f}ms")
        result.outcomes.append(TaskOutcome(definition=current, duration_ms=duration_ms))

    return result
