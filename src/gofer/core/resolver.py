"""Dependency resolution for tasks.

Resolution is a depth-first topological sort over the dependency graph
reachable from the requested task. Two working sets drive it:

- ``half``: tasks on the current traversal path (visit in progress).
- ``marked``: tasks fully resolved, in the order they must run.

Meeting a task that is already in ``half`` means the graph loops back on
itself. Tasks already ``marked`` are skipped, so a task shared by several
dependents is performed only once.
"""

from __future__ import annotations

import logging
from typing import Iterator

from gofer.core.dependencies import Dependencies
from gofer.core.errors import CyclicDependencyError, UnresolvableDependenciesError
from gofer.core.manual import Manual

logger = logging.getLogger(__name__)


def resolve(manual: Manual, definition: str) -> Dependencies:
    """Compute the running order for ``definition`` and its dependencies.

    Args:
        manual: The manual to look tasks up in.
        definition: Full path of the requested task.

    Returns:
        Task paths in execution order; ``definition`` is last.

    Raises:
        CyclicDependencyError: A task is reachable from itself.
        UnresolvableDependenciesError: A dependency is not registered.
    """
    half = Dependencies()
    marked = Dependencies()

    # Each frame holds a path and an iterator over its remaining
    # dependencies (None until the path has been entered).
    stack: list[tuple[str, Iterator[str] | None]] = [(definition, None)]

    while stack:
        current, pending = stack[-1]

        if pending is None:
            if current in half:
                cycle = list(half[half.index(current):]) + [current]
                raise CyclicDependencyError(current, cycle)

            if current in marked:
                stack.pop()
                continue

            half.add(current)
            task = manual.index(current)
            if task is None:
                required_by = stack[-2][0] if len(stack) > 1 else None
                raise UnresolvableDependenciesError(current, required_by)

            pending = iter(list(task.dependencies))
            stack[-1] = (current, pending)

        dependency = next(pending, None)
        if dependency is None:
            stack.pop()
            half.remove(current)
            marked.add(current)
        else:
            stack.append((dependency, None))

    logger.debug(f"Resolved {definition}: {', '.join(marked)}")
    return marked
