"""The manual: a forest of tasks keyed by namespace path."""

from __future__ import annotations

from typing import Iterator

from gofer.core.task import DELIMITER, Task, split_path


class Manual:
    """Root tasks of the registry and the sub-namespaces they own.

    Paths are looked up one section at a time, starting from the roots and
    descending into each matched task's children. No two nodes share a
    full path.
    """

    def __init__(self) -> None:
        self.roots: list[Task] = []

    def index(self, definition: str) -> Task | None:
        """Return the task at ``definition`` or ``None`` if any section is missing."""
        entries = self.roots
        task = None

        for section in split_path(definition):
            task = _find(entries, section)
            if task is None:
                return None
            entries = task.children

        return task

    def sectionalize(self, definition: str) -> Task | None:
        """Ensure every section of ``definition`` exists and return the deepest.

        Missing sections are created as empty grouping tasks. Returns
        ``None`` for an empty path or one containing an empty section.
        """
        task = self.index(definition)
        if task is not None:
            return task

        sections = split_path(definition)
        if not all(sections):
            return None

        entries = self.roots
        task = None

        for i, section in enumerate(sections):
            found = _find(entries, section)
            if found is None:
                found = Task(label=section, namespace=DELIMITER.join(sections[:i]))
                entries.append(found)
            task = found
            entries = task.children

        return task

    def add_root(self, task: Task) -> None:
        self.roots.append(task)

    def walk(self) -> Iterator[Task]:
        """Yield every task depth-first, parents before their children."""
        stack = list(reversed(self.roots))
        while stack:
            task = stack.pop()
            yield task
            stack.extend(reversed(task.children))

    def __len__(self) -> int:
        return sum(1 for _ in self.walk())

    def __iter__(self) -> Iterator[Task]:
        return iter(self.roots)


def _find(entries: list[Task], label: str) -> Task | None:
    for task in entries:
        if task.label == label:
            return task
    return None
