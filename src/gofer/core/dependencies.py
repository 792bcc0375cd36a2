"""Ordered dependency collection with set-style operations."""

from __future__ import annotations

from typing import Iterable, Iterator


class Dependencies:
    """An ordered list of task paths.

    Used both as the dependency list stored on a task and as the working
    state of the resolver. Membership tests and removal work by value;
    ``add`` always appends so that repeated registrations can accumulate
    dependencies without de-duplication.
    """

    def __init__(self, definitions: Iterable[str] = ()) -> None:
        self._items: list[str] = list(definitions)

    def includes(self, definition: str) -> bool:
        return definition in self._items

    def add(self, definition: str) -> None:
        self._items.append(definition)

    def extend(self, definitions: Iterable[str]) -> None:
        for definition in definitions:
            self.add(definition)

    def remove(self, definition: str) -> None:
        """Remove every occurrence of ``definition``; absent values are ignored."""
        self._items = [item for item in self._items if item != definition]

    def index(self, definition: str) -> int:
        return self._items.index(definition)

    def __contains__(self, definition: object) -> bool:
        return isinstance(definition, str) and self.includes(definition)

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index):
        return self._items[index]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Dependencies):
            return self._items == other._items
        if isinstance(other, (list, tuple)):
            return self._items == list(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"Dependencies({self._items!r})"
