"""Task definitions and the nodes stored in the registry."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field, field_validator

from gofer.core.dependencies import Dependencies

# Separates namespace sections in a task path, e.g. "go:build:release".
DELIMITER = ":"

# An action receives the positional arguments given on the command line.
# Raising signals failure; returning normally signals success.
Action = Callable[..., Any]


def join_path(namespace: str, label: str) -> str:
    """Build the full task path for ``label`` under ``namespace``."""
    if not namespace:
        return label
    return DELIMITER.join([namespace, label])


def split_path(definition: str) -> list[str]:
    return definition.split(DELIMITER)


class TaskDefinition(BaseModel):
    """A task as submitted for registration.

    Definitions come from ``@gofer.task`` decorators in task modules or from
    direct calls to ``TaskRegistry.register``.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    namespace: str = Field(
        default="",
        description="Colon-delimited namespace the task lives under (empty for top level)",
    )
    label: str = Field(description="Name of the task within its namespace")
    description: str = Field(default="", description="What the task does")
    dependencies: list[str] = Field(
        default_factory=list,
        description="Full paths of tasks that must run first",
    )
    action: Action | None = Field(
        default=None,
        description="Callable run when the task is performed",
    )
    origin: str | None = Field(
        default=None,
        description="Module the definition was registered from",
    )

    @field_validator("dependencies", mode="before")
    @classmethod
    def _ensure_list(cls, value: Any) -> list[str]:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return list(value)

    @property
    def path(self) -> str:
        return join_path(self.namespace, self.label)


@dataclass(eq=False)
class Task:
    """A node in the task manual.

    A node owns the sub-namespace below it through ``children``. Nodes
    created only to hold a namespace have no action and perform as no-ops.
    """

    label: str
    namespace: str = ""
    description: str = ""
    dependencies: Dependencies = field(default_factory=Dependencies)
    action: Action | None = None
    children: list[Task] = field(default_factory=list)
    origin: str | None = None

    @classmethod
    def from_definition(cls, definition: TaskDefinition) -> Task:
        return cls(
            label=definition.label,
            namespace=definition.namespace,
            description=definition.description,
            dependencies=Dependencies(definition.dependencies),
            action=definition.action,
            origin=definition.origin,
        )

    @property
    def path(self) -> str:
        return join_path(self.namespace, self.label)

    def rewrite(self, definition: TaskDefinition) -> None:
        """Merge a redefinition of this task into the node.

        Description and action are always overwritten. Dependencies
        accumulate while the definition comes from the node's own origin (or
        the node has none yet) and are replaced when another module
        redefines the task. The recorded origin does not change.
        """
        self.description = definition.description
        self.action = definition.action

        if not self.origin or self.origin == definition.origin:
            self.dependencies.extend(definition.dependencies)
        else:
            self.dependencies = Dependencies(definition.dependencies)

    def __repr__(self) -> str:
        return f"Task(path={self.path!r}, dependencies={list(self.dependencies)!r})"
