"""Loading task modules into the registry.

Example:
    from gofer.loader import load_and_perform

    # Discover tasks under the configured search paths and run one
    load_and_perform("go:build", "--race")
"""

import importlib
import logging
import sys
from pathlib import Path
from typing import Iterable

from gofer import config
from gofer.config import Settings
from gofer.core.errors import TaskLoadError
from gofer.core.executor import PerformResult
from gofer.core.registry import TaskRegistry, get_default_registry, use_registry
from gofer.loader.discovery import ModuleReference, discover
from gofer.loader.project import ProjectFile

logger = logging.getLogger(__name__)


def load_modules(references: Iterable[ModuleReference]) -> list[ModuleReference]:
    """Import task modules so their registrations run.

    Modules already imported are left alone, so loading twice in one
    process registers nothing new.

    Raises:
        TaskLoadError: A module fails to import.
    """
    loaded = []
    importlib.invalidate_caches()

    for reference in references:
        if reference.root is not None:
            root = str(reference.root)
            if root not in sys.path:
                sys.path.insert(0, root)

        try:
            importlib.import_module(reference.name)
        except Exception as e:
            raise TaskLoadError(f"Unable to import task module {reference.name}: {e}") from e

        logger.debug(f"Loaded task module: {reference.name}")
        loaded.append(reference)

    return loaded


def collect_references(
    settings: Settings | None = None,
    project: ProjectFile | None = None,
) -> list[ModuleReference]:
    """Module references named by the settings and project file.

    Search paths from the environment take precedence over those in the
    project file. Modules listed explicitly are appended after discovered
    ones.
    """
    settings = settings or config.settings
    project = project or ProjectFile(settings.project_file, settings=settings)

    search_paths: list[Path] = list(settings.search_paths) or project.get_search_paths()
    references = discover(
        search_paths,
        package_name=project.get_package_name(),
        expected_import=settings.expected_import,
    )

    discovered = {reference.name for reference in references}
    for name in project.get_modules():
        if name not in discovered:
            references.append(ModuleReference(name=name, root=project.root))

    return references


def load_tasks(
    settings: Settings | None = None,
    project: ProjectFile | None = None,
) -> list[ModuleReference]:
    """Discover and import all task modules for the project."""
    references = collect_references(settings, project)
    loaded = load_modules(references)
    logger.info(f"Loaded {len(loaded)} task module(s)")
    return loaded


def load_and_perform(
    definition: str,
    *arguments: str,
    registry: TaskRegistry | None = None,
    settings: Settings | None = None,
) -> PerformResult:
    """Load task modules, then perform ``definition``.

    Modules imported by this call register with ``registry`` (the default
    registry when omitted). Modules already imported earlier in the
    process are not imported again and register nothing new.
    """
    if registry is None:
        registry = get_default_registry()

    with use_registry(registry):
        load_tasks(settings)

    return registry.perform(definition, *arguments)


__all__ = [
    "ModuleReference",
    "ProjectFile",
    "collect_references",
    "discover",
    "load_and_perform",
    "load_modules",
    "load_tasks",
]
