"""Discovery of task modules on disk.

Task modules are Python files inside directories named after the task
package (``tasks`` by default) that import gofer. Each one is located
relative to the search path it was found under so it can be imported by
its dotted module name.
"""

import ast
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from gofer.core.errors import TaskLoadError

logger = logging.getLogger(__name__)

# Directories never searched for task packages
SKIPPED_DIRECTORIES = {
    "__pycache__",
    "node_modules",
    "site-packages",
    "venv",
    "build",
    "dist",
}


@dataclass(frozen=True, order=True)
class ModuleReference:
    """A task module to import.

    Attributes:
        name: Dotted import path, e.g. ``tasks.build``.
        root: Directory that must be importable for ``name`` to resolve.
        path: Source file, if the module was found on disk.
    """

    name: str
    root: Path | None = None
    path: Path | None = None


def find_task_directories(search_path: Path, package_name: str) -> list[Path]:
    """Find every directory named ``package_name`` below ``search_path``."""
    directories = []

    for current, dirnames, _ in os.walk(search_path):
        dirnames[:] = sorted(
            d for d in dirnames
            if not d.startswith(".") and d not in SKIPPED_DIRECTORIES
        )
        if Path(current).name == package_name:
            directories.append(Path(current))

    return directories


def is_task_module(source: str | bytes, expected_import: str, filename: str = "<unknown>") -> bool:
    """Check whether module source imports ``expected_import``.

    Raises:
        TaskLoadError: The source does not parse.
    """
    try:
        tree = ast.parse(source, filename=filename)
    except (SyntaxError, ValueError) as e:
        raise TaskLoadError(f"Unable to parse {filename}: {e}") from e

    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            names = [alias.name for alias in node.names]
        elif isinstance(node, ast.ImportFrom) and node.level == 0 and node.module:
            names = [node.module]
        else:
            continue

        for name in names:
            if name == expected_import or name.startswith(expected_import + "."):
                return True

    return False


def module_name(path: Path, root: Path) -> str:
    """Dotted import path of ``path`` relative to ``root``."""
    relative = path.relative_to(root).with_suffix("")
    parts = list(relative.parts)
    if parts[-1] == "__init__":
        parts.pop()
    return ".".join(parts)


def _check_collisions(references: Iterable[ModuleReference]) -> None:
    """Reject module names that more than one search path provides.

    Python imports a dotted name once, so a second ``tasks.build`` (or a
    module below a regular ``tasks`` package found in another root) would
    never run its registrations.
    """
    roots_by_name: dict[str, set[Path]] = {}
    regular_packages: set[str] = set()

    for reference in references:
        parts = reference.name.split(".")
        roots_by_name.setdefault(reference.name, set()).add(reference.root)

        for depth in range(1, len(parts)):
            package = ".".join(parts[:depth])
            roots_by_name.setdefault(package, set()).add(reference.root)
            if (reference.root.joinpath(*parts[:depth]) / "__init__.py").exists():
                regular_packages.add(package)

    for reference in references:
        roots = roots_by_name[reference.name]
        if len(roots) > 1:
            found = ", ".join(str(root) for root in sorted(roots))
            raise TaskLoadError(f"Task module {reference.name} found under more than one search path: {found}")

    for package in sorted(regular_packages):
        roots = roots_by_name[package]
        if len(roots) > 1:
            found = ", ".join(str(root) for root in sorted(roots))
            raise TaskLoadError(f"Task package {package} found under more than one search path: {found}")


def discover(
    search_paths: Iterable[Path],
    package_name: str = "tasks",
    expected_import: str = "gofer",
) -> list[ModuleReference]:
    """Find all task modules under ``search_paths``.

    Args:
        search_paths: Directories to search.
        package_name: Name of task package directories.
        expected_import: Package a module must import to be a task module.

    Returns:
        Sorted module references, without duplicates.

    Raises:
        TaskLoadError: A search path is missing, a module does not parse, or
            two search paths provide the same module or package name.
    """
    references: list[ModuleReference] = []
    seen_files: set[Path] = set()

    for search_path in search_paths:
        search_path = Path(search_path).resolve()
        if not search_path.is_dir():
            raise TaskLoadError(f"Search path not found: {search_path}")

        for directory in find_task_directories(search_path, package_name):
            for source_file in sorted(directory.glob("*.py")):
                if source_file in seen_files:
                    continue
                seen_files.add(source_file)

                # Bytes let ast honour PEP 263 coding declarations
                source = source_file.read_bytes()
                if not is_task_module(source, expected_import, str(source_file)):
                    continue

                reference = ModuleReference(
                    name=module_name(source_file, search_path),
                    root=search_path,
                    path=source_file,
                )
                references.append(reference)
                logger.debug(f"Discovered task module: {reference.name} ({source_file})")

    _check_collisions(references)
    return sorted(references)
