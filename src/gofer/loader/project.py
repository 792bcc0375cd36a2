"""Project file for gofer.

Lists where task modules live, loaded from ``gofer.yaml`` next to the
project. Missing keys fall back to the values from :class:`Settings`.
"""

import os
from pathlib import Path
from typing import Any

import yaml

from gofer import config
from gofer.config import Settings
from gofer.core.errors import TaskLoadError

_YAML_HEADER = """\
# gofer project file
# search_paths: directories scanned for task packages
# package_name: name of the task package directories
# modules: extra modules to import before running tasks

"""


def default_project(settings: Settings | None = None) -> dict[str, Any]:
    """Project values implied by ``settings``."""
    settings = settings or config.settings
    return {
        "search_paths": ["."],
        "package_name": settings.package_name,
        "modules": [],
    }


class ProjectFile:
    """Loads and exposes the project's ``gofer.yaml``."""

    def __init__(self, path: str | Path = "gofer.yaml", settings: Settings | None = None) -> None:
        self.path = Path(os.path.expanduser(str(path)))
        self.defaults = default_project(settings)
        self._data: dict[str, Any] | None = None

    # -- loading --------------------------------------------------------

    def load(self) -> dict[str, Any]:
        """Load the project file, filling in defaults for missing keys."""
        if self._data is not None:
            return self._data

        if self.path.exists():
            try:
                with open(self.path) as f:
                    data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise TaskLoadError(f"Invalid YAML in project file {self.path}: {e}") from e
            if not isinstance(data, dict):
                raise TaskLoadError(f"Project file must be a YAML mapping: {self.path}")
            self._data = data
        else:
            self._data = {}

        for key, default_value in self.defaults.items():
            if self._data.get(key) is None:
                self._data[key] = default_value

        for key in ("search_paths", "modules"):
            if isinstance(self._data[key], str):
                self._data[key] = [self._data[key]]

        return self._data

    @property
    def root(self) -> Path:
        return self.path.resolve().parent

    def get_search_paths(self) -> list[Path]:
        """Search paths with ``~`` expanded, relative to the project file."""
        paths = []
        for entry in self.load()["search_paths"]:
            path = Path(os.path.expanduser(str(entry)))
            if not path.is_absolute():
                path = self.root / path
            paths.append(path)
        return paths

    def get_package_name(self) -> str:
        return str(self.load()["package_name"])

    def get_modules(self) -> list[str]:
        return [str(module) for module in self.load()["modules"]]

    # -- bootstrap ------------------------------------------------------

    def save_defaults(self) -> bool:
        """Write the default project file unless one exists.

        Returns:
            True if the file was written
        """
        if self.path.exists():
            return False

        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            f.write(_YAML_HEADER)
            yaml.dump(
                self.defaults,
                f,
                default_flow_style=False,
                allow_unicode=True,
                sort_keys=False,
            )
        return True
