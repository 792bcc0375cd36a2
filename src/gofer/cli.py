"""Command-line interface for gofer.

CONCEPTS:
---------
- TASK:      A named unit of work, addressed by its colon-delimited path
             (e.g. ``go:build``). Tasks may depend on other tasks.
- NAMESPACE: The path sections above a task. A namespace with no action
             of its own runs as a no-op.
- PLAN:      The order in which a task and its dependencies run. Every
             dependency runs once, before the tasks that need it.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import NoReturn

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from gofer import __version__
from gofer.config import Settings, settings
from gofer.core.errors import ActionFailureError, GoferError
from gofer.core.registry import TaskRegistry, get_default_registry
from gofer.loader import load_tasks
from gofer.loader.project import ProjectFile

console = Console()


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.WARNING
    fmt = "%(name)s: %(message)s" if verbose else "%(message)s"
    logging.basicConfig(
        level=level,
        format=fmt,
        handlers=[RichHandler(rich_tracebacks=True, console=console, show_path=verbose)],
    )


def print_success_notice(message: str) -> None:
    console.print(f"[ [green]✓[/green] ] {message}")


def print_failure_notice(message: str) -> None:
    console.print(f"[ [red]✗[/red] ] {message}")


def _settings_from_args(args: argparse.Namespace) -> Settings:
    if args.project_file:
        return settings.model_copy(update={"project_file": Path(args.project_file)})
    return settings


def prepare_registry(args: argparse.Namespace) -> TaskRegistry:
    """Load the project's task modules and return the registry they fill."""
    load_tasks(_settings_from_args(args))
    return get_default_registry()


def cmd_run(args: argparse.Namespace) -> None:
    """Perform a task after its dependencies."""
    try:
        registry = prepare_registry(args)
        result = registry.perform(args.task_name, *args.args)
    except ActionFailureError as e:
        for outcome in e.completed:
            if not outcome.skipped:
                print_success_notice(f"Successfully performed task {outcome.definition}")
        print_failure_notice(f"Task {e.definition} failed to execute")
        print_failure_notice(f"Error: {e.error}")
        sys.exit(1)
    except GoferError as e:
        print_failure_notice(str(e))
        sys.exit(1)

    for outcome in result.outcomes:
        if not outcome.skipped:
            print_success_notice(f"Successfully performed task {outcome.definition}")


def cmd_list(args: argparse.Namespace) -> None:
    """List all registered tasks."""
    try:
        registry = prepare_registry(args)
    except GoferError as e:
        print_failure_notice(str(e))
        sys.exit(1)

    tasks = registry.list_tasks()

    if getattr(args, "json", False):
        output = [
            {
                "path": task.path,
                "description": task.description,
                "dependencies": list(task.dependencies),
                "has_action": task.action is not None,
                "origin": task.origin,
            }
            for task in tasks
        ]
        print(json.dumps(output, indent=2))
        return

    if not tasks:
        console.print("[yellow]No tasks found[/yellow]")
        return

    table = Table(title=f"Tasks ({len(tasks)})")
    table.add_column("Task", style="cyan")
    table.add_column("Description", style="white")
    table.add_column("Dependencies", style="yellow")

    for task in tasks:
        path = task.path if task.action else f"[dim]{task.path}[/dim]"
        table.add_row(path, task.description, ", ".join(task.dependencies) or "-")

    console.print(table)


def cmd_plan(args: argparse.Namespace) -> None:
    """Show the order a task and its dependencies would run in."""
    try:
        registry = prepare_registry(args)
        if registry.get(args.task_name) is None:
            print_failure_notice(f"Unable to look up task: {args.task_name}")
            sys.exit(1)
        order = registry.resolve(args.task_name)
    except GoferError as e:
        print_failure_notice(str(e))
        sys.exit(1)

    for position, definition in enumerate(order, start=1):
        task = registry.get(definition)
        marker = "" if task is not None and task.action else " [dim](no action)[/dim]"
        console.print(f"{position:>3}. [cyan]{definition}[/cyan]{marker}")


def cmd_init(args: argparse.Namespace) -> None:
    """Write a default project file."""
    project_settings = _settings_from_args(args)
    project = ProjectFile(project_settings.project_file, settings=project_settings)

    if project.save_defaults():
        console.print(f"[green]Created project file:[/green] {project.path}")
    else:
        console.print(f"[yellow]Project file already exists:[/yellow] {project.path}")


def cmd_version(args: argparse.Namespace) -> None:
    """Show version information."""
    console.print(f"gofer v{__version__}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gofer",
        description="gofer - namespaced task runner",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show detailed output")
    parser.add_argument(
        "-C", "--project-file",
        help="Path to the project file (default: gofer.yaml)",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    run_parser = subparsers.add_parser(
        "run",
        help="Perform a task and its dependencies",
        description="Perform a task after all of its dependencies, stopping at the first failure.",
    )
    run_parser.add_argument("task_name", help="Task path, e.g. go:build")
    run_parser.add_argument(
        "args", nargs=argparse.REMAINDER,
        help="Arguments passed to every task's action",
    )
    run_parser.set_defaults(func=cmd_run)

    list_parser = subparsers.add_parser("list", help="List registered tasks")
    list_parser.add_argument(
        "--json", action="store_true",
        help="Output as JSON",
    )
    list_parser.set_defaults(func=cmd_list)

    plan_parser = subparsers.add_parser(
        "plan",
        help="Show the running order for a task",
        description="Resolve a task's dependencies and print the order without running anything.",
    )
    plan_parser.add_argument("task_name", help="Task path, e.g. go:build")
    plan_parser.set_defaults(func=cmd_plan)

    init_parser = subparsers.add_parser("init", help="Create a default gofer.yaml")
    init_parser.set_defaults(func=cmd_init)

    version_parser = subparsers.add_parser("version", help="Show version information")
    version_parser.set_defaults(func=cmd_version)

    return parser


def main(argv: list[str] | None = None) -> NoReturn:
    """Main entry point for the gofer CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose or settings.verbose)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    args.func(args)
    sys.exit(0)


if __name__ == "__main__":
    main()
