"""Command-line interface for resolving task groups."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from tekton_taskgroup.catalog import TaskCatalog
from tekton_taskgroup.config import ENV_VARS, CliEnv, EnvParseError, load_cli_env
from tekton_taskgroup.errors import SchemaValidationError, TaskGroupError
from tekton_taskgroup.manifest import build_task, dump_manifest, load_task_groups
from tekton_taskgroup.resolve import resolve_task_spec
from tekton_taskgroup.validation import validate_task_group

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="taskgroup",
    help="Resolve TaskGroups into flat Tasks.",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)


def _load_env() -> CliEnv:
    try:
        return load_cli_env()
    except EnvParseError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1) from None


def _configure_logging(env: CliEnv, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else env.log_level_value,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def _load_catalog(catalog_path: str | None, env: CliEnv) -> TaskCatalog:
    # An explicit --catalog must exist; the default location may be absent
    if catalog_path:
        return TaskCatalog.from_path(catalog_path)
    if not Path(env.catalog).exists():
        logger.debug(f"Catalog path {env.catalog} does not exist, using an empty catalog")
        return TaskCatalog()
    return TaskCatalog.from_path(env.catalog)


def _print_schema_errors(e: SchemaValidationError) -> None:
    err_console.print(f"[red]Validation failed:[/red] {escape(e.message)}")
    for error in e.errors:
        err_console.print(f"  • {escape(error)}")


@app.command("resolve")
def resolve_cmd(
    file: str = typer.Option(
        ...,
        "--file",
        "-f",
        help="Path to a TaskGroup manifest file or directory",
    ),
    catalog_path: str | None = typer.Option(
        None,
        "--catalog",
        "-c",
        help="Task manifest file or directory (default: $TASKGROUP_CATALOG or 'tasks')",
    ),
    output: str | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: 'yaml' or 'json' (default: $TASKGROUP_OUTPUT or 'yaml')",
    ),
    namespace: str | None = typer.Option(
        None,
        "--namespace",
        "-n",
        help="Namespace for produced Tasks (default: the group's, then $TASKGROUP_NAMESPACE)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging",
    ),
) -> None:
    """Resolve TaskGroups and print the resulting Task manifests.

    Example:
        taskgroup resolve -f build-group.yaml -c tasks/ -o yaml
    """
    env = _load_env()
    _configure_logging(env, verbose)

    try:
        groups = load_task_groups(file)
        if not groups:
            err_console.print(f"[red]Error:[/red] No TaskGroup found in {escape(file)}")
            raise typer.Exit(code=1)

        catalog = _load_catalog(catalog_path, env)

        tasks = []
        for group in groups:
            references = catalog.references_for(group.spec)
            spec = resolve_task_spec(group.spec, references)
            task = build_task(
                group,
                spec,
                namespace=namespace or group.metadata.namespace or env.namespace,
            )
            logger.info(
                f"Resolved TaskGroup '{group.metadata.name}': "
                f"{len(spec.steps)} step(s), {len(spec.params)} param(s)"
            )
            tasks.append(task)

        rendered = dump_manifest(tasks if len(tasks) > 1 else tasks[0], output or env.output)
    except SchemaValidationError as e:
        _print_schema_errors(e)
        raise typer.Exit(code=1) from None
    except (TaskGroupError, ValueError) as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1) from None

    typer.echo(rendered, nl=False)


@app.command("validate")
def validate_cmd(
    file: str = typer.Option(
        ...,
        "--file",
        "-f",
        help="Path to a TaskGroup manifest file or directory",
    ),
    catalog_path: str | None = typer.Option(
        None,
        "--catalog",
        "-c",
        help="Task manifest file or directory (default: $TASKGROUP_CATALOG or 'tasks')",
    ),
) -> None:
    """Validate TaskGroups without resolving them.

    Checks:
    - Manifest schema
    - Unique param and step names
    - Param bindings target declared params
    - Every used task is in the catalog
    """
    env = _load_env()
    _configure_logging(env, verbose=False)

    try:
        groups = load_task_groups(file)
        catalog = _load_catalog(catalog_path, env)
    except SchemaValidationError as e:
        _print_schema_errors(e)
        raise typer.Exit(code=1) from None
    except TaskGroupError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1) from None

    if not groups:
        err_console.print(f"[red]Error:[/red] No TaskGroup found in {escape(file)}")
        raise typer.Exit(code=1)

    failed = False
    for group in groups:
        references = catalog.references_for(group.spec)
        errors = validate_task_group(group.spec, references)
        available = ", ".join(catalog.names()) or "none"
        for index, step in group.spec.reference_steps():
            if index not in references:
                errors.append(
                    f"Step '{step.name}' uses task '{step.uses.task_ref.name}' "
                    f"which is not in the catalog (available: {available})"
                )

        name = group.metadata.name
        if errors:
            failed = True
            console.print(f"[red]✗ TaskGroup '{escape(name)}' is invalid:[/red]")
            for error in errors:
                console.print(f"  • {escape(error)}")
        else:
            console.print(f"[green]✓ TaskGroup '{escape(name)}' is valid[/green]")

    raise typer.Exit(code=1 if failed else 0)


@app.command("env")
def env_cmd() -> None:
    """Show the TASKGROUP_* environment variables and their current values."""
    table = Table(title="TASKGROUP Environment Variables")
    table.add_column("Variable", style="cyan", no_wrap=True)
    table.add_column("Default", style="yellow")
    table.add_column("Current Value", style="green")

    for field_name, env_var in sorted(ENV_VARS.items(), key=lambda x: x[1]):
        default = str(CliEnv.model_fields[field_name].default)
        value = os.environ.get(env_var, "[not set]")
        if len(value) > 50:
            value = value[:47] + "..."
        table.add_row(env_var, default, escape(value))

    console.print(table)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
