"""CLI commands for mgit.

This module provides the command-line interface for mgit: the update
command, which brings every package of a workspace up to date, and the
config command.
"""

import logging
import sys
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

import typer
from rich import print as rprint
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn, TaskProgressColumn

from mgit.commands.bootstrap import Bootstrap
from mgit.commands.exec import GitExecutor
from mgit.commands.update import UpdateCommand, after_all
from mgit.config import (
    CONFIG_FILE,
    get_command_timeout,
    get_fetch_before_checkout,
    get_jobs,
    init_config,
    is_verbose,
    load_config,
)
from mgit.core import MgitError
from mgit.models import OptionSet, PackageContext, ResolverStrategy, WorkflowResult
from mgit.resolver import Resolved, WorkspaceResolver
from mgit.utils import display_logs, display_results_table
from mgit.workspace import Workspace, load_workspace

app = typer.Typer(
    help="Keep the packages of a multi-repository workspace in sync with their remotes",
    no_args_is_help=True,
)


@app.command()
def update(
    cwd: str | None = typer.Option(
        None, "--cwd", help="Workspace root containing mgit.toml (default: current directory)"
    ),
    packages: str | None = typer.Option(
        None, "--packages", help="Directory holding the package checkouts"
    ),
    fetch: bool | None = typer.Option(
        None,
        "--fetch/--no-fetch",
        help="Run 'git fetch' before checking out the branch (default: from config)",
    ),
    jobs: int | None = typer.Option(
        None, "--jobs", "-j", help="Number of packages updated in parallel (default: from config)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every git command"),
):
    """Update all packages of the workspace.

    Packages that are not cloned yet are cloned. Cloned packages are checked
    out on their branch and pulled, unless they have uncommitted changes, are
    on a detached commit, or their branch does not exist on the server.

    Examples:
        mgit update
        mgit update --fetch --jobs 4
        mgit update --cwd ~/work/project --packages external
    """
    try:
        _configure_logging(verbose or is_verbose())

        workspace = load_workspace(Path(cwd) if cwd else Path.cwd(), packages)
        if not workspace.package_names:
            rprint("[yellow]No dependencies declared in the workspace[/yellow]")
            return

        fetch_before_checkout = fetch if fetch is not None else get_fetch_before_checkout()
        options = OptionSet(
            fetch_before_checkout=fetch_before_checkout,
            resolver_strategy=ResolverStrategy.RESOLVED,
        )

        resolver = WorkspaceResolver(workspace)
        executor = GitExecutor(timeout=get_command_timeout())
        command = UpdateCommand(executor, Bootstrap(executor, resolver))

        rprint(f"[blue]Updating {len(workspace.package_names)} packages...[/blue]")
        results, processed = _run_updates(
            command, workspace, options, Resolved(resolver), jobs or get_jobs()
        )

        for name in workspace.package_names:
            display_logs(name, results[name].logs)

        display_results_table(results)
        after_all(processed)

        if not all(result.succeeded for result in results.values()):
            sys.exit(1)

    except MgitError as e:
        rprint(f"[red]Error: {e}[/red]")
        sys.exit(1)


def _configure_logging(verbose: bool):
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
    )


def _run_updates(
    command: UpdateCommand,
    workspace: Workspace,
    options: OptionSet,
    strategy: Resolved,
    jobs: int,
) -> tuple[dict[str, WorkflowResult], int]:
    """Run the update workflow for every package, at most jobs at a time."""
    results: dict[str, WorkflowResult] = {}
    processed: set[str] = set()
    lock = threading.Lock()

    def update_one(name: str) -> tuple[str, WorkflowResult]:
        package = PackageContext(
            name=name,
            working_directory=str(workspace.packages),
            options=options,
        )
        result = command.execute(package, strategy)
        with lock:
            processed.add(name)
        return name, result

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
    ) as progress:
        task = progress.add_task("[cyan]Updating...", total=len(workspace.package_names))

        with ThreadPoolExecutor(max_workers=max(jobs, 1)) as executor:
            futures = [executor.submit(update_one, name) for name in workspace.package_names]
            for future in as_completed(futures):
                name, result = future.result()
                results[name] = result
                if not result.succeeded:
                    progress.console.print(f"  [yellow]✗ {name}[/yellow]")
                progress.advance(task)

    return results, len(processed)


@app.command()
def config(
    show: bool = typer.Option(False, "--show", help="Show current configuration"),
    init: bool = typer.Option(
        False, "--init", help="Initialize config file with defaults"
    ),
):
    """Manage mgit configuration.

    Examples:
        mgit config --show     # Show current configuration
        mgit config --init     # Create config file with defaults
    """
    if not any([show, init]):
        rprint("[red]Error: Must specify one of --show or --init[/red]")
        sys.exit(1)

    if show:
        config_data = load_config()
        rprint("[bold cyan]Current Configuration[/bold cyan]")
        rprint(f"[dim]Config file: {CONFIG_FILE}[/dim]")
        rprint(f"[dim]{'─' * 50}[/dim]\n")

        for section, values in config_data.items():
            rprint(f"[bold yellow]\\[{section}][/bold yellow]")
            if isinstance(values, dict):
                for key, value in values.items():
                    rprint(f"  [cyan]{key}[/cyan] = {value}")
            else:
                rprint(f"  {values}")
            rprint()

    elif init:
        config_path = init_config()
        rprint(f"[green]Configuration file created at {config_path}[/green]")
