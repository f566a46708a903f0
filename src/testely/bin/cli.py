# src/testely/bin/cli.py
import logging
import os
from enum import Enum
from pathlib import Path
from typing import Optional, Annotated

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from testely.lib.commands import open_counterpart
from testely.lib.context import Context
from testely.lib.domain import Direction, Document, LocationStrategy, SuffixConvention
from testely.lib.errors import TestelyError
from testely.lib.ui import ConsoleChooser, ConsoleNotifier, NonInteractiveChooser
from testely.lib.ui import console as err_console

logger = logging.getLogger(__name__)
console = Console()

__version__ = "0.1.0"

app = typer.Typer(help="Testely - jump between source files and their tests")


class LocationChoice(str, Enum):
    same_directory = "same-directory"
    nested_test = "nested-test"
    nested_tests = "nested-tests"
    root_flat = "root-flat"
    root_nested = "root-nested"


LOCATIONS = {
    LocationChoice.same_directory: LocationStrategy.SAME_DIRECTORY,
    LocationChoice.nested_test: LocationStrategy.SAME_DIRECTORY_NESTED_TEST,
    LocationChoice.nested_tests: LocationStrategy.SAME_DIRECTORY_NESTED_TESTS,
    LocationChoice.root_flat: LocationStrategy.ROOT_TEST_FOLDER_FLAT,
    LocationChoice.root_nested: LocationStrategy.ROOT_TEST_FOLDER_NESTED,
}


class ExtensionChoice(str, Enum):
    spec = "spec"
    test = "test"


EXTENSIONS = {
    ExtensionChoice.spec: SuffixConvention.SPEC,
    ExtensionChoice.test: SuffixConvention.TEST,
}

WorkspaceOption = Annotated[
    Optional[Path],
    typer.Option(
        "--workspace",
        "-w",
        help="Workspace folder to search for projects (env: TESTELY_WORKSPACE)",
    ),
]
NoInputOption = Annotated[
    Optional[bool],
    typer.Option("--no-input", help="Never prompt, fail instead (env: TESTELY_NO_INPUT)"),
]
LaunchOption = Annotated[
    bool,
    typer.Option("--launch", "-l", help="Open the resolved file with the system handler"),
]
FileArgument = Annotated[str, typer.Argument(help="File path or file:// URI")]


def get_default_workspace() -> Path:
    """Get default workspace from environment or the current directory"""
    return Path(os.getenv("TESTELY_WORKSPACE", os.getcwd()))


def get_default_no_input() -> bool:
    """Get default no-input setting from environment"""
    return os.getenv("TESTELY_NO_INPUT", "").lower() in ("1", "true", "yes")


def create_context(workspace: Optional[Path], no_input: Optional[bool]) -> Context:
    workspace = workspace or get_default_workspace()
    no_input = no_input if no_input is not None else get_default_no_input()

    if not workspace.is_dir():
        err_console.print(f"[red]✗ Error: Workspace {workspace} is not a directory[/red]")
        raise typer.Exit(1)

    chooser = NonInteractiveChooser() if no_input else ConsoleChooser()
    return Context.create(workspace, notifier=ConsoleNotifier(), chooser=chooser)


def _open(file: str, direction: Optional[Direction], workspace: Optional[Path],
          no_input: Optional[bool], launch: bool) -> None:
    context = create_context(workspace, no_input)
    path = open_counterpart(Document.from_argument(file), context, direction)
    if path is None:
        raise typer.Exit(1)

    typer.echo(str(path))
    if launch:
        typer.launch(str(path))


@app.command()
def toggle(
    file: FileArgument,
    workspace: WorkspaceOption = None,
    no_input: NoInputOption = None,
    launch: LaunchOption = False,
) -> None:
    """Print the counterpart of FILE: its source if it is a test, its test otherwise"""
    _open(file, None, workspace, no_input, launch)


@app.command("test")
def open_test(
    file: FileArgument,
    workspace: WorkspaceOption = None,
    no_input: NoInputOption = None,
    launch: LaunchOption = False,
) -> None:
    """Print the test file of FILE, creating it if it does not exist"""
    _open(file, Direction.TEST, workspace, no_input, launch)


@app.command("source")
def open_source(
    file: FileArgument,
    workspace: WorkspaceOption = None,
    no_input: NoInputOption = None,
    launch: LaunchOption = False,
) -> None:
    """Print the source file of FILE"""
    _open(file, Direction.SOURCE, workspace, no_input, launch)


@app.command()
def info(workspace: WorkspaceOption = None) -> None:
    """Display configuration and discovered projects"""
    context = create_context(workspace, no_input=True)
    config = context.configuration.get_typescript_configuration()

    console.print(Panel.fit("Testely Configuration", style="bold blue"))

    info_table = Table(show_header=False, box=None)
    info_table.add_column("Setting", style="cyan", width=20)
    info_table.add_column("Value", style="white")
    info_table.add_column("Source", style="dim", width=12)

    info_table.add_row("Workspace", str(context.workspace.root), "")
    info_table.add_row("Settings File", str(context.store.settings_file),
                       "✓" if context.store.settings_file.exists() else "✗")
    for label, value in (("Test Location", config.test_location), ("Test Extension", config.test_extension)):
        source = "ENV" if os.getenv(value.env_var) else "FILE"
        current = value.value
        info_table.add_row(label, current or "[yellow]not set[/yellow]", source if current else "")

    console.print(info_table)
    console.print()

    if not context.registry.projects:
        console.print("[yellow]No projects found in workspace[/yellow]")
        return

    console.print(Panel.fit("Projects", style="bold green"))

    projects_table = Table()
    projects_table.add_column("Kind", style="cyan", width=12)
    projects_table.add_column("Manifest", style="white")

    for project in context.registry.projects:
        try:
            manifest = project.manifest.relative_to(context.workspace.root)
        except ValueError:
            manifest = project.manifest
        projects_table.add_row(project.kind, str(manifest))

    console.print(projects_table)


@app.command()
def config(
    location: Annotated[
        Optional[LocationChoice],
        typer.Option("--location", help="Where test files live"),
    ] = None,
    extension: Annotated[
        Optional[ExtensionChoice],
        typer.Option("--extension", help="Test file suffix"),
    ] = None,
    workspace: WorkspaceOption = None,
) -> None:
    """Store settings for the workspace; prompts for both when no option is given"""
    context = create_context(workspace, no_input=False)
    ts_config = context.configuration.get_typescript_configuration()

    try:
        if location is None and extension is None:
            for value in (ts_config.test_location, ts_config.test_extension):
                choice = context.chooser.choose(value.prompt, value.options)
                if choice is None:
                    console.print(f"[yellow]Keeping {value.get_key()} unchanged[/yellow]")
                    continue
                value.set(choice)
        if location is not None:
            ts_config.set_location_strategy(LOCATIONS[location])
        if extension is not None:
            ts_config.set_test_file_extension(EXTENSIONS[extension])
    except TestelyError as e:
        err_console.print(f"[red]✗ Error: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]Saved settings to {context.store.settings_file}[/green]")


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "-v", "--verbose", help="verbosity"),
    version: bool = typer.Option(False, "-V", "--version", help="show version"),
):
    log_fmt = r"%(asctime)-15s %(levelname)-7s %(message)s"
    if verbose:
        logging.basicConfig(
            format=log_fmt, level=logging.DEBUG, datefmt="%m-%d %H:%M:%S"
        )
    else:
        logging.basicConfig(
            format=log_fmt, level=logging.INFO, datefmt="%m-%d %H:%M:%S"
        )

    if ctx.invoked_subcommand is None and version:
        ctx.invoke(print_version)
    if ctx.invoked_subcommand is None and not version:
        typer.echo(ctx.get_help())


@app.command("version", help="Show version", hidden=True)
def print_version() -> None:
    typer.echo(f"Testely version: {__version__}")


if __name__ == "__main__":
    app()
