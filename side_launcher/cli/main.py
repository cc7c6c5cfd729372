"""Main CLI entry point using Typer."""

from dataclasses import dataclass, field
from pathlib import Path

import anyio
import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from side_launcher import __version__
from side_launcher.core.config import get_settings
from side_launcher.core.host import LocalWorkspaceHost
from side_launcher.core.state import CommandResult, TaskDefinition, TaskType
from side_launcher.launcher import Launcher

app = typer.Typer(
    name="side-launcher",
    help="side-launcher - run labeled shell commands from layered configuration",
    add_completion=True,
    rich_markup_mode="rich",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)


@dataclass
class CliState:
    """Options shared by every command."""

    folders: list[Path] = field(default_factory=list)
    workspace_file: Path | None = None
    active_file: Path | None = None
    debug: bool = False

    def launcher(self) -> Launcher:
        settings = get_settings()
        if self.debug:
            settings = settings.model_copy(update={"debug": True})
        host = LocalWorkspaceHost.create(
            folders=self.folders or [Path.cwd()],
            workspace_file=self.workspace_file,
            active_file=self.active_file,
            settings=settings,
        )
        launcher = Launcher(host=host, settings=settings)
        launcher.configure_logging()
        return launcher


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]side-launcher[/bold blue] version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    folder: list[Path] | None = typer.Option(
        None,
        "--folder",
        "-f",
        help="Workspace folder (repeatable; the first is the workspace root).",
    ),
    workspace_file: Path | None = typer.Option(
        None,
        "--workspace-file",
        "-w",
        help="Path to a .code-workspace file.",
    ),
    active_file: Path | None = typer.Option(
        None,
        "--active-file",
        "-a",
        help="File exposed as the current file to commands.",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Enable debug logging.",
    ),
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """
    Run labeled shell commands defined in workspace, folder and user settings.
    """
    ctx.obj = CliState(
        folders=list(folder or []),
        workspace_file=workspace_file,
        active_file=active_file,
        debug=debug,
    )


def _print_result(result: CommandResult) -> None:
    """Show a command result and exit non-zero on error."""
    if result.stdout:
        console.print(result.stdout, end="", markup=False, highlight=False, soft_wrap=True)
    if result.stderr:
        err_console.print(
            result.stderr, end="", markup=False, highlight=False, soft_wrap=True, style="red"
        )
    if result.error:
        err_console.print(
            Panel(result.error, title="[bold red]Error[/bold red]", border_style="red")
        )
        if result.stack:
            err_console.print(result.stack, markup=False, highlight=False, style="dim")
        raise typer.Exit(code=1)


def _run(launcher: Launcher, task: TaskDefinition) -> None:
    _print_result(anyio.run(launcher.execute, task))


@app.command("list")
def list_tasks(
    ctx: typer.Context,
    errors: bool = typer.Option(
        False,
        "--errors",
        "-e",
        help="Also show sources that could not be read.",
    ),
) -> None:
    """
    List the resolved tasks in precedence order.
    """
    state: CliState = ctx.obj
    resolution = state.launcher().resolve()

    table = Table(title="Tasks")
    table.add_column("Label", style="bold", no_wrap=True)
    table.add_column("Type", style="cyan", no_wrap=True)
    table.add_column("Command")

    for task in resolution.tasks:
        command = task.command.splitlines()[0] if task.command else ""
        if "\n" in task.command:
            command += " ..."
        table.add_row(task.label, task.type.value, command)

    console.print(table)

    if errors and resolution.errors:
        console.print("\n[bold yellow]Sources not loaded[/bold yellow]")
        for source, message in resolution.errors.items():
            console.print(f"  [yellow]{source}[/yellow]: {message}")


@app.command()
def run(
    ctx: typer.Context,
    label: str = typer.Argument(..., help="Label of the task to run"),
) -> None:
    """
    Run a resolved task by label.

    Example:
        side-launcher run "unit tests"
    """
    state: CliState = ctx.obj
    launcher = state.launcher()
    task = launcher.find_task(label)
    if task is None:
        err_console.print(f"[red]No task labeled '{label}'[/red]")
        raise typer.Exit(code=2)

    _run(launcher, task)


@app.command("exec")
def exec_command(
    ctx: typer.Context,
    command: str = typer.Argument(..., help="Command line to run"),
    task_type: TaskType = typer.Option(
        TaskType.SHELL,
        "--type",
        "-t",
        help="Execution mode",
    ),
) -> None:
    """
    Run an ad-hoc command with the workspace environment.

    Example:
        side-launcher -a src/app.py exec 'echo $CURRENT_FILE_RELATIVE_PATH'
    """
    state: CliState = ctx.obj
    task = TaskDefinition(label=command, type=task_type, command=command)
    _run(state.launcher(), task)


@app.command()
def serve(
    ctx: typer.Context,
    port: int = typer.Option(8000, "--port", "-p", help="Port for the WebSocket server"),
    host: str = typer.Option("127.0.0.1", "--host", "-h", help="Host to bind to"),
) -> None:
    """
    Serve the message protocol over a WebSocket.

    Example:
        side-launcher serve --port 8765
    """
    import uvicorn

    from side_launcher.api.main import create_app

    state: CliState = ctx.obj
    api_app = create_app(state.launcher())

    console.print(
        Panel(
            f"[bold]WebSocket:[/bold] ws://{host}:{port}/ws\n"
            f"[bold]Tasks:[/bold]     http://{host}:{port}/tasks\n"
            f"[bold]Health:[/bold]    http://{host}:{port}/health",
            title="[bold cyan]side-launcher[/bold cyan]",
            border_style="cyan",
        )
    )

    uvicorn.run(api_app, host=host, port=port, log_level="info")


if __name__ == "__main__":
    app()
