"""
Main CLI application using Typer

Entry point for the volcop command: back up the volumes of one container.
"""

import sys

import typer
from rich.markup import escape

from volcop.cores.archive_sink import FilesystemArchiveSink
from volcop.cores.backup_manager import VolumeBackupOrchestrator
from volcop.cores.runtime_client import DockerRuntimeClient
from volcop.helpers import ui_utils as utils
from volcop.helpers.config import BackupSettings, load_settings
from volcop.helpers.errors import (
    ArchiveWriteError,
    BackupError,
    ConfigurationError,
    RestartError,
    RuntimeClientError,
)
from volcop.helpers.logging import setup_logging

# Create Typer app
app = typer.Typer(
    name="volcop",
    help="Back up the volumes of a container to local tar archives",
    add_completion=False,
)

console = utils.console


def create_runtime_client(settings: BackupSettings) -> DockerRuntimeClient:
    """Connect to the Docker daemon configured in the environment."""
    return DockerRuntimeClient(stop_timeout=settings.stop_timeout)


@app.command()
def backup(
    container_id: str = typer.Argument(..., help="Id or name of the container to back up"),
):
    """
    Back up every volume mounted into CONTAINER_ID

    Stops the container, copies each mount out through a helper container
    into <backup-root>/<mount-path>/content.tar, then starts it again.
    """
    try:
        settings = load_settings()
    except ConfigurationError as e:
        utils.print_error(str(e))
        raise typer.Exit(1)

    setup_logging(settings.log_level)

    sink = FilesystemArchiveSink(settings.backup_root)
    try:
        sink.ensure_root()
    except ArchiveWriteError as e:
        utils.print_error(str(e))
        raise typer.Exit(1)

    try:
        runtime = create_runtime_client(settings)
    except RuntimeClientError as e:
        utils.print_error(str(e))
        raise typer.Exit(1)

    utils.print_header(
        "Volume Backup",
        f"Container {container_id} → {settings.backup_root}"
    )

    try:
        orchestrator = VolumeBackupOrchestrator(runtime, settings=settings, sink=sink)
        result = orchestrator.backup_volumes(container_id)
    except RestartError as e:
        utils.print_error(f"Container {container_id} is left stopped: {e}")
        raise typer.Exit(1)
    except BackupError as e:
        utils.print_error(str(e))
        raise typer.Exit(1)
    finally:
        runtime.close()

    utils.print_backup_summary(result)
    utils.print_success(
        f"Backed up {len(result.archives)} volume(s) of {container_id} "
        f"in {result.duration_seconds:.2f}s"
    )


def cli_main():
    """
    Entry point for CLI

    This function is called by the console script entry point.
    """
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Cancelled by user[/yellow]")
        sys.exit(1)
    except Exception as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)


if __name__ == "__main__":
    cli_main()
