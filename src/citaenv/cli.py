"""Command-line entry point for cita-env.

Usage:
    cita-env [OPTIONS] [ARGS]...

Everything after the options is forwarded to the container. The third
argument selects the mode: `port` (recreate with new bindings), `start` or
`daemon` (detached), anything else runs attached; no arguments opens a shell.
"""

from __future__ import annotations

import sys

import click
from rich.console import Console

from . import __version__, docker
from .config import load_settings
from .constants import EXIT_INTERRUPTED
from .errors import CitaEnvError
from .launcher import launch
from .logging import get_logger, set_debug
from .modes import parse_invocation
from .run_config import RunConfig

err_console = Console(stderr=True, legacy_windows=False)
logger = get_logger(__name__)

ERR_DOCKER_NOT_RUNNING = "[red]Error: Docker is not running.[/red]"


@click.command(
    context_settings={
        "ignore_unknown_options": True,
        "allow_interspersed_args": False,
    }
)
@click.option(
    "--source-dir",
    "-C",
    default=".",
    envvar="CITA_ENV_SOURCE_DIR",
    type=click.Path(exists=True, file_okay=False),
    help="Checkout directory to detect build/run context from",
)
@click.option("--debug", "-d", is_flag=True, help="Enable debug logging")
@click.version_option(version=__version__, prog_name="cita-env")
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
def cli(source_dir: str, debug: bool, args: tuple[str, ...]) -> None:
    """cita-env - Run commands in the CITA docker container.

    Starts the build or run container if it is not running, then forwards
    ARGS into it as the invoking user.
    """
    if debug:
        set_debug(True)

    settings = load_settings()

    if not docker.check_docker_status():
        err_console.print(ERR_DOCKER_NOT_RUNNING)
        err_console.print("Start Docker and try again.")
        sys.exit(1)

    try:
        invocation = parse_invocation(args, settings.default_port)
        config = RunConfig.from_environment(source_dir, settings=settings)
        returncode = launch(config, invocation)
    except CitaEnvError as e:
        logger.debug("Launch failed", exc_info=True)
        err_console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)
    except KeyboardInterrupt:
        returncode = EXIT_INTERRUPTED

    sys.exit(returncode)


if __name__ == "__main__":  # pragma: no cover
    cli()
