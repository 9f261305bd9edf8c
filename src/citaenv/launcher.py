"""Container launch and attach workflow for cita-env.

Linear pipeline: config resolved -> container ensured -> command dispatched.
No step is retried.
"""

from __future__ import annotations

import shutil
import time

from rich.console import Console

from . import docker
from .constants import (
    CONTAINER_INIT_WAIT,
    CONTAINER_LOCALTIME,
    CONTAINER_SHELL,
    GOSU_PATH,
    IDLE_COMMAND,
)
from .context import ensure_cache_dir, prepare_localtime
from .errors import ContainerError
from .logging import get_logger
from .modes import Attached, CommandMode, Daemon, Invocation
from .run_config import RunConfig

console = Console()
logger = get_logger(__name__)


def build_run_cmd(config: RunConfig) -> list[str]:
    """Generate the docker run command for the long-lived container."""
    cache = str(config.cache_dir)
    cmd = [
        "docker",
        "run",
        "-d",
        f"--net={config.network}",
        "--volume",
        f"{config.source_dir}:{config.workdir}",
        "--volume",
        f"{cache}:{cache}",
        "--volume",
        f"{config.localtime_path}:{CONTAINER_LOCALTIME}",
        "--env",
        f"USER_ID={config.user_id}",
        "--workdir",
        config.workdir,
        "--name",
        config.container_name,
    ]
    for port in config.ports:
        cmd.extend(["-p", port])
    cmd.extend([config.image, CONTAINER_SHELL, "-c", IDLE_COMMAND])
    return cmd


def _terminal_size() -> tuple[int, int]:
    size = shutil.get_terminal_size()
    return size.columns, size.lines


def build_exec_cmd(config: RunConfig, mode: CommandMode) -> list[str]:
    """Generate the docker exec command for a command mode."""
    if isinstance(mode, Daemon):
        return [
            "docker",
            "exec",
            "-d",
            config.container_name,
            GOSU_PATH,
            config.user_name,
            *mode.command,
        ]

    cmd = ["docker", "exec", "-i"]
    if config.use_tty:
        cmd.append("-t")
    cmd.append(config.container_name)

    if isinstance(mode, Attached):
        cmd.extend([GOSU_PATH, config.user_name, *mode.command])
        return cmd

    # Shell: resize the remote pty before handing over
    cols, rows = _terminal_size()
    cmd.extend(
        [
            CONTAINER_SHELL,
            "-c",
            f"stty cols {cols} rows {rows} && {GOSU_PATH} {config.user_name} {CONTAINER_SHELL}",
        ]
    )
    return cmd


def force_recreate(config: RunConfig) -> None:
    """Stop the container so it is recreated with new port bindings."""
    if docker.stop_container(config.container_name):
        logger.debug("Stopped %s for recreation", config.container_name)


def ensure_container(config: RunConfig) -> bool:
    """Make sure the named container is running.

    The running check and the creation are not atomic: two invocations may
    both try to create the container and the loser fails on the name clash.

    Returns:
        True if a new container was created.

    Raises:
        ContainerError: If docker refuses to create the container.
    """
    if docker.is_container_running(config.container_name):
        logger.debug("Container %s already running", config.container_name)
        return False

    console.print(f"Start docker container {config.container_name} ...")
    docker.remove_container(config.container_name)

    try:
        container_id = docker.run_container(build_run_cmd(config))
    except ContainerError:
        if docker.is_container_running(config.container_name):
            logger.warning(
                "Container %s was started by another invocation meanwhile",
                config.container_name,
            )
        raise
    logger.debug("Created container %s (%s)", config.container_name, container_id[:12])

    # Wait for the image entrypoint to finish
    time.sleep(CONTAINER_INIT_WAIT)
    return True


def dispatch(config: RunConfig, mode: CommandMode) -> int:
    """Run the decoded command in the container and return its exit code."""
    cmd = build_exec_cmd(config, mode)
    logger.debug("Dispatching %s", type(mode).__name__)
    return docker.exec_in_container(cmd)


def launch(config: RunConfig, invocation: Invocation) -> int:
    """Ensure the container and dispatch the invocation.

    Returns:
        Exit code of the dispatched command.
    """
    # Refreshed on every call: a running container bind-mounts the copy
    prepare_localtime(config.platform, config.localtime_path)
    ensure_cache_dir(config.cache_dir)

    if invocation.ports is not None:
        config = config.with_ports(invocation.ports)
        force_recreate(config)

    ensure_container(config)
    return dispatch(config, invocation.mode)
