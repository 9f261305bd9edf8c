"""Docker operations for cita-env.

Thin wrappers over the docker CLI with consistent timeouts, logging and
error mapping. Cleanup helpers are best-effort: they report success as a
bool and never raise.
"""

from __future__ import annotations

import subprocess
from typing import TYPE_CHECKING

from .constants import DOCKER_COMMAND_TIMEOUT
from .errors import ContainerError, DockerError, DockerNotFoundError, DockerTimeoutError
from .logging import get_logger

logger = get_logger(__name__)

if TYPE_CHECKING:
    from collections.abc import Sequence

__all__ = [
    "DockerError",
    "DockerNotFoundError",
    "DockerTimeoutError",
    "ContainerError",
    "safe_docker_run",
    "check_docker_status",
    "is_container_running",
    "stop_container",
    "remove_container",
    "run_container",
    "exec_in_container",
]


def safe_docker_run(
    cmd: Sequence[str],
    *,
    timeout: int | None = DOCKER_COMMAND_TIMEOUT,
    capture_output: bool = True,
    check: bool = False,
) -> subprocess.CompletedProcess[str]:
    """Run a Docker command with consistent error handling.

    Args:
        cmd: Command to run (should start with 'docker').
        timeout: Command timeout in seconds, None to wait forever.
        capture_output: Capture stdout/stderr if True.
        check: Raise CalledProcessError on non-zero exit.

    Returns:
        CompletedProcess with command result.

    Raises:
        DockerNotFoundError: If docker command is not found.
        DockerTimeoutError: If command times out.
        subprocess.CalledProcessError: If check=True and command fails.
    """
    cmd_str = " ".join(cmd[:4]) + ("..." if len(cmd) > 4 else "")
    logger.debug("Running Docker command: %s", cmd_str)
    try:
        result = subprocess.run(
            cmd,
            capture_output=capture_output,
            text=True,
            check=check,
            timeout=timeout,
        )
        logger.debug("Docker command completed: exit=%d", result.returncode)
        return result
    except FileNotFoundError as e:
        logger.error("Docker not found in PATH: %s", cmd_str)
        raise DockerNotFoundError(f"Docker not found in PATH. Command: {cmd_str}") from e
    except subprocess.TimeoutExpired as e:
        logger.error("Docker command timed out after %ss: %s", timeout, cmd_str)
        raise DockerTimeoutError(
            f"Docker command timed out after {timeout}s. Command: {cmd_str}"
        ) from e


def check_docker_status() -> bool:
    """Check if Docker daemon is responsive."""
    try:
        result = safe_docker_run(["docker", "info"])
        return result.returncode == 0
    except DockerError:
        return False


def is_container_running(container_name: str) -> bool:
    """Check if a container with exactly this name is running.

    Raises:
        DockerError: If docker cannot be queried.
    """
    result = safe_docker_run(
        [
            "docker",
            "ps",
            "--filter",
            f"name=^/{container_name}$",
            "--format",
            "{{.Names}}",
        ]
    )
    if result.returncode != 0:
        raise DockerError(f"Cannot list containers: {result.stderr.strip()}")
    return container_name in result.stdout.split()


def stop_container(container_name: str) -> bool:
    """Stop a container (best-effort).

    Returns:
        True if the container was stopped, False otherwise.
    """
    try:
        result = safe_docker_run(["docker", "container", "stop", container_name])
        return result.returncode == 0
    except DockerError:
        return False


def remove_container(container_name: str) -> bool:
    """Remove a stopped container (best-effort).

    Returns:
        True if container was removed, False otherwise.
    """
    try:
        result = safe_docker_run(["docker", "rm", container_name])
        return result.returncode == 0
    except DockerError:
        return False


def run_container(cmd: Sequence[str]) -> str:
    """Create and start a detached container.

    There is no timeout: the first run may pull a multi-GB image.

    Args:
        cmd: Full `docker run -d ...` command.

    Returns:
        ID of the new container.

    Raises:
        ContainerError: If docker refuses to create the container.
    """
    result = safe_docker_run(cmd, timeout=None)
    if result.returncode != 0:
        raise ContainerError(
            f"Failed to start container (exit {result.returncode}): {result.stderr.strip()}"
        )
    return result.stdout.strip()


def exec_in_container(cmd: Sequence[str]) -> int:
    """Run `docker exec ...` attached to our stdio.

    Blocks until the remote process exits; there is no timeout.

    Returns:
        Exit code of docker exec (the remote command's exit code).
    """
    result = safe_docker_run(cmd, timeout=None, capture_output=False)
    return result.returncode
