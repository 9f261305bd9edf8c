"""Execution context detection for cita-env.

A build checkout (source tree) carries the marker file next to this tool's
working directory; a run checkout (deployment tree) does not, and its
source directory is one level up.
"""

from __future__ import annotations

import os
import platform
import pwd
import shutil
from enum import Enum
from pathlib import Path

from .config import Settings
from .constants import (
    DARWIN_NETWORK,
    DEFAULT_NETWORK,
    DEFAULT_USER,
    HOST_LOCALTIME,
    LOCALTIME_COPY_NAME,
    ROOT_USER,
)
from .errors import ConfigError
from .logging import get_logger

logger = get_logger(__name__)


class ExecutionContext(str, Enum):
    """Kind of checkout cita-env was started from."""

    BUILD = "build"
    RUN = "run"


class HostPlatform(str, Enum):
    """Host operating systems that need different container wiring."""

    DARWIN = "darwin"
    OTHER = "other"


def detect_execution_context(directory: Path, marker: str) -> ExecutionContext:
    """Detect build vs run checkout from the marker file."""
    if (directory / marker).is_file():
        return ExecutionContext.BUILD
    return ExecutionContext.RUN


def resolve_source_dir(directory: Path, context: ExecutionContext) -> Path:
    """Get the host directory mounted as the container workdir.

    The directory is resolved physically (symlinks followed, like `pwd -P`).
    """
    resolved = directory.resolve()
    if context is ExecutionContext.RUN:
        return resolved.parent
    return resolved


def container_identity(context: ExecutionContext, settings: Settings) -> tuple[str, str]:
    """Get (container name, image) for a context."""
    if context is ExecutionContext.BUILD:
        return settings.build_container, settings.build_image
    return settings.run_container, settings.run_image


def detect_host_platform() -> HostPlatform:
    """Detect the host platform from the kernel name."""
    if platform.system() == "Darwin":
        return HostPlatform.DARWIN
    return HostPlatform.OTHER


def network_mode(host: HostPlatform) -> str:
    """Get the Docker network mode for a host platform."""
    return DARWIN_NETWORK if host is HostPlatform.DARWIN else DEFAULT_NETWORK


def localtime_path(host: HostPlatform, source_dir: Path) -> Path:
    """Get the host time-zone file mounted at /etc/localtime.

    Docker for Mac cannot bind-mount /etc/localtime (a symlink into /var/db),
    so a copy inside the shared source tree is used instead.
    """
    if host is HostPlatform.DARWIN:
        return source_dir / LOCALTIME_COPY_NAME
    return Path(HOST_LOCALTIME)


def prepare_localtime(host: HostPlatform, target: Path) -> None:
    """Copy the host time-zone file to target on Darwin; no-op elsewhere."""
    if host is not HostPlatform.DARWIN:
        return
    logger.debug("Copying %s to %s", HOST_LOCALTIME, target)
    try:
        shutil.copyfile(HOST_LOCALTIME, target)
    except OSError as e:
        raise ConfigError(f"Cannot copy {HOST_LOCALTIME} to {target}: {e}") from e


def resolve_user_id(user: str | None = None) -> int:
    """Get the numeric uid of the invoking user.

    Args:
        user: User name, defaults to $USER. Falls back to the process uid
            when neither is set.

    Raises:
        ConfigError: If the user name is unknown to the password database.
    """
    if user is None:
        user = os.environ.get("USER")
    if not user:
        return os.getuid()
    try:
        return pwd.getpwnam(user).pw_uid
    except KeyError as e:
        raise ConfigError(f"Unknown user '{user}'") from e


def resolve_user_name(uid: int) -> str:
    """Get the in-container user gosu should switch to."""
    return ROOT_USER if uid == 0 else DEFAULT_USER


def ensure_cache_dir(path: Path) -> None:
    """Create the host dependency cache directory (idempotent)."""
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ConfigError(f"Cannot create cache directory {path}: {e}") from e
