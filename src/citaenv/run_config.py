"""Run configuration dataclass for cita-env.

Everything detected about the host and checkout is bundled into one
immutable object, built once at startup and passed to each launch step.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, replace
from pathlib import Path
from typing import TYPE_CHECKING

from .config import Settings
from .context import (
    ExecutionContext,
    HostPlatform,
    container_identity,
    detect_execution_context,
    detect_host_platform,
    localtime_path,
    network_mode,
    resolve_source_dir,
    resolve_user_id,
    resolve_user_name,
)
from .logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = get_logger(__name__)


@dataclass(frozen=True)
class RunConfig:
    """Configuration for one cita-env invocation.

    Immutable dataclass; use with_ports() to derive a copy with new bindings.
    """

    context: ExecutionContext
    platform: HostPlatform
    source_dir: Path
    container_name: str
    image: str
    network: str
    localtime_path: Path
    user_id: int
    user_name: str
    cache_dir: Path
    workdir: str
    ports: tuple[str, ...]
    use_tty: bool = False

    @classmethod
    def from_environment(
        cls,
        directory: str | Path = ".",
        *,
        settings: Settings | None = None,
        ports: Sequence[str] | None = None,
        use_tty: bool | None = None,
    ) -> RunConfig:
        """Detect checkout, platform and user, and build the config.

        Args:
            directory: Checkout directory searched for the marker file.
            settings: Loaded settings (defaults if None).
            ports: Port bindings (settings default if None).
            use_tty: Allocate a TTY for exec (defaults to stdout being a tty).
        """
        settings = settings or Settings()
        directory = Path(directory)

        context = detect_execution_context(directory, settings.marker_file)
        source_dir = resolve_source_dir(directory, context)
        container_name, image = container_identity(context, settings)
        host = detect_host_platform()
        user_id = resolve_user_id()

        config = cls(
            context=context,
            platform=host,
            source_dir=source_dir,
            container_name=container_name,
            image=image,
            network=network_mode(host),
            localtime_path=localtime_path(host, source_dir),
            user_id=user_id,
            user_name=resolve_user_name(user_id),
            cache_dir=settings.cache_dir,
            workdir=settings.workdir,
            ports=tuple(ports) if ports else (settings.default_port,),
            use_tty=sys.stdout.isatty() if use_tty is None else use_tty,
        )
        logger.debug(
            "Resolved %s checkout at %s -> %s (%s, net=%s)",
            context.value,
            source_dir,
            container_name,
            image,
            config.network,
        )
        return config

    def with_ports(self, ports: Sequence[str]) -> RunConfig:
        """Return a copy with new port bindings."""
        return replace(self, ports=tuple(ports))
