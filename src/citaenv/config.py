"""Configuration management for cita-env.

Defaults come from constants; ~/.cita-env/config.json may override any of
them (e.g. to pin a newer image tag without a release).
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, fields
from pathlib import Path

from rich.console import Console

from .constants import (
    BUILD_CONTAINER_NAME,
    BUILD_IMAGE,
    CONTAINER_WORKDIR,
    DEFAULT_PORT_MAPPING,
    DOCKER_CARGO_DIR,
    MARKER_FILE,
    RUN_CONTAINER_NAME,
    RUN_IMAGE,
)
from .logging import get_logger

console = Console(stderr=True)
logger = get_logger(__name__)


@dataclass(frozen=True)
class Settings:
    """cita-env settings model."""

    # Build checkout identity
    build_container: str = BUILD_CONTAINER_NAME
    build_image: str = BUILD_IMAGE

    # Run (deployment) checkout identity
    run_container: str = RUN_CONTAINER_NAME
    run_image: str = RUN_IMAGE

    marker_file: str = MARKER_FILE
    workdir: str = CONTAINER_WORKDIR
    default_port: str = DEFAULT_PORT_MAPPING

    # Host cargo cache, its git/ subdirectory is mounted
    cargo_dir: str = DOCKER_CARGO_DIR

    @property
    def cache_dir(self) -> Path:
        """Host directory persisted across containers for cargo git checkouts."""
        return Path(os.path.expanduser(self.cargo_dir)) / "git"


def get_config_dir() -> Path:
    """Get the cita-env configuration directory."""
    return Path.home() / ".cita-env"


def get_config_path() -> Path:
    """Get the path to the config file."""
    return get_config_dir() / "config.json"


def load_settings() -> Settings:
    """Load settings from file, or return defaults."""
    config_path = get_config_path()

    if config_path.exists():
        try:
            data = json.loads(config_path.read_text(encoding="utf-8"))
            if not isinstance(data, dict):
                raise ValueError("top level must be an object")
            known = {f.name for f in fields(Settings)}
            for key in sorted(known & set(data)):
                if not isinstance(data[key], str):
                    raise ValueError(f"'{key}' must be a string")
            unknown = set(data) - known
            if unknown:
                logger.warning("Ignoring unknown config keys: %s", ", ".join(sorted(unknown)))
            settings = Settings(**{k: v for k, v in data.items() if k in known})
            logger.debug("Loaded settings from %s", config_path)
            return settings
        except (OSError, ValueError) as e:
            console.print(f"[yellow]Warning: Failed to load config ({e}), using defaults[/yellow]")

    return Settings()
