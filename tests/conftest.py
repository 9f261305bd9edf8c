"""Pytest configuration and fixtures for cita-env tests.

This module ensures the citaenv package is importable during tests
without requiring installation.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Add src directory to path for development testing
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from citaenv.context import ExecutionContext, HostPlatform  # noqa: E402
from citaenv.run_config import RunConfig  # noqa: E402


@pytest.fixture
def run_config(tmp_path: Path) -> RunConfig:
    """A build-checkout config on a Linux host with a non-root user."""
    return RunConfig(
        context=ExecutionContext.BUILD,
        platform=HostPlatform.OTHER,
        source_dir=tmp_path,
        container_name="cita_build_container",
        image="cita/cita-build:ubuntu-18.04-20190304",
        network="host",
        localtime_path=Path("/etc/localtime"),
        user_id=1000,
        user_name="user",
        cache_dir=tmp_path / ".docker_cargo" / "git",
        workdir="/opt/cita",
        ports=("1337:1337",),
        use_tty=False,
    )
