"""Constants module for cita-env.

All timeout values and shared constants are defined here (SSOT).
"""

from __future__ import annotations

# === Docker Timeouts (seconds) ===
DOCKER_COMMAND_TIMEOUT = 30  # Quick docker commands (info, ps, stop, rm)
CONTAINER_INIT_WAIT = 3  # Let the image entrypoint finish after creation

# === Checkout Detection ===
MARKER_FILE = "CODE_OF_CONDUCT.md"  # Present only in a build (source) checkout

# === Container Identities ===
BUILD_CONTAINER_NAME = "cita_build_container"
BUILD_IMAGE = "cita/cita-build:ubuntu-18.04-20190304"
RUN_CONTAINER_NAME = "cita_run_container"
RUN_IMAGE = "cita/cita-run:ubuntu-18.04-20181009"

# === Networking ===
DARWIN_NETWORK = "bridge"  # Docker for Mac has no host networking
DEFAULT_NETWORK = "host"
DEFAULT_PORT_MAPPING = "1337:1337"
PORT_PLACEHOLDER = "NULL"  # Sentinel meaning "use the default mapping"

# === Host Paths ===
HOST_LOCALTIME = "/etc/localtime"
LOCALTIME_COPY_NAME = "localtime"  # Copied into the source dir on Darwin
DOCKER_CARGO_DIR = "~/.docker_cargo"  # Persistent cargo cache (expandable)

# === Container Paths ===
CONTAINER_WORKDIR = "/opt/cita"
CONTAINER_LOCALTIME = "/etc/localtime"
GOSU_PATH = "/usr/bin/gosu"
CONTAINER_SHELL = "/bin/bash"
IDLE_COMMAND = "while true;do sleep 100;done"  # Keeps the container alive for exec

# === Users ===
ROOT_USER = "root"
DEFAULT_USER = "user"

# === Exit Codes ===
EXIT_INTERRUPTED = 130  # Standard Ctrl+C code
