"""Unified exception hierarchy for cita-env.

All custom exceptions inherit from CitaEnvError for consistent error handling.
The CLI catches these and prints a one-line error before exiting.

Dependency direction:
    This module has NO internal dependencies (leaf module).
    It may be imported by: all other citaenv modules.
"""

from __future__ import annotations


class CitaEnvError(Exception):
    """Base exception for all cita-env errors."""


class ConfigError(CitaEnvError):
    """Configuration-related errors.

    Examples:
        - Unknown invoking user
        - Unreadable source directory
    """


class ValidationError(CitaEnvError):
    """Input validation errors.

    Examples:
        - Malformed port binding
    """


class DockerError(CitaEnvError):
    """Docker operation errors.

    Base class for all Docker-related exceptions.
    """


class DockerNotFoundError(DockerError):
    """Raised when Docker is not installed or not in PATH."""


class DockerTimeoutError(DockerError):
    """Raised when a Docker operation times out."""


class ContainerError(DockerError):
    """Raised when container creation fails."""
