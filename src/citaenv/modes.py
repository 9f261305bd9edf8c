"""Command-mode decoding for cita-env.

The forwarded argument list is decoded once into a closed set of modes.
The third argument is the mode marker: `port`, `start`, `daemon`, or the
start of an ordinary command.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from .constants import DEFAULT_PORT_MAPPING, PORT_PLACEHOLDER
from .errors import ValidationError

if TYPE_CHECKING:
    from collections.abc import Sequence

MODE_INDEX = 2  # Zero-based position of the mode marker

PORT_MARKER = "port"
START_MARKER = "start"
DAEMON_MARKER = "daemon"

# [ip:[host[-range]]:|host[-range]:]container[-range][/proto], ip is IPv4 or [IPv6]
_PORT_RE = re.compile(
    r"^(?:(?:\d{1,3}(?:\.\d{1,3}){3}|\[[0-9A-Fa-f:.]+\]):(?:\d+(?:-\d+)?)?:|\d+(?:-\d+)?:)?"
    r"\d+(?:-\d+)?(?:/(?:tcp|udp|sctp))?$"
)


@dataclass(frozen=True)
class Daemon:
    """Run command detached inside the container, no output streamed."""

    command: tuple[str, ...]


@dataclass(frozen=True)
class Attached:
    """Run command attached to the caller's stdio, exit status propagates."""

    command: tuple[str, ...]


@dataclass(frozen=True)
class Shell:
    """Interactive shell sized to the caller's terminal."""


CommandMode = Union[Daemon, Attached, Shell]


@dataclass(frozen=True)
class Invocation:
    """Decoded command line.

    ports is None unless port mode asked for the container to be recreated
    with new bindings.
    """

    mode: CommandMode
    ports: tuple[str, ...] | None = None


def parse_port_mappings(
    values: Sequence[str], default: str = DEFAULT_PORT_MAPPING
) -> tuple[str, ...]:
    """Parse port-mode arguments into docker -p bindings.

    Values may be separated by whitespace or commas. No values, or the
    literal NULL placeholder, select the default mapping.

    Raises:
        ValidationError: If a binding is malformed.
    """
    tokens = [t for v in values for t in re.split(r"[\s,]+", v) if t]
    if not tokens or tokens == [PORT_PLACEHOLDER]:
        return (default,)

    for token in tokens:
        if not _PORT_RE.match(token):
            raise ValidationError(f"Invalid port binding '{token}' (expected host:container)")
    return tuple(tokens)


def parse_invocation(args: Sequence[str], default_port: str = DEFAULT_PORT_MAPPING) -> Invocation:
    """Decode the forwarded arguments into a command mode."""
    argv = tuple(args)
    if not argv:
        return Invocation(Shell())

    marker = argv[MODE_INDEX] if len(argv) > MODE_INDEX else None
    head, rest = argv[:MODE_INDEX], argv[MODE_INDEX + 1 :]

    if marker == PORT_MARKER:
        # The full command line is still forwarded once the container is recreated
        return Invocation(Attached(argv), ports=parse_port_mappings(rest, default_port))

    if marker == START_MARKER:
        # `start ...` is `daemon start ...`: the start word stays in the command
        return Invocation(Daemon(argv))

    if marker == DAEMON_MARKER:
        return Invocation(Daemon(head + rest))

    return Invocation(Attached(argv))
