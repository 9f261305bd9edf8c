"""cita-env - start and attach to the CITA development container."""

from __future__ import annotations

__version__ = "0.1.0"
