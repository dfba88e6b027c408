"""Environment switches for analytics collection."""

from __future__ import annotations

import os
from types import MappingProxyType
from typing import Mapping, Optional

# Either of these set to a truthy value disables sending
DO_NOT_TRACK = "DO_NOT_TRACK"
SCARF_NO_ANALYTICS = "SCARF_NO_ANALYTICS"
# Diagnostic logging only, never affects whether an event is sent
SCARF_VERBOSE = "SCARF_VERBOSE"

_TRUTHY = ("1", "true", "yes", "on")


def is_truthy(value: Optional[str]) -> bool:
    """Check whether an environment value is one of 1/true/yes/on (any case)."""
    if value is None:
        return False
    return value.strip().lower() in _TRUTHY


def is_disabled(environ: Mapping[str, str]) -> bool:
    """Check if analytics are disabled via environment variables.

    Args:
        environ: Environment snapshot to read

    Returns:
        bool: True if DO_NOT_TRACK or SCARF_NO_ANALYTICS is truthy
    """
    return is_truthy(environ.get(DO_NOT_TRACK)) or is_truthy(environ.get(SCARF_NO_ANALYTICS))


def is_verbose(environ: Mapping[str, str]) -> bool:
    """Check if diagnostic logging is requested via SCARF_VERBOSE."""
    return is_truthy(environ.get(SCARF_VERBOSE))


def snapshot_environ(environ: Optional[Mapping[str, str]] = None) -> Mapping[str, str]:
    """Take a read-only copy of the environment.

    Args:
        environ: Mapping to copy; the process environment is used when None

    Returns:
        Mapping[str, str]: Immutable snapshot
    """
    source = os.environ if environ is None else environ
    return MappingProxyType(dict(source))
