"""User-Agent header sent with analytics events."""

from __future__ import annotations

import logging
import platform
from importlib import metadata
from typing import Callable, Optional

logger = logging.getLogger("scarf.analytics")

PRODUCT = "scarf-python"
DISTRIBUTION = "scarf-event-logger"
DEV_VERSION = "dev"

VersionProvider = Callable[[], Optional[str]]


def installed_version() -> Optional[str]:
    """Read the version of the installed distribution, if any."""
    try:
        return metadata.version(DISTRIBUTION)
    except metadata.PackageNotFoundError:
        return None


def resolve_version(
    version_provider: Optional[VersionProvider] = None, verbose: bool = False
) -> str:
    """Get the library version, falling back to ``dev``.

    Args:
        version_provider: Callable returning a version string or None;
                          defaults to the installed package metadata
        verbose: Log why the lookup failed

    Returns:
        str: The version, never empty
    """
    provider = version_provider or installed_version
    try:
        version = provider()
    except Exception as e:
        if verbose:
            logger.debug(f"Could not read package version: {e}")
        return DEV_VERSION
    if not version or not str(version).strip():
        return DEV_VERSION
    return str(version).strip()


def normalize_platform(system: Optional[str]) -> str:
    """Map a raw OS name onto macOS/linux/windows, else its lowercase form."""
    lower = (system or "").strip().lower()
    if "mac" in lower or "darwin" in lower:
        return "macOS"
    if "linux" in lower:
        return "linux"
    if "windows" in lower:
        return "windows"
    return lower or "unknown"


def _or_unknown(value: Optional[str]) -> str:
    if value is None or not value.strip():
        return "unknown"
    return value.strip()


def build_user_agent(
    version_provider: Optional[VersionProvider] = None, verbose: bool = False
) -> str:
    """Build the User-Agent string for analytics requests.

    The format is ``scarf-python/<version> (platform=<os>; arch=<arch>, python=<ver>)``.
    If the host lookup fails, the parenthetical part is left out.

    Args:
        version_provider: Optional override for the version lookup
        verbose: Log why host or version lookups failed

    Returns:
        str: The User-Agent value
    """
    base = f"{PRODUCT}/{resolve_version(version_provider, verbose)}"
    try:
        platform_name = normalize_platform(platform.system())
        arch = _or_unknown(platform.machine())
        python_version = _or_unknown(platform.python_version())
    except Exception as e:
        if verbose:
            logger.debug(f"Could not inspect host platform: {e}")
        return base
    return f"{base} (platform={platform_name}; arch={arch}, python={python_version})"
