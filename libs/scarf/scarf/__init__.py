"""Scarf analytics client for Python."""

from scarf.analytics import ScarfEventLogger

__version__ = "0.1.0"

__all__ = ["ScarfEventLogger", "__version__"]
