"""Sending anonymous analytics events to a Scarf endpoint.

Events are posted synchronously, one HTTP request per call, and can be turned
off with the DO_NOT_TRACK or SCARF_NO_ANALYTICS environment variables.
"""

from scarf.analytics.encoder import encode_properties, quote, to_json
from scarf.analytics.environment import is_disabled, is_truthy, is_verbose
from scarf.analytics.event_logger import ScarfEventLogger
from scarf.analytics.models import (
    DispatchOutcome,
    DispatchResult,
    EventLoggerConfig,
)
from scarf.analytics.user_agent import build_user_agent

__all__ = [
    "ScarfEventLogger",
    "EventLoggerConfig",
    "DispatchOutcome",
    "DispatchResult",
    "build_user_agent",
    "encode_properties",
    "to_json",
    "quote",
    "is_disabled",
    "is_truthy",
    "is_verbose",
]
