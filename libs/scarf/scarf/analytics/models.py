"""Models for analytics dispatch."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_TIMEOUT_SECONDS = 3.0
# Socket deadlines are held as a C int of milliseconds
MAX_TIMEOUT_MS = 2**31 - 1


def seconds_to_millis(seconds: float) -> Optional[int]:
    """Convert a timeout in seconds to whole milliseconds, never negative.

    Timeouts too long for a socket deadline, infinity included, saturate to
    None, meaning the request waits without a deadline.
    """
    seconds = float(seconds)
    if math.isnan(seconds):
        return 0
    if seconds * 1000 > MAX_TIMEOUT_MS:
        return None
    return max(0, int(seconds * 1000))


def millis_to_seconds(millis: Optional[int]) -> Optional[float]:
    return None if millis is None else millis / 1000


class EventLoggerConfig(BaseModel):
    """Immutable configuration of an event logger."""

    model_config = ConfigDict(frozen=True)

    endpoint_url: str
    # None means no deadline
    timeout_ms: Optional[int] = Field(default=int(DEFAULT_TIMEOUT_SECONDS * 1000), ge=0)
    verbose: bool = False

    @field_validator("endpoint_url")
    @classmethod
    def _endpoint_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("endpoint_url must not be blank")
        return value

    @classmethod
    def create(
        cls, endpoint_url: str, timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS, verbose: bool = False
    ) -> EventLoggerConfig:
        """Build a config from a timeout given in (possibly fractional) seconds."""
        return cls(
            endpoint_url=endpoint_url,
            timeout_ms=seconds_to_millis(timeout_seconds),
            verbose=verbose,
        )

    @property
    def timeout(self) -> Optional[float]:
        """Default timeout in seconds, or None for no deadline."""
        return millis_to_seconds(self.timeout_ms)


class DispatchOutcome(str, Enum):
    """How a single event dispatch ended."""

    SENT = "sent"
    REJECTED = "rejected"
    DISABLED = "disabled"
    TRANSPORT_ERROR = "transport_error"
    ERROR = "error"


@dataclass(frozen=True)
class DispatchResult:
    """Result of dispatching one event."""

    outcome: DispatchOutcome
    status_code: Optional[int] = None
    body: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        """True only when the endpoint answered with a 2xx status."""
        return self.outcome is DispatchOutcome.SENT
