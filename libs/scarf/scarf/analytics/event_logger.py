"""Event logger that posts analytics events to a Scarf endpoint."""

from __future__ import annotations

import logging
import sys
from typing import Mapping, Optional

import httpx

from scarf.analytics.encoder import Properties, encode_properties
from scarf.analytics.environment import is_disabled, is_verbose, snapshot_environ
from scarf.analytics.models import (
    DEFAULT_TIMEOUT_SECONDS,
    DispatchOutcome,
    DispatchResult,
    EventLoggerConfig,
    millis_to_seconds,
    seconds_to_millis,
)
from scarf.analytics.user_agent import VersionProvider, build_user_agent

logger = logging.getLogger("scarf.analytics")


class _StderrHandler(logging.StreamHandler):
    """Stream handler bound to whatever ``sys.stderr`` is when a record is emitted."""

    def __init__(self):
        super().__init__(sys.stderr)

    @property
    def stream(self):
        return sys.stderr

    @stream.setter
    def stream(self, value):
        pass


def _enable_verbose_logging() -> None:
    """Send diagnostics on the analytics logger to stderr, and only there."""
    if not any(isinstance(h, _StderrHandler) for h in logger.handlers):
        handler = _StderrHandler()
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    # Root handlers may write to stdout or repeat the line on stderr
    logger.propagate = False


class ScarfEventLogger:
    """Sends analytics events to a Scarf endpoint.

    Each call posts one JSON object and reports whether the endpoint accepted
    it. Failures are never raised to the caller; they come back as False.
    """

    def __init__(
        self,
        endpoint_url: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        environ: Optional[Mapping[str, str]] = None,
        transport: Optional[httpx.BaseTransport] = None,
        version_provider: Optional[VersionProvider] = None,
    ):
        """Initialize the event logger.

        Args:
            endpoint_url: Absolute URL events are posted to (must not be blank)
            timeout: Default timeout in seconds for each request; inf waits without a deadline
            environ: Environment snapshot to read switches from; defaults to os.environ
            transport: Optional httpx transport, mainly for tests
            version_provider: Optional override for the library version lookup

        Raises:
            ValueError: If the endpoint URL is missing or blank
        """
        self._environ = snapshot_environ(environ)
        self.config = EventLoggerConfig.create(
            endpoint_url, timeout, verbose=is_verbose(self._environ)
        )
        if self.config.verbose:
            _enable_verbose_logging()

        self.user_agent = build_user_agent(version_provider, verbose=self.config.verbose)
        # Only the injected snapshot is consulted, so proxies in os.environ are ignored
        self._client = httpx.Client(transport=transport, trust_env=False)

    @property
    def environ(self) -> Mapping[str, str]:
        """The environment snapshot this logger reads."""
        return self._environ

    @property
    def endpoint_url(self) -> str:
        return self.config.endpoint_url

    @property
    def verbose(self) -> bool:
        return self.config.verbose

    def is_disabled(self) -> bool:
        """Check if sending is turned off by DO_NOT_TRACK or SCARF_NO_ANALYTICS."""
        return is_disabled(self._environ)

    def log_event(
        self, properties: Optional[Properties] = None, timeout: Optional[float] = None
    ) -> bool:
        """Send an event and wait for the endpoint to answer.

        Args:
            properties: Event properties; None sends an empty object
            timeout: Timeout in seconds for this call, or None for the default

        Returns:
            bool: True if the endpoint answered with a 2xx status, False otherwise
        """
        return self.dispatch(properties, timeout).ok

    send = log_event

    def dispatch(
        self, properties: Optional[Properties] = None, timeout: Optional[float] = None
    ) -> DispatchResult:
        """Send an event and return the classified outcome.

        Args:
            properties: Event properties; None sends an empty object
            timeout: Timeout in seconds for this call, or None for the default

        Returns:
            DispatchResult: Outcome, plus status and body when a response arrived
        """
        if self.is_disabled():
            self._log("Scarf analytics disabled via environment variable.")
            return DispatchResult(DispatchOutcome.DISABLED)

        try:
            return self._post(properties or {}, timeout)
        except KeyboardInterrupt:
            self._log("Scarf request interrupted.", logging.WARNING)
            raise
        except Exception as e:
            self._log(f"Scarf request error: {e}", logging.WARNING)
            return DispatchResult(DispatchOutcome.ERROR, error=str(e))

    def _post(self, properties: Properties, timeout: Optional[float]) -> DispatchResult:
        timeout_ms = self.config.timeout_ms if timeout is None else seconds_to_millis(timeout)
        body = encode_properties(properties)
        self._log(f"Scarf payload: {body}")
        self._log(f"Scarf user-agent: {self.user_agent}")

        try:
            # Connect, read, write and pool waits all share one deadline
            response = self._client.post(
                self.config.endpoint_url,
                content=body.encode("utf-8"),
                headers={
                    "Content-Type": "application/json",
                    "User-Agent": self.user_agent,
                },
                timeout=httpx.Timeout(millis_to_seconds(timeout_ms)),
            )
        except (httpx.TransportError, OSError) as e:
            self._log(f"Scarf request failed: {e}", logging.WARNING)
            return DispatchResult(DispatchOutcome.TRANSPORT_ERROR, error=str(e) or type(e).__name__)

        code = response.status_code
        text = response.text or ""
        self._log(f"Scarf response status={code}, body={text}")
        outcome = DispatchOutcome.SENT if 200 <= code < 300 else DispatchOutcome.REJECTED
        return DispatchResult(outcome, status_code=code, body=text)

    def _log(self, message: str, level: int = logging.INFO) -> None:
        if self.config.verbose:
            logger.log(level, message)

    def close(self) -> None:
        """Release the underlying HTTP connections."""
        self._client.close()

    def __enter__(self) -> ScarfEventLogger:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
