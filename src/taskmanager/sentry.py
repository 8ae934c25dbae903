"""Sentry error tracking for the task manager CLI.

Usage:
    from taskmanager.sentry import init_sentry, capture_exception, flush
    init_sentry(dsn=settings.sentry_dsn)
    try:
        run_command()
    except Exception as e:
        capture_exception(e)
        raise
    finally:
        flush()
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, cast

import sentry_sdk
from sentry_sdk.integrations.logging import LoggingIntegration

if TYPE_CHECKING:
    from sentry_sdk._types import Event, Hint

logger = logging.getLogger(__name__)

SENSITIVE_KEYS = {
    "token",
    "api_key",
    "apikey",
    "key",
    "secret",
    "password",
    "authorization",
    "bearer",
    "gemini_api_key",
    "sentry_dsn",
}

# Module state
_initialized = False


def init_sentry(
    dsn: str | None = None,
    environment: str = "production",
    release: str | None = None,
    traces_sample_rate: float = 0.0,
) -> bool:
    """Initialize Sentry SDK for error tracking.

    Args:
        dsn: Sentry DSN. Empty/None disables Sentry (safe for development).
        environment: Environment name (production, staging, development).
        release: Release version. If None, auto-detected from package version.
        traces_sample_rate: Sample rate for performance tracing (0.0-1.0).

    Returns:
        True if Sentry was initialized, False if skipped.
    """
    global _initialized

    if _initialized:
        logger.debug("Sentry already initialized")
        return True

    if not dsn:
        logger.debug("No SENTRY_DSN configured, error tracking disabled")
        return False

    if release is None:
        try:
            from importlib.metadata import PackageNotFoundError, version

            release = f"taskmanager@{version('taskmanager')}"
        except PackageNotFoundError:
            release = "taskmanager@unknown"

    sentry_sdk.init(
        dsn=dsn,
        environment=environment,
        release=release,
        traces_sample_rate=traces_sample_rate,
        integrations=[LoggingIntegration(level=logging.INFO, event_level=logging.ERROR)],
        send_default_pii=False,
        before_send=_before_send,
    )

    _initialized = True
    logger.info("Sentry initialized: environment=%s, release=%s", environment, release)
    return True


def _before_send(event: Event, hint: Hint) -> Event | None:
    """Drop network noise and scrub secrets before an event leaves the process."""
    if "exc_info" in hint:
        exc_type, _, _ = hint["exc_info"]
        if exc_type.__name__ in ("TimeoutError", "ConnectionError"):
            return None

    if "request" in event:
        _scrub_dict(cast(dict[str, Any], event["request"]))

    if "breadcrumbs" in event:
        breadcrumbs = cast(dict[str, Any], event["breadcrumbs"])
        for breadcrumb in breadcrumbs.get("values", []):
            if "data" in breadcrumb:
                _scrub_dict(breadcrumb["data"])

    return event


def _scrub_dict(data: dict[str, Any]) -> None:
    """Scrub sensitive keys from a dictionary in-place."""
    for key in list(data.keys()):
        if key.lower() in SENSITIVE_KEYS:
            data[key] = "[REDACTED]"
        elif isinstance(data[key], dict):
            _scrub_dict(data[key])


def capture_exception(exception: BaseException | None = None) -> str | None:
    """Send an exception to Sentry; returns the event ID if captured."""
    if not _initialized:
        return None
    return sentry_sdk.capture_exception(exception)


def flush(timeout: float = 2.0) -> None:
    """Flush pending Sentry events before shutdown."""
    if not _initialized:
        return
    sentry_sdk.flush(timeout=timeout)


def is_enabled() -> bool:
    return _initialized
