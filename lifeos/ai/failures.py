"""
Failure classification for provider errors.

The orchestrator never looks at raw exceptions: it asks ``classify_failure``
whether an error is FATAL (configuration/authorization, a second provider
would hit it too) or TRANSIENT (worth retrying on the fallback provider).
Errors that match no known signature are TRANSIENT through an explicit
``unclassified`` branch.
"""

from __future__ import annotations

import asyncio
import errno
import logging
from enum import Enum

import anthropic
import httpx

from ..constants import ERROR_MESSAGES
from ..exceptions import ConfigurationError, ProviderFailedError

logger = logging.getLogger(__name__)


class FailureClass(str, Enum):
    FATAL = "fatal"
    TRANSIENT = "transient"


_FATAL_STATUSES = frozenset({400, 401, 403})

_TRANSIENT_MARKERS = (
    "resource_exhausted",
    "quota",
    "rate limit",
    "overloaded",
    "timeout",
    "timed out",
    "unavailable",
    "internal",
    "deadline exceeded",
)

_NETWORK_CODES = frozenset({"ETIMEDOUT", "ECONNRESET", "ENOTFOUND", "ECONNREFUSED"})
_NETWORK_ERRNOS = frozenset({errno.ETIMEDOUT, errno.ECONNRESET, errno.ECONNREFUSED})

_NETWORK_TYPES: tuple[type[BaseException], ...] = (
    httpx.TransportError,
    anthropic.APIConnectionError,
    asyncio.TimeoutError,
    TimeoutError,
    ConnectionError,
)


def error_status(exc: BaseException) -> int | None:
    """
    HTTP-ish status carried by an error, if any.

    anthropic uses ``status_code``; google-genai uses an int ``code`` (and a
    string ``status``); httpx keeps it on ``response``.
    """
    for attr in ("status_code", "code", "status"):
        value = getattr(exc, attr, None)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    response = getattr(exc, "response", None)
    value = getattr(response, "status_code", None)
    return value if isinstance(value, int) else None


def _network_code(exc: BaseException) -> bool:
    code = getattr(exc, "code", None)
    if isinstance(code, str) and code.upper() in _NETWORK_CODES:
        return True
    return isinstance(exc, OSError) and exc.errno in _NETWORK_ERRNOS


def classify_failure_with_reason(exc: BaseException) -> tuple[FailureClass, str]:
    """Classify ``exc`` and say which rule decided it."""
    if isinstance(exc, ConfigurationError):
        return FailureClass.FATAL, "missing credentials"

    status = error_status(exc)
    if status in _FATAL_STATUSES:
        return FailureClass.FATAL, f"status {status}"
    if status == 429:
        return FailureClass.TRANSIENT, "rate limited"
    if status is not None and status >= 500:
        return FailureClass.TRANSIENT, f"server error {status}"

    message = str(exc).lower()
    for marker in _TRANSIENT_MARKERS:
        if marker in message:
            return FailureClass.TRANSIENT, f"message mentions {marker!r}"

    if isinstance(exc, _NETWORK_TYPES) or _network_code(exc):
        return FailureClass.TRANSIENT, "network error"

    # Unknown failure mode
    return FailureClass.TRANSIENT, "unclassified"


def classify_failure(exc: BaseException) -> FailureClass:
    return classify_failure_with_reason(exc)[0]


def format_user_error(exc: BaseException) -> str:
    """Short, actionable text for a channel to show instead of a raw exception."""
    if isinstance(exc, ProviderFailedError):
        return ERROR_MESSAGES["providers_down"]

    status = error_status(exc)
    message = str(exc).lower()

    if status == 429 or "rate limit" in message or "resource_exhausted" in message:
        return ERROR_MESSAGES["rate_limited"]
    if status in (401, 403) or isinstance(exc, ConfigurationError):
        return ERROR_MESSAGES["auth_failed"]
    if "quota" in message:
        return ERROR_MESSAGES["quota"]
    if status == 404:
        return ERROR_MESSAGES["not_found"]
    if status is not None and 500 <= status <= 504:
        return ERROR_MESSAGES["service_unavailable"]
    if "timeout" in message or isinstance(exc, (asyncio.TimeoutError, TimeoutError, httpx.TimeoutException)):
        return ERROR_MESSAGES["timeout"]
    if isinstance(exc, (httpx.TransportError, anthropic.APIConnectionError, ConnectionError)):
        return ERROR_MESSAGES["network"]
    return str(exc) or ERROR_MESSAGES["default"]
