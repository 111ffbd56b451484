"""
Error classification helpers mapping faults to normalized ErrorCode values.

Implements HTTP status extraction, status-to-code mapping, and message-based
heuristics as a fallback so that vendor SDK exceptions, normalized
``ProviderError`` values and cancellation all land in one category used by
structured logging.
"""
from __future__ import annotations

import asyncio
from typing import Optional, Dict

from .error_code import ErrorCode
from .configuration_error import ConfigurationError
from .probe_timeout_error import ProbeTimeoutError
from .provider_error import ProviderError


def _extract_status(exc: BaseException) -> Optional[int]:
    """Attempt to extract an HTTP status code from a provider exception.

    Supported attribute shapes (checked in order):
    - ``exc.status_code``
    - ``exc.status``
    - ``exc.response.status_code``
    Returns ``None`` if no valid status can be found.
    """
    for attr in ("status_code", "status"):
        val = getattr(exc, attr, None)
        if isinstance(val, int) and 100 <= val < 600:
            return val
    resp = getattr(exc, "response", None)
    if resp is not None:
        sc = getattr(resp, "status_code", None)
        if isinstance(sc, int) and 100 <= sc < 600:
            return sc
    return None


_HTTP_STATUS_MAP: Dict[int, ErrorCode] = {
    400: ErrorCode.VALIDATION,
    401: ErrorCode.AUTH,
    403: ErrorCode.AUTH,
    404: ErrorCode.NOT_FOUND,
    408: ErrorCode.TIMEOUT,
    409: ErrorCode.CONFLICT,
    422: ErrorCode.VALIDATION,
    429: ErrorCode.RATE_LIMIT,
    500: ErrorCode.SERVER_ERROR,
    502: ErrorCode.TRANSIENT,
    503: ErrorCode.UNAVAILABLE,
    504: ErrorCode.TIMEOUT,
}

_VALUES = {c.value: c for c in ErrorCode}


def _heuristic_from_message(msg: str) -> Optional[ErrorCode]:  # pragma: no cover - simple mapping
    """Substring heuristic mapping for faults without an HTTP status."""
    PATTERN_GROUPS = (
        (ErrorCode.RATE_LIMIT, ("rate", "limit")),
        (ErrorCode.TIMEOUT, ("timeout",)),
        (ErrorCode.TIMEOUT, ("timed out",)),
        (ErrorCode.CANCELLED, ("cancelled",)),
        (ErrorCode.AUTH, ("auth",)),
        (ErrorCode.AUTH, ("api key",)),
        (ErrorCode.AUTH, ("unauthorized",)),
        (ErrorCode.AUTH, ("forbidden",)),
        (ErrorCode.UNSUPPORTED, ("unsupported",)),
        (ErrorCode.UNSUPPORTED, ("not supported",)),
        (ErrorCode.NOT_FOUND, ("not found",)),
        (ErrorCode.NOT_FOUND, ("does not exist",)),
        (ErrorCode.CONFLICT, ("conflict",)),
        (ErrorCode.CONFLICT, ("already exists",)),
        (ErrorCode.UNAVAILABLE, ("unavailable",)),
        (ErrorCode.UNAVAILABLE, ("overloaded",)),
        (ErrorCode.VALIDATION, ("validation",)),
        (ErrorCode.VALIDATION, ("invalid",)),
        (ErrorCode.VALIDATION, ("malformed",)),
        (ErrorCode.SERVER_ERROR, ("server error",)),
        (ErrorCode.SERVER_ERROR, ("internal error",)),
    )
    for code, patterns in PATTERN_GROUPS:
        if code is ErrorCode.RATE_LIMIT and patterns == ("rate", "limit"):
            if all(p in msg for p in patterns):
                return code
            continue
        if any(p in msg for p in patterns):
            return code
    return None


def classify_exception(exc: BaseException) -> ErrorCode:
    """Classify a fault into a normalized :class:`ErrorCode`.

    Precedence:
        1. Configuration and probe-timeout errors.
        2. ``ProviderError`` whose code already names a category.
        3. Timeout exceptions (sync/async).
        4. HTTP status mapping (directly or via ``__cause__``).
        5. Substring heuristics.
        6. ``UNKNOWN`` fallback.
    """
    if isinstance(exc, ConfigurationError):
        return ErrorCode.CONFIGURATION
    if isinstance(exc, ProbeTimeoutError):
        return ErrorCode.TIMEOUT
    if isinstance(exc, ProviderError) and exc.code in _VALUES:
        return _VALUES[exc.code]
    if getattr(exc, "code", None) == ErrorCode.CANCELLED.value:
        return ErrorCode.CANCELLED
    if isinstance(exc, (TimeoutError, asyncio.TimeoutError)):
        return ErrorCode.TIMEOUT
    status = _extract_status(exc)
    if status is None and exc.__cause__ is not None:
        status = _extract_status(exc.__cause__)
    if status is not None and status in _HTTP_STATUS_MAP:
        return _HTTP_STATUS_MAP[status]
    code = _heuristic_from_message(str(exc).lower())
    return code if code is not None else ErrorCode.UNKNOWN


__all__ = [
    "classify_exception",
    "_extract_status",
    "_HTTP_STATUS_MAP",
]
