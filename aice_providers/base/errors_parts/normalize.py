"""
Error normalization: the single funnel for every observed fault.

Collapses vendor exceptions, nested vendor error objects, plain strings and
arbitrary values into one canonical error whose ``str()`` is the final
message. The formatting rule is deterministic: ``"<code>: <message>"`` when a
code is known and the message does not already start with it, otherwise the
message alone.

An exception that is already in canonical shape is returned unchanged (same
object), which keeps its traceback and ``__cause__`` chain intact.
``normalize_error`` never raises.
"""
from __future__ import annotations

from typing import Any, Mapping, NamedTuple, Optional

from .provider_error import ProviderError


class ErrorDetails(NamedTuple):
    code: Optional[str] = None
    message: Optional[str] = None


def _non_empty_str(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value
    return None


def _read_field(raw: Any, name: str) -> Any:
    if isinstance(raw, Mapping):
        return raw.get(name)
    try:
        return getattr(raw, name, None)
    except Exception:  # properties on SDK objects may raise
        return None


def format_error_message(details: ErrorDetails, fallback_message: str) -> str:
    """Combine a code and message into the canonical message string."""
    message = details.message if details.message is not None else fallback_message
    if not details.code or message.startswith(details.code):
        return message
    return f"{details.code}: {message}"


def read_error_details(raw: Any, *, depth: int = 1) -> ErrorDetails:
    """Extract ``code`` / ``message`` from a structured object.

    Reads the top level first; when neither is present, looks one level down
    into a nested ``error`` property (``{"error": {"code": ..., "message": ...}}``).
    """
    if raw is None or isinstance(raw, (str, bytes, int, float, bool)):
        return ErrorDetails()
    code = _non_empty_str(_read_field(raw, "code"))
    message = _non_empty_str(_read_field(raw, "message"))
    if code or message:
        return ErrorDetails(code, message)
    if depth <= 0:
        return ErrorDetails()
    nested = _read_field(raw, "error")
    if nested is None or nested is raw:
        return ErrorDetails()
    return read_error_details(nested, depth=depth - 1)


def _normalize_exception(exc: BaseException, fallback_message: str) -> BaseException:
    code = _non_empty_str(_read_field(exc, "code"))
    try:
        text = str(exc)
    except Exception:
        text = ""
    message = text if text.strip() else fallback_message
    formatted = format_error_message(ErrorDetails(code, message), fallback_message)
    if text and formatted == text:
        return exc
    wrapped = ProviderError(
        message=formatted,
        code=code,
        provider=_non_empty_str(_read_field(exc, "provider")),
        model=_non_empty_str(_read_field(exc, "model")),
        name=(exc.name if isinstance(exc, ProviderError) else None) or type(exc).__name__,
    )
    wrapped.__cause__ = exc
    return wrapped


def normalize_error(raw: Any, fallback_message: str) -> BaseException:
    """Return the canonical error for ``raw``.

    Parameters:
        raw: Exception, string, mapping, SDK error object, or anything else.
        fallback_message: Message used when ``raw`` carries none.

    Returns:
        An exception usable as the payload of an ``error`` chunk.
    """
    try:
        if isinstance(raw, BaseException):
            return _normalize_exception(raw, fallback_message)
        if isinstance(raw, str):
            return ProviderError(message=raw if raw.strip() else fallback_message)
        details = read_error_details(raw)
        return ProviderError(
            message=format_error_message(details, fallback_message),
            code=details.code,
        )
    except Exception:  # pragma: no cover - last resort, the normalizer never raises
        return ProviderError(message=fallback_message)


__all__ = [
    "ErrorDetails",
    "format_error_message",
    "read_error_details",
    "normalize_error",
]
