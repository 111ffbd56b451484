"""Token usage extraction helpers.

This module centralizes *best-effort* extraction of token accounting from raw
vendor payloads and converts vendor-specific field names into the canonical
:class:`~aice_providers.base.protocol.TokenUsage` shape.

Accepted field names
--------------------
input side:   ``input_tokens``, ``inputTokens``, ``prompt_tokens``, ``promptTokens``
output side:  ``output_tokens``, ``outputTokens``, ``completion_tokens``, ``completionTokens``
total:        ``total_tokens``, ``totalTokens``

The payload may be a mapping or an SDK object exposing attributes; wrappers
carrying a ``usage`` field are unwrapped with :func:`extract_usage_from`.

Failure Modes
-------------
* Attribute absence → field left ``None``
* Non-integer / negative values → coerced to ``None``
* Nothing usable at all → ``None`` returned instead of an empty usage

None of these helpers raise.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional

from ..protocol import TokenUsage

INPUT_KEYS = ("input_tokens", "inputTokens", "prompt_tokens", "promptTokens")
OUTPUT_KEYS = ("output_tokens", "outputTokens", "completion_tokens", "completionTokens")
TOTAL_KEYS = ("total_tokens", "totalTokens")


def _coerce_int(value: Any) -> Optional[int]:
    """Coerce arbitrary value to a non-negative ``int`` or ``None``."""
    if value is None or isinstance(value, bool):
        return None
    try:
        iv = int(value)  # type: ignore[arg-type]
        return iv if iv >= 0 else None
    except Exception:  # pragma: no cover - coercion failure path
        return None


def _first(raw: Any, keys: Iterable[str]) -> Optional[int]:
    for key in keys:
        if isinstance(raw, Mapping):
            value = raw.get(key)
        else:
            value = getattr(raw, key, None)
        coerced = _coerce_int(value)
        if coerced is not None:
            return coerced
    return None


def normalize_usage(raw: Any) -> Optional[TokenUsage]:
    """Map a vendor usage object (any naming convention) to ``TokenUsage``.

    Derives ``total_tokens`` as input + output when the vendor omits it and
    both parts are known. Returns ``None`` when no field is usable.
    """
    if raw is None:
        return None
    if isinstance(raw, TokenUsage):
        return None if raw.is_empty() else raw
    try:
        prompt = _first(raw, INPUT_KEYS)
        completion = _first(raw, OUTPUT_KEYS)
        total = _first(raw, TOTAL_KEYS)
    except Exception:  # pragma: no cover - structural mismatch
        return None
    if total is None and prompt is not None and completion is not None:
        total = prompt + completion
    usage = TokenUsage(input_tokens=prompt, output_tokens=completion, total_tokens=total)
    return None if usage.is_empty() else usage


def extract_usage_from(container: Any) -> Optional[TokenUsage]:
    """Read ``container.usage`` (or ``container["usage"]``) and normalize it."""
    if container is None:
        return None
    if isinstance(container, Mapping):
        return normalize_usage(container.get("usage"))
    return normalize_usage(getattr(container, "usage", None))


def merge_usage(previous: Optional[TokenUsage], update: Optional[TokenUsage]) -> Optional[TokenUsage]:
    """Overlay the known fields of ``update`` on ``previous``.

    Used by vendors that report input and output counts in separate events.
    The total is re-derived when the vendor did not send one.
    """
    if update is None:
        return previous
    if previous is None:
        return update
    prompt = update.input_tokens if update.input_tokens is not None else previous.input_tokens
    completion = update.output_tokens if update.output_tokens is not None else previous.output_tokens
    total = update.total_tokens
    if total is None and prompt is not None and completion is not None:
        total = prompt + completion
    return TokenUsage(input_tokens=prompt, output_tokens=completion, total_tokens=total)


def usage_log_payload(usage: Optional[TokenUsage]) -> dict:
    """Canonical ``tokens`` mapping used by structured log events."""
    if usage is None:
        return {"prompt": None, "completion": None, "total": None}
    return {"prompt": usage.input_tokens, "completion": usage.output_tokens, "total": usage.total_tokens}


__all__ = [
    "normalize_usage",
    "extract_usage_from",
    "merge_usage",
    "usage_log_payload",
]
