"""Token usage helpers package."""

from .extraction import (
    normalize_usage,
    extract_usage_from,
    merge_usage,
    usage_log_payload,
)

__all__ = [
    "normalize_usage",
    "extract_usage_from",
    "merge_usage",
    "usage_log_payload",
]
