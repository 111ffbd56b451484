"""Unified provider error public surface.

This module re-exports the one-class-per-file implementations under
``aice_providers.base.errors_parts`` to maintain a stable import path. The
Error Normalizer (``normalize_error``) is the single funnel every fault passes
through before it becomes an ``error`` chunk or a raised configuration error.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.provider_error import ProviderError
from .errors_parts.configuration_error import ConfigurationError
from .errors_parts.probe_timeout_error import ProbeTimeoutError, CONNECTIVITY_TIMEOUT_MESSAGE
from .errors_parts.normalize import format_error_message, normalize_error, read_error_details
from .errors_parts.classification import classify_exception

__all__ = [
    "ErrorCode",
    "ProviderError",
    "ConfigurationError",
    "ProbeTimeoutError",
    "CONNECTIVITY_TIMEOUT_MESSAGE",
    "format_error_message",
    "normalize_error",
    "read_error_details",
    "classify_exception",
]
