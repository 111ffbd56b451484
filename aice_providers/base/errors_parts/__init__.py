"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `aice_providers.base.errors` for the stable surface.
"""

from .error_code import ErrorCode
from .provider_error import ProviderError
from .configuration_error import ConfigurationError
from .probe_timeout_error import ProbeTimeoutError, CONNECTIVITY_TIMEOUT_MESSAGE
from .normalize import ErrorDetails, format_error_message, read_error_details, normalize_error
from .classification import classify_exception

__all__ = [
    "ErrorCode",
    "ProviderError",
    "ConfigurationError",
    "ProbeTimeoutError",
    "CONNECTIVITY_TIMEOUT_MESSAGE",
    "ErrorDetails",
    "format_error_message",
    "read_error_details",
    "normalize_error",
    "classify_exception",
]
