"""
Providers Base Package

Exports the provider-agnostic contracts shared by every adapter:

- Protocol: canonical chunk types, provider identities, token usage
- Models (DTOs): messages and session requests
- Interfaces: the streaming ``LLMProvider`` boundary
- Errors: normalized errors and the error normalizer
- Streaming: the lifecycle wrapper used by flat-event adapters
- Timeouts & Cancellation: the probe deadline and cooperative tokens
"""

from .cancellation import CancellationToken, CancelledError
from .errors import (
    ConfigurationError,
    ErrorCode,
    ProbeTimeoutError,
    ProviderError,
    classify_exception,
    normalize_error,
)
from .interfaces import LLMProvider
from .models import Message, ProviderRequestInput, Role, SessionRequest
from .protocol import (
    DoneChunk,
    ErrorChunk,
    MetaChunk,
    ProviderId,
    ProviderStreamChunk,
    StatusChunk,
    StreamChunk,
    StreamStatus,
    TextChunk,
    TokenUsage,
    UsageAccumulator,
    UsageChunk,
    is_provider_id,
    is_terminal,
    parse_provider_id,
)
from .streaming import StreamFault, StreamMetrics, release_stream, stream_with_lifecycle
from .timeouts import TimeoutConfig, get_timeout_config, with_cancellable_timeout

__all__ = [
    # Protocol
    "ProviderId",
    "StreamStatus",
    "TokenUsage",
    "MetaChunk",
    "StatusChunk",
    "TextChunk",
    "UsageChunk",
    "ErrorChunk",
    "DoneChunk",
    "StreamChunk",
    "ProviderStreamChunk",
    "UsageAccumulator",
    "is_provider_id",
    "is_terminal",
    "parse_provider_id",
    # Models
    "Role",
    "Message",
    "SessionRequest",
    "ProviderRequestInput",
    # Interfaces
    "LLMProvider",
    # Errors
    "ProviderError",
    "ConfigurationError",
    "ProbeTimeoutError",
    "ErrorCode",
    "classify_exception",
    "normalize_error",
    # Streaming
    "StreamFault",
    "StreamMetrics",
    "release_stream",
    "stream_with_lifecycle",
    # Timeouts & Cancellation
    "TimeoutConfig",
    "get_timeout_config",
    "with_cancellable_timeout",
    "CancellationToken",
    "CancelledError",
]
