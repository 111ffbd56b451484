"""aice_providers package

Streaming protocol normalization layer for a multi-vendor terminal chat.

Purpose:
    Turn each vendor's event stream (OpenAI Responses, Anthropic Messages,
    DeepSeek chat completions, the OpenAI Agents SDK) into one canonical,
    provider-agnostic chunk sequence with a uniform lifecycle, error shape,
    and cancellation/timeout semantics.

Public API (re-exported):
    - Version: ``__version__``
    - Protocol: chunk types, :class:`ProviderId`, :class:`StreamStatus`,
      :class:`TokenUsage`
    - Errors: :class:`ProviderError`, :class:`ConfigurationError`,
      :class:`ProbeTimeoutError`, :func:`normalize_error`
    - Sessions: :func:`run_session`, :func:`create_provider_binding`,
      :class:`ChatService`
    - Connectivity: :func:`probe_provider`
    - Configuration: :class:`ProviderEnv`, :func:`load_provider_env`

Adapters are imported lazily by the registry; import them directly from
``aice_providers.openai`` etc. when needed.
"""

from .base.cancellation import CancellationToken, CancelledError
from .base.errors import (
    ConfigurationError,
    ErrorCode,
    ProbeTimeoutError,
    ProviderError,
    normalize_error,
)
from .base.interfaces import LLMProvider
from .base.models import Message, ProviderRequestInput, SessionRequest
from .base.protocol import (
    DoneChunk,
    ErrorChunk,
    MetaChunk,
    ProviderId,
    StatusChunk,
    StreamChunk,
    StreamStatus,
    TextChunk,
    TokenUsage,
    UsageAccumulator,
    UsageChunk,
    is_terminal,
)
from .base.utils.messages import build_messages, build_prompt
from .config import ProviderEnv, load_provider_env, try_load_provider_env
from .probe import probe_provider
from .registry import ProviderBinding, create_provider_binding
from .service import ChatService
from .session import run_session

__version__ = "0.1.0"

__all__ = [
    "__version__",
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
    "UsageAccumulator",
    "is_terminal",
    # Errors
    "ProviderError",
    "ConfigurationError",
    "ProbeTimeoutError",
    "ErrorCode",
    "normalize_error",
    # Cancellation
    "CancellationToken",
    "CancelledError",
    # Models
    "Message",
    "SessionRequest",
    "ProviderRequestInput",
    "LLMProvider",
    "build_messages",
    "build_prompt",
    # Sessions
    "ProviderBinding",
    "create_provider_binding",
    "run_session",
    "ChatService",
    "probe_provider",
    # Configuration
    "ProviderEnv",
    "load_provider_env",
    "try_load_provider_env",
]
