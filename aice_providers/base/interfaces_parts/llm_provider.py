"""LLMProvider Protocol (single-class module).

Defines the streaming contract every provider adapter satisfies.
"""

from __future__ import annotations

from typing import AsyncIterator, Protocol, runtime_checkable

from ..models import SessionRequest
from ..protocol import ProviderId, ProviderStreamChunk


@runtime_checkable
class LLMProvider(Protocol):
    """Minimal interface for streaming Large Language Model providers.

    Implementations map ``SessionRequest`` fields to their SDK parameters and
    translate vendor events into canonical chunks; SDK objects never leak
    upstream.
    """

    @property
    def id(self) -> ProviderId:
        """Identity the adapter implements, checked against the request."""
        ...

    def stream(self, request: SessionRequest) -> AsyncIterator[ProviderStreamChunk]:
        """Return the canonical chunk sequence for ``request``.

        Configuration problems (missing model) raise ``ConfigurationError``
        synchronously, before any network call. Runtime faults are reported as
        ``status: failed`` followed by one ``error`` chunk.
        """
        ...
