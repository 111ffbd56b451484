"""Chat service: the seam between a chat surface and the provider layer.

Given the active :class:`~aice_providers.config.ProviderEnv` and the next
turn's input, the service creates the provider binding, builds the
``SessionRequest`` and starts the session. A terminal UI consumes the
returned chunk stream; nothing here renders or persists anything.
"""
from __future__ import annotations

from typing import Any, AsyncIterator, Callable, Optional

from ..base.models import ProviderRequestInput
from ..base.protocol import StreamChunk
from ..config import ProviderEnv
from ..probe import probe_provider
from ..registry import ProviderBinding, create_provider_binding
from ..session import run_session

BindingFactory = Callable[[ProviderEnv], ProviderBinding]
Prober = Callable[[ProviderEnv], Any]


class ChatService:
    """Create session streams for the active provider.

    Parameters:
        binding_factory: Builds the binding for an env (defaults to the
            registry's :func:`create_provider_binding`).
        prober: Connectivity check used by :meth:`verify_connectivity`.
    """

    def __init__(
        self,
        *,
        binding_factory: Optional[BindingFactory] = None,
        prober: Optional[Prober] = None,
    ) -> None:
        self._binding_factory = binding_factory or create_provider_binding
        self._prober = prober or probe_provider

    def create_stream(self, env: ProviderEnv, prompt: ProviderRequestInput) -> AsyncIterator[StreamChunk]:
        """Return the session stream for ``prompt`` on ``env``'s provider.

        Configuration errors (missing key, unknown provider, unresolvable
        model) raise here rather than appearing in the stream.
        """
        binding = self._binding_factory(env)
        request = binding.create_request(prompt)
        return run_session(binding.provider, request)

    async def verify_connectivity(self, env: ProviderEnv) -> None:
        """Probe the provider before activating ``env``; raises on failure."""
        await self._prober(env)


__all__ = ["ChatService"]
