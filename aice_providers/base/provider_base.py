"""Shared base for adapters whose vendor SDK emits a flat event stream.

Purpose
-------
Concentrate the parts every such adapter repeats: credential validation at
construction, model resolution before any network call, structured logging
context, and handing the vendor stream to :func:`stream_with_lifecycle`.

Subclasses provide:

- ``id`` and ``label`` class attributes.
- ``_make_client()``: build the vendor SDK client from the stored settings.
- ``_open_stream(request, model)``: start the vendor stream (may be async).
- ``_new_event_mapper()``: a fresh event → canonical items mapper per stream,
  so mappers can keep per-stream state (partial usage, first-event flags).

Failure modes
-------------
- Empty credential → ``ConfigurationError`` from the constructor.
- No model on the request nor a constructor default → ``ConfigurationError``
  from ``stream`` itself, before the returned generator is first iterated.
- Everything else surfaces as ``status: failed`` + one ``error`` chunk.
"""
from __future__ import annotations

from typing import Any, AsyncIterator, ClassVar, Optional

from .errors import ConfigurationError
from .logging import LogContext, get_logger
from .models import SessionRequest
from .protocol import ProviderId, ProviderStreamChunk
from .streaming import EventMapper, stream_with_lifecycle


class BaseLifecycleProvider:
    """Reusable base implementing :class:`~aice_providers.base.interfaces.LLMProvider`."""

    id: ClassVar[ProviderId]
    label: ClassVar[str] = "Provider"

    def __init__(
        self,
        api_key: Optional[str],
        *,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        client: Any = None,
    ) -> None:
        if not api_key or not str(api_key).strip():
            raise ConfigurationError(f"Missing {self.label} API key", provider=self.id.value)
        self._api_key = api_key
        self._base_url = base_url
        self._model = model
        self._logger = get_logger(self.id.value)
        self._client = client if client is not None else self._make_client()

    # ----- Abstract surface -----
    def _make_client(self) -> Any:  # pragma: no cover - subclasses override
        raise NotImplementedError

    def _open_stream(self, request: SessionRequest, model: str) -> Any:  # pragma: no cover
        raise NotImplementedError

    def _new_event_mapper(self) -> EventMapper:  # pragma: no cover
        raise NotImplementedError

    # ----- Shared behaviour -----
    @property
    def client(self) -> Any:
        return self._client

    def default_model(self) -> Optional[str]:
        return self._model

    def resolve_model(self, request: SessionRequest) -> str:
        """Return the request model, else the constructor default.

        Raises:
            ConfigurationError: when neither is set.
        """
        model = request.model or self._model
        if not model:
            raise ConfigurationError(f"{self.label} model is required", provider=self.id.value)
        return model

    def stream(self, request: SessionRequest) -> AsyncIterator[ProviderStreamChunk]:
        model = self.resolve_model(request)
        return stream_with_lifecycle(
            open_stream=lambda: self._open_stream(request, model),
            map_event=self._new_event_mapper(),
            start_fallback_message=f"Failed to start {self.label} stream",
            stream_fallback_message=f"{self.label} stream failed",
            cancellation_token=request.cancellation_token,
            logger=self._logger,
            ctx=LogContext(provider=self.id.value, model=model),
        )

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        return f"{type(self).__name__}(model={self._model!r}, base_url={self._base_url!r})"


__all__ = ["BaseLifecycleProvider"]
