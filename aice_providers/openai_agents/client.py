"""Agent-style adapter built on the OpenAI Agents SDK.

Unlike the flat-event adapters this one does not go through
``stream_with_lifecycle``: the SDK already runs a multi-turn loop (model call,
tool calls, model call ...) and reports it as run-level events. The adapter
reproduces the lifecycle contract directly:

1. ``status: running`` first.
2. Run events are translated as they arrive:

   * ``raw_response_event`` with ``response.created`` or
     ``response.in_progress`` → ``status: running`` (repeats are kept);
     ``response.output_text.delta`` → ``text``; ``response.completed`` → usage candidate (not yet emitted).
   * ``agent_updated_stream_event`` → ``status: running`` with
     ``agent=<name>`` detail.
   * ``run_item_stream_event`` (tool called, tool output, handoffs) →
     ``status: running`` with the event name as detail. Message output items
     are skipped; the raw deltas already carried the text.

3. Any exception from the run → ``status: failed`` + one ``error`` chunk.
4. Otherwise the run's aggregated usage (falling back to the last
   ``response.completed`` usage) and ``status: completed``.
5. ``result.cancel()`` in ``finally``, however the generator ends.
"""

from __future__ import annotations

import logging
from contextlib import suppress
from pathlib import Path
from typing import Any, AsyncIterator, List, Optional, Sequence, Union

from agents import Agent, ModelSettings, OpenAIProvider as AgentsModelProvider, RunConfig, Runner

from ..base.errors import ConfigurationError, normalize_error
from ..base.logging import LogContext, get_logger, log_event, normalized_log_event
from ..base.models import SessionRequest
from ..base.protocol import (
    ErrorChunk,
    ProviderId,
    ProviderStreamChunk,
    StatusChunk,
    StreamStatus,
    TextChunk,
    TokenUsage,
    UsageChunk,
)
from ..base.streaming import StreamMetrics, finalize_stream
from ..base.tokens import extract_usage_from
from ..base.utils.fields import read_field, read_path
from ..base.utils.messages import split_system
from ..config.defaults import OPENAI_AGENTS_DEFAULT_INSTRUCTIONS
from ..openai.client import RESPONSE_STARTED_EVENTS
from .workspace_tools import create_workspace_tools

__all__ = ["OpenAIAgentsProvider", "map_run_event"]

AGENT_NAME = "AICE Agent"
_RUN_FALLBACK_MESSAGE = "Agent run failed"


def _map_raw_response(data: Any) -> List[ProviderStreamChunk]:
    kind = read_field(data, "type")
    if kind in RESPONSE_STARTED_EVENTS:
        return [StatusChunk(StreamStatus.RUNNING)]
    if kind == "response.output_text.delta":
        delta = read_field(data, "delta")
        return [TextChunk(delta)] if delta else []
    if kind == "response.completed":
        usage = extract_usage_from(read_field(data, "response"))
        return [UsageChunk(usage)] if usage is not None else []
    return []


def map_run_event(event: Any) -> List[ProviderStreamChunk]:
    """Translate one Agents SDK stream event into canonical items."""
    kind = read_field(event, "type")
    if kind == "raw_response_event":
        return _map_raw_response(read_field(event, "data"))
    if kind == "agent_updated_stream_event":
        name = read_path(event, "new_agent", "name")
        return [StatusChunk(StreamStatus.RUNNING, f"agent={name}" if name else None)]
    if kind == "run_item_stream_event":
        item_type = read_path(event, "item", "type")
        if item_type == "message_output_item":
            return []
        detail = read_field(event, "name") or item_type
        return [StatusChunk(StreamStatus.RUNNING, detail)] if detail else []
    return []


class OpenAIAgentsProvider:
    """Streaming adapter running a single agent through ``Runner.run_streamed``.

    Parameters:
        api_key: OpenAI API key (required).
        base_url: Optional OpenAI-compatible endpoint.
        model: Default model when the request omits one.
        instructions: Default agent instructions when the request has no
            system prompt.
        workspace_root: When set, the agent gets the read-only workspace
            tools scoped to this directory.
        tools: Explicit tool list; overrides ``workspace_root``.
        runner: Object exposing ``run_streamed`` (defaults to the SDK ``Runner``).
    """

    id = ProviderId.OPENAI_AGENTS
    label = "OpenAI"

    def __init__(
        self,
        api_key: Optional[str],
        *,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        instructions: Optional[str] = None,
        workspace_root: Union[str, Path, None] = None,
        tools: Optional[Sequence[Any]] = None,
        runner: Any = None,
    ) -> None:
        if not api_key or not str(api_key).strip():
            raise ConfigurationError("Missing OpenAI API key", provider=self.id.value)
        self._api_key = api_key
        self._base_url = base_url
        self._model = model
        self._instructions = instructions or OPENAI_AGENTS_DEFAULT_INSTRUCTIONS
        if tools is not None:
            self._tools = list(tools)
        elif workspace_root is not None:
            self._tools = create_workspace_tools(workspace_root)
        else:
            self._tools = []
        self._runner = runner if runner is not None else Runner
        self._logger = get_logger(self.id.value)

    def default_model(self) -> Optional[str]:
        return self._model

    def resolve_model(self, request: SessionRequest) -> str:
        model = request.model or self._model
        if not model:
            raise ConfigurationError("OpenAI Agents model is required", provider=self.id.value)
        return model

    def _build_agent(self, request: SessionRequest, model: str, instructions: Optional[str]) -> Agent:
        settings = ModelSettings(temperature=request.temperature, max_tokens=request.max_tokens)
        return Agent(
            name=AGENT_NAME,
            instructions=instructions or self._instructions,
            model=model,
            model_settings=settings,
            tools=list(self._tools),
        )

    def _run_config(self) -> RunConfig:
        return RunConfig(
            model_provider=AgentsModelProvider(
                api_key=self._api_key,
                base_url=self._base_url,
                use_responses=True,
            )
        )

    def stream(self, request: SessionRequest) -> AsyncIterator[ProviderStreamChunk]:
        model = self.resolve_model(request)
        return self._stream_run(request, model)

    def _final_usage(self, result: Any, ctx: LogContext) -> Optional[TokenUsage]:
        try:
            return extract_usage_from(read_field(result, "context_wrapper"))
        except Exception as exc:
            # usage is informational; a failed read only drops the usage chunk
            log_event(self._logger, "stream.usage.error", ctx, level=logging.DEBUG, error=str(exc))
            return None

    async def _stream_run(self, request: SessionRequest, model: str) -> AsyncIterator[ProviderStreamChunk]:
        ctx = LogContext(provider=self.id.value, model=model)
        metrics = StreamMetrics()
        token = request.cancellation_token
        normalized_log_event(self._logger, "stream.start", ctx, phase="start", attempt=None, emitted=False, tokens=None)
        yield StatusChunk(StreamStatus.RUNNING)

        result = None
        try:
            last_usage: Optional[UsageChunk] = None
            failure: Optional[BaseException] = None
            try:
                if token is not None:
                    token.raise_if_cancelled()
                instructions, turns = split_system(request)
                run_input: Union[str, List[dict]] = (
                    turns[0]["content"] if len(turns) == 1 and turns[0]["role"] == "user" else turns
                )
                result = self._runner.run_streamed(
                    self._build_agent(request, model, instructions),
                    run_input,
                    run_config=self._run_config(),
                )
                iterator = result.stream_events().__aiter__()
                while True:
                    try:
                        if token is None:
                            event = await iterator.__anext__()
                        else:
                            event = await token.race(iterator.__anext__())
                    except StopAsyncIteration:
                        break
                    for item in map_run_event(event):
                        if isinstance(item, UsageChunk):
                            last_usage = item
                            continue
                        if isinstance(item, TextChunk):
                            metrics.mark_emitted()
                        yield item
            except Exception as exc:
                failure = normalize_error(exc, _RUN_FALLBACK_MESSAGE)

            if failure is not None:
                finalize_stream(logger=self._logger, ctx=ctx, metrics=metrics, error=failure, phase="stream")
                yield StatusChunk(StreamStatus.FAILED)
                yield ErrorChunk(failure)
                return

            usage = self._final_usage(result, ctx) or (last_usage.usage if last_usage is not None else None)
            metrics.usage = usage
            finalize_stream(logger=self._logger, ctx=ctx, metrics=metrics)
            if usage is not None:
                yield UsageChunk(usage)
            yield StatusChunk(StreamStatus.COMPLETED)
        finally:
            if result is not None:
                with suppress(Exception):
                    result.cancel()
