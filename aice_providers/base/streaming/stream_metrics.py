"""Per-session streaming metrics and the consolidated end-of-stream log line.

Kept apart from the lifecycle wrapper so the orchestration code stays small.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Optional

from ..errors import classify_exception
from ..logging import LogContext, normalized_log_event
from ..protocol import TokenUsage
from ..tokens import usage_log_payload


@dataclass
class StreamMetrics:
    """Collected metrics for a single adapter stream.

    ``emitted`` counts text chunks; timings are milliseconds measured from
    construction with a monotonic clock.
    """

    emitted: int = 0
    time_to_first_token_ms: Optional[float] = None
    total_duration_ms: Optional[float] = None
    usage: Optional[TokenUsage] = None
    started_at: float = field(default_factory=time.monotonic, repr=False)

    def _elapsed_ms(self) -> float:
        return round((time.monotonic() - self.started_at) * 1000.0, 3)

    def mark_emitted(self) -> None:
        if self.emitted == 0:
            self.time_to_first_token_ms = self._elapsed_ms()
        self.emitted += 1

    def finish(self) -> None:
        self.total_duration_ms = self._elapsed_ms()


def finalize_stream(
    *,
    logger: logging.Logger,
    ctx: Optional[LogContext],
    metrics: StreamMetrics,
    error: Optional[BaseException] = None,
    phase: str = "finalize",
) -> None:
    """Emit the ``stream.end`` / ``stream.error`` event for a finished stream."""
    metrics.finish()
    normalized_log_event(
        logger,
        "stream.end" if error is None else "stream.error",
        ctx,
        phase=phase,
        attempt=None,
        error_code=classify_exception(error).value if error is not None else None,
        emitted=metrics.emitted > 0,
        tokens=usage_log_payload(metrics.usage) if metrics.usage is not None else None,
        level=logging.INFO if error is None else logging.WARNING,
        emitted_count=metrics.emitted,
        time_to_first_token_ms=metrics.time_to_first_token_ms,
        total_duration_ms=metrics.total_duration_ms,
        error=str(error) if error is not None else None,
    )


__all__ = ["StreamMetrics", "finalize_stream"]
