"""Streaming package for the provider layer.

Exposes the lifecycle wrapper, stream release helper and per-stream metrics
under a single namespace.
"""

from .lifecycle import EventMapper, MappedItem, StreamFault, release_stream, stream_with_lifecycle
from .stream_metrics import StreamMetrics, finalize_stream

__all__ = [
    "EventMapper",
    "MappedItem",
    "StreamFault",
    "release_stream",
    "stream_with_lifecycle",
    "StreamMetrics",
    "finalize_stream",
]
