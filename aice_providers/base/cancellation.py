"""Cooperative cancellation primitives (public API facade).

Purpose
-------
Expose stable, provider-agnostic cancellation constructs via the canonical
``aice_providers.base.cancellation`` import path while the concrete
implementations live under ``cancellation_parts`` for organization.

Notes
-----
- ``CancellationToken`` is the single explicit handle passed by reference
  through the adapter, the lifecycle wrapper and the connectivity prober.
- ``CancelledError`` is raised by operations that observe a cancellation request.
"""

from .cancellation_parts.cancelled_error import CancelledError
from .cancellation_parts.cancellation_token import CancellationToken

__all__ = ["CancellationToken", "CancelledError"]
