"""Cancellation error type.

Defines the public ``CancelledError`` used to signal cooperative cancellation
in provider operations. Kept isolated to satisfy one-class-per-file policy.
It is deliberately distinct from ``asyncio.CancelledError``: it is a regular
``Exception`` so that the streaming lifecycle can turn it into a terminal
``error`` chunk.
"""

from __future__ import annotations


class CancelledError(RuntimeError):
    """Raised when an operation is cancelled cooperatively.

    Carries the ``cancelled`` code so the Error Normalizer renders it as
    ``"cancelled: <reason>"``.
    """

    code = "cancelled"


__all__ = ["CancelledError"]
