"""
Provider-agnostic domain models (DTOs) public surface.

This module re-exports the one-class-per-file implementations under
``aice_providers.base.models_parts``.
"""

from .models_parts.message import Message, Role
from .models_parts.provider_request_input import ProviderRequestInput
from .models_parts.session_request import SessionRequest

__all__ = [
    "Message",
    "Role",
    "ProviderRequestInput",
    "SessionRequest",
]
