"""One-class-per-file implementations re-exported by ``base.models``."""

from .message import Message, Role
from .provider_request_input import ProviderRequestInput
from .session_request import SessionRequest

__all__ = ["Message", "Role", "ProviderRequestInput", "SessionRequest"]
