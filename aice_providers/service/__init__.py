"""Application-facing services built on the provider layer."""

from .chat_service import ChatService

__all__ = ["ChatService"]
