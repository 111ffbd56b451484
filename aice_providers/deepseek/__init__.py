"""DeepSeek chat-completions adapter."""

from .client import DeepSeekProvider

__all__ = ["DeepSeekProvider"]
