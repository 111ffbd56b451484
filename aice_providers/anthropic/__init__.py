"""Anthropic Messages API adapter."""

from .client import AnthropicProvider

__all__ = ["AnthropicProvider"]
