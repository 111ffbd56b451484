"""Interfaces (Protocols) split into single-class modules.

``aice_providers.base.interfaces`` re-exports them as the stable API.
"""

from .llm_provider import LLMProvider

__all__ = ["LLMProvider"]
