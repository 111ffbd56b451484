"""Agent-style adapter (OpenAI Agents SDK) and its workspace tools."""

from .client import OpenAIAgentsProvider
from .workspace_tools import WorkspaceTools, create_workspace_tools

__all__ = ["OpenAIAgentsProvider", "WorkspaceTools", "create_workspace_tools"]
