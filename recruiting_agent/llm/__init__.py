"""Agent service adapters.

This package intentionally contains ONLY agent service adapters.

Rules:
- No prompt rendering here.
- No console I/O here.

Those belong in the runtime and services layers.
"""
from .base import AgentClient, AgentDefinition, AgentMessage, AgentThread
from .azure_agents import AzureAgentsClient, AzureAgentsConfig
from .mock import MockAgentClient
