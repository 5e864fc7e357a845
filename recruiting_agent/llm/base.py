"""Agent service adapter interface.

This module defines the narrow contract used by the services and the console loop.
The adapter is:
- swappable (hosted agent service, local model, etc.)
- mockable (deterministic tests)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import AsyncIterator


@dataclass(frozen=True)
class AgentDefinition:
    """An agent registered with the agent service.

    Attributes:
        id: Service-assigned agent id.
        model: Model deployment the agent runs on.
        name: Display name.
        description: Short human-readable description.
        instructions: System instructions applied to every thread.
    """

    id: str
    model: str
    name: str | None = None
    description: str | None = None
    instructions: str | None = None


@dataclass(frozen=True)
class AgentThread:
    """A conversation thread. Deleted by the caller when done."""

    id: str


@dataclass(frozen=True)
class AgentMessage:
    """One message produced on a thread."""

    role: str
    content: str
    id: str | None = None
    run_id: str | None = None


class AgentClient(ABC):
    """Agent service adapter."""

    @abstractmethod
    async def create_agent(
        self,
        *,
        model: str,
        name: str | None = None,
        description: str | None = None,
        instructions: str | None = None,
    ) -> AgentDefinition:
        raise NotImplementedError

    @abstractmethod
    async def get_agent(self, agent_id: str) -> AgentDefinition:
        raise NotImplementedError

    @abstractmethod
    async def delete_agent(self, agent_id: str) -> None:
        raise NotImplementedError

    @abstractmethod
    async def create_thread(self) -> AgentThread:
        raise NotImplementedError

    @abstractmethod
    async def delete_thread(self, thread_id: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def invoke(self, agent_id: str, thread_id: str, content: str) -> AsyncIterator[AgentMessage]:
        """Post a user message on the thread and yield the agent's replies, oldest first."""
        raise NotImplementedError
