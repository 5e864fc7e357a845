"""Mock agent adapter.

Use this for:
- deterministic tests
- offline development (`--offline` on the CLI)
"""

from __future__ import annotations

import itertools
from typing import AsyncIterator, Callable, Iterable

from recruiting_agent.llm.base import AgentClient, AgentDefinition, AgentMessage, AgentThread


class MockAgentClient(AgentClient):
    """An agent service that answers with pre-canned replies.

    Provide either:
    - a list of replies, returned as separate messages for every invocation, or
    - a callable mapping the user message to a list of replies.

    Every call is recorded so tests can assert on thread and agent lifecycle.
    """

    def __init__(
        self,
        replies: Iterable[str] | None = None,
        fn: Callable[[str], Iterable[str]] | None = None,
    ) -> None:
        self._replies = list(replies) if replies is not None else ['mock reply']
        self._fn = fn
        self._ids = itertools.count(1)
        self.agents: dict[str, AgentDefinition] = {}
        self.threads: set[str] = set()
        self.deleted_threads: list[str] = []
        self.deleted_agents: list[str] = []
        self.prompts: list[str] = []

    def _next_id(self, prefix: str) -> str:
        return f'{prefix}_{next(self._ids)}'

    async def create_agent(
        self,
        *,
        model: str,
        name: str | None = None,
        description: str | None = None,
        instructions: str | None = None,
    ) -> AgentDefinition:
        agent = AgentDefinition(
            id=self._next_id('asst'),
            model=model,
            name=name,
            description=description,
            instructions=instructions,
        )
        self.agents[agent.id] = agent
        return agent

    async def get_agent(self, agent_id: str) -> AgentDefinition:
        agent = self.agents.get(agent_id)
        if agent is None:
            agent = AgentDefinition(id=agent_id, model='mock-model')
            self.agents[agent_id] = agent
        return agent

    async def delete_agent(self, agent_id: str) -> None:
        self.agents.pop(agent_id, None)
        self.deleted_agents.append(agent_id)

    async def create_thread(self) -> AgentThread:
        thread = AgentThread(id=self._next_id('thread'))
        self.threads.add(thread.id)
        return thread

    async def delete_thread(self, thread_id: str) -> None:
        self.threads.discard(thread_id)
        self.deleted_threads.append(thread_id)

    async def invoke(self, agent_id: str, thread_id: str, content: str) -> AsyncIterator[AgentMessage]:
        self.prompts.append(content)
        replies = self._fn(content) if self._fn is not None else self._replies
        run_id = self._next_id('run')
        for reply in replies:
            yield AgentMessage(role='assistant', content=reply, id=self._next_id('msg'), run_id=run_id)
