"""Scripted one-shot conversation with a freshly created agent."""

from __future__ import annotations

from typing import Callable, Sequence

from recruiting_agent.llm.base import AgentClient

DEMO_AGENT_NAME = 'Simple Agent with the information on Hungarian swimmers'
DEMO_AGENT_DESCRIPTION = 'Simple hungarian swimmers agent'
DEMO_AGENT_INSTRUCTIONS = 'You provide information about the Hungarian swimmers'
DEMO_QUESTIONS = (
    'Who was Alfred Hajos?',
    'What are latest achievements of the Hungarian swimmers?',
)


async def run_scripted_demo(
    client: AgentClient,
    *,
    model: str,
    questions: Sequence[str] = DEMO_QUESTIONS,
    name: str = DEMO_AGENT_NAME,
    description: str = DEMO_AGENT_DESCRIPTION,
    instructions: str = DEMO_AGENT_INSTRUCTIONS,
    output_fn: Callable[[str], None] = print,
) -> list[str]:
    """Create an agent, ask each question on one thread, then delete thread and agent.

    Returns:
        Every response message, in the order received.
    """
    agent = await client.create_agent(model=model, name=name, description=description, instructions=instructions)
    responses: list[str] = []
    try:
        thread = await client.create_thread()
        try:
            for question in questions:
                async for message in client.invoke(agent.id, thread.id, question):
                    output_fn(message.content)
                    responses.append(message.content)
        finally:
            await client.delete_thread(thread.id)
    finally:
        await client.delete_agent(agent.id)
    return responses
