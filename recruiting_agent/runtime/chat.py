"""Interactive console conversation with an existing agent."""

from __future__ import annotations

from typing import Callable

from recruiting_agent.llm.base import AgentClient
from recruiting_agent.observability.tracing import log_event, new_trace_id

EXIT_COMMANDS = frozenset({'exit', 'quit'})

BANNER = (
    '=== Recruiting Assistant Agent ===\n'
    'Ask me anything about recruiting, interviewing, or hiring!\n'
    "Type 'exit' or 'quit' to end the conversation.\n"
)
GOODBYE = '\nGoodbye! Thanks for using the Recruiting Assistant.'
NO_RESPONSE = "I didn't receive a response. Please try again."


def is_exit_command(user_input: str | None) -> bool:
    return user_input is None or not user_input.strip() or user_input.strip().casefold() in EXIT_COMMANDS


class ChatSession:
    """Read-eval-print loop over one agent thread.

    The thread is created when the session starts and deleted when it ends,
    whatever the reason. The agent itself is left untouched.
    """

    def __init__(
        self,
        client: AgentClient,
        agent_id: str,
        *,
        input_fn: Callable[[str], str] = input,
        output_fn: Callable[[str], None] = print,
    ) -> None:
        self._client = client
        self._agent_id = agent_id
        self._input = input_fn
        self._output = output_fn

    def _read(self) -> str | None:
        try:
            return self._input('You: ')
        except EOFError:
            return None

    async def run(self) -> int:
        """Run until the user exits. Returns the number of turns answered."""
        trace_id = new_trace_id()
        thread = await self._client.create_thread()
        log_event('chat_started', trace_id=trace_id, agent_id=self._agent_id, thread_id=thread.id)
        turns = 0
        try:
            self._output(BANNER)
            while True:
                user_input = self._read()
                if is_exit_command(user_input):
                    self._output(GOODBYE)
                    break

                self._output('\nAgent:')
                has_response = False
                async for message in self._client.invoke(self._agent_id, thread.id, user_input):
                    self._output(message.content)
                    has_response = True

                if not has_response:
                    self._output(NO_RESPONSE)

                self._output('')
                turns += 1
        finally:
            await self._client.delete_thread(thread.id)
            log_event('chat_ended', trace_id=trace_id, thread_id=thread.id, turns=turns)
        return turns
