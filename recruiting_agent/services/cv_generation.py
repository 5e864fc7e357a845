"""CV generation: render the CV prompt and run it through the agent on a fresh thread."""

from __future__ import annotations

import json
import logging
from typing import Any

from recruiting_agent.core.errors import AgentInvocationError
from recruiting_agent.llm.base import AgentClient
from recruiting_agent.observability.tracing import Span, log_event, new_trace_id
from recruiting_agent.runtime.prompt_builder import CVPromptBuilder


def serialize_json_inputs(job_profile: Any, job_offer: Any = None) -> tuple[str, str]:
    """Serialize JSON-compatible inputs with indentation. A missing offer becomes ''."""
    profile = json.dumps(job_profile, indent=2, ensure_ascii=False)
    offer = json.dumps(job_offer, indent=2, ensure_ascii=False) if job_offer is not None else ''
    return profile, offer


class CVGenerationService:
    """Generates CVs from a candidate profile and an optional job offer."""

    def __init__(self, client: AgentClient, agent_id: str, builder: CVPromptBuilder | None = None) -> None:
        self._client = client
        self._agent_id = agent_id
        self._builder = builder or CVPromptBuilder.from_store()

    def build_prompt(self, job_profile: Any, job_offer: Any = None) -> str:
        profile = '' if job_profile is None else str(job_profile)
        offer = None if job_offer is None else str(job_offer)
        return self._builder.build(profile, offer)

    async def generate_cv(self, job_profile: Any, job_offer: Any = None) -> str:
        """Generate a CV, tailored to the job offer when one is given.

        Args:
            job_profile: The candidate profile (converted with `str`).
            job_offer: Optional job offer. None or a blank value yields a generic CV.

        Returns:
            The concatenated content of every message the agent produced.
        """
        prompt = self.build_prompt(job_profile, job_offer)
        trace_id = new_trace_id()
        span = Span(name='generate_cv', trace_id=trace_id, attributes={'tailored': job_offer is not None and bool(str(job_offer).strip())})

        thread = await self._client.create_thread()
        parts: list[str] = []
        try:
            async for message in self._client.invoke(self._agent_id, thread.id, prompt):
                parts.append(message.content)
        except BaseException:
            span.end()
            log_event('cv_generation_failed', trace_id=trace_id, span=span, thread_id=thread.id, level=logging.WARNING)
            await self._discard_thread(thread.id, trace_id)
            raise

        span.end()
        log_event('cv_generated', trace_id=trace_id, span=span, thread_id=thread.id)
        await self._client.delete_thread(thread.id)
        return ''.join(parts)

    async def _discard_thread(self, thread_id: str, trace_id: str) -> None:
        # The caller sees the invocation error, not the cleanup failure.
        try:
            await self._client.delete_thread(thread_id)
        except AgentInvocationError as exc:
            log_event('thread_delete_failed', trace_id=trace_id, thread_id=thread_id, error=str(exc), level=logging.WARNING)

    async def generate_cv_from_json(self, job_profile: Any, job_offer: Any = None) -> str:
        """Generate a CV from JSON-compatible objects, serialized with indentation."""
        profile, offer = serialize_json_inputs(job_profile, job_offer)
        return await self.generate_cv(profile, offer)
