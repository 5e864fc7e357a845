"""Hosted agent service adapter (HTTP-based).

Talks to the Azure AI Foundry agent REST API directly with httpx:
- agents live under /assistants
- conversations are /threads with /messages
- a /runs call executes the agent over a thread and is polled until it finishes

Keeping it on plain HTTP makes the adapter easy to mock with httpx transports.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, AsyncIterator

import httpx
from pydantic import BaseModel, ValidationError

from recruiting_agent.config import AzureAIOptions, Settings
from recruiting_agent.core.errors import AgentInvocationError
from recruiting_agent.llm.base import AgentClient, AgentDefinition, AgentMessage, AgentThread
from recruiting_agent.observability.tracing import Span, log_event, new_trace_id
from recruiting_agent.schemas import (
    AgentPayload,
    DeletionStatus,
    MessageList,
    RunPayload,
    RunStatus,
    ThreadPayload,
    validation_summary,
)


@dataclass(frozen=True)
class AzureAgentsConfig:
    """Configuration for the agent service adapter."""

    endpoint: str
    api_key: str
    api_version: str = 'v1'
    request_timeout: float = 60.0
    poll_interval: float = 0.5
    run_timeout: float = 120.0


class AzureAgentsClient(AgentClient):
    """AgentClient that calls the hosted agent REST API."""

    def __init__(self, config: AzureAgentsConfig, client: httpx.AsyncClient | None = None) -> None:
        self._cfg = config
        self._client = client

    @staticmethod
    def from_settings(settings: Settings, *, require_agent_id: bool = True) -> 'AzureAgentsClient':
        options: AzureAIOptions = settings.azure_ai
        options.validate_options(require_agent_id=require_agent_id)
        cfg = AzureAgentsConfig(
            endpoint=options.endpoint,
            api_key=options.api_key,
            api_version=options.api_version,
            request_timeout=settings.request_timeout,
            poll_interval=settings.run_poll_interval,
            run_timeout=settings.run_timeout,
        )
        return AzureAgentsClient(cfg)

    # ------------------------------------------------------------------
    # agents
    # ------------------------------------------------------------------

    async def create_agent(
        self,
        *,
        model: str,
        name: str | None = None,
        description: str | None = None,
        instructions: str | None = None,
    ) -> AgentDefinition:
        body: dict[str, Any] = {'model': model}
        if name is not None:
            body['name'] = name
        if description is not None:
            body['description'] = description
        if instructions is not None:
            body['instructions'] = instructions

        data = await self._request('POST', '/assistants', json=body)
        agent = _parse(AgentPayload, data)
        log_event('agent_created', trace_id=new_trace_id(), agent_id=agent.id, model=agent.model)
        return _to_definition(agent)

    async def get_agent(self, agent_id: str) -> AgentDefinition:
        data = await self._request('GET', f'/assistants/{agent_id}')
        return _to_definition(_parse(AgentPayload, data))

    async def delete_agent(self, agent_id: str) -> None:
        data = await self._request('DELETE', f'/assistants/{agent_id}')
        _parse(DeletionStatus, data)
        log_event('agent_deleted', trace_id=new_trace_id(), agent_id=agent_id)

    # ------------------------------------------------------------------
    # threads
    # ------------------------------------------------------------------

    async def create_thread(self) -> AgentThread:
        data = await self._request('POST', '/threads', json={})
        thread = _parse(ThreadPayload, data)
        log_event('thread_created', trace_id=new_trace_id(), thread_id=thread.id)
        return AgentThread(id=thread.id)

    async def delete_thread(self, thread_id: str) -> None:
        data = await self._request('DELETE', f'/threads/{thread_id}')
        _parse(DeletionStatus, data)
        log_event('thread_deleted', trace_id=new_trace_id(), thread_id=thread_id)

    # ------------------------------------------------------------------
    # runs
    # ------------------------------------------------------------------

    async def invoke(self, agent_id: str, thread_id: str, content: str) -> AsyncIterator[AgentMessage]:
        trace_id = new_trace_id()
        span = Span(name='agent_run', trace_id=trace_id, attributes={'agent_id': agent_id, 'thread_id': thread_id})

        await self._request('POST', f'/threads/{thread_id}/messages', json={'role': 'user', 'content': content})
        data = await self._request('POST', f'/threads/{thread_id}/runs', json={'assistant_id': agent_id})
        run = _parse(RunPayload, data)
        span.attributes['run_id'] = run.id

        run = await self._wait_for_run(thread_id, run)
        span.end()
        log_event('agent_run_finished', trace_id=trace_id, span=span, status=run.status.value)

        if run.status != RunStatus.COMPLETED:
            reason = run.last_error.message if run.last_error and run.last_error.message else run.status.value
            raise AgentInvocationError(f'Agent run {run.id} did not complete: {reason}')

        async for message in self._run_messages(thread_id, run.id):
            yield message

    async def _wait_for_run(self, thread_id: str, run: RunPayload) -> RunPayload:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self._cfg.run_timeout
        while not run.status.is_terminal:
            if loop.time() >= deadline:
                raise AgentInvocationError(
                    f'Agent run {run.id} timed out after {self._cfg.run_timeout:.1f}s (last status: {run.status.value})'
                )
            await asyncio.sleep(self._cfg.poll_interval)
            data = await self._request('GET', f'/threads/{thread_id}/runs/{run.id}')
            run = _parse(RunPayload, data)
        return run

    async def _run_messages(self, thread_id: str, run_id: str) -> AsyncIterator[AgentMessage]:
        params: dict[str, str] = {'order': 'asc', 'run_id': run_id}
        while True:
            data = await self._request('GET', f'/threads/{thread_id}/messages', params=params)
            page = _parse(MessageList, data)
            for message in page.data:
                if message.role != 'assistant' or (message.run_id is not None and message.run_id != run_id):
                    continue
                yield AgentMessage(role=message.role, content=message.text, id=message.id, run_id=message.run_id)
            if not page.has_more or not page.data:
                return
            params['after'] = page.last_id or page.data[-1].id

    # ------------------------------------------------------------------
    # transport
    # ------------------------------------------------------------------

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        url = f'{self._cfg.endpoint.rstrip("/")}{path}'
        headers = {
            'Authorization': f'Bearer {self._cfg.api_key}',
            'Content-Type': 'application/json',
        }
        query = {'api-version': self._cfg.api_version, **(params or {})}

        try:
            if self._client is not None:
                resp = await self._client.request(
                    method, url, json=json, params=query, headers=headers, timeout=self._cfg.request_timeout
                )
                resp.raise_for_status()
                return resp.json()

            async with httpx.AsyncClient() as client:
                resp = await client.request(
                    method, url, json=json, params=query, headers=headers, timeout=self._cfg.request_timeout
                )
                resp.raise_for_status()
                return resp.json()
        except httpx.HTTPStatusError as exc:
            raise AgentInvocationError(
                f'{method} {path} failed with HTTP {exc.response.status_code}: {exc.response.text[:200]}'
            ) from exc
        except httpx.HTTPError as exc:
            raise AgentInvocationError(f'{method} {path} failed: {exc}') from exc
        except ValueError as exc:
            raise AgentInvocationError(f'{method} {path} returned a non-JSON body') from exc


def _parse(model: type[BaseModel], payload: Any) -> Any:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise AgentInvocationError(
            f'Unexpected {model.__name__} payload {validation_summary(payload)}: {exc.error_count()} error(s)'
        ) from exc


def _to_definition(agent: AgentPayload) -> AgentDefinition:
    return AgentDefinition(
        id=agent.id,
        model=agent.model,
        name=agent.name,
        description=agent.description,
        instructions=agent.instructions,
    )
