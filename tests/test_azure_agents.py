from __future__ import annotations

import httpx
import pytest

from recruiting_agent.config import Settings
from recruiting_agent.core.errors import AgentInvocationError, ConfigurationError
from recruiting_agent.llm.azure_agents import AzureAgentsClient, AzureAgentsConfig
from tests.fixtures.agent_service_stub import BASE_URL, AgentServiceStub


def _config(**overrides) -> AzureAgentsConfig:
    values = {'endpoint': BASE_URL, 'api_key': 'test-key', 'poll_interval': 0.0, 'run_timeout': 5.0}
    values.update(overrides)
    return AzureAgentsConfig(**values)


@pytest.mark.asyncio
async def test_invoke_yields_run_replies_in_order() -> None:
    # Arrange
    stub = AgentServiceStub(replies=['First part.', 'Second part.'], polls_before_done=3)
    async with httpx.AsyncClient(transport=httpx.MockTransport(stub)) as http:
        client = AzureAgentsClient(_config(), client=http)
        thread = await client.create_thread()

        # Act
        messages = [m async for m in client.invoke('asst_existing', thread.id, 'Who was Alfred Hajos?')]

    # Assert
    assert [m.content for m in messages] == ['First part.', 'Second part.']
    assert all(m.role == 'assistant' for m in messages)
    assert stub.polls == 3
    assert stub.threads[thread.id][0]['content'][0]['text']['value'] == 'Who was Alfred Hajos?'
    assert all(r.headers['Authorization'] == 'Bearer test-key' for r in stub.requests)


@pytest.mark.asyncio
async def test_invoke_follows_message_pages() -> None:
    stub = AgentServiceStub(replies=['a', 'b', 'c'], page_size=1)
    async with httpx.AsyncClient(transport=httpx.MockTransport(stub)) as http:
        client = AzureAgentsClient(_config(), client=http)
        thread = await client.create_thread()

        messages = [m.content async for m in client.invoke('asst_existing', thread.id, 'hi')]

    assert messages == ['a', 'b', 'c']
    assert any('after' in r.url.params for r in stub.requests)


@pytest.mark.asyncio
async def test_failed_run_raises_with_reason() -> None:
    stub = AgentServiceStub(final_status='failed', last_error={'code': 'rate_limit_exceeded', 'message': 'Rate limit reached'})
    async with httpx.AsyncClient(transport=httpx.MockTransport(stub)) as http:
        client = AzureAgentsClient(_config(), client=http)
        thread = await client.create_thread()

        with pytest.raises(AgentInvocationError, match='Rate limit reached'):
            [m async for m in client.invoke('asst_existing', thread.id, 'hi')]


@pytest.mark.asyncio
async def test_run_timeout_raises() -> None:
    stub = AgentServiceStub(polls_before_done=1_000)
    async with httpx.AsyncClient(transport=httpx.MockTransport(stub)) as http:
        client = AzureAgentsClient(_config(run_timeout=0.0), client=http)
        thread = await client.create_thread()

        with pytest.raises(AgentInvocationError, match='timed out'):
            [m async for m in client.invoke('asst_existing', thread.id, 'hi')]


@pytest.mark.asyncio
async def test_agent_and_thread_lifecycle() -> None:
    stub = AgentServiceStub()
    async with httpx.AsyncClient(transport=httpx.MockTransport(stub)) as http:
        client = AzureAgentsClient(_config(), client=http)

        agent = await client.create_agent(model='gpt-4o', name='Swimmers', instructions='Answer about swimmers')
        fetched = await client.get_agent(agent.id)
        thread = await client.create_thread()
        await client.delete_thread(thread.id)
        await client.delete_agent(agent.id)

    assert fetched == agent
    assert agent.name == 'Swimmers'
    assert agent.instructions == 'Answer about swimmers'
    assert thread.id not in stub.threads
    assert agent.id not in stub.agents


@pytest.mark.asyncio
async def test_http_error_is_wrapped() -> None:
    stub = AgentServiceStub()
    async with httpx.AsyncClient(transport=httpx.MockTransport(stub)) as http:
        client = AzureAgentsClient(_config(), client=http)

        with pytest.raises(AgentInvocationError, match='HTTP 404'):
            await client.get_agent('asst_missing')


@pytest.mark.asyncio
async def test_unexpected_payload_is_rejected() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={'object': 'thread'})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        client = AzureAgentsClient(_config(), client=http)

        with pytest.raises(AgentInvocationError, match='ThreadPayload'):
            await client.create_thread()


def test_from_settings_validates_options() -> None:
    settings = Settings(_env_file=None, azure_ai={'endpoint': '', 'agent_id': 'asst_1'})
    with pytest.raises(ConfigurationError):
        AzureAgentsClient.from_settings(settings)

    ok = Settings(_env_file=None, azure_ai={'endpoint': BASE_URL})
    assert isinstance(AzureAgentsClient.from_settings(ok, require_agent_id=False), AzureAgentsClient)
