from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Sequence

from pydantic import ValidationError

from recruiting_agent.config import Settings, get_settings
from recruiting_agent.core.errors import AgentInvocationError, RecruitingAgentError
from recruiting_agent.llm.azure_agents import AzureAgentsClient
from recruiting_agent.llm.base import AgentClient
from recruiting_agent.llm.mock import MockAgentClient
from recruiting_agent.observability.tracing import configure_logging
from recruiting_agent.runtime.chat import ChatSession
from recruiting_agent.runtime.demo import run_scripted_demo
from recruiting_agent.runtime.prompt_builder import CVPromptBuilder
from recruiting_agent.services.cv_generation import CVGenerationService, serialize_json_inputs

EXIT_AGENT_ERROR = 1
EXIT_CONFIG_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='recruiting-agent', description='Recruiting assistant agent.')
    parser.add_argument('--offline', action='store_true', help='Use a canned mock agent instead of the service.')
    parser.add_argument('--log-level', default=None, help='Override APP_LOG_LEVEL.')
    sub = parser.add_subparsers(dest='command', required=True)

    sub.add_parser('chat', help='Talk to the configured agent.')
    sub.add_parser('demo', help='Ask scripted questions to a temporary agent.')

    for name, text in (('generate-cv', 'Generate a CV with the agent.'), ('render-prompt', 'Print the CV prompt.')):
        cmd = sub.add_parser(name, help=text)
        cmd.add_argument('--profile', required=True, type=Path, help='Candidate profile JSON file.')
        cmd.add_argument('--offer', type=Path, default=None, help='Optional job offer JSON file.')

    return parser


def _load_json(path: Path | None) -> Any:
    if path is None:
        return None
    return json.loads(path.read_text(encoding='utf-8'))


def _make_client(args: argparse.Namespace, settings: Settings, *, require_agent_id: bool) -> AgentClient:
    if args.offline:
        return MockAgentClient()
    return AzureAgentsClient.from_settings(settings, require_agent_id=require_agent_id)


async def _run(args: argparse.Namespace, settings: Settings) -> int:
    if args.command == 'render-prompt':
        profile, offer = serialize_json_inputs(_load_json(args.profile), _load_json(args.offer))
        print(CVPromptBuilder.from_store().build(profile, offer))
        return 0

    if args.command == 'demo':
        client = _make_client(args, settings, require_agent_id=False)
        await run_scripted_demo(client, model=settings.azure_ai.model)
        return 0

    client = _make_client(args, settings, require_agent_id=True)
    agent_id = settings.azure_ai.agent_id or 'offline-agent'
    agent = await client.get_agent(agent_id)

    if args.command == 'chat':
        await ChatSession(client, agent.id).run()
        return 0

    service = CVGenerationService(client, agent.id)
    print(await service.generate_cv_from_json(_load_json(args.profile), _load_json(args.offer)))
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = get_settings()
        configure_logging(args.log_level or settings.log_level)
        return asyncio.run(_run(args, settings))
    except AgentInvocationError as exc:
        print(f'error: {exc}', file=sys.stderr)
        return EXIT_AGENT_ERROR
    except (RecruitingAgentError, ValidationError, OSError, json.JSONDecodeError) as exc:
        print(f'error: {exc}', file=sys.stderr)
        return EXIT_CONFIG_ERROR


if __name__ == '__main__':
    sys.exit(main())
