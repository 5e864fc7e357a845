from __future__ import annotations

import pytest

from recruiting_agent.core.errors import MalformedTemplate
from recruiting_agent.runtime.prompt_builder import CVPromptBuilder, PromptBuilder
from recruiting_agent.runtime.renderer import Template
from tests.fixtures.mock_prompt_store import MockPromptStore

PROFILE = '{\n  "name": "Jane Doe",\n  "skills": ["Python", "SQL"]\n}'
OFFER = '{\n  "title": "Senior Engineer"\n}'


def test_builder_primary_always_present() -> None:
    builder = PromptBuilder('{{#if p}}got {{p}}{{else}}nothing{{/if}}', primary_name='p', secondary_name='s')
    assert builder.build('value') == 'got value'
    assert builder.build('') == 'nothing'


def test_builder_secondary_only_when_given() -> None:
    builder = PromptBuilder('{{p}}{{#if s}} + {{s}}{{/if}}', primary_name='p', secondary_name='s')
    assert builder.build('a', 'b') == 'a + b'
    assert builder.build('a') == 'a'
    assert builder.build('a', '') == 'a'


def test_builder_parses_template_once() -> None:
    builder = PromptBuilder('{{p}}', primary_name='p', secondary_name='s')
    template = builder.template

    builder.build('one')
    builder.build('two')

    assert isinstance(template, Template)
    assert builder.template is template


def test_builder_rejects_malformed_template_up_front() -> None:
    with pytest.raises(MalformedTemplate):
        CVPromptBuilder('{{#if jobOffer}}unterminated')


def test_cv_builder_from_store_uses_cv_prompt_name() -> None:
    store = MockPromptStore()
    builder = CVPromptBuilder.from_store(store)

    assert store.requested == ['generate_cv']
    assert builder.build('Jane', 'Engineer') == 'Profile: Jane for Engineer'
    assert builder.build('Jane') == 'Profile: Jane (generic)'


def test_packaged_cv_prompt_tailored() -> None:
    builder = CVPromptBuilder.from_store()

    prompt = builder.build(PROFILE, OFFER)

    assert prompt.startswith('You are an experienced recruiter')
    assert '"name": "Jane Doe"' in prompt
    assert '**TARGET JOB OFFER:**' in prompt
    assert '"title": "Senior Engineer"' in prompt
    assert 'INSTRUCTIONS FOR TAILORED CV' in prompt
    assert 'INSTRUCTIONS FOR GENERIC CV' not in prompt
    assert '{{' not in prompt


@pytest.mark.parametrize('offer', [None, '', '  \n'])
def test_packaged_cv_prompt_generic(offer: str | None) -> None:
    builder = CVPromptBuilder.from_store()

    prompt = builder.build(PROFILE, offer)

    assert 'INSTRUCTIONS FOR GENERIC CV' in prompt
    assert 'TARGET JOB OFFER' not in prompt
    assert 'INSTRUCTIONS FOR TAILORED CV' not in prompt
    assert prompt.endswith('Do not include any commentary outside of the CV itself.')
    assert '{{' not in prompt
