from pathlib import Path

from recruiting_agent.core.errors import MalformedTemplate, TemplateNotFound
from recruiting_agent.prompts.loader import extract_template_body, load_document, load_prompt, parse_header
from recruiting_agent.prompts.store import FilesystemPromptStore, InMemoryPromptStore
import pytest

DOCUMENT = """name: Greeting
description: Says hello.
input_variables:
  - name: who
template: |
  Hello {{who}},
    indented line
  {{#if note}}
  Note: {{note}}
  {{/if}}
"""


def test_load_prompt_ok() -> None:
    content = load_prompt('generate_cv')
    assert content.startswith('You are an experienced recruiter')
    assert '{{#if jobOffer}}' in content
    assert 'template: |' not in content


def test_load_prompt_matches_logical_name() -> None:
    assert load_prompt('GenerateCV') == load_prompt('generate_cv')


def test_load_prompt_missing() -> None:
    with pytest.raises(TemplateNotFound) as exc:
        load_prompt('does-not-exist')

    assert 'generate_cv' in exc.value.available
    assert isinstance(exc.value, LookupError)


def test_extract_template_body_strips_indentation() -> None:
    body = extract_template_body(DOCUMENT)
    assert body == 'Hello {{who}},\n  indented line\n{{#if note}}\nNote: {{note}}\n{{/if}}'


def test_extract_template_body_without_marker_returns_document() -> None:
    assert extract_template_body('Just {{text}}\n') == 'Just {{text}}\n'


def test_parse_header_reads_nested_lists() -> None:
    header = parse_header(DOCUMENT)
    assert header == {'name': 'Greeting', 'description': 'Says hello.', 'input_variables': [{'name': 'who'}]}


def test_parse_header_unquotes_and_folds_scalars() -> None:
    header = parse_header('name: "GenerateCV"\ndescription: >\n  Folded\n  text\ntemplate: |\n  body\n')
    assert header['name'] == 'GenerateCV'
    assert header['description'] == 'Folded text\n'


def test_parse_header_rejects_invalid_yaml() -> None:
    with pytest.raises(MalformedTemplate) as exc:
        parse_header('name: [unclosed\ntemplate: |\n  body\n')
    assert isinstance(exc.value, ValueError)


def test_load_document_from_custom_directory(tmp_path: Path) -> None:
    (tmp_path / 'greeting.yaml').write_text(DOCUMENT, encoding='utf-8')

    document = load_document('greeting', tmp_path)

    assert document.name == 'Greeting'
    assert document.description == 'Says hello.'
    assert document.body.startswith('Hello {{who}},')


def test_packaged_document_metadata() -> None:
    document = load_document('generate_cv')
    assert document.name == 'GenerateCV'
    assert document.metadata['template_format'] == 'handlebars'
    assert [v['name'] for v in document.metadata['input_variables']] == ['jobProfile', 'jobOffer']


def test_filesystem_store_reads_directory(tmp_path: Path) -> None:
    (tmp_path / 'greeting.yaml').write_text(DOCUMENT, encoding='utf-8')
    store = FilesystemPromptStore(base_dir=tmp_path)

    assert store.get_prompt('greeting').startswith('Hello')
    with pytest.raises(TemplateNotFound):
        store.get_prompt('generate_cv')


def test_in_memory_store_missing_prompt() -> None:
    store = InMemoryPromptStore({'a': 'text'})
    assert store.get_prompt('a') == 'text'
    with pytest.raises(TemplateNotFound) as exc:
        store.get_prompt('b')
    assert exc.value.available == ['a']
