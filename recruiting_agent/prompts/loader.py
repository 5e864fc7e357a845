"""Prompt loader for packaged template documents.

A template document looks like:

    name: GenerateCV
    description: ...
    template: |
      line one of the template
      line two of the template

Everything after `template: |` is the template body, indented by two spaces.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from recruiting_agent.core.errors import MalformedTemplate, TemplateNotFound

PROMPTS_DIR = Path(__file__).resolve().parent
TEMPLATE_SUFFIX = '.yaml'
BODY_MARKER = 'template: |'
INDENT = '  '


@dataclass(frozen=True)
class PromptDocument:
    """A packaged template document split into header metadata and body."""

    name: str
    body: str
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def description(self) -> str:
        return str(self.metadata.get('description') or '').strip()


def _normalize(name: str) -> str:
    return ''.join(ch for ch in name.casefold() if ch.isalnum())


def available_prompts(base_dir: Path = PROMPTS_DIR) -> list[str]:
    """List the logical names of every packaged template document."""
    return sorted(p.stem for p in base_dir.glob(f'*{TEMPLATE_SUFFIX}'))


def extract_template_body(document: str) -> str:
    """Return the template body of a packaged document.

    Lines after `template: |` lose their two-space indentation and the result is trimmed.
    A document without the marker is returned unchanged.
    """
    start = document.find(BODY_MARKER)
    if start < 0:
        return document

    lines = document[start + len(BODY_MARKER):].split('\n')
    stripped = [line[len(INDENT):] if len(line) > len(INDENT) and line.startswith(INDENT) else line for line in lines]
    return '\n'.join(stripped).strip()


def parse_header(document: str) -> dict[str, Any]:
    """Parse the YAML header preceding the template body.

    Raises:
        MalformedTemplate: If the header is not valid YAML.
    """
    start = document.find(BODY_MARKER)
    header = document if start < 0 else document[:start]
    try:
        data = yaml.safe_load(header)
    except yaml.YAMLError as exc:
        mark = getattr(exc, 'problem_mark', None)
        position = mark.index if mark is not None else 0
        problem = getattr(exc, 'problem', None) or 'invalid YAML'
        raise MalformedTemplate(f'Invalid template header ({problem})', marker=header[position:position + 20], position=position, source=document) from exc
    return data if isinstance(data, dict) else {}


def resolve_prompt_path(name: str, base_dir: Path = PROMPTS_DIR) -> Path:
    """Locate a template document by logical name.

    An exact file name match wins; otherwise names are compared ignoring case,
    underscores and dashes (so `GenerateCV` finds `generate_cv.yaml`).

    Raises:
        TemplateNotFound: If no document matches.
    """
    exact = base_dir / f'{name}{TEMPLATE_SUFFIX}'
    if exact.is_file():
        return exact

    wanted = _normalize(name)
    for candidate in sorted(base_dir.glob(f'*{TEMPLATE_SUFFIX}')):
        if _normalize(candidate.stem) == wanted:
            return candidate

    raise TemplateNotFound(name, available_prompts(base_dir))


def load_document(name: str, base_dir: Path = PROMPTS_DIR) -> PromptDocument:
    path = resolve_prompt_path(name, base_dir)
    text = path.read_text(encoding='utf-8')
    metadata = parse_header(text)
    return PromptDocument(name=str(metadata.get('name') or path.stem), body=extract_template_body(text), metadata=metadata)


def load_prompt(name: str, base_dir: Path = PROMPTS_DIR) -> str:
    """Load the template body of a packaged prompt.

    Args:
        name: Logical template name (e.g. "generate_cv").
        base_dir: Directory holding template documents.

    Returns:
        Template text with indentation removed.

    Raises:
        TemplateNotFound: If the prompt document is missing.
    """
    return load_document(name, base_dir).body
