"""Prompt renderer (placeholders + one level of if/else).

Rendering is split in two phases so a template is parsed once and rendered many times:
- `Template.parse` turns raw text into an immutable segment tree
- `Template.render` walks the tree against a context

Supported markers:
    {{name}}                       placeholder, missing names render as ''
    {{#if name}} ... {{/if}}       kept when context[name] is non-blank
    {{#if name}} ... {{else}} ... {{/if}}
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Iterator, Mapping, Union

from recruiting_agent.core.errors import MalformedTemplate

_OPEN = '{{'
_CLOSE = '}}'
_IF_RE = re.compile(r'#if\s+([^\s{}]+)\Z')
_NAME_RE = re.compile(r'[^\s{}]+\Z')

Context = Mapping[str, Any]


@dataclass(frozen=True)
class Literal:
    """Plain text copied to the output as is."""

    text: str


@dataclass(frozen=True)
class Placeholder:
    """A `{{name}}` substitution point."""

    name: str


@dataclass(frozen=True)
class Conditional:
    """A `{{#if name}}` block.

    Attributes:
        name: Context key whose truthiness selects the branch.
        if_branch: Segments rendered when the key is truthy.
        else_branch: Segments rendered when the key is falsy, or None without `{{else}}`.
    """

    name: str
    if_branch: tuple['Segment', ...]
    else_branch: tuple['Segment', ...] | None = None


Segment = Union[Literal, Placeholder, Conditional]


@dataclass(frozen=True)
class _Token:
    kind: str  # text | var | if | else | endif
    value: str
    position: int
    marker: str = ''


def is_truthy(context: Context, name: str) -> bool:
    """A name is truthy when present and non-blank after trimming."""
    value = context.get(name)
    if value is None:
        return False
    return str(value).strip() != ''


def _tokenize(source: str) -> Iterator[_Token]:
    pos = 0
    while True:
        start = source.find(_OPEN, pos)
        if start < 0:
            if pos < len(source):
                yield _Token('text', source[pos:], pos)
            return
        if start > pos:
            yield _Token('text', source[pos:start], pos)

        end = source.find(_CLOSE, start + len(_OPEN))
        if end < 0:
            raise MalformedTemplate('Unclosed marker', marker=source[start:start + 20], position=start, source=source)

        marker = source[start:end + len(_CLOSE)]
        inner = source[start + len(_OPEN):end].strip()

        if inner.startswith('#'):
            match = _IF_RE.match(inner)
            if match is None:
                raise MalformedTemplate('Unknown block marker', marker=marker, position=start, source=source)
            yield _Token('if', match.group(1), start, marker)
        elif inner == 'else':
            yield _Token('else', '', start, marker)
        elif inner.startswith('/'):
            if inner[1:].strip() != 'if':
                raise MalformedTemplate('Unknown closing marker', marker=marker, position=start, source=source)
            yield _Token('endif', '', start, marker)
        elif _NAME_RE.match(inner):
            yield _Token('var', inner, start, marker)
        else:
            raise MalformedTemplate('Invalid placeholder', marker=marker, position=start, source=source)

        pos = end + len(_CLOSE)


def _parse(source: str) -> tuple[Segment, ...]:
    segments: list[Segment] = []
    # Open block state: (opening token, if branch, else branch or None)
    block: tuple[_Token, list[Segment], list[Segment] | None] | None = None

    for token in _tokenize(source):
        target = segments
        if block is not None:
            target = block[2] if block[2] is not None else block[1]

        if token.kind == 'text':
            target.append(Literal(token.value))
        elif token.kind == 'var':
            target.append(Placeholder(token.value))
        elif token.kind == 'if':
            if block is not None:
                raise MalformedTemplate('Nested conditional', marker=token.marker, position=token.position, source=source)
            block = (token, [], None)
        elif token.kind == 'else':
            if block is None:
                raise MalformedTemplate('Else outside conditional', marker=token.marker, position=token.position, source=source)
            if block[2] is not None:
                raise MalformedTemplate('Duplicate else', marker=token.marker, position=token.position, source=source)
            block = (block[0], block[1], [])
        else:
            if block is None:
                raise MalformedTemplate('Unbalanced closing marker', marker=token.marker, position=token.position, source=source)
            opening, if_branch, else_branch = block
            segments.append(
                Conditional(
                    name=opening.value,
                    if_branch=tuple(if_branch),
                    else_branch=tuple(else_branch) if else_branch is not None else None,
                )
            )
            block = None

    if block is not None:
        opening = block[0]
        raise MalformedTemplate('Unterminated conditional', marker=opening.marker, position=opening.position, source=source)

    return tuple(segments)


def _render_segments(segments: tuple[Segment, ...], context: Context, out: list[str]) -> None:
    for segment in segments:
        if isinstance(segment, Literal):
            out.append(segment.text)
        elif isinstance(segment, Placeholder):
            value = context.get(segment.name)
            out.append('' if value is None else str(value))
        elif is_truthy(context, segment.name):
            _render_segments(segment.if_branch, context, out)
        elif segment.else_branch is not None:
            _render_segments(segment.else_branch, context, out)


@dataclass(frozen=True)
class Template:
    """A parsed, immutable prompt template.

    Examples:
        >>> Template.parse('Hi {{name}}{{#if role}} ({{role}}){{/if}}').render({'name': 'Ann'})
        'Hi Ann'
    """

    source: str
    segments: tuple[Segment, ...]

    @classmethod
    def parse(cls, source: str) -> 'Template':
        """Parse template text.

        Raises:
            MalformedTemplate: On unbalanced, nested or unknown markers.
        """
        return cls(source=source, segments=_parse(source))

    @property
    def names(self) -> frozenset[str]:
        """Every placeholder and condition name referenced by the template."""
        found: set[str] = set()

        def _collect(segments: tuple[Segment, ...]) -> None:
            for segment in segments:
                if isinstance(segment, Placeholder):
                    found.add(segment.name)
                elif isinstance(segment, Conditional):
                    found.add(segment.name)
                    _collect(segment.if_branch)
                    _collect(segment.else_branch or ())

        _collect(self.segments)
        return frozenset(found)

    def render(self, context: Context) -> str:
        out: list[str] = []
        _render_segments(self.segments, context, out)
        return ''.join(out).strip()


class PromptRenderer:
    """Render prompt templates against a context."""

    def render(self, template: str | Template, variables: Context) -> str:
        """Render a prompt template.

        Args:
            template: Raw template text or an already parsed Template.
            variables: Mapping of names to values. Missing names render as ''.

        Returns:
            Rendered prompt, trimmed.

        Raises:
            MalformedTemplate: If raw template text cannot be parsed.
        """
        if not isinstance(template, Template):
            template = Template.parse(template)
        return template.render(variables)
