# ---------------------------------
# TYPED EXCEPTIONS
# ---------------------------------

from __future__ import annotations


class RecruitingAgentError(Exception):
    """Base class for every error raised by this package."""


class TemplateNotFound(RecruitingAgentError, LookupError):
    """Raised when a packaged prompt template cannot be located."""

    def __init__(self, name: str, available: list[str] | None = None) -> None:
        self.name = name
        self.available = sorted(available or [])
        listing = ', '.join(self.available) if self.available else '<none>'
        super().__init__(f"Prompt template '{name}' not found. Available templates: {listing}")


class MalformedTemplate(RecruitingAgentError, ValueError):
    """Raised when a template has unbalanced, nested or unknown markers."""

    def __init__(self, message: str, *, marker: str, position: int, source: str = '') -> None:
        self.marker = marker
        self.position = position
        self.line = source.count('\n', 0, position) + 1
        self.column = position - (source.rfind('\n', 0, position) + 1) + 1
        super().__init__(f'{message}: {marker!r} at line {self.line}, column {self.column} (offset {position})')


class ConfigurationError(RecruitingAgentError):
    """Raised when required settings are missing or invalid."""


class AgentInvocationError(RecruitingAgentError, RuntimeError):
    """Raised when the agent service fails to produce a response."""
