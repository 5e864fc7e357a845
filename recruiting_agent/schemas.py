"""Schemas for agent service payloads.

Pydantic keeps the HTTP adapter honest:
- responses are validated before anything downstream touches them
- unknown fields are ignored so service additions do not break parsing
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class _Payload(BaseModel):
    model_config = ConfigDict(extra='ignore')


class RunStatus(str, Enum):
    QUEUED = 'queued'
    IN_PROGRESS = 'in_progress'
    REQUIRES_ACTION = 'requires_action'
    CANCELLING = 'cancelling'
    CANCELLED = 'cancelled'
    FAILED = 'failed'
    COMPLETED = 'completed'
    EXPIRED = 'expired'
    INCOMPLETE = 'incomplete'

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL_STATUSES


_TERMINAL_STATUSES = {
    RunStatus.CANCELLED,
    RunStatus.FAILED,
    RunStatus.COMPLETED,
    RunStatus.EXPIRED,
    RunStatus.INCOMPLETE,
}


class AgentPayload(_Payload):
    """An agent (assistant) object."""

    id: str = Field(min_length=1)
    model: str
    name: str | None = None
    description: str | None = None
    instructions: str | None = None


class ThreadPayload(_Payload):
    id: str = Field(min_length=1)


class RunError(_Payload):
    code: str | None = None
    message: str | None = None


class RunPayload(_Payload):
    """A run of an agent over a thread."""

    id: str = Field(min_length=1)
    thread_id: str | None = None
    status: RunStatus
    last_error: RunError | None = None


class TextValue(_Payload):
    value: str = ''


class MessageContent(_Payload):
    type: str
    text: TextValue | None = None


class MessagePayload(_Payload):
    """A thread message. Only text content parts are read."""

    id: str
    role: Literal['user', 'assistant']
    run_id: str | None = None
    content: list[MessageContent] = Field(default_factory=list)

    @property
    def text(self) -> str:
        return ''.join(part.text.value for part in self.content if part.type == 'text' and part.text is not None)


class MessageList(_Payload):
    data: list[MessagePayload] = Field(default_factory=list)
    has_more: bool = False
    last_id: str | None = None


class DeletionStatus(_Payload):
    id: str
    deleted: bool


def validation_summary(payload: Any) -> str:
    """Short description of a payload for error messages."""
    text = repr(payload)
    return text if len(text) <= 200 else text[:197] + '...'
