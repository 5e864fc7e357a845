"""Minimal tracing primitives.

Events are single-line JSON objects written to the `recruiting_agent.events` logger,
so they can be shipped anywhere a logging handler can write to and never mix with
the console conversation on stdout.
"""

from __future__ import annotations

import json
import logging
import sys
import time
import uuid
from dataclasses import dataclass, field
from typing import Any

EVENT_LOGGER_NAME = 'recruiting_agent.events'

_logger = logging.getLogger(EVENT_LOGGER_NAME)


@dataclass
class Span:
    name: str
    trace_id: str
    span_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    start_ns: int = field(default_factory=time.time_ns)
    end_ns: int | None = None
    attributes: dict[str, Any] = field(default_factory=dict)

    def end(self) -> None:
        self.end_ns = time.time_ns()

    @property
    def duration_ms(self) -> float | None:
        if self.end_ns is None:
            return None
        return (self.end_ns - self.start_ns) / 1_000_000.0


def new_trace_id() -> str:
    return uuid.uuid4().hex


def log_event(event: str, *, trace_id: str, span: Span | None = None, level: int = logging.INFO, **fields: Any) -> None:
    payload: dict[str, Any] = {'event': event, 'trace_id': trace_id, **fields}
    if span is not None:
        payload['span'] = {
            'name': span.name,
            'span_id': span.span_id,
            'duration_ms': span.duration_ms,
            'attributes': span.attributes,
        }
    _logger.log(level, json.dumps(payload, ensure_ascii=False, default=str))


def configure_logging(level: str | int = 'INFO') -> None:
    """Send package logs to stderr at the given level."""
    root = logging.getLogger('recruiting_agent')
    root.setLevel(level.upper() if isinstance(level, str) else level)
    for existing in [h for h in root.handlers if getattr(h, '_recruiting_agent', False)]:
        root.removeHandler(existing)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter('%(asctime)s %(levelname)s %(name)s %(message)s'))
    handler._recruiting_agent = True  # type: ignore[attr-defined]
    root.addHandler(handler)
