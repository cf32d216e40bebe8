"""Tracing and observability data models."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class TraceEvent:
    """One observability event recorded during a turn."""

    id: str
    event_type: str  # e.g. "dialog_started", "prompt_retried"
    actor: str  # "dialogue_agent", "dialog:<id>", ...
    data: dict
    timestamp: datetime
