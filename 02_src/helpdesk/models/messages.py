"""Message-related data models."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal


@dataclass
class Reply:
    """Bot output for one activity: text plus optional quick replies."""

    text: str
    suggested_actions: list[str] = field(default_factory=list)


@dataclass
class Message:
    """A single transcript entry for a conversation."""

    id: str
    conversation_id: str
    role: Literal["user", "bot"]
    content: str
    timestamp: datetime
    suggested_actions: list[str] = field(default_factory=list)
