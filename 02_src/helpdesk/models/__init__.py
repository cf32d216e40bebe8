"""Core data models for the helpdesk bot."""

from .dialogue import (
    DialogInstance,
    DialogState,
    DialogTurnStatus,
    PendingPrompt,
    TurnResponse,
    TurnResult,
)
from .messages import Message, Reply
from .profile import EntityProfile, normalize_category
from .tracing import TraceEvent

__all__ = [
    # Profile
    "EntityProfile",
    "normalize_category",
    # Dialogue
    "DialogInstance",
    "DialogState",
    "DialogTurnStatus",
    "PendingPrompt",
    "TurnResponse",
    "TurnResult",
    # Messages
    "Message",
    "Reply",
    # Tracing
    "TraceEvent",
]
