"""Dialog cursor and turn models."""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

from .messages import Reply


class DialogTurnStatus(str, Enum):
    """Outcome of one inbound turn for a conversation."""

    EMPTY = "empty"  # nothing was running
    WAITING = "waiting"  # suspended on a prompt
    COMPLETE = "complete"  # the dialog stack ran to its end
    CANCELLED = "cancelled"


@dataclass
class PendingPrompt:
    """A prompt awaiting the user's reply."""

    prompt_id: str
    text: str
    choices: list[str] = field(default_factory=list)
    attempts: int = 0


@dataclass
class DialogInstance:
    """One running waterfall: the persisted cursor."""

    dialog_id: str
    step_index: int = 0
    options: dict = field(default_factory=dict)
    pending_prompt: PendingPrompt | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "DialogInstance":
        pending = data.get("pending_prompt")
        return cls(
            dialog_id=data["dialog_id"],
            step_index=data.get("step_index", 0),
            options=data.get("options") or {},
            pending_prompt=PendingPrompt(**pending) if pending else None,
        )


@dataclass
class DialogState:
    """Dialog stack for a conversation; the last instance is active."""

    conversation_id: str
    stack: list[DialogInstance] = field(default_factory=list)

    @property
    def active(self) -> DialogInstance | None:
        return self.stack[-1] if self.stack else None

    def to_json_stack(self) -> list[dict]:
        return [asdict(instance) for instance in self.stack]


@dataclass
class TurnResult:
    """What the dialog set produced for one turn."""

    replies: list[Reply]
    status: DialogTurnStatus
    result: Any = None


@dataclass
class TurnResponse:
    """What the dialogue agent returns to the transport for one turn."""

    conversation_id: str
    replies: list[Reply]
    status: DialogTurnStatus
    continuation: bool = True
    active_dialog: str | None = None
