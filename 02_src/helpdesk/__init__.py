"""RP helpdesk bot: scripted support dialogs over a step sequencer."""

from .app import Application, IApplication
from .dialogs import (
    ChoicePrompt,
    DialogSet,
    StepContext,
    StepOutcome,
    TextPrompt,
    TopicDialog,
    WaterfallDialog,
)
from .dialogue import DialogueAgent, IDialogueAgent
from .errors import ConfigurationError, HelpdeskError, UnknownDialogError
from .models import (
    DialogTurnStatus,
    EntityProfile,
    Message,
    Reply,
    TraceEvent,
    TurnResponse,
    TurnResult,
)
from .storage import IStorage, Storage
from .topics import build_dialog_set
from .tracker import ITracker, Tracker

__all__ = [
    # Application
    "Application",
    "IApplication",
    # Models
    "DialogTurnStatus",
    "EntityProfile",
    "Message",
    "Reply",
    "TraceEvent",
    "TurnResponse",
    "TurnResult",
    # Dialogs
    "ChoicePrompt",
    "DialogSet",
    "StepContext",
    "StepOutcome",
    "TextPrompt",
    "TopicDialog",
    "WaterfallDialog",
    "build_dialog_set",
    # Components
    "IStorage",
    "Storage",
    "ITracker",
    "Tracker",
    "IDialogueAgent",
    "DialogueAgent",
    # Errors
    "HelpdeskError",
    "ConfigurationError",
    "UnknownDialogError",
]
