"""Dialog runtime: step sequencer, prompts and state accessors."""

from .prompts import (
    ChoicePrompt,
    IPrompt,
    PromptResult,
    Recognition,
    TextPrompt,
    is_yes,
    validate_yes_no,
)
from .state import (
    DialogStateAccessor,
    IDialogStateAccessor,
    IProfileAccessor,
    ProfileAccessor,
)
from .waterfall import (
    DialogSet,
    IDialogSet,
    Step,
    StepAction,
    StepContext,
    StepOutcome,
    TopicDialog,
    WaterfallDialog,
)

__all__ = [
    # Sequencer
    "DialogSet",
    "IDialogSet",
    "Step",
    "StepAction",
    "StepContext",
    "StepOutcome",
    "TopicDialog",
    "WaterfallDialog",
    # Prompts
    "ChoicePrompt",
    "IPrompt",
    "PromptResult",
    "Recognition",
    "TextPrompt",
    "is_yes",
    "validate_yes_no",
    # State
    "DialogStateAccessor",
    "IDialogStateAccessor",
    "IProfileAccessor",
    "ProfileAccessor",
]
