"""Prompt primitives: rendering and reply recognition."""

from dataclasses import dataclass
from typing import Callable, Protocol

from ..models import PendingPrompt, Reply, normalize_category

# Validator returns None to accept, or the message to show on rejection.
TextValidator = Callable[[str], str | None]

DEFAULT_CHOICE_RETRY = "Please choose an option from the list."
DEFAULT_TEXT_RETRY = "Sorry, I didn't understand that."


@dataclass
class PromptResult:
    """Normalized reply handed to the step after the prompting one."""

    value: str


@dataclass
class Recognition:
    """Outcome of matching a raw reply against a pending prompt."""

    result: PromptResult | None
    retry_message: str | None = None

    @property
    def accepted(self) -> bool:
        return self.result is not None


class IPrompt(Protocol):
    """A prompt registered by a topic under a prompt id."""

    prompt_id: str

    def render(self, pending: PendingPrompt) -> Reply:
        """Build the reply that asks the question."""
        ...

    def recognize(self, pending: PendingPrompt, text: str) -> Recognition:
        """Match the user's reply against the pending question."""
        ...


class ChoicePrompt:
    """Multiple-choice prompt rendered as quick replies."""

    def __init__(self, prompt_id: str, retry_message: str = DEFAULT_CHOICE_RETRY):
        self.prompt_id = prompt_id
        self.retry_message = retry_message

    def render(self, pending: PendingPrompt) -> Reply:
        return Reply(text=pending.text, suggested_actions=list(pending.choices))

    def recognize(self, pending: PendingPrompt, text: str) -> Recognition:
        reply = normalize_category(text)
        for choice in pending.choices:
            if normalize_category(choice) == reply:
                return Recognition(PromptResult(value=choice))

        # "2" picks the second choice; isdigit() also admits "²", which int() rejects
        if reply.isdecimal():
            index = int(reply) - 1
            if 0 <= index < len(pending.choices):
                return Recognition(PromptResult(value=pending.choices[index]))

        return Recognition(None, retry_message=self.retry_message)


class TextPrompt:
    """Free-text prompt with an optional validator."""

    def __init__(self, prompt_id: str, validator: TextValidator | None = None):
        self.prompt_id = prompt_id
        self.validator = validator

    def render(self, pending: PendingPrompt) -> Reply:
        return Reply(text=pending.text, suggested_actions=list(pending.choices))

    def recognize(self, pending: PendingPrompt, text: str) -> Recognition:
        value = (text or "").strip()
        if not value:
            return Recognition(None, retry_message=DEFAULT_TEXT_RETRY)

        if self.validator:
            rejection = self.validator(value)
            if rejection:
                return Recognition(None, retry_message=rejection)

        return Recognition(PromptResult(value=value))


YES_ANSWERS = ("yes", "y", "yeah", "yep")
NO_ANSWERS = ("no", "n", "nope")


def validate_yes_no(text: str) -> str | None:
    """Accept only yes/no style answers."""
    if normalize_category(text) in YES_ANSWERS + NO_ANSWERS:
        return None
    return "Please answer Yes or No."


def is_yes(result: PromptResult | None) -> bool:
    return result is not None and normalize_category(result.value) in YES_ANSWERS
