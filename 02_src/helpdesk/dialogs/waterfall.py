"""Step sequencer: waterfall dialogs with a persisted per-conversation cursor.

A waterfall is an ordered list of step functions. Each step receives a
``StepContext`` and returns a ``StepOutcome``:

- NEXT: advance and run the following step in the same turn.
- PROMPT: ask a question and suspend; the validated reply is handed to
  the following step on the next turn.
- BEGIN: push a child waterfall; when it ends, the parent's following
  step runs with the child's result.
- END: pop the waterfall and hand its result to the parent, if any.

Running past the last step is an implicit END.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, Protocol

from ..errors import ConfigurationError, UnknownDialogError
from ..logging_config import get_logger, log_context
from ..models import (
    DialogInstance,
    DialogState,
    DialogTurnStatus,
    EntityProfile,
    PendingPrompt,
    Reply,
    TurnResult,
    normalize_category,
)
from ..tracker import ITracker
from .prompts import IPrompt
from .state import IDialogStateAccessor, IProfileAccessor

logger = get_logger(__name__)


class StepAction(str, Enum):
    """What the sequencer does after a step returns."""

    NEXT = "next"
    PROMPT = "prompt"
    BEGIN = "begin"
    END = "end"


@dataclass
class StepOutcome:
    """Return value of a step function."""

    action: StepAction
    result: Any = None
    prompt: PendingPrompt | None = None
    dialog_id: str | None = None
    options: dict | None = None


class StepContext:
    """Inputs of one step invocation plus the replies it emits."""

    def __init__(
        self,
        conversation_id: str,
        dialog_id: str,
        step_index: int,
        profile: EntityProfile | None,
        result: Any,
        options: dict,
    ):
        self.conversation_id = conversation_id
        self.dialog_id = dialog_id
        self.step_index = step_index
        self.profile = profile
        self.result = result
        self.options = options
        self.replies: list[Reply] = []
        self.profile_changed = False

    @property
    def entity(self) -> str:
        """Normalized entity of the profile, "" when unset."""
        return self.profile.category if self.profile else ""

    def entity_is(self, *categories: str) -> bool:
        return bool(self.entity) and self.entity in {
            normalize_category(c) for c in categories
        }

    # Output
    def send(self, *lines: str) -> None:
        """Emit one reply per line."""
        self.replies.extend(Reply(text=line) for line in lines)

    def suggest(self, text: str, choices: Iterable[str]) -> None:
        """Emit a reply with quick-reply suggestions (not a prompt)."""
        self.replies.append(Reply(text=text, suggested_actions=list(choices)))

    # Profile
    def set_profile(self, profile: EntityProfile) -> None:
        self.profile = profile
        self.profile_changed = True

    def save_profile(self) -> None:
        """Mark the profile for persisting once the step returns."""
        if self.profile is None:
            raise RuntimeError("No profile to save")
        self.profile_changed = True

    # Outcomes
    def next(self, result: Any = None) -> StepOutcome:
        return StepOutcome(StepAction.NEXT, result=result)

    def prompt(
        self, prompt_id: str, text: str, choices: Iterable[str] | None = None
    ) -> StepOutcome:
        pending = PendingPrompt(
            prompt_id=prompt_id, text=text, choices=list(choices or [])
        )
        return StepOutcome(StepAction.PROMPT, prompt=pending)

    def begin(self, dialog_id: str, options: dict | None = None) -> StepOutcome:
        return StepOutcome(StepAction.BEGIN, dialog_id=dialog_id, options=options)

    def end(self, result: Any = None) -> StepOutcome:
        return StepOutcome(StepAction.END, result=result)


Step = Callable[[StepContext], StepOutcome]


class WaterfallDialog:
    """A named, ordered list of steps."""

    def __init__(self, dialog_id: str, steps: list[Step]):
        if not dialog_id:
            raise ConfigurationError("dialog_id is required")
        if not steps:
            raise ConfigurationError(f"Waterfall {dialog_id} has no steps")
        self.dialog_id = dialog_id
        self.steps = list(steps)

    def __len__(self) -> int:
        return len(self.steps)


class TopicDialog:
    """A topic: main waterfall, optional child waterfalls and its prompts.

    ``categories`` lists the entity keys the topic answers for.
    """

    def __init__(
        self,
        dialog_id: str,
        steps: list[Step],
        prompts: Iterable[IPrompt] = (),
        children: dict[str, list[Step]] | None = None,
        categories: Iterable[str] = (),
    ):
        if not dialog_id:
            raise ConfigurationError("dialog_id is required")
        self.dialog_id = dialog_id
        self.waterfalls = [WaterfallDialog(dialog_id, steps)]
        for child_id, child_steps in (children or {}).items():
            self.waterfalls.append(WaterfallDialog(child_id, child_steps))
        self.prompts: dict[str, IPrompt] = {p.prompt_id: p for p in prompts}
        self.categories = tuple(normalize_category(c) for c in categories)

    def owns(self, category: str) -> bool:
        return normalize_category(category) in self.categories


class IDialogSet(Protocol):
    """Registry of topics plus the turn-level sequencing operations."""

    @property
    def topic_ids(self) -> list[str]:
        """Ids of the registered topics (child waterfalls excluded)."""
        ...

    def has_topic(self, dialog_id: str) -> bool:
        ...

    async def active_dialog(self, conversation_id: str) -> str | None:
        """Id of the waterfall awaiting a reply, if any."""
        ...

    async def begin(
        self, conversation_id: str, dialog_id: str, options: dict | None = None
    ) -> TurnResult:
        """Start a dialog on top of the stack and run it until it suspends or ends."""
        ...

    async def continue_dialog(self, conversation_id: str, text: str) -> TurnResult:
        """Deliver the user's reply to the active dialog."""
        ...

    async def cancel_all(self, conversation_id: str) -> TurnResult:
        """Drop every running dialog of the conversation."""
        ...


class DialogSet:
    """Registered topic dialogs and the sequencer that drives them."""

    def __init__(
        self,
        profile_accessor: IProfileAccessor,
        state_accessor: IDialogStateAccessor,
        tracker: ITracker | None = None,
    ):
        if profile_accessor is None:
            raise ConfigurationError("profile_accessor is required")
        if state_accessor is None:
            raise ConfigurationError("state_accessor is required")
        self._profiles = profile_accessor
        self._states = state_accessor
        self._tracker = tracker
        self._topics: dict[str, TopicDialog] = {}
        self._waterfalls: dict[str, tuple[WaterfallDialog, TopicDialog]] = {}

    def add(self, topic: TopicDialog) -> "DialogSet":
        """Register a topic and its child waterfalls."""
        for waterfall in topic.waterfalls:
            if waterfall.dialog_id in self._waterfalls:
                raise ConfigurationError(
                    f"Dialog {waterfall.dialog_id} is already registered"
                )
        self._topics[topic.dialog_id] = topic
        for waterfall in topic.waterfalls:
            self._waterfalls[waterfall.dialog_id] = (waterfall, topic)
        return self

    @property
    def topic_ids(self) -> list[str]:
        return list(self._topics)

    def has_topic(self, dialog_id: str) -> bool:
        return dialog_id in self._topics

    def topic_for_category(self, category: str | None) -> TopicDialog | None:
        """Topic that answers for an entity, if any."""
        if not category:
            return None
        for topic in self._topics.values():
            if topic.owns(category):
                return topic
        return None

    async def active_dialog(self, conversation_id: str) -> str | None:
        state = await self._states.get(conversation_id)
        if not state or not state.active:
            return None
        return state.active.dialog_id

    async def begin(
        self, conversation_id: str, dialog_id: str, options: dict | None = None
    ) -> TurnResult:
        """Start a dialog on top of the stack and run it until it suspends or ends."""
        self._lookup(dialog_id)

        state = await self._states.get(conversation_id) or DialogState(conversation_id)
        state.stack.append(DialogInstance(dialog_id=dialog_id, options=options or {}))
        await self._track("dialog_started", dialog_id, {"conversation_id": conversation_id})

        replies: list[Reply] = []
        # Step 0 receives the start options as its result
        status, result = await self._run(state, replies, options or None)
        return TurnResult(replies=replies, status=status, result=result)

    async def continue_dialog(self, conversation_id: str, text: str) -> TurnResult:
        """Deliver the user's reply to the active dialog."""
        state = await self._states.get(conversation_id)
        if not state or not state.active:
            return TurnResult(replies=[], status=DialogTurnStatus.EMPTY)

        instance = state.active
        replies: list[Reply] = []
        pending = instance.pending_prompt

        if pending is None:
            # Stack persisted without a question; replay the current step
            logger.warning(
                "Resuming %s without a pending prompt",
                instance.dialog_id,
                extra=log_context(conversation_id=conversation_id),
            )
            status, result = await self._run(state, replies, text)
            return TurnResult(replies=replies, status=status, result=result)

        prompt = self._prompt(instance.dialog_id, pending.prompt_id)
        recognition = prompt.recognize(pending, text)

        if not recognition.accepted:
            pending.attempts += 1
            if recognition.retry_message:
                replies.append(Reply(text=recognition.retry_message))
            replies.append(prompt.render(pending))
            await self._states.set(state)
            await self._track(
                "prompt_retried",
                instance.dialog_id,
                {
                    "conversation_id": conversation_id,
                    "prompt_id": pending.prompt_id,
                    "attempts": pending.attempts,
                },
            )
            logger.info(
                "Reply %r rejected by %s",
                text,
                pending.prompt_id,
                extra=log_context(
                    conversation_id=conversation_id, dialog_id=instance.dialog_id
                ),
            )
            return TurnResult(replies=replies, status=DialogTurnStatus.WAITING)

        instance.pending_prompt = None
        instance.step_index += 1
        status, result = await self._run(state, replies, recognition.result)
        return TurnResult(replies=replies, status=status, result=result)

    async def cancel_all(self, conversation_id: str) -> TurnResult:
        """Drop every running dialog of the conversation."""
        state = await self._states.get(conversation_id)
        if not state or not state.stack:
            return TurnResult(replies=[], status=DialogTurnStatus.EMPTY)

        cancelled = [instance.dialog_id for instance in state.stack]
        await self._states.delete(conversation_id)
        if self._tracker:
            await self._tracker.track(
                "dialogs_cancelled",
                "dialog_set",
                {"conversation_id": conversation_id, "dialogs": cancelled},
            )
        logger.info(
            "Cancelled dialogs %s",
            cancelled,
            extra=log_context(conversation_id=conversation_id),
        )
        return TurnResult(replies=[], status=DialogTurnStatus.CANCELLED)

    async def _run(
        self, state: DialogState, replies: list[Reply], result: Any
    ) -> tuple[DialogTurnStatus, Any]:
        """Run steps until one prompts or the stack empties."""
        conversation_id = state.conversation_id

        while state.stack:
            instance = state.stack[-1]
            waterfall, topic = self._lookup(instance.dialog_id)

            if instance.step_index >= len(waterfall):
                await self._end_active(state, result)
                continue

            profile = await self._profiles.get(conversation_id)
            ctx = StepContext(
                conversation_id=conversation_id,
                dialog_id=instance.dialog_id,
                step_index=instance.step_index,
                profile=profile,
                result=result,
                options=instance.options,
            )
            outcome = waterfall.steps[instance.step_index](ctx)
            replies.extend(ctx.replies)

            if ctx.profile_changed and ctx.profile is not None:
                await self._profiles.set(conversation_id, ctx.profile)

            logger.debug(
                "Step %s[%s] -> %s",
                instance.dialog_id,
                instance.step_index,
                outcome.action.value,
                extra=log_context(conversation_id=conversation_id),
            )

            if outcome.action is StepAction.NEXT:
                instance.step_index += 1
                result = outcome.result

            elif outcome.action is StepAction.PROMPT:
                pending = outcome.prompt
                prompt = self._prompt(instance.dialog_id, pending.prompt_id)
                instance.pending_prompt = pending
                replies.append(prompt.render(pending))
                await self._states.set(state)
                await self._track(
                    "prompt_issued",
                    instance.dialog_id,
                    {
                        "conversation_id": conversation_id,
                        "prompt_id": pending.prompt_id,
                        "text": pending.text,
                    },
                )
                return DialogTurnStatus.WAITING, None

            elif outcome.action is StepAction.BEGIN:
                self._lookup(outcome.dialog_id)
                state.stack.append(
                    DialogInstance(
                        dialog_id=outcome.dialog_id, options=outcome.options or {}
                    )
                )
                result = outcome.options or None
                await self._track(
                    "dialog_started",
                    outcome.dialog_id,
                    {"conversation_id": conversation_id, "parent": instance.dialog_id},
                )

            else:
                result = outcome.result
                await self._end_active(state, result)

        await self._states.set(state)
        return DialogTurnStatus.COMPLETE, result

    async def _end_active(self, state: DialogState, result: Any) -> None:
        """Pop the active waterfall; the parent resumes at its next step."""
        finished = state.stack.pop()
        if state.stack:
            state.stack[-1].step_index += 1
        await self._track(
            "dialog_ended",
            finished.dialog_id,
            {"conversation_id": state.conversation_id, "result": result},
        )

    def _lookup(self, dialog_id: str | None) -> tuple[WaterfallDialog, TopicDialog]:
        try:
            return self._waterfalls[dialog_id]
        except KeyError:
            raise UnknownDialogError(str(dialog_id)) from None

    def _prompt(self, dialog_id: str, prompt_id: str) -> IPrompt:
        _, topic = self._lookup(dialog_id)
        try:
            return topic.prompts[prompt_id]
        except KeyError:
            raise ConfigurationError(
                f"Prompt {prompt_id} is not registered for {topic.dialog_id}"
            ) from None

    async def _track(self, event_type: str, dialog_id: str, data: dict) -> None:
        if self._tracker:
            await self._tracker.track(event_type, f"dialog:{dialog_id}", data)
