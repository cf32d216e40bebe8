"""Step builders and canned text shared by the topic tables."""

import functools
from typing import Iterable

from ..dialogs import Step, StepContext, StepOutcome
from ..models import EntityProfile

# Prompt IDs
CONFIRM_PROMPT = "confirm_prompt"

YES_NO = ["Yes", "No"]

BUSINESS_ADMIN_HELP = "You can refer help tab for business admin contacts."

SUPERVISOR_CYCLE_LINES = (
    "This error occurs when any user/supervisor himself assigned as supervisor in PDM.",
    "Please check your profile and your supervisor profile, and your supervisor's supervisor profile and so on.",
    "Then correct the supervisor for the concerned person.",
)


def seed_profile(ctx: StepContext) -> EntityProfile:
    """Return the stored profile, creating it from start options if missing."""
    if ctx.profile is not None:
        return ctx.profile

    seeded = (ctx.options or {}).get("entity_profile")
    if isinstance(seeded, EntityProfile):
        profile = seeded
    elif isinstance(seeded, dict):
        profile = EntityProfile.from_dict(seeded)
    else:
        profile = EntityProfile()
    ctx.set_profile(profile)
    return profile


def initialize_state(menu_text: str, choices: Iterable[str]) -> Step:
    """First step of a topic: no entity means show the topic menu and end."""
    menu = list(choices)

    def initialize_state_step(ctx: StepContext) -> StepOutcome:
        seed_profile(ctx)
        if not ctx.entity:
            ctx.suggest(menu_text, menu)
            return ctx.end()
        return ctx.next()

    return initialize_state_step


def when_entity(*categories: str):
    """Run the decorated step only for the given categories, else pass through."""

    def decorator(step: Step) -> Step:
        @functools.wraps(step)
        def guarded(ctx: StepContext) -> StepOutcome:
            if not ctx.entity_is(*categories):
                return ctx.next()
            return step(ctx)

        return guarded

    return decorator


def inform(categories: str | tuple[str, ...], *lines: str, end: bool = False) -> Step:
    """Step that sends fixed lines for the given categories."""
    if isinstance(categories, str):
        categories = (categories,)

    @when_entity(*categories)
    def inform_step(ctx: StepContext) -> StepOutcome:
        ctx.send(*lines)
        return ctx.end() if end else ctx.next()

    return inform_step


def set_continuation(ctx: StepContext, value: bool) -> None:
    ctx.profile.continuation = value
    ctx.save_profile()
