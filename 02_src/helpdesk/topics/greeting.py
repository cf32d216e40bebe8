"""Greeting topic: entry dialog when no intent was classified.

Welcomes the user with the topic menu, or routes the entity classified
on this turn (passed as ``options["entity"]``) to the topic that answers
for it. A stale entity left in the stored profile is never routed.
"""

from typing import Callable

from ..dialogs import StepContext, StepOutcome, TopicDialog
from ..models import normalize_category
from .common import seed_profile

GREETING_DIALOG = "greeting"

WELCOME_TEXT = "Hi! I am the RP support assistant. What can I help you with today?"
WELCOME_CHOICES = [
    "Login issue",
    "Report issue",
    "Project assignment",
    "Update Supervisor/Backup Approver",
    "Transaction not successfully started",
]
FALLBACK_TEXT = (
    "Sorry, I don't have an answer for that yet. Please raise an incident "
    "to RP team in DriveIT."
)

# Maps a normalized entity to the id of the topic that owns it
TopicResolver = Callable[[str], str | None]


def _routed_entity(ctx: StepContext) -> str:
    return normalize_category((ctx.options or {}).get("entity"))


def greet(ctx: StepContext) -> StepOutcome:
    profile = seed_profile(ctx)
    if not _routed_entity(ctx):
        ctx.suggest(WELCOME_TEXT, WELCOME_CHOICES)
        return ctx.end()

    routed = ctx.options["entity"].strip()
    if profile.entity != routed:
        profile.entity = routed
        ctx.save_profile()
    return ctx.next()


def build_greeting_dialog(resolve_topic: TopicResolver) -> TopicDialog:
    def route_entity(ctx: StepContext) -> StepOutcome:
        topic_id = resolve_topic(_routed_entity(ctx))
        if topic_id is None:
            ctx.send(FALLBACK_TEXT)
            return ctx.end()
        return ctx.begin(topic_id, {"entity_profile": ctx.profile.to_dict()})

    def finish_greeting(ctx: StepContext) -> StepOutcome:
        return ctx.end(ctx.result)

    return TopicDialog(
        GREETING_DIALOG,
        steps=[greet, route_entity, finish_greeting],
    )
