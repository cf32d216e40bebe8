"""Project assignment topic: disabled Assign Project button, missing projects."""

from ..dialogs import ChoicePrompt, StepContext, StepOutcome, TopicDialog, is_yes
from .common import (
    CONFIRM_PROMPT,
    YES_NO,
    initialize_state,
    inform,
    set_continuation,
    when_entity,
)

ASSIGNMENT_DIALOG = "assignment"

DISABLED = "disabled"
VISIBLE = "visible"

TASK_ID = "RP:102036"

MENU_TEXT = "Ok, glad to help you on that. Which issue you are facing now?"
MENU_CHOICES = [
    "Assign Project Button is disabled",
    "Project type/Project/Model Year is not visible",
]


@when_entity(DISABLED)
def prompt_for_disabled(ctx: StepContext) -> StepOutcome:
    set_continuation(ctx, False)
    ctx.send(
        "For NAFTA users, Assign Project feature is enabled only for two weeks "
        "and for other region users, it is enabled for one month.",
        "If you want to assign project out of this timeframe, please create "
        "Task in DriveIT with business Admin approval.",
    )
    return ctx.prompt(CONFIRM_PROMPT, "Do you want to create the task in DriveIT now ?", YES_NO)


@when_entity(DISABLED)
def response_for_disabled(ctx: StepContext) -> StepOutcome:
    if is_yes(ctx.result):
        ctx.send(f"Ok. I created a task {TASK_ID} for you.")
    else:
        ctx.send("Ok. You can create the task in DriveIT later with business Admin approval.")
    # Reset regardless of the answer; see DESIGN.md open questions
    set_continuation(ctx, True)
    return ctx.next()


response_for_visible = inform(
    VISIBLE,
    "Please contact your business admin. You can refer help tab for admin details.",
)


def build_assignment_dialog() -> TopicDialog:
    return TopicDialog(
        ASSIGNMENT_DIALOG,
        steps=[
            initialize_state(MENU_TEXT, MENU_CHOICES),
            prompt_for_disabled,
            response_for_disabled,
            response_for_visible,
        ],
        prompts=[ChoicePrompt(CONFIRM_PROMPT)],
        categories=[DISABLED, VISIBLE],
    )
