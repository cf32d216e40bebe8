"""Role update topic: supervisor and backup approver corrections."""

from ..dialogs import (
    ChoicePrompt,
    StepContext,
    StepOutcome,
    TextPrompt,
    TopicDialog,
    is_yes,
    validate_yes_no,
)
from ..models import normalize_category
from .common import BUSINESS_ADMIN_HELP, YES_NO, initialize_state, set_continuation, when_entity

CORRECTION_DIALOG = "correction"
SUPERVISOR_DIALOG = "correction.supervisor"
BACKUP_APPROVER_DIALOG = "correction.backup_approver"

# Prompt IDs
ROLE_PROMPT = "sup_appr_prompt"
YES_NO_PROMPT = "yes_no_prompt"

APPROVER = "approver"
SUPERVISOR = "supervisor"
BACKUP_APPROVER = "backup approver"

ROLE_CHOICES = ["Supervisor", "Backup Approver"]

MENU_TEXT = "Ok, glad to help you on that. Do you want to update Supervisor or Backup Approver?"
MENU_CHOICES = ["Update Supervisor", "Update Backup Approver"]


@when_entity(APPROVER)
def prompt_for_approver(ctx: StepContext) -> StepOutcome:
    return ctx.prompt(ROLE_PROMPT, "Do you want to update Supervisor or Backup Approver?", ROLE_CHOICES)


def route_role(ctx: StepContext) -> StepOutcome:
    if ctx.entity_is(APPROVER):
        role = normalize_category(ctx.result.value) if ctx.result else ""
    else:
        role = ctx.entity

    if role == SUPERVISOR:
        return ctx.begin(SUPERVISOR_DIALOG)
    if role == BACKUP_APPROVER:
        return ctx.begin(BACKUP_APPROVER_DIALOG)
    return ctx.next()


def finish_correction(ctx: StepContext) -> StepOutcome:
    return ctx.end(ctx.result)


def prompt_for_pdm_update(ctx: StepContext) -> StepOutcome:
    set_continuation(ctx, False)
    return ctx.prompt(YES_NO_PROMPT, "Has the supervisor been updated in PDM?", YES_NO)


def response_for_pdm_update(ctx: StepContext) -> StepOutcome:
    set_continuation(ctx, True)
    if is_yes(ctx.result):
        ctx.send(
            "PDM changes are synced to RP overnight.",
            "If the supervisor is still not reflected in RP after 24 hours, "
            "please raise an incident to RP team in DriveIT.",
        )
    else:
        ctx.send(
            "RP takes the supervisor from PDM. Please get the supervisor updated "
            "in PDM first.",
            "Contact your business admin if you are not able to update PDM.",
        )
    return ctx.end()


def contact_admin_for_backup(ctx: StepContext) -> StepOutcome:
    ctx.send(
        "Backup approver can be updated only by your business admin. Please contact your business admin.",
        BUSINESS_ADMIN_HELP,
    )
    return ctx.end()


def build_correction_dialog() -> TopicDialog:
    return TopicDialog(
        CORRECTION_DIALOG,
        steps=[
            initialize_state(MENU_TEXT, MENU_CHOICES),
            prompt_for_approver,
            route_role,
            finish_correction,
        ],
        prompts=[
            ChoicePrompt(ROLE_PROMPT),
            TextPrompt(YES_NO_PROMPT, validator=validate_yes_no),
        ],
        children={
            SUPERVISOR_DIALOG: [prompt_for_pdm_update, response_for_pdm_update],
            BACKUP_APPROVER_DIALOG: [contact_admin_for_backup],
        },
        categories=[APPROVER, SUPERVISOR, BACKUP_APPROVER],
    )
