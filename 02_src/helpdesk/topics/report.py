"""Report tool topic: BIRT, Qlikview and Qliksense troubleshooting."""

from ..dialogs import ChoicePrompt, StepContext, StepOutcome, TopicDialog, is_yes
from ..models import normalize_category
from .common import CONFIRM_PROMPT, YES_NO, initialize_state, set_continuation, when_entity

REPORT_DIALOG = "report"

BIRT = "BIRT"
QLIKVIEW = "Qlikview"
QLIKSENSE = "Qliksense"

INTERNET_EXPLORER = "Internet explorer"
BROWSERS = [INTERNET_EXPLORER, "Chrome", "Firefox"]

ACCESS_DENIED = "Access Denied"
QLIK_ISSUES = [ACCESS_DENIED, "Not showing the recent data"]

USERNAME_HINT = "Please try the user name as: domain\\TID. Ex: CAG\\T000AA."

MENU_TEXT = "Please let me know the tool which you are trying?"
MENU_CHOICES = ["Qlikview", "BIRT(From Report Tab)", "Qliksense"]


def _answered(ctx: StepContext, value: str) -> bool:
    return ctx.result is not None and normalize_category(ctx.result.value) == normalize_category(value)


@when_entity(BIRT)
def prompt_for_birt(ctx: StepContext) -> StepOutcome:
    set_continuation(ctx, False)
    return ctx.prompt(CONFIRM_PROMPT, "Are you using Windows 10 ?", YES_NO)


@when_entity(BIRT)
def response_for_birt(ctx: StepContext) -> StepOutcome:
    if is_yes(ctx.result):
        ctx.send(
            "BIRT reports are not accessible in windows 10. Please use Qlikview "
            "& Qliksense for RP reports extraction.",
            "Contact your business admin for the accessibility.",
        )
        return ctx.end()

    set_continuation(ctx, False)
    return ctx.prompt(CONFIRM_PROMPT, "Which Browser you are logged in ?", BROWSERS)


@when_entity(BIRT)
def response_for_birt_browser(ctx: StepContext) -> StepOutcome:
    if _answered(ctx, INTERNET_EXPLORER):
        ctx.send("Please raise an incident to RP team in DriveIT with the issue description.")
    else:
        ctx.send("Please try accessing BIRT report in Internet explorer.")
    return ctx.next()


@when_entity(QLIKVIEW)
def prompt_for_qlikview(ctx: StepContext) -> StepOutcome:
    set_continuation(ctx, False)
    return ctx.prompt(CONFIRM_PROMPT, "Please select an issue that you are facing ?", QLIK_ISSUES)


@when_entity(QLIKVIEW)
def response_for_qlikview(ctx: StepContext) -> StepOutcome:
    if _answered(ctx, ACCESS_DENIED):
        ctx.send(USERNAME_HINT)
    else:
        ctx.send(
            "The qlikview data refresh time is : 9.30 PM EST.",
            "Please try to extract the report after the refresh timings.",
        )
    return ctx.next()


@when_entity(QLIKSENSE)
def prompt_for_qliksense(ctx: StepContext) -> StepOutcome:
    set_continuation(ctx, False)
    return ctx.prompt(CONFIRM_PROMPT, "Please select an issue that you are facing ?", QLIK_ISSUES)


@when_entity(QLIKSENSE)
def response_for_qliksense(ctx: StepContext) -> StepOutcome:
    if _answered(ctx, ACCESS_DENIED):
        ctx.send(
            USERNAME_HINT,
            "Please contact your business admin for the accessibility and training.",
        )
    else:
        ctx.send(
            "Please see the refresh time for each reports below: ",
            "Participation : 5.30 AM EST",
            "DOE-Grant : 10.30 PM EST",
            "Active Projects : 10.30 PM EST.",
            "Please try to extract the report after 45 mins of refresh timings "
            "to get the latest data.",
        )
    return ctx.next()


def build_report_dialog() -> TopicDialog:
    return TopicDialog(
        REPORT_DIALOG,
        steps=[
            initialize_state(MENU_TEXT, MENU_CHOICES),
            prompt_for_birt,
            response_for_birt,
            response_for_birt_browser,
            prompt_for_qlikview,
            response_for_qlikview,
            prompt_for_qliksense,
            response_for_qliksense,
        ],
        prompts=[ChoicePrompt(CONFIRM_PROMPT)],
        categories=[BIRT, QLIKVIEW, QLIKSENSE],
    )
