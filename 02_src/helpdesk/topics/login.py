"""Login topic: one canned answer per login failure category."""

from ..dialogs import StepContext, StepOutcome, TopicDialog
from .common import BUSINESS_ADMIN_HELP, SUPERVISOR_CYCLE_LINES, initialize_state

LOGIN_DIALOG = "login"

DEACTIVATED = "deactivated"
INVALID = "invalid"
LDAP = "ldap"
TRANSACTION = "transaction"
UNAUTHORIZED = "not authorized"

MENU_TEXT = "Ok, glad to help you on that. Please select the appropriate issue from the dropdown ?"
MENU_CHOICES = [
    "Invalid userid/password",
    "User Id not defined in LDAP",
    "Not authorized to access RP due to invalid LOC/DEPT",
    "You are currently deactivated in the system",
    "Transaction not successfully started",
]

_CONTACT_ADMIN = (
    "Please contact your business admin to activate in RP.",
    BUSINESS_ADMIN_HELP,
)

LOGIN_RESPONSES: dict[str, tuple[str, ...]] = {
    LDAP: (
        "Please follow the below steps.",
        "i) Contact your HR to active your profile in LDAP.",
        "ii) Contact your business admin to activate in RP.",
        BUSINESS_ADMIN_HELP,
    ),
    INVALID: (
        "Please reset your password. If still issue persists try login after "
        "clearing the browser caches.",
    ),
    TRANSACTION: SUPERVISOR_CYCLE_LINES,
    UNAUTHORIZED: _CONTACT_ADMIN,
    DEACTIVATED: _CONTACT_ADMIN,
}


def response_for_login(ctx: StepContext) -> StepOutcome:
    lines = LOGIN_RESPONSES.get(ctx.entity)
    if lines:
        ctx.send(*lines)
    return ctx.next()


def build_login_dialog() -> TopicDialog:
    return TopicDialog(
        LOGIN_DIALOG,
        steps=[initialize_state(MENU_TEXT, MENU_CHOICES), response_for_login],
        categories=list(LOGIN_RESPONSES),
    )
