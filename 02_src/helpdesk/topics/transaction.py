"""Transaction topic: fixed supervisor-cycle explanation, entity ignored."""

from ..dialogs import StepContext, StepOutcome, TopicDialog
from .common import SUPERVISOR_CYCLE_LINES

TRANSACTION_DIALOG = "transaction"


def explain_supervisor_cycle(ctx: StepContext) -> StepOutcome:
    ctx.send(*SUPERVISOR_CYCLE_LINES)
    return ctx.end()


def build_transaction_dialog() -> TopicDialog:
    return TopicDialog(TRANSACTION_DIALOG, steps=[explain_supervisor_cycle])
