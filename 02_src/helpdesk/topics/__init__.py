"""Scripted support topics and the registry that wires them together."""

from ..dialogs import DialogSet, IDialogStateAccessor, IProfileAccessor
from ..tracker import ITracker
from .assignment import ASSIGNMENT_DIALOG, build_assignment_dialog
from .correction import CORRECTION_DIALOG, build_correction_dialog
from .greeting import GREETING_DIALOG, build_greeting_dialog
from .login import LOGIN_DIALOG, build_login_dialog
from .report import REPORT_DIALOG, build_report_dialog
from .transaction import TRANSACTION_DIALOG, build_transaction_dialog

TOPIC_IDS = (
    ASSIGNMENT_DIALOG,
    CORRECTION_DIALOG,
    GREETING_DIALOG,
    LOGIN_DIALOG,
    REPORT_DIALOG,
    TRANSACTION_DIALOG,
)


def build_dialog_set(
    profile_accessor: IProfileAccessor,
    state_accessor: IDialogStateAccessor,
    tracker: ITracker | None = None,
) -> DialogSet:
    """Create a DialogSet with every support topic registered."""
    dialogs = DialogSet(profile_accessor, state_accessor, tracker)

    def resolve_topic(category: str) -> str | None:
        topic = dialogs.topic_for_category(category)
        return topic.dialog_id if topic else None

    dialogs.add(build_assignment_dialog())
    dialogs.add(build_correction_dialog())
    dialogs.add(build_login_dialog())
    dialogs.add(build_report_dialog())
    dialogs.add(build_transaction_dialog())
    dialogs.add(build_greeting_dialog(resolve_topic))
    return dialogs


__all__ = [
    "ASSIGNMENT_DIALOG",
    "CORRECTION_DIALOG",
    "GREETING_DIALOG",
    "LOGIN_DIALOG",
    "REPORT_DIALOG",
    "TRANSACTION_DIALOG",
    "TOPIC_IDS",
    "build_dialog_set",
]
