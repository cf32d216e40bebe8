"""Exceptions raised by the dialog runtime."""


class HelpdeskError(Exception):
    """Base class for helpdesk bot errors."""


class ConfigurationError(HelpdeskError):
    """A dialog or dialog set was built without a required piece."""


class UnknownDialogError(HelpdeskError, KeyError):
    """A dialog id was requested that nothing registered."""

    def __init__(self, dialog_id: str):
        super().__init__(dialog_id)
        self.dialog_id = dialog_id

    def __str__(self) -> str:
        return f"Unknown dialog: {self.dialog_id}"
