"""Edit session state machine."""

from .state import QUIT_WARNING, EditSession, Mode, PickerScope, StatusMessage

__all__ = ["EditSession", "Mode", "PickerScope", "QUIT_WARNING", "StatusMessage"]
