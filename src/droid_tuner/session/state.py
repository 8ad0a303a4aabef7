"""EditSession: the in-memory editing state behind the tuner UI.

The session owns the discovered records, a selection cursor, the current
mode and a transient status message. Every user action is a method here;
the presentation layer only reads state and forwards keys.

Modes:
- LIST: browsing the droid table
- PICK_MODEL: choosing a model for the selected droid or for all droids
- PICK_REASONING: choosing a reasoning effort for the pending model
"""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from ..catalog.models import INHERIT, ModelCatalog
from ..droids.base import DroidRecord
from ..droids.parser import DroidParseError
from ..droids.repository import DroidRepository
from ..logging import JSONLLogger

logger = logging.getLogger(__name__)

QUIT_WARNING = "Unsaved changes! Press 's' to save or 'q' again to force quit"


class Mode(Enum):
    """Which view the session is in."""

    LIST = "list"
    PICK_MODEL = "pick_model"
    PICK_REASONING = "pick_reasoning"


class PickerScope(Enum):
    """Records a picker choice applies to."""

    ONE = "one"
    ALL = "all"


@dataclass
class StatusMessage:
    """A status line text that expires at a monotonic timestamp."""

    text: str
    expires_at: float

    def is_active(self, now: float) -> bool:
        return now < self.expires_at


class EditSession:
    """Tracks droid edits between discovery and save.

    Example:
        session = EditSession(repository, catalog)
        session.open_model_picker(PickerScope.ONE)
        session.choose_model("gpt-5.1")
        session.save_all()
    """

    def __init__(
        self,
        repository: DroidRepository,
        catalog: ModelCatalog,
        message_ttl: float = 3.0,
        clock: Callable[[], float] = time.monotonic,
        event_log: JSONLLogger | None = None,
    ) -> None:
        self.repository = repository
        self.catalog = catalog
        self.message_ttl = message_ttl
        self.event_log = event_log
        self._clock = clock

        self._records: list[DroidRecord] = repository.discover()
        self.selected_index = 0
        self.mode = Mode.LIST
        self.scope = PickerScope.ONE
        self.pending_model: str | None = None
        self.quit_armed = False
        self._status: StatusMessage | None = None

        if self.event_log is not None:
            self.event_log.log("session_start", count=len(self._records))

    @property
    def records(self) -> list[DroidRecord]:
        return self._records

    @property
    def selected(self) -> DroidRecord | None:
        if not self._records:
            return None
        return self._records[self.selected_index]

    @property
    def modified(self) -> list[DroidRecord]:
        return [d for d in self._records if d.is_modified]

    @property
    def modified_count(self) -> int:
        return len(self.modified)

    @property
    def status_message(self) -> str:
        """Current status text, or empty once it has expired."""
        if self._status is None:
            return ""
        if not self._status.is_active(self._clock()):
            self._status = None
            return ""
        return self._status.text

    @property
    def picker_title(self) -> str:
        if self.scope is PickerScope.ALL:
            target = "ALL droids"
        else:
            target = self.selected.name if self.selected else ""

        if self.mode is Mode.PICK_REASONING:
            return f"Reasoning effort for {target} ({self.pending_model})"
        if self.scope is PickerScope.ALL:
            return "Set ALL droids to:"
        return f"Model for {target}"

    def model_sections(self) -> list[tuple[str, list[str]]]:
        """Model picker options grouped under section titles."""
        sections = [("Factory Models", list(self.catalog.factory))]
        byok = [m for m in self.catalog.byok if m not in self.catalog.factory]
        if byok:
            sections.append(("BYOK Custom", byok))
        return sections

    def reasoning_options(self) -> list[str | None]:
        """Levels for the pending model, default first, then None for skip."""
        if self.pending_model is None:
            return []
        info = self.catalog.reasoning_for(self.pending_model)
        if info is None:
            return []
        return [*info.ordered_levels(), None]

    def default_reasoning(self) -> str | None:
        if self.pending_model is None:
            return None
        info = self.catalog.reasoning_for(self.pending_model)
        return info.default if info else None

    def set_status(self, text: str) -> None:
        self._status = StatusMessage(text=text, expires_at=self._clock() + self.message_ttl)

    def clear_status(self) -> None:
        self._status = None

    def _begin_action(self) -> None:
        """Any action other than quit disarms the quit confirmation."""
        self.quit_armed = False

    def move_up(self) -> None:
        if self.mode is not Mode.LIST:
            return
        self._begin_action()
        if self.selected_index > 0:
            self.selected_index -= 1
            self.clear_status()

    def move_down(self) -> None:
        if self.mode is not Mode.LIST:
            return
        self._begin_action()
        if self.selected_index < len(self._records) - 1:
            self.selected_index += 1
            self.clear_status()

    def open_model_picker(self, scope: PickerScope) -> None:
        """Enter PICK_MODEL for the selected droid or for all droids."""
        if self.mode is not Mode.LIST:
            return
        self._begin_action()
        if not self._records:
            return
        self.scope = scope
        self.pending_model = None
        self.mode = Mode.PICK_MODEL

    def request_quit(self) -> bool:
        """Handle a quit key press.

        Returns:
            True if the application should terminate now.
        """
        if self.mode is not Mode.LIST:
            return False

        if self.modified_count == 0 or self.quit_armed:
            if self.event_log is not None:
                self.event_log.log("quit", count=self.modified_count)
            return True

        self.quit_armed = True
        self.set_status(QUIT_WARNING)
        return False

    def save_all(self) -> int:
        """Persist every modified droid.

        A droid that fails to save stays modified and the failure is shown
        in the status line; the remaining droids are still attempted.

        Returns:
            Number of droids saved.
        """
        if self.mode is not Mode.LIST:
            return 0
        self._begin_action()

        saved = 0
        failures: list[str] = []
        for droid in self.modified:
            try:
                self.repository.save(droid)
                saved += 1
            except (OSError, DroidParseError) as e:
                logger.error("Failed to save %s: %s", droid.name, e)
                if self.event_log is not None:
                    self.event_log.log_save_failed(droid.name, str(e))
                failures.append(f"Failed to save {droid.name}: {e}")

        if failures:
            prefix = f"Saved {saved} droid(s) | " if saved else ""
            self.set_status(prefix + "; ".join(failures))
        elif saved:
            self.set_status(f"Saved {saved} droid(s)")
        else:
            self.set_status("No changes to save")
        return saved

    def set_all_inherit(self) -> None:
        """Point every droid at ``inherit``, leaving reasoning effort as is."""
        if self.mode is not Mode.LIST:
            return
        self._begin_action()
        for droid in self._records:
            droid.model = INHERIT
        self.set_status(f"All droids set to '{INHERIT}'")

    def reload(self) -> None:
        """Rediscover droids from disk, dropping unsaved edits."""
        if self.mode is not Mode.LIST:
            return
        self._begin_action()
        self._records = self.repository.discover()
        self.selected_index = max(0, min(self.selected_index, len(self._records) - 1))
        self.set_status("Reloaded from disk")
        if self.event_log is not None:
            self.event_log.log("reload", count=len(self._records))

    def choose_model(self, model: str) -> None:
        """Pick a model; asks for reasoning effort when the model has it."""
        if self.mode is not Mode.PICK_MODEL:
            return
        self._begin_action()

        if self.catalog.supports_reasoning(model):
            self.pending_model = model
            self.mode = Mode.PICK_REASONING
            return

        self._apply(model, reasoning_effort=None, touch_reasoning=False)

    def choose_reasoning(self, level: str | None) -> None:
        """Apply the pending model with a level, or None to leave it unset."""
        if self.mode is not Mode.PICK_REASONING or self.pending_model is None:
            return
        self._begin_action()
        self._apply(self.pending_model, reasoning_effort=level, touch_reasoning=True)

    def cancel(self) -> None:
        """Back out of a picker without changing anything."""
        self._begin_action()
        if self.mode is Mode.LIST:
            return
        self.pending_model = None
        self.mode = Mode.LIST

    def _apply(self, model: str, reasoning_effort: str | None, touch_reasoning: bool) -> None:
        if self.scope is PickerScope.ALL:
            targets = list(self._records)
        else:
            targets = [self.selected] if self.selected else []

        for droid in targets:
            droid.model = model
            if touch_reasoning:
                droid.reasoning_effort = reasoning_effort

        label = f"'{model}'"
        if touch_reasoning and reasoning_effort:
            label += f" ({reasoning_effort})"

        if self.scope is PickerScope.ALL:
            self.set_status(f"All droids set to {label}")
        elif targets:
            self.set_status(f"Set {targets[0].name} to {label}")

        self.pending_model = None
        self.mode = Mode.LIST
