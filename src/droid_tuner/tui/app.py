"""Textual front end for the edit session.

The app holds no editing logic. Key bindings call EditSession methods and
every handler ends by re-rendering from session state.
"""

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import DataTable, OptionList, Static
from textual.widgets.option_list import Option

from .. import __version__
from ..session import EditSession, Mode, PickerScope

SKIP_ID = "__skip__"
MODEL_PREFIX = "model:"
LEVEL_PREFIX = "level:"

LIST_HELP = "↑↓/j/k: Navigate | Enter: Edit | a: Set All | i: All Inherit | s: Save | r: Reload | q: Quit"
PICKER_HELP = "Use ↑↓/j/k to navigate, Enter to select, Esc to cancel"


class TunerApp(App):
    """Droid table plus model and reasoning pickers."""

    TITLE = "Droid Model Tuner"
    # Keys go to app bindings until a picker takes focus.
    AUTO_FOCUS = None

    CSS = """
    #title {
        color: cyan;
        text-style: bold;
        margin-bottom: 1;
    }
    #picker-title {
        color: cyan;
        text-style: bold;
    }
    #droids {
        height: auto;
    }
    #picker-view {
        height: auto;
    }
    #picker {
        height: auto;
        max-height: 20;
        margin-top: 1;
    }
    #status {
        border: round gray;
        padding: 0 1;
        margin-top: 1;
    }
    .help {
        color: $text-muted;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("s", "save", "Save"),
        Binding("a", "set_all", "Set All"),
        Binding("i", "all_inherit", "All Inherit"),
        Binding("r", "reload", "Reload"),
        Binding("enter", "edit", "Edit", show=False),
        Binding("up,k", "cursor_up", "Up", show=False),
        Binding("down,j", "cursor_down", "Down", show=False),
        Binding("escape", "cancel", "Back", show=False),
    ]

    def __init__(self, session: EditSession) -> None:
        super().__init__()
        self.session = session

    def compose(self) -> ComposeResult:
        yield Static(f"Droid Model Tuner v{__version__}", id="title")
        with Vertical(id="list-view"):
            yield DataTable(id="droids", cursor_type="row", zebra_stripes=False)
            yield Static(id="status")
            yield Static(LIST_HELP, classes="help")
        with Vertical(id="picker-view"):
            yield Static(id="picker-title")
            yield Static(PICKER_HELP, classes="help")
            yield OptionList(id="picker")

    def on_mount(self) -> None:
        table = self.query_one("#droids", DataTable)
        table.can_focus = False
        table.add_columns("Name", "Model", "Reasoning", "Location", "Status")
        self.set_interval(0.5, self._refresh_status)
        self.render_session()

    def _refresh_status(self) -> None:
        if self.session.mode is Mode.LIST:
            self.query_one("#status", Static).update(self._status_text())

    def _status_text(self) -> str:
        parts = [f"{len(self.session.records)} droids"]
        if self.session.modified_count:
            parts.append(f"{self.session.modified_count} modified")
        message = self.session.status_message
        if message:
            parts.append(message)
        return " | ".join(parts)

    def _render_table(self) -> None:
        table = self.query_one("#droids", DataTable)
        table.clear()
        for droid in self.session.records:
            style = "yellow" if droid.is_modified else ""
            table.add_row(
                droid.name,
                Text(droid.model, style=style),
                Text(droid.reasoning_effort or "-", style=style),
                Text(droid.location, style="dim"),
                Text("modified" if droid.is_modified else "", style="yellow"),
                key=droid.name,
            )
        if self.session.records:
            table.move_cursor(row=self.session.selected_index)

    def _picker_options(self) -> tuple[list[Option], str | None]:
        """Build picker options and the id that should start highlighted."""
        options: list[Option] = []
        current: str | None = None

        if self.session.mode is Mode.PICK_MODEL:
            selected = self.session.selected
            if self.session.scope is PickerScope.ONE and selected is not None:
                current = MODEL_PREFIX + selected.model
            for title, models in self.session.model_sections():
                options.append(Option(f"── {title} ──", disabled=True))
                options.extend(Option(f"  {m}", id=MODEL_PREFIX + m) for m in models)
        else:
            default = self.session.default_reasoning()
            for level in self.session.reasoning_options():
                if level is None:
                    options.append(Option("  skip (leave unset)", id=SKIP_ID))
                    continue
                label = f"  {level} (default)" if level == default else f"  {level}"
                options.append(Option(label, id=LEVEL_PREFIX + level))

        return options, current

    def _render_picker(self) -> None:
        self.query_one("#picker-title", Static).update(self.session.picker_title)
        picker = self.query_one("#picker", OptionList)
        options, current = self._picker_options()
        picker.clear_options()
        picker.add_options(options)

        ids = [opt.id for opt in options]
        if current in ids:
            picker.highlighted = ids.index(current)
        else:
            picker.highlighted = next(i for i, opt in enumerate(options) if not opt.disabled)
        picker.focus()

    def render_session(self) -> None:
        """Re-render the whole screen from session state."""
        in_list = self.session.mode is Mode.LIST
        self.query_one("#list-view").display = in_list
        self.query_one("#picker-view").display = not in_list

        if in_list:
            self._render_table()
            self.query_one("#status", Static).update(self._status_text())
            self.set_focus(None)
        else:
            self._render_picker()

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        option_id = event.option.id or ""
        if option_id.startswith(MODEL_PREFIX):
            self.session.choose_model(option_id[len(MODEL_PREFIX):])
        elif option_id.startswith(LEVEL_PREFIX):
            self.session.choose_reasoning(option_id[len(LEVEL_PREFIX):])
        elif option_id == SKIP_ID:
            self.session.choose_reasoning(None)
        self.render_session()

    async def action_quit(self) -> None:
        """Quit, asking for a second press when there are unsaved edits."""
        if self.session.request_quit():
            self.exit()
            return
        self.render_session()

    def action_save(self) -> None:
        self.session.save_all()
        self.render_session()

    def action_set_all(self) -> None:
        self.session.open_model_picker(PickerScope.ALL)
        self.render_session()

    def action_all_inherit(self) -> None:
        self.session.set_all_inherit()
        self.render_session()

    def action_reload(self) -> None:
        self.session.reload()
        self.render_session()

    def action_edit(self) -> None:
        self.session.open_model_picker(PickerScope.ONE)
        self.render_session()

    def action_cursor_up(self) -> None:
        if self.session.mode is Mode.LIST:
            self.session.move_up()
            self.render_session()
        else:
            self.query_one("#picker", OptionList).action_cursor_up()

    def action_cursor_down(self) -> None:
        if self.session.mode is Mode.LIST:
            self.session.move_down()
            self.render_session()
        else:
            self.query_one("#picker", OptionList).action_cursor_down()

    def action_cancel(self) -> None:
        self.session.cancel()
        self.render_session()
