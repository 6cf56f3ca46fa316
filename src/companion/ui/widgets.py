"""Custom Textual widgets for the TUI.

Hides widget implementation details:
- Input history management
- Chat message rendering
- Reminder banner and schedule table rendering
- Log rendering and level filtering
"""

from datetime import datetime

from rich.table import Table
from rich.text import Text
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.events import Click
from textual.message import Message
from textual.widgets import Button, RichLog, Static, TextArea

from ..reminder import ReminderState
from ..schedule import SchedulePresentation
from ..session import ChatMessage, Role
from .config import (
    CHAT_TIMESTAMP_FORMAT,
    COMPANION_NAME,
    INPUT_HISTORY_MAX_SIZE,
    LOG_MAX_MESSAGE_LENGTH,
    LOG_TIMESTAMP_FORMAT,
    LogLevel,
)


class ClickableMessage(Vertical):
    """A chat message container that copies content when clicked."""

    def __init__(self, content: str, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._content = content

    def on_click(self, event: Click) -> None:
        event.stop()
        try:
            import pyperclip
            pyperclip.copy(self._content)
            self.app.notify("Copied to clipboard", timeout=2)
        except Exception:
            self.app.copy_to_clipboard(self._content)
            self.app.notify("Copied (terminal)", timeout=2)


class ChatInputBar(Horizontal):
    """Chat input bar with TextArea and Send button."""

    class Submitted(Message):
        """Message sent when user submits input."""

        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    class Changed(Message):
        """Message sent when the draft text changes."""

        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._history: list[str] = []
        self._history_index: int = -1

    def compose(self):
        text_area = TextArea(id="chat-input", show_line_numbers=False)
        text_area.cursor_blink = False
        yield text_area
        yield Button("Send", id="send-btn", variant="success").with_tooltip(
            "Send message (Ctrl+J)"
        )

    def on_mount(self) -> None:
        text_area = self.query_one("#chat-input", TextArea)
        text_area.focus()
        text_area.highlight_cursor_line = False

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "send-btn":
            self._submit()

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        event.stop()
        self.post_message(self.Changed(event.text_area.text))

    def on_key(self, event) -> None:
        """Handle keyboard shortcuts.

        Note: ctrl+enter cannot work in terminals, so ctrl+j submits.
        """
        if event.key == "ctrl+j":
            self._submit()
            event.prevent_default()
            event.stop()
        elif event.key == "up" and self._is_cursor_at_start():
            self._navigate_history(-1)
            event.prevent_default()
            event.stop()
        elif event.key == "down" and self._is_cursor_at_end():
            self._navigate_history(1)
            event.prevent_default()
            event.stop()

    def _is_cursor_at_start(self) -> bool:
        text_area = self.query_one("#chat-input", TextArea)
        return text_area.cursor_location == (0, 0)

    def _is_cursor_at_end(self) -> bool:
        text_area = self.query_one("#chat-input", TextArea)
        lines = text_area.text.split("\n")
        last_row = len(lines) - 1
        last_col = len(lines[-1]) if lines else 0
        return text_area.cursor_location == (last_row, last_col)

    def _navigate_history(self, direction: int) -> None:
        if not self._history:
            return
        text_area = self.query_one("#chat-input", TextArea)
        if direction < 0:  # Up
            if self._history_index == -1:
                self._history_index = len(self._history) - 1
            elif self._history_index > 0:
                self._history_index -= 1
        else:  # Down
            if self._history_index < len(self._history) - 1:
                self._history_index += 1
            else:
                self._history_index = -1
                text_area.text = ""
                return
        text_area.text = self._history[self._history_index]

    def _submit(self) -> None:
        # Whitespace-only drafts are left for the controller to reject
        text_area = self.query_one("#chat-input", TextArea)
        value = text_area.text
        if value.strip():
            stripped = value.strip()
            if not self._history or self._history[-1] != stripped:
                self._history.append(stripped)
                del self._history[:-INPUT_HISTORY_MAX_SIZE]
            self._history_index = -1
        self.post_message(self.Submitted(value))

    def clear(self) -> None:
        self.query_one("#chat-input", TextArea).text = ""

    def focus_input(self) -> None:
        """Focus the text input."""
        self.query_one("#chat-input", TextArea).focus()


class ChatHistoryWidget(VerticalScroll):
    """Scrollable chat transcript.

    The transcript is append-only, so syncing only mounts messages that have
    not been rendered yet.
    """

    BORDER_TITLE = "Chat"
    BORDER_SUBTITLE = "Conversation"
    ALLOW_SELECT = True

    def __init__(self, *args, welcome: str | None = None, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._welcome = welcome
        self._rendered = 0

    def on_mount(self) -> None:
        if self._welcome:
            self.mount(self._build(COMPANION_NAME, "companion-message", self._welcome, None))

    def sync(self, messages: tuple[ChatMessage, ...]) -> None:
        """Render any messages appended since the last sync."""
        new = messages[self._rendered:]
        if not new:
            return
        for msg in new:
            if msg.role is Role.USER:
                widget = self._build("You", "user-message", msg.content, msg.timestamp)
            else:
                widget = self._build(COMPANION_NAME, "companion-message", msg.content, msg.timestamp)
            self.mount(widget)
        self._rendered = len(messages)
        self.border_subtitle = f"{self._rendered} messages"
        self.scroll_end(animate=False)

    def _build(
        self, author: str, css_class: str, content: str, timestamp: datetime | None
    ) -> ClickableMessage:
        header = author if timestamp is None else f"{author} [{timestamp.strftime(CHAT_TIMESTAMP_FORMAT)}]"
        container = ClickableMessage(content=content, classes=f"chat-message {css_class}")
        container.compose_add_child(Static(header, classes="message-header", markup=False))
        container.compose_add_child(Static(content, classes="message-content", markup=False))
        return container


class ReminderBanner(Static):
    """Banner showing the current medication reminder."""

    BORDER_TITLE = "Reminder"

    def on_mount(self) -> None:
        self.display = False

    def show_state(self, state: ReminderState) -> None:
        self.display = state.visible
        if state.visible and state.text is not None:
            self.update(Text(state.text))


class SchedulePanel(Static):
    """Panel listing the medications for the open period."""

    BORDER_TITLE = "Schedule"

    def on_mount(self) -> None:
        self.display = False

    def show_presentation(self, presentation: SchedulePresentation) -> None:
        current = presentation.current
        if current is None or presentation.open_period is None:
            self.display = False
            return

        start, end = current.hours
        self.border_title = f"{presentation.open_period.value.capitalize()} Medications"
        self.border_subtitle = f"{start} - {end}  [Esc] close"

        if not current.medications:
            self.update(Text("No medications scheduled.", style="dim"))
        else:
            table = Table(expand=True, show_edge=False)
            table.add_column("Medication", style="bold")
            table.add_column("Dosage")
            table.add_column("Instructions", style="dim")
            for med in current.medications:
                table.add_row(med.name, med.dosage, med.instructions)
            self.update(table)
        self.display = True


class DebugPanel(RichLog):
    """Log panel for real-time tracing with level filtering.

    Shows timestamped log messages from all components.
    Supports standard log levels: DEBUG < INFO < WARNING < ERROR.
    Hidden by default, shown with --log-level flag or toggled with Ctrl+D.
    """

    BORDER_TITLE = "Log"
    BORDER_SUBTITLE = "Trace log"

    COMPONENT_COLORS = {
        "TUI": "cyan",
        "Controller": "green",
        "Transport": "magenta",
        "Schedule": "bright_blue",
        "Reminder": "bright_yellow",
    }

    LEVEL_COLORS = {
        LogLevel.DEBUG: "dim white",
        LogLevel.INFO: "cyan",
        LogLevel.WARNING: "yellow",
        LogLevel.ERROR: "red",
    }

    def __init__(self, *args, log_level: int = LogLevel.DEBUG, **kwargs) -> None:
        super().__init__(
            *args,
            markup=True,
            highlight=False,
            auto_scroll=True,
            wrap=False,
            **kwargs
        )
        self._log_level = log_level

    @property
    def log_level(self) -> int:
        """Current log level threshold."""
        return self._log_level

    @log_level.setter
    def log_level(self, level: int) -> None:
        self._log_level = level
        self._update_subtitle()

    def _update_subtitle(self) -> None:
        if self.display:
            self.border_subtitle = f"Level: {LogLevel.name(self._log_level)}"
        else:
            self.border_subtitle = "Hidden"

    def on_mount(self) -> None:
        """Hide by default."""
        self.display = False

    def log_entry(
        self,
        component: str,
        message: str,
        level: int = LogLevel.DEBUG
    ) -> None:
        """Add a log entry if it meets the current level threshold.

        Args:
            component: Component name (TUI, Controller, Transport, etc.)
            message: Log message
            level: Log level (LogLevel.DEBUG, INFO, WARNING, ERROR)
        """
        if level < self._log_level:
            return

        if len(message) > LOG_MAX_MESSAGE_LENGTH:
            message = message[:LOG_MAX_MESSAGE_LENGTH] + "..."

        timestamp = datetime.now().strftime(LOG_TIMESTAMP_FORMAT)
        level_color = self.LEVEL_COLORS.get(level, "white")
        comp_color = self.COMPONENT_COLORS.get(component, "white")

        line = Text()
        line.append(f"{timestamp} ", style="dim")
        line.append(f"{LogLevel.name(level):<5} ", style=level_color)
        line.append(f"[{component}] ", style=comp_color)
        line.append(message)
        self.write(line)

    def emit(self, level: str, component: str, message: str) -> None:
        """Debug-callback entry point: route a string level to the log."""
        self.log_entry(component, message, LogLevel.from_string(level))

    def info(self, component: str, message: str) -> None:
        self.log_entry(component, message, LogLevel.INFO)

    def show(self) -> None:
        self.display = True
        self._update_subtitle()

    def hide(self) -> None:
        self.display = False
        self.border_subtitle = "Hidden"

    def toggle(self) -> bool:
        """Toggle visibility. Returns new state."""
        if self.display:
            self.hide()
            return False
        self.show()
        return True
