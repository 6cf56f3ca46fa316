"""Main Textual TUI application.

Hosts the companion widget: renders controller state and forwards user
intents. All rules about what happens on submit, reminder or dismiss live
in the InteractionController.
"""

import asyncio

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import Footer, Header

from ..controller import InteractionController
from .config import WELCOME_MESSAGE, LogLevel
from .styles import APP_CSS
from .widgets import (
    ChatHistoryWidget,
    ChatInputBar,
    DebugPanel,
    ReminderBanner,
    SchedulePanel,
)


class CompanionApp(App):
    """Textual TUI for the companion widget."""

    CSS = APP_CSS
    TITLE = "Companion"

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit"),
        Binding("ctrl+r", "request_reminder", "Reminder"),
        Binding("escape", "dismiss_schedule", "Close Schedule"),
        Binding("ctrl+t", "toggle_chat", "Toggle Chat"),
        Binding("ctrl+y", "copy_last_response", "Copy Response"),
        Binding("ctrl+d", "toggle_debug", "Debug"),
    ]

    def __init__(
        self,
        controller: InteractionController,
        log_level: str | None = None,
        base_url: str | None = None,
    ) -> None:
        super().__init__()
        self._controller = controller
        self._log_level = log_level
        self._base_url = base_url

    @property
    def controller(self) -> InteractionController:
        return self._controller

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield ChatHistoryWidget(id="chat-history", welcome=WELCOME_MESSAGE)
        with Vertical(id="side-panel"):
            yield ReminderBanner(id="reminder-banner")
            yield SchedulePanel(id="schedule-panel")
            yield DebugPanel(id="debug-panel")
        yield ChatInputBar(id="chat-input-bar")
        yield Footer()

    def on_mount(self) -> None:
        """Called when app is mounted."""
        if self._log_level is not None:
            log_panel = self.query_one("#debug-panel", DebugPanel)
            log_panel.log_level = LogLevel.from_string(self._log_level)
            log_panel.show()
            log_panel.info("TUI", f"Log panel enabled with level: {self._log_level.upper()}")

        if self._base_url:
            self.sub_title = self._base_url

        self._controller.set_debug_callback(self._on_debug)
        self._controller.set_change_callback(self._refresh_view)
        self._controller.open()
        self.query_one("#chat-input-bar", ChatInputBar).focus_input()

    def on_unmount(self) -> None:
        """Tear the widget down so no timer fires into destroyed widgets."""
        self._controller.set_change_callback(None)
        self._controller.set_debug_callback(None)
        self._controller.close()

    def _on_debug(self, level: str, component: str, message: str) -> None:
        self.query_one("#debug-panel", DebugPanel).emit(level, component, message)

    def _refresh_view(self) -> None:
        """Re-render every panel from controller state."""
        chat = self.query_one("#chat-history", ChatHistoryWidget)
        chat.sync(self._controller.messages)
        chat.set_class(not self._controller.is_open, "-hidden")
        self.query_one("#reminder-banner", ReminderBanner).show_state(self._controller.reminder)
        self.query_one("#schedule-panel", SchedulePanel).show_presentation(self._controller.schedule)

    def on_chat_input_bar_changed(self, event: ChatInputBar.Changed) -> None:
        if not self._controller.is_closed:
            self._controller.set_input(event.value)

    def on_chat_input_bar_submitted(self, event: ChatInputBar.Submitted) -> None:
        """Handle user input submission."""
        submission = self._controller.submit(event.value)
        if submission is None:
            return
        self.query_one("#chat-input-bar", ChatInputBar).clear()

    def action_request_reminder(self) -> None:
        self._controller.request_reminder()

    def action_dismiss_schedule(self) -> None:
        self._controller.dismiss_schedule()

    def action_toggle_chat(self) -> None:
        self._controller.toggle()

    def action_toggle_debug(self) -> None:
        """Toggle the log panel visibility."""
        log_panel = self.query_one("#debug-panel", DebugPanel)
        is_visible = log_panel.toggle()
        self.notify(f"Log panel {'shown' if is_visible else 'hidden'}", timeout=2)

    def action_copy_last_response(self) -> None:
        """Copy last companion reply to clipboard."""
        response = self._controller.last_companion_reply()
        if response:
            self.copy_to_clipboard(response)
            self.notify("Response copied")
        else:
            self.notify("No response to copy", severity="warning")


async def run_companion_tui(
    controller: InteractionController,
    log_level: str | None = None,
    base_url: str | None = None,
) -> None:
    """Run the Textual TUI.

    Args:
        controller: Interaction controller to host
        log_level: Log level for panel (debug/info/warning/error), None to hide
        base_url: Companion service URL shown in the header
    """
    app = CompanionApp(controller=controller, log_level=log_level, base_url=base_url)
    try:
        await app.run_async()
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
    finally:
        await controller.aclose()
