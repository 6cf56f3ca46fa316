"""Terminal UI module for the companion widget.

Provides a Textual-based TUI hosting the InteractionController.

Module structure (each module hides a design decision):
- config.py: Constants and log levels
- widgets.py: Custom widgets (chat transcript, reminder banner, schedule table, log)
- styles.py: CSS styling (layout decisions)
- app.py: Application wiring (which key does what)
"""

from .app import CompanionApp, run_companion_tui
from .config import LogLevel
from .widgets import ChatHistoryWidget, ChatInputBar, DebugPanel, ReminderBanner, SchedulePanel

__all__ = [
    "ChatHistoryWidget",
    "ChatInputBar",
    "CompanionApp",
    "DebugPanel",
    "LogLevel",
    "ReminderBanner",
    "SchedulePanel",
    "run_companion_tui",
]
