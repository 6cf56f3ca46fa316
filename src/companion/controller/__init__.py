"""Interaction controller module.

The state machine behind the companion widget: chat transcript, reminder
banner and schedule panel, driven by user intents and transport replies.
"""

from .controller import CHAT_FALLBACK, REMINDER_FALLBACK, InteractionController, Submission

__all__ = [
    "CHAT_FALLBACK",
    "REMINDER_FALLBACK",
    "InteractionController",
    "Submission",
]
