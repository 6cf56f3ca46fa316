"""
Companion: a conversational companion widget with medication reminders.

This package follows Parnas's information hiding principles,
where each module hides a specific design decision.
"""

__version__ = "0.1.0"

from .controller import CHAT_FALLBACK, REMINDER_FALLBACK, InteractionController, Submission
from .reminder import ReminderState, ReminderTimer
from .schedule import (
    Medication,
    MedicationSchedule,
    Period,
    PeriodSchedule,
    SchedulePresentation,
    classify,
)
from .session import ChatMessage, Role, SessionStore
from .transport import (
    CompanionTransport,
    HTTPCompanionTransport,
    TransportError,
    create_companion_transport,
)

__all__ = [
    "CHAT_FALLBACK",
    "REMINDER_FALLBACK",
    "ChatMessage",
    "CompanionTransport",
    "HTTPCompanionTransport",
    "InteractionController",
    "Medication",
    "MedicationSchedule",
    "Period",
    "PeriodSchedule",
    "ReminderState",
    "ReminderTimer",
    "Role",
    "SchedulePresentation",
    "SessionStore",
    "Submission",
    "TransportError",
    "classify",
]
