"""Reminder banner module."""

from .models import ReminderState
from .timer import DEFAULT_HIDE_AFTER, ReminderTimer, Scheduler

__all__ = [
    "DEFAULT_HIDE_AFTER",
    "ReminderState",
    "ReminderTimer",
    "Scheduler",
]
