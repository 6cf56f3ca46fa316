"""Medication schedule module.

- matcher.py: keyword detection (which inputs ask for a schedule)
- models.py: schedule payload and presentation snapshot
- presenter.py: panel state machine and stale-reply rejection
"""

from .matcher import Period, classify
from .models import Medication, MedicationSchedule, PeriodSchedule, SchedulePresentation
from .presenter import SchedulePhase, SchedulePresenter, ScheduleRequest

__all__ = [
    "Medication",
    "MedicationSchedule",
    "Period",
    "PeriodSchedule",
    "SchedulePhase",
    "SchedulePresentation",
    "SchedulePresenter",
    "ScheduleRequest",
    "classify",
]
