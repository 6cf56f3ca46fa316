"""Data models for medication schedules.

These models mirror the companion service's schedule payload and the
snapshot the presentation layer renders from.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, RootModel, model_validator

from .matcher import Period

_SCHEDULED = frozenset(p.value for p in Period if p.is_match)


def _clock(hour: float) -> str:
    minutes = round(hour * 60)
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


class Medication(BaseModel):
    """A single medication entry."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Medication name")
    dosage: str = Field(description="Dosage, e.g. '10mg'")
    instructions: str = Field(default="", description="How to take it")


class PeriodSchedule(BaseModel):
    """Medications due within one period of the day."""

    model_config = ConfigDict(frozen=True)

    medications: tuple[Medication, ...] = Field(default_factory=tuple)
    time_range: tuple[float, float] = Field(description="Start and end hour")

    @property
    def hours(self) -> tuple[str, str]:
        """Start and end as HH:MM, fractional hours carried into minutes."""
        return _clock(self.time_range[0]), _clock(self.time_range[1])


class MedicationSchedule(RootModel[dict[Period, PeriodSchedule]]):
    """Full schedule keyed by period, fetched in one call."""

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def drop_unknown_periods(cls, data: Any) -> Any:
        """Keep only morning, afternoon and evening entries."""
        if not isinstance(data, dict):
            return data
        return {
            key: value for key, value in data.items()
            if getattr(key, "value", key) in _SCHEDULED
        }

    def get(self, period: Period) -> PeriodSchedule | None:
        return self.root.get(period)

    def __contains__(self, period: object) -> bool:
        return period in self.root

    @property
    def periods(self) -> list[Period]:
        """Periods present in the schedule, in day order."""
        order = [Period.MORNING, Period.AFTERNOON, Period.EVENING]
        return [p for p in order if p in self.root]


class SchedulePresentation(BaseModel):
    """What the schedule panel should show.

    Replaced as a whole on every change, never mutated in place.
    """

    model_config = ConfigDict(frozen=True)

    schedule: MedicationSchedule | None = None
    open_period: Period | None = None
    is_open: bool = False

    @property
    def current(self) -> PeriodSchedule | None:
        """Schedule for the open period, if the panel is open."""
        if not self.is_open or self.schedule is None or self.open_period is None:
            return None
        return self.schedule.get(self.open_period)
