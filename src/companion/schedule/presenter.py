"""Schedule panel state machine.

Hides how schedule fetches are tracked and which reply is allowed to update
the panel. Each fetch is tagged with a monotonically increasing request id;
only the latest outstanding request may change what is displayed.
"""

from dataclasses import dataclass
from enum import Enum

from .matcher import Period
from .models import MedicationSchedule, SchedulePresentation


class SchedulePhase(str, Enum):
    """Phase of the schedule panel."""

    IDLE = "idle"
    AWAITING_SCHEDULE = "awaiting_schedule"
    DISPLAYING = "displaying"


@dataclass(frozen=True)
class ScheduleRequest:
    """An outstanding schedule fetch."""

    request_id: int
    period: Period


class SchedulePresenter:
    """Holds the fetched schedule and which period is open.

    Example:
        presenter = SchedulePresenter()
        request = presenter.begin(Period.MORNING)
        schedule = await transport.fetch_schedule()
        presenter.resolve(request, schedule)
        presenter.presentation.is_open  # True
    """

    def __init__(self) -> None:
        self._presentation = SchedulePresentation()
        self._next_id = 0
        self._pending: ScheduleRequest | None = None

    @property
    def presentation(self) -> SchedulePresentation:
        """Current presentation snapshot."""
        return self._presentation

    @property
    def pending(self) -> ScheduleRequest | None:
        """The latest outstanding request, if any."""
        return self._pending

    @property
    def phase(self) -> SchedulePhase:
        if self._pending is not None:
            return SchedulePhase.AWAITING_SCHEDULE
        if self._presentation.is_open:
            return SchedulePhase.DISPLAYING
        return SchedulePhase.IDLE

    def begin(self, period: Period) -> ScheduleRequest:
        """Start tracking a fetch for the given period.

        Any earlier outstanding request becomes stale.

        Raises:
            ValueError: If period is NO_MATCH
        """
        if not period.is_match:
            raise ValueError("Cannot fetch a schedule for an unmatched period")
        self._next_id += 1
        self._pending = ScheduleRequest(request_id=self._next_id, period=period)
        return self._pending

    def is_current(self, request: ScheduleRequest) -> bool:
        return self._pending is not None and self._pending.request_id == request.request_id

    def resolve(self, request: ScheduleRequest, schedule: MedicationSchedule) -> bool:
        """Apply a fetched schedule.

        Returns:
            True if the panel was updated, False if the reply was stale or
            did not contain the requested period
        """
        if not self.is_current(request):
            return False
        self._pending = None
        if request.period not in schedule:
            return False
        self._presentation = SchedulePresentation(
            schedule=schedule,
            open_period=request.period,
            is_open=True,
        )
        return True

    def fail(self, request: ScheduleRequest) -> bool:
        """Record a failed fetch. The presentation is left untouched.

        Returns:
            True if the request was the current one
        """
        if not self.is_current(request):
            return False
        self._pending = None
        return True

    def dismiss(self) -> None:
        """Close the panel and drop any outstanding request."""
        self._pending = None
        self._presentation = SchedulePresentation(schedule=self._presentation.schedule)
