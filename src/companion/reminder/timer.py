"""Auto-hiding reminder timer.

Hides how the delayed hide is scheduled and cancelled. Scheduling goes
through a Scheduler so an asyncio loop can be swapped for a simulated clock.
"""

import asyncio
from collections.abc import Callable
from typing import Any, Protocol

from .models import ReminderState

DEFAULT_HIDE_AFTER = 5.0


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Anything with an asyncio-style ``call_later``."""

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle: ...


class ReminderTimer:
    """Single-shot, cancellable auto-hide for the reminder banner.

    At most one hide is pending at any time. Re-arming cancels the previous
    hide before scheduling a new one, and each scheduled hide carries the
    generation it was armed with so a stale one can never hide a newer
    reminder.

    Example:
        timer = ReminderTimer(on_change=refresh)
        timer.arm("Take your vitamins")
        timer.state.visible  # True, hidden again after 5 seconds
    """

    def __init__(
        self,
        hide_after: float = DEFAULT_HIDE_AFTER,
        scheduler: Scheduler | None = None,
        on_change: Callable[[ReminderState], None] | None = None,
    ) -> None:
        if hide_after <= 0:
            raise ValueError(f"hide_after must be positive, got {hide_after}")
        self._hide_after = hide_after
        self._scheduler = scheduler
        self._on_change = on_change
        self._state = ReminderState()
        self._handle: TimerHandle | None = None
        self._generation = 0

    @property
    def state(self) -> ReminderState:
        return self._state

    @property
    def hide_after(self) -> float:
        return self._hide_after

    @property
    def is_armed(self) -> bool:
        """Whether an auto-hide is pending."""
        return self._handle is not None

    def arm(self, text: str) -> None:
        """Show a reminder and schedule its auto-hide."""
        self.cancel()
        self._set_state(ReminderState(text=text, visible=True))
        scheduler = self._scheduler or asyncio.get_running_loop()
        self._handle = scheduler.call_later(self._hide_after, self._hide, self._generation)

    def cancel(self) -> None:
        """Drop the pending auto-hide. Visibility is unchanged."""
        self._generation += 1
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _hide(self, generation: int) -> None:
        if generation != self._generation:
            return
        self._handle = None
        self._set_state(ReminderState())

    def _set_state(self, state: ReminderState) -> None:
        self._state = state
        if self._on_change is not None:
            self._on_change(state)
