"""Interaction controller for the companion widget.

Owns the chat session, the reminder banner and the schedule panel, and is
the single writer of all three. The presentation layer reads snapshots and
forwards user intents; it is told to re-render through the change callback.

Every network call runs as its own asyncio task, so a slow reply never
blocks the next submit, reminder or schedule request.
"""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from ..reminder import DEFAULT_HIDE_AFTER, ReminderState, ReminderTimer, Scheduler
from ..schedule import (
    Period,
    SchedulePhase,
    SchedulePresentation,
    SchedulePresenter,
    ScheduleRequest,
    classify,
)
from ..session import ChatMessage, SessionStore
from ..transport import CompanionTransport, TransportError

CHAT_FALLBACK = "Sorry, I encountered an error. Please try again."
REMINDER_FALLBACK = "Unable to fetch reminder at this time."


@dataclass
class Submission:
    """Requests started by one submit.

    Attributes:
        message: The user message appended to the transcript
        period: Schedule period the text matched (NO_MATCH if none)
        chat: Task resolving the companion reply
        schedule: Task fetching the schedule, if the text matched a period
    """

    message: ChatMessage
    period: Period
    chat: asyncio.Task
    schedule: asyncio.Task | None = None

    async def wait(self) -> None:
        """Wait until every request of this submission has settled."""
        tasks = [t for t in (self.chat, self.schedule) if t is not None]
        await asyncio.gather(*tasks, return_exceptions=True)


class InteractionController:
    """Orchestrates chat, reminders and schedule lookups.

    Hidden design decisions:
    - Optimistic append of the user's message before the reply is known
    - Fallback texts for failed chat and reminder calls
    - Silent handling of failed schedule fetches
    - Fire-and-forget request tasks and their teardown

    Example:
        controller = InteractionController(transport)
        controller.open()
        submission = controller.submit("morning")
        await submission.wait()
        controller.schedule.is_open  # True if the fetch succeeded
        await controller.aclose()
    """

    def __init__(
        self,
        transport: CompanionTransport,
        reminder_hide_after: float = DEFAULT_HIDE_AFTER,
        scheduler: Scheduler | None = None,
    ) -> None:
        """Initialize the controller.

        Args:
            transport: Companion service transport
            reminder_hide_after: Seconds a reminder stays visible
            scheduler: Clock used for the reminder auto-hide (default: running loop)
        """
        self._transport = transport
        self._session = SessionStore()
        self._presenter = SchedulePresenter()
        self._reminder = ReminderTimer(
            hide_after=reminder_hide_after,
            scheduler=scheduler,
            on_change=self._on_reminder_change,
        )
        self._tasks: set[asyncio.Task] = set()
        self._reminder_request = 0
        self._is_open = False
        self._closed = False
        self._change_callback: Callable[[], None] | None = None
        self._debug_callback: Any | None = None

    # ------------------------------------------------------------------
    # Read-only state for the presentation layer
    # ------------------------------------------------------------------

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        return self._session.messages

    @property
    def current_input(self) -> str:
        return self._session.current_input

    @property
    def reminder(self) -> ReminderState:
        return self._reminder.state

    @property
    def schedule(self) -> SchedulePresentation:
        return self._presenter.presentation

    @property
    def schedule_phase(self) -> SchedulePhase:
        return self._presenter.phase

    @property
    def is_open(self) -> bool:
        """Whether the chat widget is currently shown."""
        return self._is_open

    @property
    def is_closed(self) -> bool:
        """Whether the controller has been torn down."""
        return self._closed

    @property
    def pending_requests(self) -> int:
        return len(self._tasks)

    def last_companion_reply(self) -> str | None:
        return self._session.last_companion_reply()

    # ------------------------------------------------------------------
    # Callbacks
    # ------------------------------------------------------------------

    def set_change_callback(self, callback: Callable[[], None] | None) -> None:
        """Set the callback invoked after every state change.

        Args:
            callback: Zero-argument callable, typically a re-render
        """
        self._change_callback = callback

    def set_debug_callback(self, callback: Any) -> None:
        """Set the debug callback for detailed logging.

        Args:
            callback: Callable(level: str, component: str, message: str)
                      level: 'debug', 'info', 'warning', 'error'
        """
        self._debug_callback = callback
        self._transport.set_debug_callback(callback)

    def _debug(self, level: str, component: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, component, message)

    def _notify(self) -> None:
        if self._change_callback is not None and not self._closed:
            self._change_callback()

    def _on_reminder_change(self, state: ReminderState) -> None:
        self._debug("debug", "Reminder", f"visible={state.visible}")
        self._notify()

    # ------------------------------------------------------------------
    # User intents
    # ------------------------------------------------------------------

    def open(self) -> None:
        """Show the chat widget."""
        self._ensure_active()
        self._is_open = True
        self._notify()

    def toggle(self) -> bool:
        """Toggle widget visibility. Returns the new state."""
        self._ensure_active()
        self._is_open = not self._is_open
        self._notify()
        return self._is_open

    def set_input(self, text: str) -> None:
        self._ensure_active()
        self._session.set_input(text)

    def submit(self, text: str | None = None) -> Submission | None:
        """Send a message to the companion.

        Appends the user's message and clears the input immediately, starts a
        schedule fetch when the text is a period keyword, and always starts a
        chat request.

        Args:
            text: Message to send (default: the current input)

        Returns:
            The started requests, or None if the text was empty
        """
        self._ensure_active()
        if text is None:
            text = self._session.current_input
        if not text.strip():
            return None

        message = self._session.append_user(text)
        self._session.clear_input()

        period = classify(text)
        schedule_task = None
        if period.is_match:
            request = self._presenter.begin(period)
            self._debug(
                "info", "Schedule",
                f"Keyword '{period.value}' matched, request #{request.request_id}"
            )
            schedule_task = self._spawn(self._load_schedule(request))

        chat_task = self._spawn(self._send_chat(text))
        self._notify()
        return Submission(
            message=message,
            period=period,
            chat=chat_task,
            schedule=schedule_task,
        )

    def request_reminder(self) -> asyncio.Task:
        """Fetch a reminder and show it in the auto-hiding banner.

        Returns:
            Task that settles once the banner has been armed. Only the latest
            request arms the banner; older replies are discarded.
        """
        self._ensure_active()
        self._reminder.cancel()
        self._reminder_request += 1
        return self._spawn(self._load_reminder(self._reminder_request))

    def dismiss_schedule(self) -> None:
        """Close the schedule panel."""
        self._ensure_active()
        self._presenter.dismiss()
        self._notify()

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Tear the widget down.

        Cancels the pending reminder hide and every outstanding request.
        Replies that arrive afterwards are ignored. Safe to call twice.
        """
        if self._closed:
            return
        self._reminder.cancel()
        for task in list(self._tasks):
            task.cancel()
        self._is_open = False
        self._closed = True
        self._debug("info", "Controller", "Closed")

    async def aclose(self) -> None:
        """Tear down and release the transport."""
        tasks = list(self._tasks)
        self.close()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        await self._transport.close()

    async def __aenter__(self) -> "InteractionController":
        self.open()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Request tasks
    # ------------------------------------------------------------------

    def _ensure_active(self) -> None:
        if self._closed:
            raise RuntimeError("Controller has been closed")

    def _spawn(self, coro: Any) -> asyncio.Task:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _send_chat(self, text: str) -> None:
        try:
            reply = await self._transport.send_chat(text)
        except TransportError as e:
            self._debug("error", "Controller", f"Chat failed: {e}")
            reply = CHAT_FALLBACK
        except Exception as e:
            self._debug("error", "Controller", f"Unexpected chat error: {e!r}")
            reply = CHAT_FALLBACK

        if self._closed:
            return
        self._session.append_companion(reply)
        self._notify()

    async def _load_reminder(self, request_id: int) -> None:
        try:
            text = await self._transport.fetch_reminder()
        except TransportError as e:
            self._debug("error", "Controller", f"Reminder failed: {e}")
            text = REMINDER_FALLBACK
        except Exception as e:
            self._debug("error", "Controller", f"Unexpected reminder error: {e!r}")
            text = REMINDER_FALLBACK

        if self._closed:
            return
        if request_id != self._reminder_request:
            self._debug("debug", "Reminder", f"Discarded stale reply #{request_id}")
            return
        self._reminder.arm(text)

    async def _load_schedule(self, request: ScheduleRequest) -> None:
        try:
            schedule = await self._transport.fetch_schedule()
        except TransportError as e:
            self._presenter.fail(request)
            self._debug("error", "Schedule", f"Request #{request.request_id} failed: {e}")
            self._notify()
            return
        except Exception as e:
            self._presenter.fail(request)
            self._debug(
                "error", "Schedule",
                f"Unexpected error in request #{request.request_id}: {e!r}"
            )
            self._notify()
            return

        if self._closed:
            return
        was_current = self._presenter.is_current(request)
        if self._presenter.resolve(request, schedule):
            self._debug("info", "Schedule", f"Showing {request.period.value} schedule")
        elif was_current:
            self._debug(
                "warning", "Schedule",
                f"Schedule has no '{request.period.value}' entry"
            )
        else:
            self._debug("debug", "Schedule", f"Discarded stale reply #{request.request_id}")
        self._notify()
