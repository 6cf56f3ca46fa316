"""Pytest configuration and shared fixtures."""
import asyncio
import heapq
import itertools
from typing import Any

import httpx
import pytest

from companion.schedule import MedicationSchedule
from companion.transport import CompanionTransport, HTTPCompanionTransport, TransportError


class FakeHandle:
    def __init__(self) -> None:
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeClock:
    """Simulated clock with an asyncio-style call_later."""

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: list = []
        self._counter = itertools.count()

    def call_later(self, delay: float, callback: Any, *args: Any) -> FakeHandle:
        handle = FakeHandle()
        heapq.heappush(self._queue, (self.now + delay, next(self._counter), handle, callback, args))
        return handle

    def advance(self, seconds: float) -> int:
        """Move time forward, firing due callbacks. Returns how many fired."""
        target = self.now + seconds
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            when, _, handle, callback, args = heapq.heappop(self._queue)
            self.now = when
            if not handle.cancelled:
                callback(*args)
                fired += 1
        self.now = target
        return fired

    @property
    def pending(self) -> int:
        return sum(1 for entry in self._queue if not entry[2].cancelled)


class FakeTransport(CompanionTransport):
    """In-memory transport.

    With ``gated=True`` every call waits on a future the test resolves, which
    lets tests choose the order replies arrive in.
    """

    def __init__(
        self,
        chat_reply: str = "Hello there!",
        reminder: str = "Time to take your medication.",
        schedule: dict | None = None,
        chat_error: Exception | None = None,
        reminder_error: Exception | None = None,
        schedule_error: Exception | None = None,
        gated: bool = False,
    ) -> None:
        self.chat_reply = chat_reply
        self.reminder = reminder
        self.schedule = schedule
        self.chat_error = chat_error
        self.reminder_error = reminder_error
        self.schedule_error = schedule_error
        self.gated = gated
        self.chat_calls: list[str] = []
        self.reminder_calls = 0
        self.schedule_calls = 0
        self.pending_chat: list[asyncio.Future] = []
        self.pending_reminder: list[asyncio.Future] = []
        self.pending_schedule: list[asyncio.Future] = []
        self.closed = False

    async def _gate(self, queue: list[asyncio.Future]) -> Any:
        future = asyncio.get_running_loop().create_future()
        queue.append(future)
        return await future

    async def send_chat(self, message: str) -> str:
        self.chat_calls.append(message)
        if self.gated:
            return await self._gate(self.pending_chat)
        if self.chat_error:
            raise self.chat_error
        return self.chat_reply

    async def fetch_reminder(self) -> str:
        self.reminder_calls += 1
        if self.gated:
            return await self._gate(self.pending_reminder)
        if self.reminder_error:
            raise self.reminder_error
        return self.reminder

    async def fetch_schedule(self) -> MedicationSchedule:
        self.schedule_calls += 1
        if self.gated:
            return await self._gate(self.pending_schedule)
        if self.schedule_error:
            raise self.schedule_error
        if self.schedule is None:
            raise TransportError("fetch_schedule", "no schedule configured")
        return MedicationSchedule.model_validate(self.schedule)

    async def close(self) -> None:
        self.closed = True


async def settle(rounds: int = 5) -> None:
    """Let spawned tasks run up to their next suspension point."""
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def schedule_payload():
    """Return a schedule payload as the companion service sends it."""
    return {
        "morning": {
            "medications": [
                {"name": "Metformin", "dosage": "500mg", "instructions": "With breakfast"},
                {"name": "Lisinopril", "dosage": "10mg", "instructions": "With water"},
            ],
            "time_range": [6, 12],
        },
        "afternoon": {
            "medications": [
                {"name": "Vitamin D", "dosage": "1000IU", "instructions": "After lunch"},
            ],
            "time_range": [12, 18],
        },
        "evening": {
            "medications": [
                {"name": "Atorvastatin", "dosage": "20mg", "instructions": "Before bed"},
            ],
            "time_range": [18, 22],
        },
    }


@pytest.fixture
def medication_schedule(schedule_payload):
    """Return the parsed schedule."""
    return MedicationSchedule.model_validate(schedule_payload)


@pytest.fixture
def clock():
    """Return a simulated clock."""
    return FakeClock()


@pytest.fixture
def fake_transport(schedule_payload):
    """Return an in-memory transport answering every call successfully."""
    return FakeTransport(chat_reply="Good morning!", schedule=schedule_payload)


@pytest.fixture
def gated_transport():
    """Return an in-memory transport whose replies the test releases."""
    return FakeTransport(gated=True)


@pytest.fixture
def make_http_transport():
    """Return a factory building an HTTP transport over a mock handler."""
    def _make(handler) -> HTTPCompanionTransport:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return HTTPCompanionTransport(base_url="http://companion.test", client=client)

    return _make
