from abc import ABC, abstractmethod
from typing import Any

from ..schedule.models import MedicationSchedule


class CompanionTransport(ABC):
    """Abstract base class for companion service transports.

    This module hides the design decision of how the companion service is
    reached. Implementations must handle:
    - Client setup and connection reuse
    - Request encoding and response decoding
    - Translating every ordinary failure into TransportError

    Implementations make exactly one attempt per call; retrying is left to
    the caller.

    Supports async context manager protocol for proper resource cleanup:
        async with transport:
            reply = await transport.send_chat("hello")
    """

    @abstractmethod
    async def send_chat(self, message: str) -> str:
        """Send a chat message and return the companion's reply.

        Raises:
            TransportError: On network failure or an unusable response
        """
        pass

    @abstractmethod
    async def fetch_reminder(self) -> str:
        """Fetch a medication reminder text.

        Raises:
            TransportError: On network failure or an unusable response
        """
        pass

    @abstractmethod
    async def fetch_schedule(self) -> MedicationSchedule:
        """Fetch the full medication schedule (all periods).

        Raises:
            TransportError: On network failure or an unusable response
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""
        pass

    def set_debug_callback(self, callback: Any) -> None:
        """Set the debug callback for request logging.

        Args:
            callback: Callable(level: str, component: str, message: str)
        """
        self._debug_callback = callback

    def _debug(self, level: str, message: str) -> None:
        callback = getattr(self, "_debug_callback", None)
        if callback:
            callback(level, "Transport", message)

    async def __aenter__(self) -> "CompanionTransport":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit with automatic cleanup.

        Note: Suppresses "Event loop is closed" errors during cleanup,
        a known race in httpx/anyio shutdown.
        """
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise
