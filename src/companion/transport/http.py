from typing import Any

import httpx
from pydantic import ValidationError

from ..schedule.models import MedicationSchedule
from .base import CompanionTransport
from .errors import TransportError

DEFAULT_BASE_URL = "http://localhost:5000"
DEFAULT_TIMEOUT = 10.0


class HTTPCompanionTransport(CompanionTransport):
    """Companion service reached over HTTP.

    Hidden design decisions:
    - Endpoint paths and request encoding (form-encoded chat)
    - Response key names
    - Mapping httpx and decoding errors onto TransportError
    """

    CHAT_PATH = "/chat"
    REMIND_PATH = "/remind"
    SCHEDULE_PATH = "/medication_schedule"

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.AsyncClient | None = None,
        **client_kwargs: Any
    ):
        """Initialize the HTTP transport.

        Args:
            base_url: Companion service root URL
            timeout: Per-request timeout in seconds
            client: Pre-built client to use instead of creating one
            **client_kwargs: Additional kwargs for httpx.AsyncClient
        """
        self._debug_callback: Any | None = None
        self._base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=self._base_url,
            timeout=timeout,
            **client_kwargs
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    async def send_chat(self, message: str) -> str:
        data = await self._request(
            "send_chat", "POST", self.CHAT_PATH, data={"message": message}
        )
        return self._field(data, "response", "send_chat")

    async def fetch_reminder(self) -> str:
        data = await self._request("fetch_reminder", "GET", self.REMIND_PATH)
        return self._field(data, "reminder", "fetch_reminder")

    async def fetch_schedule(self) -> MedicationSchedule:
        data = await self._request("fetch_schedule", "GET", self.SCHEDULE_PATH)
        if not isinstance(data, dict) or "schedule" not in data:
            raise TransportError("fetch_schedule", "response has no 'schedule' field")
        try:
            return MedicationSchedule.model_validate(data["schedule"])
        except ValidationError as e:
            raise TransportError("fetch_schedule", "malformed schedule payload", cause=e) from e

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _request(self, operation: str, method: str, path: str, **kwargs: Any) -> Any:
        """Issue one request and decode its JSON body.

        Raises:
            TransportError: On any httpx error, non-2xx status or invalid JSON
        """
        url = f"{self._base_url}{path}"
        self._debug("debug", f"{method} {url}")
        try:
            response = await self._client.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            self._debug("warning", f"{operation} failed with HTTP {status}")
            raise TransportError(
                operation, f"HTTP {status}", cause=e, status_code=status
            ) from e
        except httpx.HTTPError as e:
            self._debug("warning", f"{operation} failed: {e!r}")
            raise TransportError(operation, str(e) or type(e).__name__, cause=e) from e

        try:
            return response.json()
        except ValueError as e:
            raise TransportError(operation, "invalid JSON in response", cause=e) from e

    @staticmethod
    def _field(data: Any, key: str, operation: str) -> str:
        if not isinstance(data, dict) or not isinstance(data.get(key), str):
            raise TransportError(operation, f"response has no string '{key}' field")
        return data[key]
