"""Companion service transport module.

Hides how chat replies, reminders and schedules are obtained from the
companion backend.
"""

from .base import CompanionTransport
from .errors import TransportError
from .factory import create_companion_transport
from .http import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, HTTPCompanionTransport

__all__ = [
    "CompanionTransport",
    "DEFAULT_BASE_URL",
    "DEFAULT_TIMEOUT",
    "HTTPCompanionTransport",
    "TransportError",
    "create_companion_transport",
]
