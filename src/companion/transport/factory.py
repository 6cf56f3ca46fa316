from typing import Any

from .base import CompanionTransport
from .http import HTTPCompanionTransport


def create_companion_transport(kind: str = "http", **config: Any) -> CompanionTransport:
    """Create a companion transport instance.

    This factory function hides the instantiation logic for transports.

    Args:
        kind: Transport type ('http')
        **config: Transport-specific configuration
            For HTTP:
                - base_url: str (default: 'http://localhost:5000')
                - timeout: float (default: 10.0)
                - client: httpx.AsyncClient | None

    Returns:
        Initialized transport instance

    Raises:
        ValueError: If transport type is not supported or config is invalid

    Examples:
        >>> transport = create_companion_transport(
        ...     "http",
        ...     base_url="http://localhost:5000",
        ...     timeout=5.0
        ... )
    """
    kind_lower = kind.lower()

    if kind_lower == "http":
        timeout = config.get("timeout")
        if timeout is not None and timeout <= 0:
            raise ValueError(f"Transport timeout must be positive, got {timeout}")
        return HTTPCompanionTransport(**config)

    raise ValueError(
        f"Unsupported transport: {kind}. "
        f"Supported transports: 'http'"
    )
