"""Provider factory functions for CLI.

Centralizes creation of the transport and controller from environment
variables. Hides configuration details from command implementations.
"""

import os

from rich.console import Console

from ..controller import InteractionController
from ..reminder import DEFAULT_HIDE_AFTER
from ..transport import (
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT,
    CompanionTransport,
    create_companion_transport,
)

# Default console for output
_console = Console()


def _float_from_env(name: str, default: float, console: Console) -> float:
    import typer

    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        console.print(f"[red]Error: {name} must be a number, got '{raw}'[/red]")
        raise typer.Exit(code=1)
    if value <= 0:
        console.print(f"[red]Error: {name} must be positive, got {value}[/red]")
        raise typer.Exit(code=1)
    return value


def get_base_url(base_url: str | None = None) -> str:
    """Resolve the companion service URL.

    Environment variables:
        COMPANION_BASE_URL: Service root URL (default: http://localhost:5000)
    """
    return base_url or os.getenv("COMPANION_BASE_URL", DEFAULT_BASE_URL)


def get_transport(
    base_url: str | None = None,
    timeout: float | None = None,
    console: Console | None = None
) -> CompanionTransport:
    """Create the companion transport from arguments or environment variables.

    Args:
        base_url: Overrides COMPANION_BASE_URL
        timeout: Overrides COMPANION_TIMEOUT
        console: Optional Rich console for output

    Returns:
        HTTP companion transport instance

    Raises:
        SystemExit: If the configuration is invalid

    Environment variables:
        COMPANION_BASE_URL: Service root URL (default: http://localhost:5000)
        COMPANION_TIMEOUT: Request timeout in seconds (default: 10)
    """
    import typer

    con = console or _console
    if timeout is None:
        timeout = _float_from_env("COMPANION_TIMEOUT", DEFAULT_TIMEOUT, con)

    try:
        return create_companion_transport(
            "http",
            base_url=get_base_url(base_url),
            timeout=timeout,
        )
    except ValueError as e:
        con.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)


def get_controller(
    base_url: str | None = None,
    timeout: float | None = None,
    console: Console | None = None
) -> InteractionController:
    """Create an interaction controller wired to the configured transport.

    Environment variables:
        COMPANION_REMINDER_SECONDS: Seconds a reminder stays visible (default: 5)
    """
    con = console or _console
    transport = get_transport(base_url=base_url, timeout=timeout, console=con)
    hide_after = _float_from_env("COMPANION_REMINDER_SECONDS", DEFAULT_HIDE_AFTER, con)
    return InteractionController(transport, reminder_hide_after=hide_after)
