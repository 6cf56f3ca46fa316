"""Main CLI application using Typer."""
import asyncio

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..controller import CHAT_FALLBACK, REMINDER_FALLBACK
from ..schedule import Period
from ..transport import TransportError
from .providers import get_base_url, get_controller, get_transport

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="companion",
    help="Conversational companion with medication reminders and schedules",
    no_args_is_help=True,
    add_completion=True,
)

# Console for rich output
console = Console()

BASE_URL_OPTION = typer.Option(
    None,
    "--base-url",
    "-u",
    help="Companion service URL (default: $COMPANION_BASE_URL or http://localhost:5000)"
)
TIMEOUT_OPTION = typer.Option(
    None,
    "--timeout",
    "-t",
    help="Request timeout in seconds (default: $COMPANION_TIMEOUT or 10)"
)


@app.command()
def ask(
    message: str = typer.Argument(..., help="Message to send to the companion"),
    base_url: str | None = BASE_URL_OPTION,
    timeout: float | None = TIMEOUT_OPTION,
):
    """Send one chat message and print the reply."""
    if not message.strip():
        console.print("[yellow]Nothing to send[/yellow]")
        raise typer.Exit(code=1)

    async def _ask():
        transport = get_transport(base_url, timeout, console)
        try:
            reply = await transport.send_chat(message)
        except TransportError as e:
            console.print(f"[dim]{escape(str(e))}[/dim]")
            reply = CHAT_FALLBACK
        finally:
            await transport.close()
        console.print(f"[bold magenta]Companion:[/] {escape(reply)}")

    asyncio.run(_ask())


@app.command()
def remind(
    base_url: str | None = BASE_URL_OPTION,
    timeout: float | None = TIMEOUT_OPTION,
):
    """Fetch and print a medication reminder."""
    async def _remind():
        transport = get_transport(base_url, timeout, console)
        try:
            reminder = await transport.fetch_reminder()
        except TransportError as e:
            console.print(f"[dim]{escape(str(e))}[/dim]")
            reminder = REMINDER_FALLBACK
        finally:
            await transport.close()
        console.print(f"[bold yellow]Reminder:[/] {escape(reminder)}")

    asyncio.run(_remind())


@app.command()
def schedule(
    period: str | None = typer.Argument(
        None,
        help="Period to show: morning, afternoon or evening (default: all)"
    ),
    base_url: str | None = BASE_URL_OPTION,
    timeout: float | None = TIMEOUT_OPTION,
):
    """Fetch and print the medication schedule."""
    selected: list[Period] | None = None
    if period is not None:
        try:
            requested = Period(period.strip().casefold())
        except ValueError:
            requested = Period.NO_MATCH
        if not requested.is_match:
            console.print(f"[red]Error: unknown period '{period}'[/red]")
            raise typer.Exit(code=1)
        selected = [requested]

    async def _schedule():
        transport = get_transport(base_url, timeout, console)
        try:
            result = await transport.fetch_schedule()
        except TransportError as e:
            console.print(f"[red]Error: {escape(str(e))}[/red]")
            raise typer.Exit(code=1)
        finally:
            await transport.close()

        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("Period", style="bold")
        table.add_column("Hours", style="dim", width=13)
        table.add_column("Medication", style="cyan")
        table.add_column("Dosage", style="green")
        table.add_column("Instructions")

        for p in selected or result.periods:
            entry = result.get(p)
            if entry is None:
                console.print(f"[yellow]No {p.value} schedule[/yellow]")
                continue
            start, end = entry.hours
            hours = f"{start}-{end}"
            if not entry.medications:
                table.add_row(p.value, hours, "-", "-", "-")
            for med in entry.medications:
                table.add_row(p.value, hours, med.name, med.dosage, med.instructions)

        console.print(table)

    asyncio.run(_schedule())


@app.command()
def chat(
    base_url: str | None = BASE_URL_OPTION,
    timeout: float | None = TIMEOUT_OPTION,
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Show log panel with level: debug (all), info, warning, or error"
    ),
):
    """Launch the interactive companion TUI."""
    controller = get_controller(base_url, timeout, console)

    async def _tui():
        from ..ui import run_companion_tui

        try:
            await run_companion_tui(
                controller,
                log_level=log_level,
                base_url=get_base_url(base_url),
            )
        finally:
            console.print("\n[dim]Goodbye![/dim]")

    try:
        asyncio.run(_tui())
    except KeyboardInterrupt:
        pass


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
