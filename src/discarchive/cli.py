"""Command line interface for Disc Archive."""

import asyncio

import typer
from rich.console import Console

from discarchive import __version__
from discarchive.core.config import settings
from discarchive.core.exceptions import ValidationError
from discarchive.services.disc_codes import generate_disc_code
from discarchive.services.size_units import format_size, parse_size_string

app = typer.Typer(
    name="discarchive",
    help="Disc Archive - Optical disc catalogue server",
)
console = Console()


@app.command()
def serve(
    host: str = typer.Option(settings.host, "--host", help="Interface to bind"),
    port: int = typer.Option(settings.port, "--port", "-p", help="Port to listen on"),
    reload: bool = typer.Option(settings.debug, "--reload", help="Reload on code changes"),
) -> None:
    """Run the Disc Archive API server."""
    import uvicorn

    console.print(f"[bold]Disc Archive Server v{__version__}[/bold] on {host}:{port}")
    uvicorn.run("discarchive.main:app", host=host, port=port, reload=reload)


@app.command("init-db")
def init_db_command() -> None:
    """Create the database tables."""
    from discarchive.database import get_database_url, init_db

    asyncio.run(init_db())
    console.print(f"[green][OK][/green] Database ready: {get_database_url()}")


@app.command("parse-size")
def parse_size_command(text: str = typer.Argument(..., help='Size such as "1.5GiB"')) -> None:
    """Convert a size string to KiB."""
    try:
        kib = parse_size_string(text)
    except ValidationError as e:
        console.print(f"[red][X][/red] {e.message}")
        raise typer.Exit(code=1) from e
    console.print(f"{kib} KiB ({format_size(kib)})")


@app.command("format-size")
def format_size_command(kib: int = typer.Argument(..., min=0, help="Size in KiB")) -> None:
    """Render a KiB value as KiB/MiB/GiB."""
    console.print(format_size(kib))


@app.command("new-code")
def new_code(count: int = typer.Option(1, "--count", "-n", min=1, help="How many codes")) -> None:
    """Generate random disc codes (not checked against the database)."""
    for _ in range(count):
        console.print(generate_disc_code())


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"Disc Archive v{__version__}")


if __name__ == "__main__":
    app()
