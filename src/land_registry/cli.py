"""Typer CLI for the land registry."""

import asyncio

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(name="land-registry", help="Land registry API server and admin tools")
console = Console()


@app.command()
def serve(
    host: str = typer.Option(None, help="Bind host (defaults to settings)"),
    port: int = typer.Option(None, help="Bind port (defaults to settings)"),
):
    """Start the land registry API server."""
    import uvicorn
    from land_registry.app import create_app
    from land_registry.common.config import get_settings

    settings = get_settings()
    host = host or settings.host
    port = port or settings.port
    console.print(f"[bold green]Starting land registry on {host}:{port}[/bold green]")
    uvicorn.run(create_app(), host=host, port=port)


async def _seed_users() -> list:
    from land_registry.common.config import get_settings
    from land_registry.common.database import DatabaseManager
    from land_registry.users.service import UserService

    settings = get_settings()
    db = DatabaseManager(settings)
    await db.init()
    await db.create_all()
    try:
        async with db.get_session() as session:
            return await UserService().seed_defaults(
                session,
                admin_password=settings.admin_password,
                verifier_password=settings.verifier_password,
            )
    finally:
        await db.close()


@app.command("seed-users")
def seed_users():
    """Create the initial admin and verifier accounts if they are missing."""
    from land_registry.common.logging import setup_logging

    setup_logging("WARNING")
    created = asyncio.run(_seed_users())
    if not created:
        console.print("[yellow]Nothing to do: admin and verifier already exist[/yellow]")
        return
    for user in created:
        console.print(f"  [green]created[/green] {user.username} ({user.role.value})")


async def _stats() -> dict[str, int]:
    from land_registry.common.config import get_settings
    from land_registry.common.database import DatabaseManager
    from land_registry.system.service import StatsService

    db = DatabaseManager(get_settings())
    await db.init()
    await db.create_all()
    try:
        async with db.get_session() as session:
            return await StatsService().get_stats(session)
    finally:
        await db.close()


@app.command()
def stats():
    """Print registry counts straight from the database."""
    counts = asyncio.run(_stats())
    table = Table(title="Land registry")
    table.add_column("Metric")
    table.add_column("Count", justify="right")
    for name, value in counts.items():
        table.add_row(name.replace("_", " "), str(value))
    console.print(table)


@app.command()
def health(
    url: str = typer.Option("http://localhost:5000", help="Server URL"),
):
    """Check land registry server health."""
    import httpx

    try:
        resp = httpx.get(f"{url}/health", timeout=5)
        data = resp.json()
        console.print(f"[bold green]{data['status']}[/bold green] — v{data['version']}")
    except (httpx.HTTPError, ValueError, KeyError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
