"""Command-line interface for CollectionHub.

This module provides the CLI commands for running and managing
the CollectionHub service.
"""

import asyncio
from typing import NoReturn

import click

from collectionhub import __version__
from collectionhub.core.config import get_settings
from collectionhub.core.logging import configure_logging, get_logger


@click.group()
@click.version_option(version=__version__, prog_name="CollectionHub")
def cli() -> None:
    """CollectionHub - curated collections of projects.

    Settings are loaded from COLLECTIONHUB_* environment variables
    and the .env file.
    """


@cli.command()
@click.option("--host", type=str, default=None, help="Host to bind to (overrides config)")
@click.option("--port", type=int, default=None, help="Port to bind to (overrides config)")
@click.option(
    "--workers",
    type=int,
    default=None,
    help="Number of worker processes (overrides config)",
)
@click.option(
    "--reload",
    is_flag=True,
    default=False,
    help="Enable auto-reload for development",
)
def serve(host: str | None, port: int | None, workers: int | None, reload: bool) -> None:
    """Start the CollectionHub server."""
    import uvicorn

    settings = get_settings()

    bind_host = host or settings.host
    bind_port = port or settings.port
    bind_workers = workers or settings.workers

    configure_logging(settings)
    logger = get_logger(__name__)
    logger.info(
        "Starting CollectionHub server",
        host=bind_host,
        port=bind_port,
        workers=bind_workers,
        reload=reload,
        environment=settings.environment,
    )

    uvicorn.run(
        "collectionhub.infrastructure.api.app:app",
        host=bind_host,
        port=bind_port,
        workers=1 if reload else bind_workers,
        reload=reload,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


@cli.command()
@click.option("--force", is_flag=True, help="Skip confirmation prompt")
def init_db(force: bool) -> None:
    """Create all database tables.

    Use this only in development. In production, run the alembic
    migrations instead.
    """
    from collectionhub.infrastructure.persistence import models  # noqa: F401
    from collectionhub.infrastructure.persistence.database import get_db_manager

    settings = get_settings()
    configure_logging(settings)

    if settings.is_production and not force:
        click.echo(
            "ERROR: Running in production mode. Use migrations instead of init-db.",
            err=True,
        )
        raise SystemExit(1)

    if not force:
        click.confirm("This will create all database tables. Continue?", abort=True, default=False)

    async def initialize():
        db = get_db_manager()
        try:
            await db.create_tables()
            click.echo("Database initialized successfully.")
        finally:
            await db.disconnect()

    asyncio.run(initialize())


@cli.command()
@click.argument("project_id")
@click.option("--title", type=str, default="", help="Project title")
def add_project(project_id: str, title: str) -> None:
    """Register a project so collections can reference it."""
    from collectionhub.infrastructure.persistence.database import get_db_manager, transaction
    from collectionhub.infrastructure.persistence.models import ProjectModel

    configure_logging(get_settings())

    async def insert():
        db = get_db_manager()
        try:
            async with db.session() as session:
                async with transaction(session):
                    session.add(ProjectModel(id=project_id, title=title or project_id))
            click.echo(f"Project {project_id} added.")
        finally:
            await db.disconnect()

    asyncio.run(insert())


@cli.command()
def check_storage() -> None:
    """Verify the configured asset store is reachable."""
    from collectionhub.infrastructure.storage import create_asset_store

    settings = get_settings()
    configure_logging(settings)

    ok, error = asyncio.run(create_asset_store(settings).test_connection())
    if not ok:
        click.echo(f"Storage check failed: {error}", err=True)
        raise SystemExit(1)
    click.echo(f"Storage backend '{settings.storage_backend}' is reachable.")


def main() -> NoReturn:
    """Main entry point for the CLI."""
    cli()
