"""RoleHex command-line interface."""

import asyncio
from typing import NoReturn

import click

from rolehex.core.config import get_settings
from rolehex.core.logging import LoggingContext, configure_logging, get_logger


@click.group()
@click.version_option(version="0.1.0", prog_name="RoleHex")
def cli() -> None:
    """RoleHex - role management service.

    Settings are read from ROLEHEX_* environment variables and .env files.
    """


@cli.command()
@click.option(
    "--host",
    type=str,
    default=None,
    help="Host to bind to (overrides config)",
)
@click.option(
    "--port",
    type=int,
    default=None,
    help="Port to bind to (overrides config)",
)
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
    """Start the RoleHex server.

    By default, the server runs on 0.0.0.0:8080.
    """
    import uvicorn

    settings = get_settings()

    bind_host = host or settings.host
    bind_port = port or settings.port
    bind_workers = workers or settings.workers

    if bind_workers > 1 and settings.database_url.startswith("sqlite"):
        click.echo(
            "Error: SQLite does not support multiple worker processes. "
            "Use --workers 1 or switch to PostgreSQL.",
            err=True,
        )
        raise SystemExit(1)

    configure_logging(settings)

    logger = get_logger(__name__)
    logger.info(
        "Starting RoleHex server",
        host=bind_host,
        port=bind_port,
        workers=bind_workers,
        reload=reload,
        environment=settings.environment,
    )

    uvicorn.run(
        "rolehex.infrastructure.api.app:app",
        host=bind_host,
        port=bind_port,
        workers=1 if reload else bind_workers,
        reload=reload,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


@cli.command()
@click.option(
    "--force",
    is_flag=True,
    help="Skip confirmation prompt",
)
def init_db(force: bool) -> None:
    """Initialize the database.

    Creates the roles table and seeds sample roles. Use this only in development.
    In production, use migrations instead.
    """
    from rolehex.infrastructure.persistence.database import (
        get_db_manager,
        init_database,
    )

    settings = get_settings()
    configure_logging(settings)

    if settings.is_production and not force:
        click.echo(
            "ERROR: Running in production mode. Use migrations instead of init-db.",
            err=True,
        )
        raise SystemExit(1)

    if not force:
        click.confirm(
            "This will create all database tables. Continue?",
            abort=True,
            default=False,
        )

    async def initialize():
        try:
            await init_database()
            click.echo("Database initialized successfully.")
        finally:
            await get_db_manager().disconnect()

    asyncio.run(initialize())


@cli.command()
@click.argument("name")
def create_role(name: str) -> None:
    """Create a role named NAME.

    The name goes through the same validation as the HTTP API.
    """
    from rolehex.application.services import RoleService
    from rolehex.domain.exceptions import RoleError
    from rolehex.infrastructure.persistence.database import get_db_manager
    from rolehex.infrastructure.persistence.repositories import RoleRepository

    settings = get_settings()
    configure_logging(settings)
    logger = get_logger(__name__)

    async def create() -> bool:
        db = get_db_manager()
        try:
            async with db.session() as session:
                role = await RoleService(RoleRepository(session)).create(name)
        except RoleError as e:
            click.echo(f"Error: {e.message}", err=True)
            return False
        finally:
            await db.disconnect()

        click.echo(f"Role created: id={role.id} name={role.name}")
        logger.info("Role created via CLI", role_id=role.id, role_name=role.name)
        return True

    with LoggingContext(command="create-role"):
        created = asyncio.run(create())
    if not created:
        raise SystemExit(1)


@cli.command()
def list_roles() -> None:
    """List all stored roles."""
    from rolehex.application.services import RoleService
    from rolehex.infrastructure.persistence.database import get_db_manager
    from rolehex.infrastructure.persistence.repositories import RoleRepository

    settings = get_settings()
    configure_logging(settings)

    async def show() -> None:
        db = get_db_manager()
        try:
            async with db.session() as session:
                service = RoleService(RoleRepository(session))
                found = False
                async for role in service.list_roles():
                    found = True
                    click.echo(f"{role.id:>6}  {role.name:<50}  {role.created_at.isoformat()}")
                if not found:
                    click.echo("No roles found.")
        finally:
            await db.disconnect()

    with LoggingContext(command="list-roles"):
        asyncio.run(show())


@cli.command()
def info() -> None:
    """Display RoleHex configuration."""
    from sqlalchemy.engine import make_url

    settings = get_settings()
    database_url = make_url(settings.database_url).render_as_string(hide_password=True)

    click.echo(f"""
RoleHex v{settings.app_version}
{'=' * 40}
  Environment:  {settings.environment}
  API Prefix:   {settings.api_prefix}
  Bind:         {settings.host}:{settings.port} ({settings.workers} worker(s))
  Database:     {database_url}
  Seed Roles:   {settings.seed_sample_roles}
  Logging:      {settings.log_level} ({settings.log_format})
""")


def main() -> NoReturn:
    cli()


if __name__ == "__main__":
    main()
