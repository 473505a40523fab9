"""
Command line interface for operating the StayNest marketplace.
"""
import click
from typing import Optional

from .firebase_sync import DocumentClient, create_document_client
from .stores import LocalStore, AuthStore, PropertyStore
from .utils.errors import MarketplaceError
from .utils.logger import setup_logger
from config.settings import app_config


def _connect(ctx: click.Context) -> DocumentClient:
    """Build and initialize the document client chosen on the command line."""
    client = create_document_client(ctx.obj['backend'])
    if not client.initialize():
        click.echo("Error: could not connect to the document database")
        ctx.exit(1)
    return client


@click.group()
@click.option('--backend', type=click.Choice(['firestore', 'memory']),
              default=app_config.storage_backend, show_default=True,
              help='Document database backend')
@click.option('--log-level', type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR']),
              default=app_config.log_level, help='Logging level')
@click.option('--log-file', type=str, default=app_config.log_file,
              help='Log file path (optional)')
@click.pass_context
def cli(ctx, backend, log_level, log_file):
    """
    StayNest vacation rental marketplace.

    Seeds sample listings, bootstraps the administrator account, prints
    collection statistics and serves the HTTP API.
    """
    setup_logger("staynest", log_level, log_file)
    ctx.ensure_object(dict)
    ctx.obj['backend'] = backend


@cli.command()
@click.pass_context
def seed(ctx):
    """Write the sample listings if the properties collection is empty."""
    client = _connect(ctx)
    try:
        written = PropertyStore(client).seed()
    except MarketplaceError as e:
        click.echo(f"Error: {e.message}")
        ctx.exit(1)
    if written:
        click.echo(f"Seeded {written} sample listings")
    else:
        click.echo("Properties collection already has data, nothing seeded")


@cli.command('create-admin')
@click.option('--name', prompt=True, help='Administrator display name')
@click.option('--email', default=lambda: app_config.super_admin_email or None, prompt=True,
              help='Administrator email')
@click.password_option(help='Administrator password')
@click.pass_context
def create_admin(ctx, name, email, password):
    """Create the single super-admin account, or promote an existing one."""
    client = _connect(ctx)
    store = AuthStore(client, LocalStore(path=None), super_admin_email=email)
    try:
        admin = store.bootstrap_super_admin(name, email, password)
    except MarketplaceError as e:
        click.echo(f"Error: {e.message}")
        ctx.exit(1)
    click.echo(f"Super-admin ready: {admin.email} ({admin.id})")


@cli.command()
@click.pass_context
def stats(ctx):
    """Show document counts per status for each collection."""
    client = _connect(ctx)
    store = PropertyStore(client, seed_on_start=False)
    store.start()
    try:
        counts = store.stats()
    finally:
        store.stop()

    for name, by_status in counts.items():
        click.echo(f"{name.capitalize()}: {by_status.get('total', 0)}")
        for status, count in sorted(by_status.items()):
            if status != 'total':
                click.echo(f"  {status}: {count}")


@cli.command()
@click.option('--host', type=str, default=None, help='Bind address')
@click.option('--port', type=int, default=None, help='Bind port')
@click.option('--reload', is_flag=True, help='Reload on code changes (firestore backend only)')
@click.pass_context
def serve(ctx, host: Optional[str], port: Optional[int], reload: bool):
    """Serve the HTTP API with uvicorn."""
    import uvicorn
    from .api import create_app, ServiceContainer
    from .api.config import settings

    host = host or settings.host
    port = port or settings.port
    if reload:
        uvicorn.run("main:app", host=host, port=port, reload=True,
                    log_level=settings.log_level.lower(), access_log=True)
        return

    container = ServiceContainer(client=create_document_client(ctx.obj['backend']))
    uvicorn.run(create_app(container), host=host, port=port,
                log_level=settings.log_level.lower(), access_log=True)


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
