"""Main CLI entry point."""

import logging

import click
from fintrack import __version__
from fintrack.database.factories import create_database

# Import and register all commands at module level
from fintrack.cli.commands import (
    account,
    transaction,
    transfer,
    category,
    purchase,
    notification,
    goal,
    dashboard,
)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(verbose: bool) -> None:
    """Send fintrack log records to stderr; DEBUG when verbose."""
    logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger("fintrack").setLevel(logging.DEBUG if verbose else logging.WARNING)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides FINTRACK_DB_PATH environment variable)",
    envvar="FINTRACK_DB_PATH",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.version_option(version=__version__, prog_name="fintrack")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: bool):
    """Fintrack - Personal finance tracking.

    Manage accounts, transactions, transfers, DPS savings, purchases and
    savings goals, with a per-currency dashboard.
    """
    ctx.ensure_object(dict)
    configure_logging(verbose)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
account.register_commands(cli)
transaction.register_commands(cli)
transfer.register_commands(cli)
category.register_commands(cli)
purchase.register_commands(cli)
notification.register_commands(cli)
goal.register_commands(cli)
dashboard.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
