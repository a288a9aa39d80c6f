"""CLI error handling helpers."""

import logging

import click

logger = logging.getLogger(__name__)

EXIT_FAILURE = 1


def handle_domain_error(ctx: click.Context, error: ValueError) -> None:
    """Print ``Error: <message>`` to stderr and exit with failure.

    The exception and its cause are logged at DEBUG, so ``--verbose`` shows
    where a failed transfer or write went wrong.
    """
    logger.debug("%s failed", ctx.command_path, exc_info=error)
    click.echo(f"Error: {error}", err=True)
    ctx.exit(EXIT_FAILURE)
