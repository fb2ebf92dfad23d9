"""CLI error handling helpers."""

import logging

import click

from cashledger.domain.errors import CommitError, DomainError

logger = logging.getLogger(__name__)


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError | OSError) -> None:
    """Echo an error as ``Error: ...`` on stderr and exit with status 1.

    A failed commit rolls back the whole unit of work, so its message says
    that nothing was saved.
    """
    logger.debug("Command failed", exc_info=error)
    message = str(error)
    if isinstance(error, CommitError):
        message = f"{message} (no changes were saved)"
    click.echo(f"Error: {message}", err=True)
    ctx.exit(1)
