"""CLI error handling helpers."""

import click

from ledgerkit.domain.errors import CycleDetected, DomainError
from ledgerkit.logging_config import get_logger

logger = get_logger("cli")


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure.

    CycleDetected means the stored account hierarchy is corrupted, so it is
    also logged as an error rather than treated as a rejected request.
    """
    if isinstance(error, CycleDetected):
        logger.error("Corrupted account hierarchy: %s", error)
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
