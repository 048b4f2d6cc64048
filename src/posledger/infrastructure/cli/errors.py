from __future__ import annotations

import click

from posledger.domain.exceptions import DomainException


def domain_error(exc: DomainException) -> click.ClickException:
    """Render a domain error as ``[kind] message`` for the terminal."""
    message = f"[{exc.kind}] {exc.message}"
    if exc.retryable:
        message += " (safe to retry)"
    return click.ClickException(message)
