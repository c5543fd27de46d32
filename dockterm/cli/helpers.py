# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Shared helpers for CLI commands."""

import functools

import click
from rich.console import Console

from dockterm.utils.exceptions import (
    ConfigError,
    ContainerError,
    DocktermError,
    EndpointUnavailableError,
    HandshakeRejectedError,
)
from dockterm.utils.logging import get_logger

console = Console()
err_console = Console(stderr=True)

logger = get_logger(__name__)


def handle_errors(func):
    """Turn Dockterm errors into click errors with a readable message."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except click.ClickException:
            raise
        except EndpointUnavailableError as e:
            logger.debug(f"Endpoint unavailable: {e}")
            raise click.ClickException(str(e)) from e
        except HandshakeRejectedError as e:
            logger.debug(f"Handshake rejected, header was:\n{e.header}")
            if e.header:
                err_console.print(f"[dim]{e.header.strip()}[/dim]", markup=True, highlight=False)
            raise click.ClickException(str(e)) from e
        except (ContainerError, ConfigError) as e:
            raise click.ClickException(str(e)) from e
        except DocktermError as e:
            logger.debug(f"{type(e).__name__}: {e}")
            raise click.ClickException(str(e)) from e
        except OSError as e:
            raise click.ClickException(f"{e.strerror or e}") from e

    return wrapper
