# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Dockterm CLI package."""

from pathlib import Path

import click

from dockterm import __version__
from dockterm.cli.helpers import console, handle_errors


@click.group()
@click.version_option(version=__version__)
@click.option("--debug", is_flag=True, envvar="DOCKTERM_DEBUG", help="Verbose logging to the log file")
@click.pass_context
@handle_errors
def cli(ctx, debug: bool):
    """Dockterm - attach your terminal to a running container."""
    from dockterm.config import get_config
    from dockterm.utils.logging import configure_logging

    config = get_config()
    log_settings = config.model.logging
    configure_logging(
        debug=True if debug else None,
        level=log_settings.level,
        log_file=Path(log_settings.file).expanduser() if log_settings.file else None,
    )
    ctx.obj = config


def main():
    """Main entry point."""
    cli()


from dockterm.cli.commands import attach  # noqa: E402,F401


@cli.command("fix-terminal")
@handle_errors
def fix_terminal():
    """Reset terminal after an attach session ended abnormally.

    Restores line buffering and echo, shows the cursor and resets colours.
    """
    from dockterm.utils.terminal import reset_terminal
    reset_terminal()
    console.print("[green]Terminal reset complete[/green]")
