# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Attach and status commands."""

import asyncio
from typing import Optional

import click
from rich.table import Table

from dockterm.attach.session import attach as attach_session
from dockterm.cli import cli
from dockterm.cli.helpers import console, handle_errors
from dockterm.config import HostConfig
from dockterm.docker_api import ContainerStatus, inspect_container
from dockterm.utils.exceptions import ContainerNotRunningError, DocktermError
from dockterm.utils.logging import get_logger

logger = get_logger(__name__)


def _fetch_status(target: str, socket_path) -> ContainerStatus:
    return asyncio.run(inspect_container(target, socket_path))


def _report_lost_stream(target: str, socket_path) -> None:
    """After the remote side hung up, say what happened to the container."""
    try:
        status = _fetch_status(target, socket_path)
    except DocktermError as e:
        console.print(f"[yellow]Disconnected from {target}[/yellow] [dim]({e})[/dim]")
        return
    except OSError as e:
        logger.debug(f"Post-disconnect inspect failed: {e}")
        console.print(f"[yellow]Disconnected from {target}[/yellow]")
        return

    console.print(f"[yellow]Disconnected from {target}[/yellow] [dim](container {status.describe()})[/dim]")


@cli.command()
@click.argument("target")
@click.option("--socket", "socket_override", help="Engine control socket path")
@click.option("--no-check", is_flag=True, help="Skip the running-container check before attaching")
@click.pass_obj
@handle_errors
def attach(config: HostConfig, target: str, socket_override: Optional[str], no_check: bool):
    """Attach the terminal to a running container.

    Container output scrolls above a two-line footer; type a line and press
    Enter to send it to the container's stdin. Ctrl+C detaches without
    stopping the container.
    """
    socket_path = config.socket_path(socket_override)
    settings = config.model

    if settings.attach.check_running and not no_check:
        status = _fetch_status(target, socket_path)
        if not status.running:
            raise ContainerNotRunningError(f"Container {target} is not running ({status.describe()})")

    logger.info(f"Attaching to {target} via {socket_path}")
    session = asyncio.run(
        attach_session(
            target,
            socket_path,
            attach_config=settings.attach,
            footer_config=settings.footer,
        )
    )

    if session.clean_exit:
        console.print(f"[green]Detached from {target}[/green]")
    else:
        _report_lost_stream(target, socket_path)


@cli.command()
@click.argument("target")
@click.option("--socket", "socket_override", help="Engine control socket path")
@click.pass_obj
@handle_errors
def status(config: HostConfig, target: str, socket_override: Optional[str]):
    """Show the state of a container."""
    socket_path = config.socket_path(socket_override)
    info = _fetch_status(target, socket_path)

    table = Table(title=f"Container {info.name}", show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Status", info.describe())
    table.add_row("Running", "yes" if info.running else "no")
    table.add_row("Exit code", str(info.exit_code))
    if info.error:
        table.add_row("Error", info.error)
    table.add_row("Socket", str(socket_path))
    console.print(table)
