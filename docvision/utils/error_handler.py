"""Simple CLI error output with fuzzy command matching."""

import difflib
import re
from typing import List, Optional

import click

from ..errors import DocVisionError

AVAILABLE_COMMANDS = ['recognize', 'batch', 'formats']


def format_extraction_error(error: DocVisionError) -> str:
    """Render a DocVisionError as 'CODE: message'."""
    return f"{error.code.value}: {error.message}"


def report_extraction_error(error: DocVisionError) -> None:
    click.echo(click.style(format_extraction_error(error), fg='red'), err=True)


def handle_cli_error(e: Exception, available_commands: Optional[List[str]] = None) -> None:
    """Handle CLI errors with simple, helpful output."""
    if available_commands is None:
        available_commands = AVAILABLE_COMMANDS

    error_msg = str(e).replace("Error: ", "").strip()

    command_match = re.search(r"No such command '([\w-]+)'", error_msg)
    if command_match:
        attempted_cmd = command_match.group(1)
        closest = difflib.get_close_matches(attempted_cmd, available_commands, n=1, cutoff=0.5)

        if closest:
            click.echo(click.style(f"Did you mean '{closest[0]}'?", fg='yellow', bold=True), err=True)

        click.echo(f"\nAvailable commands: {', '.join(available_commands)}", err=True)
        click.echo(click.style("For help: docvision --help", fg='cyan', dim=True), err=True)
        return

    if "Missing argument" in error_msg:
        click.echo(click.style(error_msg, fg='red', bold=True), err=True)
        click.echo("Try: docvision recognize ./scan.pdf --language en-US", err=True)
        click.echo(click.style("\nFor help: docvision COMMAND --help", fg='cyan', dim=True), err=True)
        return

    click.echo(click.style(f"Error: {error_msg}", fg='red'), err=True)
    click.echo(click.style("For help: docvision --help", fg='cyan', dim=True), err=True)
