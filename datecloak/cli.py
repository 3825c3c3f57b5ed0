#!/usr/bin/env python3
"""
datecloak CLI
Command-line interface for hiding and recovering original commit dates.
Usable as the body of a prepare-commit-msg hook.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

import click
import jcs

from datecloak.core import __version__, encode_salt, generate_salt
from datecloak.encoder import OriginalDateEncoder
from datecloak.exceptions import DateCloakError
from datecloak.log import configure_logging
from datecloak.redact import CommitDateProvider
from datecloak.settings import PrivacySettings
from datecloak.trailer import detach

logger = logging.getLogger(__name__)


def _read_message(message_file):
    if message_file is None:
        return sys.stdin.read()
    return Path(message_file).read_text(encoding="utf-8")


def _parse_date(value):
    if value is None:
        return datetime.now().astimezone()
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise click.BadParameter(f"Not an ISO 8601 date: {value}", param_hint="--date")


def _encoder(ctx):
    try:
        return OriginalDateEncoder.from_settings(ctx.obj)
    except DateCloakError as e:
        raise click.ClickException(str(e))


@click.group()
@click.version_option(version=__version__)
@click.option('--password', default=None, help='Password (default: $GIT_PRIVACY_PASSWORD)')
@click.option('--salt', default=None, help='Base64 salt (default: $GIT_PRIVACY_SALT)')
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
@click.option('--log-json', is_flag=True, help='Log JSON lines to stderr')
@click.pass_context
def cli(ctx, password, salt, verbose, log_json):
    """datecloak: keep the original commit date, encrypted, in the commit message."""
    configure_logging(verbose=verbose, log_json=log_json)
    try:
        ctx.obj = PrivacySettings.from_cli(password=password, salt=salt)
    except ValueError as e:
        raise click.ClickException(f"Invalid settings: {e}")


@cli.command()
def salt():
    """Print a fresh random salt (base64)."""
    click.echo(encode_salt(generate_salt()))


@cli.command()
@click.argument('message-file', required=False, type=click.Path(exists=True, dir_okay=False))
@click.option('--date', '-d', 'date_text', help='Original date, ISO 8601 (default: now)')
@click.option('--committed', help='Original committed date, ISO 8601 (default: --date)')
@click.option('--in-place', '-i', is_flag=True, help='Rewrite MESSAGE_FILE instead of printing')
@click.pass_context
def encode(ctx, message_file, date_text, committed, in_place):
    """Append the encrypted original date to a commit message."""
    if in_place and message_file is None:
        raise click.UsageError("--in-place needs MESSAGE_FILE")

    message = _read_message(message_file)
    original = _parse_date(date_text)
    committed_date = _parse_date(committed) if committed else None

    encoder = _encoder(ctx)
    try:
        result = encoder.encode(message, original, committed_date)
    except DateCloakError as e:
        raise click.ClickException(str(e))

    if in_place:
        Path(message_file).write_text(result, encoding="utf-8")
        logger.debug("Rewrote %s (changed=%s)", message_file, result != message)
    else:
        click.echo(result, nl=False)


@cli.command()
@click.argument('message-file', required=False, type=click.Path(exists=True, dir_okay=False))
@click.option('--json', 'as_json', is_flag=True, help='Print canonical JSON')
@click.pass_context
def decode(ctx, message_file, as_json):
    """Recover the original dates from a commit message."""
    message = _read_message(message_file)
    dates = _encoder(ctx).decode(message)

    if dates is None:
        click.echo("No recoverable original date", err=True)
        sys.exit(1)

    if as_json:
        result = {
            "authored": dates.authored.isoformat(),
            "committed": dates.committed.isoformat(),
        }
        click.echo(jcs.canonicalize(result).decode("utf-8"))
    else:
        click.echo(f"Authored:  {dates.authored.isoformat()}")
        click.echo(f"Committed: {dates.committed.isoformat()}")


@cli.command()
@click.argument('message-file', required=False, type=click.Path(exists=True, dir_okay=False))
def strip(message_file):
    """Print a commit message without its date trailer."""
    click.echo(detach(_read_message(message_file)), nl=False)


@cli.command()
@click.option('--date', '-d', 'date_text', help='Date to redact, ISO 8601 (default: now)')
@click.pass_context
def redact(ctx, date_text):
    """Show the redacted commit date for the configured policy."""
    provider = CommitDateProvider.from_settings(ctx.obj)
    result = provider.commit_date(_parse_date(date_text))
    output = {
        "original": result.original.isoformat(),
        "redacted": result.redacted.isoformat(),
        "redacted_changed": result.was_redacted,
    }
    click.echo(jcs.canonicalize(output).decode("utf-8"))


if __name__ == '__main__':
    cli()
