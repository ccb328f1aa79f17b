"""Click CLI for the credential helper."""

from __future__ import annotations

import functools
import logging
import sys
import time
from typing import Any, Callable, TypeVar

import click

from . import mfa, passwords, pins
from .errors import CredentialHelperError
from .generators import DEFAULT_PASSWORD_LENGTH, DEFAULT_PIN_LENGTH, PasswordPolicy, SpecialCharacters
from .settings import CONFIG_DIR_ENV, Settings, get_settings
from .totp import DEFAULT_PERIOD


logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def _reports_errors(func: F) -> F:
    """Turn credhelper errors into `Error: ...` and exit status 1."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except CredentialHelperError as exc:
            logger.debug("command failed", exc_info=True)
            raise click.ClickException(str(exc)) from exc

    return wrapper  # type: ignore[return-value]


def _settings(ctx: click.Context) -> Settings:
    return ctx.obj["settings_factory"]()


@click.group()
@click.option(
    "--config-dir",
    type=click.Path(file_okay=False),
    envvar=CONFIG_DIR_ENV,
    default=None,
    help="Root configuration directory (default: ~/.config)",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging on stderr")
@click.pass_context
def cli(ctx: click.Context, config_dir: str | None, verbose: bool) -> None:
    """Local TOTP, password and PIN helper."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    ctx.ensure_object(dict)
    # Resolved lazily so a missing home directory surfaces as a command error
    ctx.obj["settings_factory"] = functools.partial(get_settings, config_dir)


@cli.command("setup-mfa")
@click.option("--account", required=True, help="Account name")
@click.option("--name", required=True, help="Name/email")
@click.option("-k", "--key", "secret", required=True, help="Base32 secret key")
@click.option(
    "-s",
    "--seconds",
    "period",
    type=int,
    default=DEFAULT_PERIOD,
    show_default=True,
    help="Time step in seconds",
)
@click.pass_context
@_reports_errors
def setup_mfa_cmd(ctx: click.Context, account: str, name: str, secret: str, period: int) -> None:
    """Store the shared secret for an account."""
    mfa.setup(account, name, secret, period, settings=_settings(ctx))
    click.echo(f"MFA setup successful for {name} ({account})")


@cli.command("list")
@click.pass_context
@_reports_errors
def list_cmd(ctx: click.Context) -> None:
    """List MFA accounts (secrets are not shown)."""
    entries = mfa.list_entries(settings=_settings(ctx))
    if not entries:
        click.echo("No MFA entries found")
        return
    click.echo("MFA Accounts:")
    for entry in entries:
        click.echo(f"  Account: {entry.account}, Name: {entry.name}, Period: {entry.period}s")


@cli.command("generate")
@click.option("--account", required=True, help="Account name")
@click.option("--name", required=True, help="Name/email")
@click.option("--offset", type=int, default=0, help="Shift the clock by this many seconds")
@click.option(
    "--window",
    type=click.IntRange(min=0),
    default=0,
    help="Also show codes for this many periods before and after now",
)
@click.pass_context
@_reports_errors
def generate_cmd(ctx: click.Context, account: str, name: str, offset: int, window: int) -> None:
    """Print the current TOTP code for an account."""
    settings = _settings(ctx)
    # One clock reading so the window and the main code share a period
    now = int(time.time())
    if window:
        codes = mfa.generate_window(account, name, steps=window, now=now, offset=offset, settings=settings)
        for code in codes:
            click.echo(f"  {code.offset:+d}s: {code.code} (counter {code.counter})")
    result = mfa.generate(account, name, now=now, offset=offset, settings=settings)
    click.echo(f"MFA Code: {result.code} (valid for {result.remaining} seconds)")


@cli.command("add-pass")
@click.option("--name", required=True, help="Name/service")
@click.option("--account", required=True, help="Account/username")
@click.option(
    "-l",
    "--length",
    type=int,
    default=DEFAULT_PASSWORD_LENGTH,
    show_default=True,
    help="Password length",
)
@click.option("-a", "lower", is_flag=True, help="Include lowercase letters")
@click.option("-A", "upper", is_flag=True, help="Include uppercase letters")
@click.option("-d", "digits", is_flag=True, help="Include digits")
@click.option(
    "-s",
    "special",
    default=None,
    help="Special characters; 'default' for the built-in set or a custom string",
)
@click.pass_context
@_reports_errors
def add_pass_cmd(
    ctx: click.Context,
    name: str,
    account: str,
    length: int,
    lower: bool,
    upper: bool,
    digits: bool,
    special: str | None,
) -> None:
    """Generate and store a password.

    With no -a/-A/-d/-s flags, all character classes and the default special
    set are used.
    """
    policy = PasswordPolicy(
        include_lower=lower,
        include_upper=upper,
        include_digits=digits,
        special=SpecialCharacters.from_option(special),
    )
    entry, replaced = passwords.add(name, account, length, policy, settings=_settings(ctx))
    verb = "updated" if replaced else "generated"
    click.echo(f"Password {verb} for {entry.name} ({entry.account}): {entry.password}")


@cli.command("get-pass")
@click.pass_context
@_reports_errors
def get_pass_cmd(ctx: click.Context) -> None:
    """List stored passwords."""
    entries = passwords.list_entries(settings=_settings(ctx))
    if not entries:
        click.echo("No passwords found")
        return
    click.echo("Stored Passwords:")
    click.echo("=================")
    for index, entry in enumerate(entries, start=1):
        click.echo(f"{index}. Name: {entry.name}")
        click.echo(f"   Account: {entry.account}")
        click.echo(f"   Password: {entry.password}")
        click.echo(f"   Length: {entry.length} characters")
        click.echo(f"   Config: {entry.config}")
        click.echo()


@cli.command("add-mpin")
@click.option("--name", required=True, help="Name/service")
@click.option("--account", required=True, help="Account/username")
@click.option(
    "-l",
    "--length",
    type=int,
    default=DEFAULT_PIN_LENGTH,
    show_default=True,
    help="MPIN length",
)
@click.pass_context
@_reports_errors
def add_mpin_cmd(ctx: click.Context, name: str, account: str, length: int) -> None:
    """Generate and store a numeric PIN."""
    entry, replaced = pins.add(name, account, length, settings=_settings(ctx))
    verb = "updated" if replaced else "generated"
    click.echo(f"MPIN {verb} for {entry.name} ({entry.account}): {entry.pin}")


@cli.command("get-mpin")
@click.option("--name", required=True, help="Name/service")
@click.option("--account", required=True, help="Account/username")
@click.pass_context
@_reports_errors
def get_mpin_cmd(ctx: click.Context, name: str, account: str) -> None:
    """Show the stored PIN for one entry."""
    entry = pins.get(name, account, settings=_settings(ctx))
    click.echo(f"MPIN for {entry.name} ({entry.account}): {entry.pin}")


@cli.command("list-mpin")
@click.pass_context
@_reports_errors
def list_mpin_cmd(ctx: click.Context) -> None:
    """List stored PINs."""
    entries = pins.list_entries(settings=_settings(ctx))
    if not entries:
        click.echo("No MPIN entries found")
        return
    click.echo("MPIN Entries:")
    for entry in entries:
        click.echo(f"  Name: {entry.name}, Account: {entry.account}, PIN: {entry.pin}")


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
