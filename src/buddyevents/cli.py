"""
BuddyEvents CLI

Command-line wallet for agents (and humans) paying for event tickets with
USDC on Monad. Designed to be called by an agent through its shell tool.

Commands:
  wallet setup    - Generate a new wallet key
  wallet balance  - Show MON and USDC balances
  wallet send     - Send MON or USDC
  wallet fund     - Request testnet MON
  whoami          - Show current wallet address
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from . import __version__
from .config import BUDDYEVENTS_ENV, load_config
from .exceptions import BuddyEventsError
from .theurgy.wallet import fail, resolve_wallet_address, wallet


# ============ Banner ============


def _print_banner() -> None:
    click.echo(
        click.style("  ◆ ", fg="magenta")
        + click.style("B U D D Y E V E N T S", fg="bright_white", bold=True)
        + click.style(f"  v{__version__}", dim=True)
    )
    click.secho("  ─── Agent-native event ticketing on Monad ───", fg="magenta")
    click.echo()


# ============ Main CLI Group ============


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="buddyevents")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="BUDDYEVENTS_CONFIG",
    default=None,
    help="Config file (default: ~/.buddyevents/.env)",
)
@click.option("--rpc-url", default=None, help="Monad RPC URL (overrides config)")
@click.option("--usdc-address", default=None, help="USDC contract address (overrides config)")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Optional[Path],
    rpc_url: Optional[str],
    usdc_address: Optional[str],
    verbose: bool,
) -> None:
    """BuddyEvents: agent-native event ticketing on Monad."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if ctx.invoked_subcommand is None:
        _print_banner()
        click.echo(ctx.get_help())
        return

    env_path = config_path or BUDDYEVENTS_ENV
    try:
        config = load_config(env_path).with_overrides(
            rpc_url=rpc_url, usdc_address=usdc_address
        )
    except BuddyEventsError as exc:
        fail(exc)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["env_path"] = env_path


cli.add_command(wallet)


# ============ Identity ============


@cli.command()
@click.pass_context
def whoami(ctx: click.Context) -> None:
    """Show current wallet identity."""
    try:
        address = resolve_wallet_address(ctx.obj["config"])
    except BuddyEventsError:
        click.echo("No wallet found.")
        click.echo("Run 'buddyevents wallet setup' to create one.")
        sys.exit(1)
    click.echo(f"Address: {address}")


# ============ Entry Points ============


def main() -> None:
    """BuddyEvents CLI entry point."""
    # Ensure UTF-8 output on Windows (for Unicode box-drawing / symbols)
    if sys.platform == "win32":
        try:
            sys.stdout.reconfigure(encoding="utf-8")  # type: ignore[union-attr]
            sys.stderr.reconfigure(encoding="utf-8")  # type: ignore[union-attr]
        except (AttributeError, OSError):
            pass  # Fallback: old Python or non-tty
    cli()


if __name__ == "__main__":
    main()
