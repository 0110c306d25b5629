"""
Theurgy Wallet - Wallet management commands.

Commands:
- setup:   Generate a new wallet key for this agent
- balance: Show MON and USDC balances
- send:    Send MON or USDC from the configured wallet
- fund:    Request testnet MON from the Monad faucet
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import NoReturn

import click
import httpx

from ..config import MONAD_TESTNET_CHAIN_ID, WalletConfig
from ..exceptions import BuddyEventsError, ConfigurationError, EncodingError, RPCError
from ..pneuma.calldata import encode_balance_of_call
from ..pneuma.rpc import RPCGateway
from ..pneuma.tx import NATIVE_TOKEN, SUPPORTED_TOKENS, TransferIntent, send_transfer
from ..pneuma.units import (
    NATIVE_DECIMALS,
    USDC_DECIMALS,
    hex_to_int,
    units_to_decimal_string,
)
from ..sigil.eth import generate_eoa, get_address, load_credential, save_wallet

FAUCET_URL = "https://agents.devnads.com/v1/faucet"
USDC_FAUCET_URL = "https://faucet.circle.com"
MON_FAUCET_URL = "https://faucet.monad.xyz"

DISPLAY_PRECISION = 6


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def fail(exc: BuddyEventsError) -> NoReturn:
    """Print an error and exit with its exit code."""
    click.secho(f"Error: {exc}", fg="red", err=True)
    sys.exit(exc.exit_code)


def resolve_wallet_address(config: WalletConfig) -> str:
    """Configured address, falling back to the key's derived address."""
    if config.wallet_address:
        return config.wallet_address
    if config.private_key:
        return get_address(config.private_key)
    raise ConfigurationError("No wallet configured. Run: buddyevents wallet setup")


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------

@click.group()
def wallet() -> None:
    """Wallet management (setup, balance, send, fund)."""


# ---------------------------------------------------------------------------
# setup
# ---------------------------------------------------------------------------

@wallet.command()
@click.option("--force", is_flag=True, help="Replace an existing wallet key")
@click.pass_context
def setup(ctx: click.Context, force: bool) -> None:
    """Generate a new wallet for this agent."""
    config: WalletConfig = ctx.obj["config"]
    env_path: Path = ctx.obj["env_path"]

    if config.private_key and not force:
        click.secho(
            f"A wallet is already configured ({config.wallet_address or 'address unknown'}).",
            fg="yellow",
        )
        click.echo("Use --force to replace it.")
        sys.exit(1)

    private_key, address = generate_eoa()
    try:
        saved = save_wallet(private_key, env_path)
    except BuddyEventsError as exc:
        fail(exc)

    click.secho("Wallet created!", fg="green", bold=True)
    click.echo(f"Address: {address}")
    click.echo(f"\nSaved to {saved}")
    click.echo("\nNext: Fund your wallet with testnet MON and USDC:")
    click.echo(f"  MON:  {MON_FAUCET_URL}  (or: buddyevents wallet fund)")
    click.echo(f"  USDC: {USDC_FAUCET_URL} (select Monad Testnet)")


# ---------------------------------------------------------------------------
# balance
# ---------------------------------------------------------------------------

@wallet.command()
@click.pass_context
def balance(ctx: click.Context) -> None:
    """Check wallet balances (MON + USDC)."""
    config: WalletConfig = ctx.obj["config"]
    try:
        address = resolve_wallet_address(config)
    except BuddyEventsError as exc:
        fail(exc)

    click.echo(f"Wallet: {address}")
    click.echo()

    with RPCGateway(config.rpc_url, timeout=config.rpc_timeout) as gateway:
        try:
            wei = gateway.get_balance(address)
            mon = units_to_decimal_string(wei, NATIVE_DECIMALS, DISPLAY_PRECISION)
            click.echo(f"MON:  {mon}")
        except RPCError as exc:
            click.echo("MON:  " + click.style(f"error: {exc}", fg="red"))

        try:
            result = gateway.eth_call(config.usdc_address, encode_balance_of_call(address))
            # Non-contract addresses answer with empty return data
            units = 0 if result in ("", "0x") else hex_to_int(result)
            usdc = units_to_decimal_string(units, USDC_DECIMALS, DISPLAY_PRECISION)
            click.echo(f"USDC: {usdc}")
        except (RPCError, EncodingError) as exc:
            click.echo("USDC: " + click.style(f"error: {exc}", fg="red"))


# ---------------------------------------------------------------------------
# send
# ---------------------------------------------------------------------------

@wallet.command()
@click.option("--to", "recipient", required=True, help="Recipient wallet address (0x...)")
@click.option("--amount", required=True, help="Amount in human-readable units (e.g. 1.5)")
@click.option(
    "--token",
    default=NATIVE_TOKEN,
    show_default=True,
    help=f"Token to send: {'|'.join(SUPPORTED_TOKENS)}",
)
@click.pass_context
def send(ctx: click.Context, recipient: str, amount: str, token: str) -> None:
    """Send MON or USDC from the configured wallet.

    \b
    Examples:
      buddyevents wallet send --to 0xAbc... --amount 0.5
      buddyevents wallet send --to 0xAbc... --amount 2.5 --token usdc
    """
    config: WalletConfig = ctx.obj["config"]

    try:
        credential = load_credential(config)
        intent = TransferIntent.create(recipient, amount, token)
        tx_hash = send_transfer(intent, credential, config)
    except BuddyEventsError as exc:
        fail(exc)

    click.echo(f"Sent {intent.amount} {intent.token.upper()} to {intent.recipient}")
    click.echo(f"Tx: {tx_hash}")


# ---------------------------------------------------------------------------
# fund
# ---------------------------------------------------------------------------

@wallet.command()
@click.pass_context
def fund(ctx: click.Context) -> None:
    """Request testnet MON from faucet."""
    config: WalletConfig = ctx.obj["config"]
    try:
        address = resolve_wallet_address(config)
    except BuddyEventsError as exc:
        fail(exc)

    click.echo(f"Requesting testnet MON for {address}...")

    try:
        response = httpx.post(
            FAUCET_URL,
            json={"chainId": MONAD_TESTNET_CHAIN_ID, "address": address},
            timeout=config.rpc_timeout,
        )
    except httpx.HTTPError as exc:
        click.secho(f"Error: faucet request failed: {exc}", fg="red", err=True)
        sys.exit(1)

    if response.status_code != 200:
        click.secho(
            f"Error: faucet error ({response.status_code}): {response.text}",
            fg="red",
            err=True,
        )
        sys.exit(1)

    try:
        tx_hash = response.json().get("txHash")
    except (ValueError, AttributeError):
        tx_hash = None

    click.secho(f"Funded! Tx: {tx_hash or 'unknown'}", fg="green")
    click.echo(f"\nFor USDC, visit: {USDC_FAUCET_URL} (select Monad Testnet)")
