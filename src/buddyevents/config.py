"""
Wallet configuration for the BuddyEvents CLI.

Settings live in ~/.buddyevents/.env next to the private key. Values already
present in the process environment take precedence over the file. The
resolved WalletConfig is passed explicitly into every operation.
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional

from dotenv import dotenv_values

from .exceptions import ConfigurationError
from .pneuma.rpc import DEFAULT_TIMEOUT

# Default config directory
BUDDYEVENTS_DIR = Path.home() / ".buddyevents"
BUDDYEVENTS_ENV = BUDDYEVENTS_DIR / ".env"

DEFAULT_RPC_URL = "https://testnet-rpc.monad.xyz"
DEFAULT_USDC_ADDRESS = "0x534b2f3A21130d7a60830c2Df862319e593943A3"
MONAD_TESTNET_CHAIN_ID = 10143


@dataclass(frozen=True)
class WalletConfig:
    rpc_url: str = DEFAULT_RPC_URL
    usdc_address: str = DEFAULT_USDC_ADDRESS
    wallet_address: str = ""
    private_key: str = field(default="", repr=False)
    rpc_timeout: float = DEFAULT_TIMEOUT

    @property
    def has_wallet(self) -> bool:
        return bool(self.wallet_address and self.private_key)

    def with_overrides(
        self,
        rpc_url: Optional[str] = None,
        usdc_address: Optional[str] = None,
    ) -> "WalletConfig":
        """Return a copy with CLI flag overrides applied."""
        changes = {}
        if rpc_url:
            changes["rpc_url"] = rpc_url
        if usdc_address:
            changes["usdc_address"] = usdc_address
        return replace(self, **changes)


def load_config(env_path: Optional[Path] = None) -> WalletConfig:
    """
    Load wallet configuration from .env file and environment.

    Args:
        env_path: Path to .env file (default: ~/.buddyevents/.env)

    Returns:
        Resolved WalletConfig (defaults when nothing is configured)

    Raises:
        ConfigurationError: If a value cannot be parsed
    """
    env_path = env_path or BUDDYEVENTS_ENV

    values: dict[str, Optional[str]] = {}
    if env_path.exists():
        values.update(dotenv_values(env_path))

    def lookup(key: str, default: str = "") -> str:
        value = os.environ.get(key) or values.get(key) or default
        return value.strip()

    raw_timeout = lookup("BUDDYEVENTS_RPC_TIMEOUT", str(DEFAULT_TIMEOUT))
    try:
        timeout = float(raw_timeout)
    except ValueError as exc:
        raise ConfigurationError(
            f"Invalid BUDDYEVENTS_RPC_TIMEOUT in {env_path}: {raw_timeout!r}"
        ) from exc
    if not math.isfinite(timeout) or timeout <= 0:
        raise ConfigurationError(
            f"BUDDYEVENTS_RPC_TIMEOUT must be a finite number > 0: {raw_timeout!r}"
        )

    private_key = lookup("PRIVATE_KEY")
    if private_key and not private_key.startswith("0x"):
        private_key = "0x" + private_key

    return WalletConfig(
        rpc_url=lookup("MONAD_RPC", DEFAULT_RPC_URL),
        usdc_address=lookup("USDC_ADDRESS", DEFAULT_USDC_ADDRESS),
        wallet_address=lookup("WALLET_ADDRESS"),
        private_key=private_key,
        rpc_timeout=timeout,
    )
