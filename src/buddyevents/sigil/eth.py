"""
ECDSA / secp256k1 Key Management for the BuddyEvents CLI.

The wallet key signs MON and USDC transfers on Monad. It is stored in
~/.buddyevents/.env as PRIVATE_KEY (hex format) together with the derived
WALLET_ADDRESS; the two are always written together and checked against each
other on load.
"""

from __future__ import annotations

import os
import re
import secrets
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from eth_account import Account
from eth_account.signers.local import LocalAccount

from ..config import (
    BUDDYEVENTS_ENV,
    DEFAULT_RPC_URL,
    DEFAULT_USDC_ADDRESS,
    WalletConfig,
)
from ..exceptions import ConfigurationError, SigningError

_PRIVATE_KEY_RE = re.compile(r"0x[0-9a-fA-F]{64}")


@dataclass(frozen=True)
class AccountCredential:
    """A private key and the address derived from it."""

    private_key: str = field(repr=False)
    address: str

    @classmethod
    def from_private_key(
        cls, private_key: str, expected_address: Optional[str] = None
    ) -> "AccountCredential":
        """
        Derive the credential for a key.

        Args:
            private_key: Hex private key, 0x prefix optional
            expected_address: Configured address that must match the key

        Raises:
            SigningError: If the key is malformed or the address does not match
        """
        account = get_account(private_key)
        if expected_address and expected_address.lower() != account.address.lower():
            raise SigningError(
                f"Configured address {expected_address} does not match the "
                f"private key (derives {account.address})"
            )
        return cls(private_key=_normalize_key(private_key), address=account.address)


def _normalize_key(private_key: str) -> str:
    key = private_key.strip()
    if not key.startswith("0x"):
        key = "0x" + key
    if not _PRIVATE_KEY_RE.fullmatch(key):
        raise SigningError("Invalid private key: expected 32 bytes of hex")
    return key


def generate_eoa() -> tuple[str, str]:
    """
    Generate a new ECDSA/secp256k1 keypair (EOA).

    Returns:
        Tuple of (private_key_hex, address)
        - private_key_hex: 0x-prefixed hex private key (66 chars)
        - address: 0x-prefixed checksummed address (42 chars)
    """
    private_key = "0x" + secrets.token_hex(32)
    account = Account.from_key(private_key)
    return private_key, account.address


def save_wallet(private_key: str, env_path: Optional[Path] = None) -> Path:
    """
    Save private key and its address to .env file.

    Other keys already in the file (MONAD_RPC, USDC_ADDRESS, ...) are kept.

    Args:
        private_key: 0x-prefixed hex private key
        env_path: Path to .env file (default: ~/.buddyevents/.env)

    Returns:
        Path to the saved .env file
    """
    credential = AccountCredential.from_private_key(private_key)
    env_path = env_path or BUDDYEVENTS_ENV
    env_path.parent.mkdir(parents=True, exist_ok=True)

    # Read existing .env content or start fresh
    existing = {}
    if env_path.exists():
        for line in env_path.read_text(encoding="utf-8").splitlines():
            line = line.strip()
            if line and not line.startswith("#") and "=" in line:
                k, v = line.split("=", 1)
                existing[k.strip()] = v.strip()

    existing["PRIVATE_KEY"] = credential.private_key
    existing["WALLET_ADDRESS"] = credential.address
    # Only fill endpoints that are missing, so user overrides survive
    existing.setdefault("MONAD_RPC", DEFAULT_RPC_URL)
    existing.setdefault("USDC_ADDRESS", DEFAULT_USDC_ADDRESS)

    lines = [f"{k}={v}" for k, v in existing.items()]
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")

    # Set secure permissions on Unix
    if os.name != "nt":
        env_path.chmod(0o600)

    return env_path


def get_account(private_key: str) -> LocalAccount:
    """
    Get an eth-account LocalAccount from a private key.

    Raises:
        SigningError: If the key is not a valid secp256k1 secret
    """
    key = _normalize_key(private_key)
    try:
        return Account.from_key(key)
    except Exception as exc:  # eth-keys raises its own ValidationError
        raise SigningError(f"Invalid private key: {exc}") from exc


def get_address(private_key: str) -> str:
    """0x-prefixed checksummed address for a private key."""
    return get_account(private_key).address


def load_credential(config: WalletConfig) -> AccountCredential:
    """
    Build the signing credential from a resolved config.

    Raises:
        ConfigurationError: If no wallet is configured
        SigningError: If the key is malformed or out of sync with the address
    """
    if not config.private_key:
        raise ConfigurationError("No wallet configured. Run: buddyevents wallet setup")
    return AccountCredential.from_private_key(
        config.private_key, expected_address=config.wallet_address or None
    )
