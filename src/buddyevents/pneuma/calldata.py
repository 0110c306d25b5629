"""
Calldata - ERC-20 call encoding for the USDC contract.

Layout for transfer: 4-byte selector + address word + uint256 word, 68 bytes.
Arguments are ABI-encoded with eth-abi; selectors are Keccak-256 prefixes.
"""

from __future__ import annotations

import re

from eth_abi import encode
from eth_hash.auto import keccak

from ..exceptions import InvalidAddress, InvalidAmount
from .units import MAX_UINT256

TRANSFER_SIGNATURE = "transfer(address,uint256)"
BALANCE_OF_SIGNATURE = "balanceOf(address)"

TRANSFER_CALL_LENGTH = 4 + 32 + 32

_ADDRESS_RE = re.compile(r"(0[xX])?[0-9a-fA-F]{40}")


def function_selector(signature: str) -> bytes:
    """First 4 bytes of keccak256(signature)."""
    # NOTE: Keccak-256 != SHA3-256 (NIST). Never use hashlib.sha3_256 here.
    return keccak(signature.encode("utf-8"))[:4]


def is_hex_address(value: str) -> bool:
    """True for 40 hex digits with optional 0x prefix, any case."""
    return isinstance(value, str) and _ADDRESS_RE.fullmatch(value) is not None


def normalize_address(value: str) -> str:
    """Return the lowercase 0x-prefixed form of an address.

    Raises:
        InvalidAddress: If value is not a 20-byte hex address
    """
    if not is_hex_address(value):
        raise InvalidAddress(f"Invalid address: {value!r}")
    return "0x" + value[-40:].lower()


def to_checksum_address(address: str) -> str:
    """Convert an address to EIP-55 checksummed format.

    eth-account requires checksummed addresses in transaction fields.
    """
    addr = normalize_address(address)[2:]
    addr_hash = keccak(addr.encode("utf-8")).hex()
    result = "0x"
    for i, c in enumerate(addr):
        if c in "abcdef":
            result += c.upper() if int(addr_hash[i], 16) >= 8 else c
        else:
            result += c
    return result


def encode_transfer_call(recipient: str, amount: int) -> bytes:
    """
    Build calldata for ``transfer(address,uint256)``.

    Args:
        recipient: 20-byte hex address, with or without 0x
        amount: Token amount in base units

    Returns:
        68 bytes: a9059cbb + padded recipient + padded amount

    Raises:
        InvalidAddress: If recipient is malformed
        InvalidAmount: If amount does not fit a uint256
    """
    to = normalize_address(recipient)
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidAmount(f"Amount must be an integer of base units: {amount!r}")
    if amount < 0 or amount > MAX_UINT256:
        raise InvalidAmount(f"Amount out of uint256 range: {amount}")

    return function_selector(TRANSFER_SIGNATURE) + encode(
        ["address", "uint256"], [to, amount]
    )


def encode_balance_of_call(owner: str) -> bytes:
    """Build calldata for ``balanceOf(address)``."""
    return function_selector(BALANCE_OF_SIGNATURE) + encode(
        ["address"], [normalize_address(owner)]
    )
