"""
Transaction Builder - Build, sign, and send MON / USDC transfers.

Uses eth-account for signing and the httpx-based RPC gateway for chain
state and submission. Transactions are legacy EIP-155 transactions with a
flat gas limit per transfer kind; there is no gas estimation.

Steps, aborting at the first failure:
  validate intent -> chain id -> pending nonce -> gas price
  -> unsigned record -> sign -> eth_sendRawTransaction
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

from ..config import WalletConfig
from ..exceptions import (
    ChainResolutionError,
    EncodingError,
    InvalidIntent,
    RPCError,
    SigningError,
)
from ..sigil.eth import AccountCredential, get_account
from .calldata import (
    encode_transfer_call,
    is_hex_address,
    normalize_address,
    to_checksum_address,
)
from .rpc import RPCGateway
from .units import NATIVE_DECIMALS, USDC_DECIMALS, to_decimal, to_fixed_point_units

logger = logging.getLogger(__name__)

NATIVE_TOKEN = "mon"
USDC_TOKEN = "usdc"
SUPPORTED_TOKENS = (NATIVE_TOKEN, USDC_TOKEN)

TOKEN_DECIMALS = {
    NATIVE_TOKEN: NATIVE_DECIMALS,
    USDC_TOKEN: USDC_DECIMALS,
}

NATIVE_TRANSFER_GAS = 21_000
# ERC-20 transfer runs contract code, so it gets a larger flat limit
TOKEN_TRANSFER_GAS = 100_000


# ============ Records ============


@dataclass(frozen=True)
class TransferIntent:
    """Send ``amount`` of ``token`` to ``recipient``."""

    recipient: str
    amount: Decimal
    token: str = NATIVE_TOKEN

    @classmethod
    def create(
        cls, recipient: str, amount: Any, token: str = NATIVE_TOKEN
    ) -> "TransferIntent":
        """Coerce CLI input into a validated intent.

        Raises:
            InvalidIntent: If any field is rejected
        """
        try:
            value = to_decimal(amount)
        except EncodingError as exc:
            raise InvalidIntent(str(exc), field="amount") from exc

        intent = cls(
            recipient=recipient.strip() if isinstance(recipient, str) else recipient,
            amount=value,
            token=(token or "").strip().lower(),
        )
        validate_intent(intent)
        return intent

    @property
    def is_native(self) -> bool:
        return self.token == NATIVE_TOKEN

    @property
    def decimals(self) -> int:
        return TOKEN_DECIMALS[self.token]

    @property
    def units(self) -> int:
        return to_fixed_point_units(self.amount, self.decimals)


@dataclass(frozen=True)
class UnsignedTransaction:
    nonce: int
    to: str
    value: int
    gas: int
    gas_price: int
    data: bytes
    chain_id: int

    def to_dict(self) -> dict[str, Any]:
        """Transaction fields in the shape eth-account signs."""
        return {
            "nonce": self.nonce,
            "to": to_checksum_address(self.to),
            "value": self.value,
            "gas": self.gas,
            "gasPrice": self.gas_price,
            "data": "0x" + self.data.hex(),
            "chainId": self.chain_id,
        }


@dataclass(frozen=True)
class SignedTransaction:
    raw_transaction: bytes
    tx_hash: str

    @property
    def raw_hex(self) -> str:
        return "0x" + self.raw_transaction.hex()


# ============ Pipeline ============


def validate_intent(intent: TransferIntent, token_address: Optional[str] = None) -> None:
    """
    Reject a bad intent before anything touches the network.

    Args:
        intent: Transfer to check
        token_address: USDC contract, required for token transfers

    Raises:
        InvalidIntent: Unsupported token, bad recipient, bad amount, or a
            missing/malformed token contract address
    """
    if intent.token not in SUPPORTED_TOKENS:
        raise InvalidIntent(
            f"Unsupported token {intent.token!r} (use {'|'.join(SUPPORTED_TOKENS)})",
            field="token",
        )
    if not is_hex_address(intent.recipient):
        raise InvalidIntent(f"Invalid --to address: {intent.recipient}", field="recipient")

    try:
        intent.units
    except EncodingError as exc:
        raise InvalidIntent(str(exc), field="amount") from exc

    if token_address is not None and not intent.is_native:
        if not is_hex_address(token_address):
            raise InvalidIntent(
                f"Invalid USDC contract address in config: {token_address!r}",
                field="token_address",
            )


def build_transfer(
    intent: TransferIntent,
    sender: str,
    gateway: RPCGateway,
    token_address: Optional[str] = None,
) -> UnsignedTransaction:
    """
    Build an unsigned transfer transaction.

    Args:
        intent: What to send
        sender: Address whose pending nonce is used
        gateway: RPC gateway for chain id, nonce and gas price
        token_address: USDC contract address (token transfers only)

    Returns:
        UnsignedTransaction ready for sign_transaction

    Raises:
        InvalidIntent: Before any RPC call, if the intent is rejected
        ChainResolutionError: If eth_chainId fails
        RPCError: If the nonce or gas price lookup fails
    """
    validate_intent(intent, token_address)

    units = intent.units
    if intent.is_native:
        to = normalize_address(intent.recipient)
        value, gas, data = units, NATIVE_TRANSFER_GAS, b""
    elif token_address is None:
        raise InvalidIntent("USDC contract address is not configured", field="token_address")
    else:
        to = normalize_address(token_address)
        value, gas = 0, TOKEN_TRANSFER_GAS
        data = encode_transfer_call(intent.recipient, units)

    try:
        chain_id = gateway.chain_id()
    except RPCError as exc:
        raise ChainResolutionError(
            f"Failed to fetch chain id: {exc.message}", exc.method
        ) from exc

    # NOTE: "pending" lets sequential sends queue; another process sending
    # from the same key concurrently can still take the same nonce.
    nonce = gateway.get_transaction_count(sender, "pending")
    gas_price = gateway.gas_price()

    tx = UnsignedTransaction(
        nonce=nonce,
        to=to,
        value=value,
        gas=gas,
        gas_price=gas_price,
        data=data,
        chain_id=chain_id,
    )

    logger.debug(
        "Built %s transfer chain_id=%d nonce=%d gas=%d gas_price=%d",
        intent.token,
        chain_id,
        nonce,
        tx.gas,
        gas_price,
    )
    return tx


def sign_transaction(tx: UnsignedTransaction, credential: AccountCredential) -> SignedTransaction:
    """
    Sign a transaction as an EIP-155 legacy transaction.

    Raises:
        SigningError: If the key is malformed or signing fails
    """
    account = get_account(credential.private_key)
    if account.address.lower() != credential.address.lower():
        raise SigningError("Credential address does not match its private key")

    try:
        signed = account.sign_transaction(tx.to_dict())
    except (ValueError, TypeError) as exc:
        raise SigningError(f"Failed to sign transaction: {exc}") from exc

    return SignedTransaction(
        raw_transaction=bytes(signed.raw_transaction),
        tx_hash="0x" + bytes(signed.hash).hex(),
    )


def send_transfer(
    intent: TransferIntent,
    credential: AccountCredential,
    config: WalletConfig,
    gateway: Optional[RPCGateway] = None,
) -> str:
    """
    Build, sign, and send a transfer.

    Convenience function combining build + sign + send.

    Args:
        intent: What to send
        credential: Signing key of the sender
        config: Resolved wallet configuration (RPC URL, USDC address)
        gateway: Existing gateway (default: one built from config)

    Returns:
        Transaction hash reported by the node
    """
    owns_gateway = gateway is None
    if gateway is None:
        gateway = RPCGateway(config.rpc_url, timeout=config.rpc_timeout)

    try:
        tx = build_transfer(
            intent,
            credential.address,
            gateway,
            token_address=config.usdc_address,
        )
        signed = sign_transaction(tx, credential)
        tx_hash = gateway.send_raw_transaction(signed.raw_transaction)
    finally:
        if owns_gateway:
            gateway.close()

    if tx_hash.lower() != signed.tx_hash.lower():
        logger.warning(
            "Node returned hash %s, locally computed %s", tx_hash, signed.tx_hash
        )
    logger.info(
        "Transaction sent token=%s nonce=%d hash=%s", intent.token, tx.nonce, tx_hash
    )
    return tx_hash
