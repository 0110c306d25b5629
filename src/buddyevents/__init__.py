__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Errors
    "BuddyEventsError",
    "ConfigurationError",
    "InvalidIntent",
    "EncodingError",
    "InvalidAddress",
    "InvalidAmount",
    "MalformedHex",
    "RPCError",
    "TransportError",
    "RemoteError",
    "MalformedResponse",
    "ChainResolutionError",
    "SigningError",
    # Config
    "WalletConfig",
    "load_config",
    # Identity
    "AccountCredential",
    "generate_eoa",
    "get_address",
    "load_credential",
    "save_wallet",
    # Units
    "to_fixed_point_units",
    "hex_to_int",
    "units_to_decimal_string",
    # Calldata
    "encode_transfer_call",
    "encode_balance_of_call",
    # RPC
    "RPCGateway",
    # Transactions
    "TransferIntent",
    "UnsignedTransaction",
    "SignedTransaction",
    "build_transfer",
    "sign_transaction",
    "send_transfer",
]

from .exceptions import (
    BuddyEventsError,
    ChainResolutionError,
    ConfigurationError,
    EncodingError,
    InvalidAddress,
    InvalidAmount,
    InvalidIntent,
    MalformedHex,
    MalformedResponse,
    RemoteError,
    RPCError,
    SigningError,
    TransportError,
)
from .config import WalletConfig, load_config
from .sigil.eth import (
    AccountCredential,
    generate_eoa,
    get_address,
    load_credential,
    save_wallet,
)
from .pneuma.units import hex_to_int, to_fixed_point_units, units_to_decimal_string
from .pneuma.calldata import encode_balance_of_call, encode_transfer_call
from .pneuma.rpc import RPCGateway
from .pneuma.tx import (
    SignedTransaction,
    TransferIntent,
    UnsignedTransaction,
    build_transfer,
    send_transfer,
    sign_transaction,
)
