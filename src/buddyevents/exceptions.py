"""Exception hierarchy for the BuddyEvents wallet client.

Each error carries an ``exit_code`` so the CLI can map failures to process
exit status without inspecting messages.
"""

from __future__ import annotations

from typing import Optional


class BuddyEventsError(RuntimeError):
    """Base exception for all BuddyEvents errors."""

    exit_code: int = 1


class ConfigurationError(BuddyEventsError):
    """Raised when the wallet configuration is invalid."""

    exit_code = 2


class InvalidIntent(BuddyEventsError):
    """Raised when a transfer request is rejected before any network call."""

    exit_code = 2

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


# ============ Encoding ============


class EncodingError(BuddyEventsError, ValueError):
    """Raised when a value cannot be converted to or from its wire form."""

    exit_code = 2


class InvalidAddress(EncodingError):
    """Raised for anything that is not a 20-byte hex address."""


class InvalidAmount(EncodingError):
    """Raised for amounts that cannot become a positive integer of base units."""


class MalformedHex(EncodingError):
    """Raised when a hex quantity contains non-hex characters."""


# ============ RPC ============


class RPCError(BuddyEventsError):
    """Base class for JSON-RPC failures, tagged with the failing method."""

    exit_code = 3

    def __init__(self, message: str, method: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.method = method

    def __str__(self) -> str:
        if self.method:
            return f"{self.method}: {self.message}"
        return self.message


class TransportError(RPCError):
    """Raised when the RPC endpoint is unreachable or times out."""

    def __init__(
        self,
        message: str,
        method: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message, method)
        self.status_code = status_code


class RemoteError(RPCError):
    """Raised when the node answers with a JSON-RPC ``error`` object."""

    def __init__(
        self,
        message: str,
        method: Optional[str] = None,
        code: Optional[int] = None,
    ) -> None:
        super().__init__(message, method)
        self.code = code


class MalformedResponse(RPCError):
    """Raised when the response body is not a usable JSON-RPC envelope."""


class ChainResolutionError(RPCError):
    """Raised when the chain id cannot be resolved."""


# ============ Signing ============


class SigningError(BuddyEventsError):
    """Raised when the credential is malformed or signing fails."""

    exit_code = 4
