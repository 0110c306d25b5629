"""
JSON-RPC Gateway for Ethereum-compatible nodes (Monad testnet by default).

Lightweight alternative to web3.py: uses httpx for HTTP. Requests and
responses are typed records validated on receipt; every failure is raised
as an RPCError subclass tagged with the method that failed. No retries are
performed here, callers decide.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence, Union

import httpx

from ..exceptions import MalformedHex, MalformedResponse, RemoteError, TransportError
from .units import hex_to_int

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


# ============ Wire Records ============


@dataclass(frozen=True)
class RPCRequest:
    method: str
    params: list = field(default_factory=list)
    id: int = 1

    def to_payload(self) -> dict[str, Any]:
        return {
            "jsonrpc": "2.0",
            "method": self.method,
            "params": self.params,
            "id": self.id,
        }


@dataclass(frozen=True)
class RPCErrorObject:
    message: str
    code: Optional[int] = None


@dataclass(frozen=True)
class RPCResponse:
    result: Optional[str] = None
    error: Optional[RPCErrorObject] = None
    id: Any = None

    @classmethod
    def from_body(cls, body: Any, method: str) -> "RPCResponse":
        """
        Validate a decoded JSON body.

        Raises:
            MalformedResponse: If the body carries neither a string result
                nor an error object
        """
        if not isinstance(body, dict):
            raise MalformedResponse("Response is not a JSON object", method)

        error = body.get("error")
        if error is not None:
            if isinstance(error, dict):
                message = error.get("message")
                code = error.get("code")
                return cls(
                    error=RPCErrorObject(
                        message=str(message) if message is not None else str(error),
                        code=code if isinstance(code, int) else None,
                    ),
                    id=body.get("id"),
                )
            return cls(error=RPCErrorObject(message=str(error)), id=body.get("id"))

        result = body.get("result")
        if not isinstance(result, str):
            raise MalformedResponse("Response has neither result nor error", method)
        return cls(result=result, id=body.get("id"))


# ============ Gateway ============


class RPCGateway:
    """
    Synchronous JSON-RPC client bound to one endpoint.

    Args:
        endpoint: HTTP(S) URL of the node
        timeout: Per-request timeout in seconds
        client: Pre-built httpx.Client (tests pass one with a MockTransport)
    """

    def __init__(
        self,
        endpoint: str,
        timeout: float = DEFAULT_TIMEOUT,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.endpoint = endpoint
        self.timeout = timeout
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout)
        self._ids = itertools.count(1)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "RPCGateway":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def call(self, method: str, params: Sequence[Any] = ()) -> str:
        """
        Make a JSON-RPC call.

        Args:
            method: RPC method name (e.g., "eth_chainId")
            params: Ordered RPC parameters

        Returns:
            Result field from the RPC response

        Raises:
            TransportError: Connection failure, timeout, or non-RPC HTTP error
            RemoteError: Response carried an error object
            MalformedResponse: Body was not a usable JSON-RPC envelope
        """
        request = RPCRequest(method=method, params=list(params), id=next(self._ids))
        logger.debug("RPC call %s id=%d", method, request.id)

        try:
            response = self._client.post(
                self.endpoint, json=request.to_payload(), timeout=self.timeout
            )
        except httpx.TimeoutException as exc:
            raise TransportError(
                f"Request timed out after {self.timeout}s", method
            ) from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"Request failed: {exc}", method) from exc

        try:
            body = response.json()
        except ValueError as exc:
            if response.is_error:
                raise TransportError(
                    f"HTTP {response.status_code} from {self.endpoint}",
                    method,
                    status_code=response.status_code,
                ) from exc
            raise MalformedResponse("Response body is not valid JSON", method) from exc

        if response.is_error and not (isinstance(body, dict) and "error" in body):
            raise TransportError(
                f"HTTP {response.status_code} from {self.endpoint}",
                method,
                status_code=response.status_code,
            )

        parsed = RPCResponse.from_body(body, method)
        if parsed.error is not None:
            logger.debug("RPC %s returned error code=%s", method, parsed.error.code)
            raise RemoteError(parsed.error.message, method, code=parsed.error.code)

        if parsed.result is None:
            raise MalformedResponse("Response has neither result nor error", method)
        return parsed.result

    def _quantity(self, method: str, params: Sequence[Any] = ()) -> int:
        result = self.call(method, params)
        try:
            return hex_to_int(result)
        except MalformedHex as exc:
            raise MalformedResponse(f"Invalid quantity {result!r}", method) from exc

    # ============ Typed Methods ============

    def chain_id(self) -> int:
        return self._quantity("eth_chainId")

    def get_transaction_count(self, address: str, block: str = "pending") -> int:
        """Nonce for the next transaction from ``address``.

        "pending" counts transactions still in the mempool, so back-to-back
        sends from this process queue in order.
        """
        return self._quantity("eth_getTransactionCount", [address, block])

    def gas_price(self) -> int:
        return self._quantity("eth_gasPrice")

    def get_balance(self, address: str, block: str = "latest") -> int:
        """Native balance in wei."""
        return self._quantity("eth_getBalance", [address, block])

    def eth_call(
        self, to: str, data: Union[bytes, str], block: str = "latest"
    ) -> str:
        """Read-only contract call; returns 0x-prefixed return data."""
        if isinstance(data, bytes):
            data = "0x" + data.hex()
        return self.call("eth_call", [{"to": to, "data": data}, block])

    def send_raw_transaction(self, raw_tx: Union[bytes, str]) -> str:
        """
        Broadcast a signed transaction.

        Returns:
            Transaction hash (0x-prefixed hex)
        """
        if isinstance(raw_tx, bytes):
            raw_tx = "0x" + raw_tx.hex()
        return self.call("eth_sendRawTransaction", [raw_tx])
