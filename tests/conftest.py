"""Shared fixtures: an in-memory JSON-RPC node and wallet keys."""

from __future__ import annotations

import json
from typing import Any

import httpx
import pytest
from eth_hash.auto import keccak

from buddyevents.pneuma.rpc import RPCGateway
from buddyevents.sigil.eth import AccountCredential

TEST_PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
MONAD_CHAIN_ID = 10143

CONFIG_KEYS = (
    "PRIVATE_KEY",
    "WALLET_ADDRESS",
    "MONAD_RPC",
    "USDC_ADDRESS",
    "BUDDYEVENTS_RPC_TIMEOUT",
    "BUDDYEVENTS_CONFIG",
)


def _tx_hash(params: list) -> str:
    raw = bytes.fromhex(params[0][2:])
    return "0x" + keccak(raw).hex()


class FakeNode:
    """Answers JSON-RPC requests from a method -> reply table.

    A reply may be a result string, ``{"error": {...}}``, an httpx.Response,
    an exception instance (raised as a transport failure), or a callable
    taking the params list.
    """

    def __init__(self) -> None:
        self.replies: dict[str, Any] = {
            "eth_chainId": hex(MONAD_CHAIN_ID),
            "eth_getTransactionCount": "0x7",
            "eth_gasPrice": hex(50 * 10**9),
            "eth_sendRawTransaction": _tx_hash,
        }
        self.calls: list[dict[str, Any]] = []

    @property
    def methods(self) -> list[str]:
        return [call["method"] for call in self.calls]

    def handler(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        self.calls.append(payload)

        reply = self.replies[payload["method"]]
        if callable(reply):
            reply = reply(payload["params"])
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, httpx.Response):
            return reply

        body: dict[str, Any] = {"jsonrpc": "2.0", "id": payload["id"]}
        if isinstance(reply, dict) and "error" in reply:
            body["error"] = reply["error"]
        else:
            body["result"] = reply
        return httpx.Response(200, json=body)

    def gateway(self, endpoint: str = "http://node.test/rpc") -> RPCGateway:
        client = httpx.Client(transport=httpx.MockTransport(self.handler))
        return RPCGateway(endpoint, client=client)


@pytest.fixture()
def node() -> FakeNode:
    return FakeNode()


@pytest.fixture()
def credential() -> AccountCredential:
    return AccountCredential.from_private_key(TEST_PRIVATE_KEY)


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove config keys from the process environment."""
    for key in CONFIG_KEYS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture()
def private_key() -> str:
    return TEST_PRIVATE_KEY
