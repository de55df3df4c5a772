# tests/conftest.py
import base64
import json
import struct
from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest
from fastapi.testclient import TestClient

from solflow_api.deps import (
    get_bags_factory,
    get_generator,
    get_payment_ledger,
    get_rpc_factory,
    get_workflow_store,
)
from solflow_api.ia import MockCompletionProvider, WorkflowGenerator
from solflow_api.main import app
from solflow_api.services.bags import BagsClient
from solflow_api.services.metaplex import METADATA_PROGRAM_ID
from solflow_api.services.payments import PaymentLedger
from solflow_api.services.solana import SolanaRpcClient
from solflow_api.services.store import InMemoryWorkflowStore
from solflow_api.util.keys import b58decode

# Valid base58 32-byte keys
SYSTEM_PROGRAM = "11111111111111111111111111111111"
WSOL_MINT = "So11111111111111111111111111111111111111112"
TOKEN_PROGRAM = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"

RPC_URL = "https://rpc.test"
BAGS_URL = "https://bags.test/api/v1"


class FakeRpcNode:
    """
    Answers JSON-RPC calls from a table of canned results.
    Unknown methods get an HTTP 500, `errors` entries a JSON-RPC error object.
    """

    def __init__(self) -> None:
        self.results: Dict[str, Any] = {}
        self.errors: Dict[str, str] = {}
        self.calls: List[Dict[str, Any]] = []

    def handle(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        self.calls.append(payload)
        method = payload["method"]
        if method in self.errors:
            return httpx.Response(
                200,
                json={"jsonrpc": "2.0", "id": payload["id"], "error": {"code": -32602, "message": self.errors[method]}},
            )
        if method not in self.results:
            return httpx.Response(500, text="boom")
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": payload["id"], "result": self.results[method]})

    def params(self, method: str) -> List[Any]:
        return [c["params"] for c in self.calls if c["method"] == method][-1]


class FakeBagsApi:
    """Bags.fm stand-in keyed by path suffix (e.g. "/tokens/abc")."""

    def __init__(self) -> None:
        self.routes: Dict[str, Tuple[int, Any]] = {}
        self.requests: List[httpx.Request] = []

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/api/v1")
        if path not in self.routes:
            return httpx.Response(404, json={"error": "not found"})
        status, body = self.routes[path]
        return httpx.Response(status, json=body)


def _borsh_str(value: str, width: int) -> bytes:
    raw = value.encode().ljust(width, b"\x00")
    return struct.pack("<I", len(raw)) + raw


def build_metadata(
    mint: str,
    name: str = "Bag #1",
    symbol: str = "BAG",
    uri: str = "https://arweave.net/bag1.json",
    update_authority: str = SYSTEM_PROGRAM,
    fee: int = 500,
    creators: Optional[List[Tuple[str, bool, int]]] = None,
    collection: Optional[Tuple[str, bool]] = None,
    is_mutable: bool = True,
    with_tail: bool = True,
) -> bytes:
    """MetadataV1 account bytes, with name/symbol/uri NUL-padded the way the program stores them."""
    out = bytes([4]) + b58decode(update_authority) + b58decode(mint)
    out += _borsh_str(name, 32) + _borsh_str(symbol, 10) + _borsh_str(uri, 200)
    out += struct.pack("<H", fee)
    if creators is None:
        out += b"\x00"
    else:
        out += b"\x01" + struct.pack("<I", len(creators))
        out += b"".join(b58decode(a) + bytes([verified, share]) for a, verified, share in creators)
    out += bytes([0, is_mutable])
    if with_tail:
        out += b"\x01\xfe" + b"\x01\x00"
        out += (b"\x01" + bytes([collection[1]]) + b58decode(collection[0])) if collection else b"\x00"
    return out


def metadata_account(data: bytes, owner: str = METADATA_PROGRAM_ID) -> Dict[str, Any]:
    return {
        "lamports": 5616720, "owner": owner, "executable": False, "rentEpoch": 361,
        "data": [base64.b64encode(data).decode(), "base64"],
    }


@pytest.fixture()
def metadata():
    """Builders for Metaplex metadata accounts: (build_metadata, metadata_account)."""
    return build_metadata, metadata_account


@pytest.fixture()
def store():
    return InMemoryWorkflowStore()


@pytest.fixture()
def ledger():
    return PaymentLedger()


@pytest.fixture()
def rpc_node():
    return FakeRpcNode()


@pytest.fixture()
def bags_api():
    return FakeBagsApi()


@pytest.fixture()
def provider():
    return MockCompletionProvider()


@pytest.fixture()
def client(store, ledger, rpc_node, bags_api, provider):
    """TestClient with every remote collaborator replaced by an in-process fake."""

    def rpc_factory(endpoint: str) -> SolanaRpcClient:
        return SolanaRpcClient(endpoint, transport=httpx.MockTransport(rpc_node.handle))

    def bags_factory(api_key: Optional[str]) -> BagsClient:
        return BagsClient(BAGS_URL, api_key=api_key, transport=httpx.MockTransport(bags_api.handle))

    app.dependency_overrides[get_workflow_store] = lambda: store
    app.dependency_overrides[get_payment_ledger] = lambda: ledger
    app.dependency_overrides[get_rpc_factory] = lambda: rpc_factory
    app.dependency_overrides[get_bags_factory] = lambda: bags_factory
    app.dependency_overrides[get_generator] = lambda: WorkflowGenerator(provider)
    try:
        yield TestClient(app, raise_server_exceptions=False)
    finally:
        app.dependency_overrides.clear()
