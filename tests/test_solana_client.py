import asyncio
import base64
import json

import httpx
import pytest

from solflow_api.services.solana import RpcError, SolanaRpcClient, account_data_length
from solflow_api.util.keys import is_valid_public_key, lamports_to_sol


def _run(coro):
    return asyncio.run(coro)


async def _call(handler, method, *args):
    async with SolanaRpcClient("https://rpc.test", transport=httpx.MockTransport(handler)) as rpc:
        return await getattr(rpc, method)(*args)


def test_sends_jsonrpc_envelope():
    seen = []

    def handler(request):
        seen.append(json.loads(request.content))
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": {"context": {}, "value": 5}})

    assert _run(_call(handler, "get_balance", "11111111111111111111111111111111")) == 5
    assert seen[0]["jsonrpc"] == "2.0"
    assert seen[0]["method"] == "getBalance"
    assert seen[0]["params"] == ["11111111111111111111111111111111", {"commitment": "confirmed"}]


def test_rpc_error_object_raises():
    def handler(request):
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "error": {"code": -32601, "message": "Method not found"}})

    with pytest.raises(RpcError) as exc:
        _run(_call(handler, "get_slot"))
    assert exc.value.code == -32601
    assert "Method not found" in str(exc.value)


def test_non_object_error_raises():
    def handler(request):
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "error": "node overloaded"})

    with pytest.raises(RpcError, match="node overloaded") as exc:
        _run(_call(handler, "get_slot"))
    assert exc.value.code is None


@pytest.mark.parametrize("method, args, result", [
    ("get_balance", ("11111111111111111111111111111111",), None),
    ("get_slot", (), None),
    ("get_slot", (), "12"),
    ("get_version", (), []),
    ("get_supply", (), {"context": {}}),
    ("get_cluster_nodes", (), {"nodes": []}),
    ("get_signature_status", ("sig",), {"value": "pending"}),
])
def test_unexpected_result_shape_raises(method, args, result):
    def handler(request):
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": result})

    with pytest.raises(RpcError, match="unexpected RPC response"):
        _run(_call(handler, method, *args))


def test_null_block_is_allowed():
    def handler(request):
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": None})

    assert _run(_call(handler, "get_block", 7)) is None


def test_multiple_accounts_keep_order_and_gaps():
    seen = []

    def handler(request):
        seen.append(json.loads(request.content))
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": {"value": [None, {"lamports": 1}]}})

    keys = ["11111111111111111111111111111111", "So11111111111111111111111111111111111111112"]
    assert _run(_call(handler, "get_multiple_accounts", keys)) == [None, {"lamports": 1}]
    assert seen[0]["params"] == [keys, {"commitment": "confirmed", "encoding": "base64"}]


def test_multiple_accounts_length_mismatch_raises():
    def handler(request):
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": {"value": [None]}})

    with pytest.raises(RpcError):
        _run(_call(handler, "get_multiple_accounts", ["a", "b"]))


def test_http_error_raises():
    with pytest.raises(RpcError, match="HTTP 502"):
        _run(_call(lambda request: httpx.Response(502), "get_slot"))


def test_invalid_json_raises():
    with pytest.raises(RpcError, match="invalid JSON"):
        _run(_call(lambda request: httpx.Response(200, text="<html>"), "get_slot"))


def test_connect_error_raises():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(RpcError, match="ConnectError"):
        _run(_call(handler, "get_slot"))


def test_signature_status_unwraps_first_value():
    def handler(request):
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": {"value": [{"slot": 3}]}})

    assert _run(_call(handler, "get_signature_status", "sig")) == {"slot": 3}


def test_account_data_length():
    account = {"data": [base64.b64encode(b"\x00" * 82).decode(), "base64"]}
    assert account_data_length(account) == 82
    assert account_data_length({}) == 0


@pytest.mark.parametrize("data", [["%%%", "base64"], [42, "base64"]])
def test_account_data_length_rejects_bad_base64(data):
    with pytest.raises(RpcError, match="not valid base64"):
        account_data_length({"data": data})


@pytest.mark.parametrize("key, ok", [
    ("11111111111111111111111111111111", True),
    ("So11111111111111111111111111111111111111112", True),
    ("TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA", True),
    ("short", False),
    ("0" * 44, False),
    ("I" * 40, False),
    ("z" * 44, False),
])
def test_public_key_check(key, ok):
    assert is_valid_public_key(key) is ok


def test_lamports_to_sol():
    assert lamports_to_sol(1_500_000_000) == 1.5
