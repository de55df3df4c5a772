"""
Solana JSON-RPC client.

A thin async wrapper over the HTTP JSON-RPC API of a Solana node. One client
is opened per request against the endpoint named in the request body:

    async with SolanaRpcClient(endpoint) as rpc:
        slot = await rpc.get_slot()

Transport failures, non-2xx statuses, JSON-RPC error objects and results
that do not have the documented shape all surface as `RpcError`.
"""

from __future__ import annotations

import base64
import itertools
import logging
from typing import Any, Callable, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_COMMITMENT = "confirmed"
TOKEN_PROGRAM_ID = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"


class RpcError(Exception):
    def __init__(self, message: str, code: Optional[int] = None):
        super().__init__(message)
        self.code = code


def _expect(method: str, value: Any, kind: type, nullable: bool = False) -> Any:
    if value is None and nullable:
        return None
    if not isinstance(value, kind):
        raise RpcError(f"{method}: unexpected RPC response")
    return value


def _records(method: str, value: Any, nullable_items: bool = False) -> list:
    """A list whose members are all objects (or null, when allowed)."""
    items = _expect(method, value, list)
    for item in items:
        if item is None and nullable_items:
            continue
        if not isinstance(item, dict):
            raise RpcError(f"{method}: unexpected RPC response")
    return items


def _value(method: str, result: Any) -> Any:
    """Unwrap the `{context, value}` envelope most account methods answer with."""
    result = _expect(method, result, dict)
    if "value" not in result:
        raise RpcError(f"{method}: unexpected RPC response")
    return result["value"]


class SolanaRpcClient:
    def __init__(
        self,
        endpoint: str,
        commitment: str = DEFAULT_COMMITMENT,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.endpoint = endpoint
        self.commitment = commitment
        self._ids = itertools.count(1)
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def __aenter__(self) -> "SolanaRpcClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def call(self, method: str, *params: Any) -> Any:
        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": list(params)}
        logger.debug("rpc %s -> %s", method, self.endpoint)
        try:
            response = await self._client.post(self.endpoint, json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise RpcError(f"{method}: RPC node returned HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise RpcError(f"{method}: {e.__class__.__name__}: {e}") from e
        except ValueError as e:
            raise RpcError(f"{method}: invalid JSON from RPC node") from e

        if not isinstance(data, dict):
            raise RpcError(f"{method}: unexpected RPC response")
        err = data.get("error")
        if err:
            if not isinstance(err, dict):
                raise RpcError(f"{method}: {err}")
            code = err.get("code")
            raise RpcError(f"{method}: {err.get('message') or 'RPC error'}", code=code if isinstance(code, int) else None)
        return data.get("result")

    def _config(self, **extra: Any) -> dict:
        config = {"commitment": self.commitment}
        config.update({k: v for k, v in extra.items() if v is not None})
        return config

    # ------------------------------------------------------------------
    # Cluster
    # ------------------------------------------------------------------

    async def get_slot(self) -> int:
        return _expect("getSlot", await self.call("getSlot", self._config()), int)

    async def get_block_height(self) -> int:
        return _expect("getBlockHeight", await self.call("getBlockHeight", self._config()), int)

    async def get_version(self) -> dict:
        return _expect("getVersion", await self.call("getVersion"), dict)

    async def get_epoch_info(self) -> dict:
        return _expect("getEpochInfo", await self.call("getEpochInfo", self._config()), dict)

    async def get_latest_blockhash(self) -> dict:
        result = await self.call("getLatestBlockhash", self._config())
        return _expect("getLatestBlockhash", _value("getLatestBlockhash", result), dict)

    async def get_recent_performance_samples(self, limit: int) -> list:
        return _records("getRecentPerformanceSamples", await self.call("getRecentPerformanceSamples", limit))

    async def get_block(self, slot: int) -> Optional[dict]:
        # Only signatures are fetched; callers need the transaction count, not bodies.
        result = await self.call(
            "getBlock",
            slot,
            self._config(encoding="json", transactionDetails="signatures", rewards=False, maxSupportedTransactionVersion=0),
        )
        return _expect("getBlock", result, dict, nullable=True)

    async def get_vote_accounts(self) -> dict:
        result = _expect("getVoteAccounts", await self.call("getVoteAccounts", self._config()), dict)
        _records("getVoteAccounts", result.get("current") or [])
        _records("getVoteAccounts", result.get("delinquent") or [])
        return result

    async def get_cluster_nodes(self) -> list:
        return _records("getClusterNodes", await self.call("getClusterNodes"))

    async def get_supply(self) -> dict:
        return _expect("getSupply", _value("getSupply", await self.call("getSupply", self._config())), dict)

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------

    async def get_balance(self, public_key: str) -> int:
        result = await self.call("getBalance", public_key, self._config())
        return _expect("getBalance", _value("getBalance", result), int)

    async def get_account_info(self, public_key: str) -> Optional[dict]:
        result = await self.call("getAccountInfo", public_key, self._config(encoding="base64"))
        return _expect("getAccountInfo", _value("getAccountInfo", result), dict, nullable=True)

    async def get_multiple_accounts(self, public_keys: list[str]) -> list[Optional[dict]]:
        """Accounts in the order asked for; missing ones are None."""
        result = await self.call("getMultipleAccounts", public_keys, self._config(encoding="base64"))
        accounts = _records("getMultipleAccounts", _value("getMultipleAccounts", result), nullable_items=True)
        if len(accounts) != len(public_keys):
            raise RpcError("getMultipleAccounts: unexpected RPC response")
        return accounts

    async def get_program_accounts(self, program_id: str) -> list:
        result = await self.call("getProgramAccounts", program_id, self._config(encoding="base64"))
        return _records("getProgramAccounts", result)

    # ------------------------------------------------------------------
    # Tokens
    # ------------------------------------------------------------------

    async def get_token_accounts_by_owner(
        self, owner: str, mint: Optional[str] = None, program_id: Optional[str] = None
    ) -> list:
        selector = {"mint": mint} if mint else {"programId": program_id or TOKEN_PROGRAM_ID}
        result = await self.call("getTokenAccountsByOwner", owner, selector, self._config(encoding="jsonParsed"))
        return _records("getTokenAccountsByOwner", _value("getTokenAccountsByOwner", result))

    async def get_token_supply(self, mint: str) -> dict:
        result = await self.call("getTokenSupply", mint, self._config())
        return _expect("getTokenSupply", _value("getTokenSupply", result), dict)

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    async def get_transaction(self, signature: str) -> Optional[dict]:
        result = await self.call(
            "getTransaction", signature, self._config(encoding="json", maxSupportedTransactionVersion=0)
        )
        return _expect("getTransaction", result, dict, nullable=True)

    async def get_signature_status(self, signature: str) -> Optional[dict]:
        result = await self.call("getSignatureStatuses", [signature], {"searchTransactionHistory": True})
        values = _records("getSignatureStatuses", _value("getSignatureStatuses", result), nullable_items=True)
        return values[0] if values else None

    async def get_signatures_for_address(self, address: str, limit: int) -> list:
        result = await self.call("getSignaturesForAddress", address, self._config(limit=limit))
        return _records("getSignaturesForAddress", result)

    async def simulate_transaction(self, transaction_b64: str) -> dict:
        result = await self.call(
            "simulateTransaction",
            transaction_b64,
            self._config(encoding="base64", sigVerify=False, replaceRecentBlockhash=True),
        )
        return _expect("simulateTransaction", _value("simulateTransaction", result), dict)


RpcClientFactory = Callable[[str], SolanaRpcClient]


def account_data(account: dict) -> bytes:
    """Raw bytes of a base64-encoded account `data` field: ["<b64>", "base64"]."""
    data = account.get("data")
    if not isinstance(data, list) or not data:
        return b""
    try:
        return base64.b64decode(data[0], validate=True)
    except (TypeError, ValueError) as e:
        raise RpcError("Account data is not valid base64") from e


def account_data_length(account: dict) -> int:
    return len(account_data(account))
