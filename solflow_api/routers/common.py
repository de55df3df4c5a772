"""Shared plumbing for the routes that proxy a Solana RPC node."""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict

from ..errors import RemoteServiceError
from ..services.solana import RpcClientFactory, RpcError, SolanaRpcClient

logger = logging.getLogger(__name__)


@asynccontextmanager
async def rpc_session(factory: RpcClientFactory, endpoint: str, failure: str) -> AsyncIterator[SolanaRpcClient]:
    """
    Open a client for one request. RPC failures inside the block become a
    400 `RemoteServiceError`; other errors pass through untouched.
    """
    client = factory(endpoint)
    try:
        yield client
    except RpcError as e:
        logger.warning("%s (%s): %s", failure, endpoint, e)
        raise RemoteServiceError(str(e) or failure, status_code=400) from e
    finally:
        await client.aclose()


def parsed_token_info(account: Dict[str, Any]) -> Dict[str, Any]:
    """`info` block of a jsonParsed SPL token account, or {}."""
    node: Any = account
    for key in ("account", "data", "parsed", "info"):
        node = node.get(key) if isinstance(node, dict) else None
    return node if isinstance(node, dict) else {}


def token_amount(info: Dict[str, Any]) -> Dict[str, Any]:
    amount = info.get("tokenAmount")
    return amount if isinstance(amount, dict) else {}
