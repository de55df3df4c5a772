from fastapi import APIRouter, Depends

from ..deps import get_rpc_factory
from ..errors import NotFoundError
from ..models.rpc import RecentTransactionsRequest, SignatureRequest, SimulateTransactionRequest
from ..services.solana import RpcClientFactory
from ..util.pagination import clamp_limit
from .common import rpc_session

router = APIRouter()


@router.post("/transactions/get")
async def get_transaction(req: SignatureRequest, rpc_factory: RpcClientFactory = Depends(get_rpc_factory)):
    async with rpc_session(rpc_factory, req.endpoint, "Failed to get transaction") as rpc:
        tx = await rpc.get_transaction(req.signature)

    if tx is None:
        raise NotFoundError("Transaction not found")
    meta = tx.get("meta") or {}
    return {
        "signature": req.signature,
        "slot": tx.get("slot"),
        "blockTime": tx.get("blockTime"),
        "meta": {
            "err": meta.get("err"),
            "fee": meta.get("fee"),
            "preBalances": meta.get("preBalances"),
            "postBalances": meta.get("postBalances"),
            "logMessages": meta.get("logMessages"),
        },
        "transaction": tx.get("transaction"),
    }


@router.post("/transactions/status")
async def get_transaction_status(req: SignatureRequest, rpc_factory: RpcClientFactory = Depends(get_rpc_factory)):
    async with rpc_session(rpc_factory, req.endpoint, "Failed to get transaction status") as rpc:
        status = await rpc.get_signature_status(req.signature) or {}
    return {
        "signature": req.signature,
        "confirmationStatus": status.get("confirmationStatus"),
        "confirmations": status.get("confirmations"),
        "err": status.get("err"),
        "slot": status.get("slot"),
    }


@router.post("/transactions/recent")
async def get_recent_transactions(
    req: RecentTransactionsRequest, rpc_factory: RpcClientFactory = Depends(get_rpc_factory)
):
    limit = clamp_limit(req.limit, default=10, max_=100)
    async with rpc_session(rpc_factory, req.endpoint, "Failed to get recent transactions") as rpc:
        signatures = await rpc.get_signatures_for_address(req.address, limit)

    keys = ("signature", "slot", "blockTime", "err", "memo")
    return {
        "address": req.address,
        "signatures": [{k: s.get(k) for k in keys} for s in signatures],
        "total": len(signatures),
    }


@router.post("/transactions/simulate")
async def simulate_transaction(
    req: SimulateTransactionRequest, rpc_factory: RpcClientFactory = Depends(get_rpc_factory)
):
    """The wire transaction is forwarded as-is; the node decodes it."""
    async with rpc_session(rpc_factory, req.endpoint, "Failed to simulate transaction") as rpc:
        result = await rpc.simulate_transaction(req.transaction)
    return {
        "value": {
            "err": result.get("err"),
            "logs": result.get("logs"),
            "unitsConsumed": result.get("unitsConsumed"),
            "accounts": result.get("accounts"),
        }
    }
