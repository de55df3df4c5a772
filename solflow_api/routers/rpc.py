"""
Cluster and account reads against the RPC node named in each request body.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..deps import get_rpc_factory
from ..errors import NotFoundError
from ..models.rpc import BlockRequest, EndpointRequest, PerformanceRequest, PublicKeyRequest
from ..services.solana import RpcClientFactory, RpcError, account_data_length
from ..util.keys import lamports_to_sol
from ..util.pagination import clamp_limit
from .common import rpc_session

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/rpc/test")
async def test_connection(req: EndpointRequest, rpc_factory: RpcClientFactory = Depends(get_rpc_factory)):
    """Reports reachability instead of raising: a dead node is a normal answer here."""
    client = rpc_factory(req.endpoint)
    try:
        slot = await client.get_slot()
        version = await client.get_version()
    except RpcError as e:
        logger.info("RPC endpoint %s unreachable: %s", req.endpoint, e)
        return JSONResponse(
            status_code=400,
            content={"connected": False, "error": str(e) or "Failed to connect to RPC", "endpoint": req.endpoint},
        )
    finally:
        await client.aclose()

    return {"connected": True, "slot": slot, "version": version, "endpoint": req.endpoint}


@router.post("/rpc/balance")
async def get_balance(req: PublicKeyRequest, rpc_factory: RpcClientFactory = Depends(get_rpc_factory)):
    async with rpc_session(rpc_factory, req.endpoint, "Failed to get balance") as rpc:
        lamports = await rpc.get_balance(req.public_key)
    return {"publicKey": req.public_key, "lamports": lamports, "sol": lamports_to_sol(lamports)}


@router.post("/rpc/account")
async def get_account(req: PublicKeyRequest, rpc_factory: RpcClientFactory = Depends(get_rpc_factory)):
    async with rpc_session(rpc_factory, req.endpoint, "Failed to get account info") as rpc:
        info = await rpc.get_account_info(req.public_key)
        if info is None:
            return {"exists": False, "publicKey": req.public_key}
        return {
            "exists": True,
            "publicKey": req.public_key,
            "lamports": info.get("lamports"),
            "owner": info.get("owner"),
            "executable": info.get("executable"),
            "rentEpoch": info.get("rentEpoch"),
            "dataLength": account_data_length(info),
        }


@router.post("/rpc/blockhash")
async def get_blockhash(req: EndpointRequest, rpc_factory: RpcClientFactory = Depends(get_rpc_factory)):
    async with rpc_session(rpc_factory, req.endpoint, "Failed to get blockhash") as rpc:
        latest = await rpc.get_latest_blockhash()
    return {"blockhash": latest.get("blockhash"), "lastValidBlockHeight": latest.get("lastValidBlockHeight")}


@router.post("/rpc/slot")
async def get_slot(req: EndpointRequest, rpc_factory: RpcClientFactory = Depends(get_rpc_factory)):
    async with rpc_session(rpc_factory, req.endpoint, "Failed to get slot") as rpc:
        slot = await rpc.get_slot()
        block_height = await rpc.get_block_height()
    return {"slot": slot, "blockHeight": block_height}


@router.post("/rpc/epoch")
async def get_epoch(req: EndpointRequest, rpc_factory: RpcClientFactory = Depends(get_rpc_factory)):
    async with rpc_session(rpc_factory, req.endpoint, "Failed to get epoch info") as rpc:
        info = await rpc.get_epoch_info()
    keys = ("epoch", "slotIndex", "slotsInEpoch", "absoluteSlot", "blockHeight", "transactionCount")
    return {k: info.get(k) for k in keys}


@router.post("/rpc/performance")
async def get_performance(req: PerformanceRequest, rpc_factory: RpcClientFactory = Depends(get_rpc_factory)):
    # The node keeps at most 720 samples
    limit = clamp_limit(req.limit, default=10, max_=720)
    async with rpc_session(rpc_factory, req.endpoint, "Failed to get performance samples") as rpc:
        samples = await rpc.get_recent_performance_samples(limit)

    keys = ("slot", "numTransactions", "numSlots", "samplePeriodSecs")
    return {"samples": [{k: s.get(k) for k in keys} for s in samples], "total": len(samples)}


@router.post("/rpc/block")
async def get_block(req: BlockRequest, rpc_factory: RpcClientFactory = Depends(get_rpc_factory)):
    async with rpc_session(rpc_factory, req.endpoint, "Failed to get block") as rpc:
        block = await rpc.get_block(req.slot)

    if block is None:
        raise NotFoundError("Block not found")
    return {
        "slot": req.slot,
        "blockhash": block.get("blockhash"),
        "previousBlockhash": block.get("previousBlockhash"),
        "parentSlot": block.get("parentSlot"),
        "blockTime": block.get("blockTime"),
        "blockHeight": block.get("blockHeight"),
        "transactions": len(block.get("signatures") or []),
    }


@router.post("/rpc/validators")
async def get_validators(req: EndpointRequest, rpc_factory: RpcClientFactory = Depends(get_rpc_factory)):
    async with rpc_session(rpc_factory, req.endpoint, "Failed to get validators") as rpc:
        accounts = await rpc.get_vote_accounts()

    current = accounts.get("current") or []
    delinquent = accounts.get("delinquent") or []
    keys = ("votePubkey", "nodePubkey", "activatedStake", "epochVoteAccount", "commission")
    return {
        "current": [{k: v.get(k) for k in keys} for v in current],
        "delinquent": len(delinquent),
        "total": len(current) + len(delinquent),
    }


@router.post("/rpc/cluster-nodes")
async def get_cluster_nodes(req: EndpointRequest, rpc_factory: RpcClientFactory = Depends(get_rpc_factory)):
    async with rpc_session(rpc_factory, req.endpoint, "Failed to get cluster nodes") as rpc:
        nodes = await rpc.get_cluster_nodes()

    keys = ("pubkey", "gossip", "tpu", "rpc", "version")
    return {"nodes": [{k: n.get(k) for k in keys} for n in nodes], "total": len(nodes)}


@router.post("/rpc/supply")
async def get_supply(req: EndpointRequest, rpc_factory: RpcClientFactory = Depends(get_rpc_factory)):
    async with rpc_session(rpc_factory, req.endpoint, "Failed to get supply") as rpc:
        supply = await rpc.get_supply()
    return {
        "total": supply.get("total"),
        "circulating": supply.get("circulating"),
        "nonCirculating": supply.get("nonCirculating"),
        "nonCirculatingAccounts": supply.get("nonCirculatingAccounts") or [],
    }
