from fastapi import APIRouter, Depends

from ..deps import get_rpc_factory
from ..models.rpc import MintRequest, OwnerRequest, TokenBalanceRequest
from ..services.solana import RpcClientFactory
from .common import parsed_token_info, rpc_session, token_amount

router = APIRouter()


@router.post("/tokens/balance")
async def get_token_balance(req: TokenBalanceRequest, rpc_factory: RpcClientFactory = Depends(get_rpc_factory)):
    """Total for one mint when `mint` is given, otherwise every SPL balance of the owner"""
    async with rpc_session(rpc_factory, req.endpoint, "Failed to get token balance") as rpc:
        accounts = await rpc.get_token_accounts_by_owner(req.owner, mint=req.mint)

    if req.mint:
        ui_amounts = (token_amount(parsed_token_info(a)).get("uiAmount") for a in accounts)
        balance = sum(v for v in ui_amounts if isinstance(v, (int, float)))
        return {"owner": req.owner, "mint": req.mint, "balance": balance, "accounts": len(accounts)}

    tokens = []
    for account in accounts:
        info = parsed_token_info(account)
        amount = token_amount(info)
        tokens.append({
            "mint": info.get("mint"),
            "balance": amount.get("uiAmount"),
            "decimals": amount.get("decimals"),
            "address": account.get("pubkey"),
        })
    return {"owner": req.owner, "tokens": tokens, "total": len(tokens)}


@router.post("/tokens/supply")
async def get_token_supply(req: MintRequest, rpc_factory: RpcClientFactory = Depends(get_rpc_factory)):
    async with rpc_session(rpc_factory, req.endpoint, "Failed to get token supply") as rpc:
        supply = await rpc.get_token_supply(req.mint)
    return {
        "mint": req.mint,
        "amount": supply.get("amount"),
        "decimals": supply.get("decimals"),
        "uiAmount": supply.get("uiAmount"),
    }


@router.post("/tokens/accounts")
async def get_token_accounts(req: OwnerRequest, rpc_factory: RpcClientFactory = Depends(get_rpc_factory)):
    async with rpc_session(rpc_factory, req.endpoint, "Failed to get token accounts") as rpc:
        accounts = await rpc.get_token_accounts_by_owner(req.owner)

    formatted = []
    for account in accounts:
        info = parsed_token_info(account)
        amount = token_amount(info)
        formatted.append({
            "address": account.get("pubkey"),
            "mint": info.get("mint"),
            "owner": info.get("owner"),
            "amount": amount.get("amount"),
            "decimals": amount.get("decimals"),
            "uiAmount": amount.get("uiAmount"),
        })
    return {"owner": req.owner, "accounts": formatted, "total": len(formatted)}
