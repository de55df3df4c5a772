"""
NFT reads backed by Metaplex token metadata.

An NFT here is an SPL token account holding exactly one unit of a zero-decimal
mint that has a metadata account.
"""

from fastapi import APIRouter, Depends

from ..deps import get_rpc_factory
from ..errors import NotFoundError, RemoteServiceError
from ..models.rpc import MintRequest, OwnerRequest
from ..services.metaplex import fetch_metadata, fetch_metadata_many
from ..services.solana import RpcClientFactory
from ..util.keys import is_valid_public_key
from .common import parsed_token_info, rpc_session, token_amount

router = APIRouter()


@router.post("/nfts/by-owner")
async def get_nfts_by_owner(req: OwnerRequest, rpc_factory: RpcClientFactory = Depends(get_rpc_factory)):
    async with rpc_session(rpc_factory, req.endpoint, "Failed to get NFTs") as rpc:
        accounts = await rpc.get_token_accounts_by_owner(req.owner)

        mints = []
        for account in accounts:
            info = parsed_token_info(account)
            mint = info.get("mint")
            amount = token_amount(info)
            if amount.get("amount") != "1" or amount.get("decimals") != 0:
                continue
            if isinstance(mint, str) and is_valid_public_key(mint):
                mints.append(mint)
        mints = list(dict.fromkeys(mints))

        found = await fetch_metadata_many(rpc, mints)

    nfts = []
    for mint in mints:
        if mint not in found:
            continue
        meta = found[mint]
        nfts.append({
            "mint": mint,
            "name": meta.name,
            "symbol": meta.symbol,
            "uri": meta.uri,
            "sellerFeeBasisPoints": meta.seller_fee_basis_points,
            "updateAuthority": meta.update_authority,
            "collection": meta.collection.address if meta.collection else None,
        })
    return {"owner": req.owner, "nfts": nfts, "total": len(nfts)}


@router.post("/nfts/metadata")
async def get_nft_metadata(req: MintRequest, rpc_factory: RpcClientFactory = Depends(get_rpc_factory)):
    async with rpc_session(rpc_factory, req.endpoint, "Failed to get NFT metadata") as rpc:
        try:
            meta = await fetch_metadata(rpc, req.mint)
        except ValueError as e:
            raise RemoteServiceError(f"Invalid metadata account for mint {req.mint}: {e}", status_code=400) from e

    if meta is None:
        raise NotFoundError("NFT metadata not found")
    return {
        "mint": req.mint,
        "name": meta.name,
        "symbol": meta.symbol,
        "uri": meta.uri,
        "sellerFeeBasisPoints": meta.seller_fee_basis_points,
        "creators": [c.model_dump() for c in meta.creators],
        "collection": meta.collection.model_dump() if meta.collection else None,
        "updateAuthority": meta.update_authority,
        "isMutable": meta.is_mutable,
    }
