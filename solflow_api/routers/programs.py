from fastapi import APIRouter, Depends

from ..deps import get_rpc_factory
from ..errors import NotFoundError
from ..models.rpc import AccountSizeRequest, ProgramAccountsRequest
from ..services.solana import RpcClientFactory, account_data_length
from .common import rpc_session

router = APIRouter()


@router.post("/programs/accounts")
async def get_program_accounts(req: ProgramAccountsRequest, rpc_factory: RpcClientFactory = Depends(get_rpc_factory)):
    async with rpc_session(rpc_factory, req.endpoint, "Failed to get program accounts") as rpc:
        accounts = await rpc.get_program_accounts(req.program_id)

        items = []
        for entry in accounts:
            account = entry.get("account")
            if not isinstance(account, dict):
                account = {}
            items.append({
                "pubkey": entry.get("pubkey"),
                "owner": account.get("owner"),
                "lamports": account.get("lamports"),
                "executable": account.get("executable"),
                "rentEpoch": account.get("rentEpoch"),
                "dataLength": account_data_length(account),
            })
    return {"programId": req.program_id, "accounts": items, "total": len(items)}


@router.post("/programs/account-size")
async def get_account_size(req: AccountSizeRequest, rpc_factory: RpcClientFactory = Depends(get_rpc_factory)):
    async with rpc_session(rpc_factory, req.endpoint, "Failed to get account size") as rpc:
        info = await rpc.get_account_info(req.account)
        if info is None:
            raise NotFoundError("Account not found")
        size = account_data_length(info)
    return {
        "account": req.account,
        "dataSize": size,
        "owner": info.get("owner"),
        "executable": info.get("executable"),
    }
