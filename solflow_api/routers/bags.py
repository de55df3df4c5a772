from fastapi import APIRouter, Depends

from ..deps import BagsClientFactory, get_bags_factory
from ..models.bags import PriceQuoteRequest, TokenAddressRequest, TrendingRequest
from ..services.bags import bonding_curve_status, migration_status, token_info

router = APIRouter()


@router.post("/bags/bonding-curve/status")
async def get_bonding_curve_status(req: TokenAddressRequest, bags_factory: BagsClientFactory = Depends(get_bags_factory)):
    async with bags_factory(req.api_key) as bags:
        data = await bags.get_token(req.token_address)
    return bonding_curve_status(req.token_address, data)


@router.post("/bags/token/info")
async def get_token_info(req: TokenAddressRequest, bags_factory: BagsClientFactory = Depends(get_bags_factory)):
    async with bags_factory(req.api_key) as bags:
        data = await bags.get_token(req.token_address)
    return token_info(req.token_address, data)


@router.post("/bags/migration/check")
async def check_migration(req: TokenAddressRequest, bags_factory: BagsClientFactory = Depends(get_bags_factory)):
    async with bags_factory(req.api_key) as bags:
        data = await bags.get_token(req.token_address)
    return migration_status(req.token_address, data)


@router.post("/bags/trending")
async def get_trending(req: TrendingRequest, bags_factory: BagsClientFactory = Depends(get_bags_factory)):
    async with bags_factory(req.api_key) as bags:
        data = await bags.get_trending(req.limit)
    return {"tokens": data.get("tokens") or [], "total": data.get("total") or 0}


@router.post("/bags/calculate-price")
async def calculate_price(req: PriceQuoteRequest, bags_factory: BagsClientFactory = Depends(get_bags_factory)):
    async with bags_factory(req.api_key) as bags:
        data = await bags.get_quote(req.token_address, req.amount)
    return {
        "tokenAddress": req.token_address,
        "inputAmount": req.amount,
        "outputAmount": data.get("outputAmount"),
        "pricePerToken": data.get("pricePerToken"),
        "priceImpact": data.get("priceImpact"),
        "fees": data.get("fees"),
    }
