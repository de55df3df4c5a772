from typing import Optional

from pydantic import Field

from .base import CamelModel, PublicKey


class BagsRequest(CamelModel):
    api_key: Optional[str] = None


class TokenAddressRequest(BagsRequest):
    token_address: PublicKey


class TrendingRequest(BagsRequest):
    limit: int = 10


class PriceQuoteRequest(TokenAddressRequest):
    amount: float = Field(gt=0)
