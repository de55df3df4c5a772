from typing import List, Optional

from .base import CamelModel


class Creator(CamelModel):
    address: str
    verified: bool
    share: int


class Collection(CamelModel):
    verified: bool
    address: str


class TokenMetadata(CamelModel):
    """Decoded Metaplex metadata account (MetadataV1)"""
    update_authority: str
    mint: str
    name: str
    symbol: str
    uri: str
    seller_fee_basis_points: int
    creators: List[Creator] = []
    primary_sale_happened: bool = False
    is_mutable: bool = True
    edition_nonce: Optional[int] = None
    token_standard: Optional[int] = None
    collection: Optional[Collection] = None
