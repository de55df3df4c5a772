"""
Metaplex token metadata.

Every NFT mint has a metadata account at a program derived address of the
Token Metadata program, seeded with ("metadata", program id, mint). The
account body is Borsh-encoded:

    key u8 | update_authority [32] | mint [32]
    name str | symbol str | uri str | seller_fee_basis_points u16
    creators Option<Vec<{address [32], verified bool, share u8}>>
    primary_sale_happened bool | is_mutable bool
    edition_nonce Option<u8> | token_standard Option<u8>
    collection Option<{verified bool, key [32]}> | ...

Accounts written by old program versions stop after `is_mutable`; the
optional tail then reads as None.
"""

import logging
import struct
from typing import Callable, Dict, List, Optional, TypeVar

from ..models.nft import Collection, Creator, TokenMetadata
from ..util.keys import b58decode, b58encode, find_program_address
from .solana import RpcError, SolanaRpcClient, account_data

logger = logging.getLogger(__name__)

METADATA_PROGRAM_ID = "metaqbxxUerdq28cj1RbAWkYQm3ybzjb6a8bt518x1s"
METADATA_V1_KEY = 4
# getMultipleAccounts accepts at most 100 keys per call
MAX_ACCOUNTS_PER_CALL = 100

T = TypeVar("T")


def metadata_address(mint: str) -> str:
    address, _ = find_program_address(
        [b"metadata", b58decode(METADATA_PROGRAM_ID), b58decode(mint)], METADATA_PROGRAM_ID
    )
    return address


class _Reader:
    def __init__(self, data: bytes) -> None:
        self.data = data
        self.offset = 0

    @property
    def remaining(self) -> int:
        return len(self.data) - self.offset

    def take(self, size: int) -> bytes:
        end = self.offset + size
        if end > len(self.data):
            raise ValueError("Metadata account data is truncated")
        chunk = self.data[self.offset:end]
        self.offset = end
        return chunk

    def u8(self) -> int:
        return self.take(1)[0]

    def u16(self) -> int:
        return struct.unpack("<H", self.take(2))[0]

    def u32(self) -> int:
        return struct.unpack("<I", self.take(4))[0]

    def flag(self) -> bool:
        value = self.u8()
        if value > 1:
            raise ValueError(f"Invalid bool byte {value} at offset {self.offset - 1}")
        return value == 1

    def pubkey(self) -> str:
        return b58encode(self.take(32))

    def string(self) -> str:
        # Fixed-width fields are padded with NULs
        return self.take(self.u32()).decode("utf-8", errors="replace").replace("\x00", "")

    def option(self, read: Callable[[], T]) -> Optional[T]:
        return read() if self.flag() else None

    def optional_tail(self, read: Callable[[], T]) -> Optional[T]:
        return self.option(read) if self.remaining else None


def decode_metadata(data: bytes) -> TokenMetadata:
    """Parse a metadata account body. Raises ValueError when it is not MetadataV1."""
    reader = _Reader(data)
    key = reader.u8()
    if key != METADATA_V1_KEY:
        raise ValueError(f"Not a metadata account (key {key})")

    update_authority = reader.pubkey()
    mint = reader.pubkey()
    name = reader.string()
    symbol = reader.string()
    uri = reader.string()
    seller_fee_basis_points = reader.u16()

    def read_creators() -> List[Creator]:
        return [
            Creator(address=reader.pubkey(), verified=reader.flag(), share=reader.u8())
            for _ in range(reader.u32())
        ]

    creators = reader.option(read_creators) or []
    primary_sale_happened = reader.flag()
    is_mutable = reader.flag()
    edition_nonce = reader.optional_tail(reader.u8)
    token_standard = reader.optional_tail(reader.u8)
    collection = reader.optional_tail(lambda: Collection(verified=reader.flag(), address=reader.pubkey()))

    return TokenMetadata(
        update_authority=update_authority,
        mint=mint,
        name=name,
        symbol=symbol,
        uri=uri,
        seller_fee_basis_points=seller_fee_basis_points,
        creators=creators,
        primary_sale_happened=primary_sale_happened,
        is_mutable=is_mutable,
        edition_nonce=edition_nonce,
        token_standard=token_standard,
        collection=collection,
    )


def decode_metadata_account(account: dict) -> TokenMetadata:
    if account.get("owner") != METADATA_PROGRAM_ID:
        raise ValueError("Account is not owned by the token metadata program")
    return decode_metadata(account_data(account))


async def fetch_metadata(rpc: SolanaRpcClient, mint: str) -> Optional[TokenMetadata]:
    """Metadata of one mint, or None when the mint has no metadata account."""
    account = await rpc.get_account_info(metadata_address(mint))
    if account is None:
        return None
    return decode_metadata_account(account)


async def fetch_metadata_many(rpc: SolanaRpcClient, mints: List[str]) -> Dict[str, TokenMetadata]:
    """Metadata by mint. Mints without a readable metadata account are left out."""
    addresses = [metadata_address(mint) for mint in mints]
    found: Dict[str, TokenMetadata] = {}
    for start in range(0, len(mints), MAX_ACCOUNTS_PER_CALL):
        batch = addresses[start:start + MAX_ACCOUNTS_PER_CALL]
        accounts = await rpc.get_multiple_accounts(batch)
        for mint, account in zip(mints[start:start + MAX_ACCOUNTS_PER_CALL], accounts):
            if account is None:
                continue
            try:
                found[mint] = decode_metadata_account(account)
            except (ValueError, RpcError) as e:
                logger.info("Skipping unreadable metadata for mint %s: %s", mint, e)
    return found
