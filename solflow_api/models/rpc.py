"""
Request bodies for the Solana proxy routes.

Each body names the RPC endpoint to talk to. Addresses are checked to be
base58-encoded 32-byte keys before any remote call is made.
"""

import base64
import binascii
from typing import Optional

from pydantic import Field, field_validator

from .base import CamelModel, PublicKey, Url


class EndpointRequest(CamelModel):
    endpoint: Url


class PublicKeyRequest(EndpointRequest):
    public_key: PublicKey


class PerformanceRequest(EndpointRequest):
    limit: int = 10


class BlockRequest(EndpointRequest):
    slot: int = Field(ge=0)


# --- Tokens ---

class TokenBalanceRequest(EndpointRequest):
    owner: PublicKey
    mint: Optional[PublicKey] = None


class OwnerRequest(EndpointRequest):
    owner: PublicKey


class MintRequest(EndpointRequest):
    mint: PublicKey


# --- Transactions ---

class SignatureRequest(EndpointRequest):
    signature: str = Field(min_length=1)


class RecentTransactionsRequest(EndpointRequest):
    address: PublicKey
    limit: int = 10


class SimulateTransactionRequest(EndpointRequest):
    transaction: str = Field(min_length=1, description="base64-encoded wire transaction")

    @field_validator("transaction")
    @classmethod
    def _check_base64(cls, v: str) -> str:
        try:
            base64.b64decode(v, validate=True)
        except (binascii.Error, ValueError):
            raise ValueError("transaction must be base64-encoded")
        return v


# --- Programs ---

class ProgramAccountsRequest(EndpointRequest):
    program_id: PublicKey


class AccountSizeRequest(EndpointRequest):
    account: PublicKey
