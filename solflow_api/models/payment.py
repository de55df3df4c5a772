from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from .rpc import EndpointRequest
from .base import CamelModel


PaymentStatus = Literal["pending", "completed", "refunded"]


class PaymentRecord(CamelModel):
    id: str
    payer: str = ""
    recipient: str
    mint: str
    amount: float
    status: PaymentStatus = "pending"
    timestamp: int  # ms since epoch
    memo: Optional[str] = None


class CreatePaymentIntentRequest(BaseModel):
    recipient: str = Field(min_length=1)
    mint: str = Field(min_length=1)
    amount: float = Field(gt=0)
    memo: Optional[str] = None


class PaymentIntentResponse(CamelModel):
    payment_id: str
    recipient: str
    mint: str
    amount: float
    status: PaymentStatus


class VerifyPaymentRequest(EndpointRequest):
    signature: str = Field(min_length=1)
    payment_id: Optional[str] = Field(default=None, alias="paymentId")


class PaymentListResponse(BaseModel):
    payments: List[PaymentRecord]
    total: int


class CalculatePaymentRequest(BaseModel):
    amount: float = Field(gt=0)
    fee_bps: int = Field(default=100, alias="feeBps", ge=0, le=10_000)
