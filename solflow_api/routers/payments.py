"""
Payment intents settled on-chain.

An intent is recorded locally; `verify` looks the paying transaction up on the
RPC node and, when it succeeded, marks the intent completed with the fee payer
as `payer`.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..deps import get_payment_ledger, get_rpc_factory
from ..errors import NotFoundError, error_body
from ..models.payment import (
    CalculatePaymentRequest,
    CreatePaymentIntentRequest,
    PaymentIntentResponse,
    PaymentListResponse,
    PaymentRecord,
    PaymentStatus,
    VerifyPaymentRequest,
)
from ..services.payments import PaymentLedger, calculate_fee
from ..services.solana import RpcClientFactory
from .common import rpc_session

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/payments/create-intent", response_model=PaymentIntentResponse)
def create_intent(
    req: CreatePaymentIntentRequest, ledger: PaymentLedger = Depends(get_payment_ledger)
) -> PaymentIntentResponse:
    payment = ledger.create_intent(req.recipient, req.mint, req.amount, req.memo)
    return PaymentIntentResponse(
        payment_id=payment.id,
        recipient=payment.recipient,
        mint=payment.mint,
        amount=payment.amount,
        status=payment.status,
    )


@router.post("/payments/verify")
async def verify_payment(
    req: VerifyPaymentRequest,
    rpc_factory: RpcClientFactory = Depends(get_rpc_factory),
    ledger: PaymentLedger = Depends(get_payment_ledger),
):
    async with rpc_session(rpc_factory, req.endpoint, "Failed to verify payment") as rpc:
        tx = await rpc.get_transaction(req.signature)

    if tx is None:
        raise NotFoundError("Transaction not found")

    meta = tx.get("meta") or {}
    if meta.get("err"):
        logger.info("Payment transaction %s failed on chain: %s", req.signature, meta["err"])
        return JSONResponse(
            status_code=400,
            content=error_body("Transaction failed", "TRANSACTION_FAILED", details=meta["err"]),
        )

    if req.payment_id:
        # Fee payer is always the first account key
        keys = ((tx.get("transaction") or {}).get("message") or {}).get("accountKeys") or []
        payer = keys[0] if keys and isinstance(keys[0], str) else ""
        ledger.mark_completed(req.payment_id, payer)

    return {
        "verified": True,
        "signature": req.signature,
        "blockTime": tx.get("blockTime"),
        "slot": tx.get("slot"),
        "fee": meta.get("fee"),
        "paymentId": req.payment_id,
        "status": "completed",
    }


@router.get("/payments/status/{payment_id}", response_model=PaymentRecord)
def get_payment_status(payment_id: str, ledger: PaymentLedger = Depends(get_payment_ledger)) -> PaymentRecord:
    return ledger.get(payment_id)


@router.get("/payments/list", response_model=PaymentListResponse)
def list_payments(
    status: Optional[PaymentStatus] = None,
    recipient: Optional[str] = None,
    payer: Optional[str] = None,
    ledger: PaymentLedger = Depends(get_payment_ledger),
) -> PaymentListResponse:
    payments = ledger.list(status=status, recipient=recipient, payer=payer)
    return PaymentListResponse(payments=payments, total=len(payments))


@router.post("/payments/calculate")
def calculate_payment(req: CalculatePaymentRequest):
    return calculate_fee(req.amount, req.fee_bps)
