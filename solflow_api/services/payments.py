"""In-memory payment intents. Replace with a database in production."""

import logging
import threading
import time
from typing import Dict, List, Optional

from ..errors import NotFoundError
from ..models.payment import PaymentRecord
from ..util.ids import new_id

logger = logging.getLogger(__name__)


def calculate_fee(amount: float, fee_bps: int) -> Dict[str, float]:
    """Split a payment into fee and net amounts; the fee is floored."""
    fee = int((amount * fee_bps) // 10_000)
    return {
        "requestedAmount": amount,
        "fee": fee,
        "feeBps": fee_bps,
        "totalToPay": amount + fee,
        "recipientReceives": amount - fee,
    }


class PaymentLedger:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._payments: Dict[str, PaymentRecord] = {}

    def create_intent(self, recipient: str, mint: str, amount: float, memo: Optional[str] = None) -> PaymentRecord:
        payment = PaymentRecord(
            id=new_id("payment_"),
            recipient=recipient,
            mint=mint,
            amount=amount,
            status="pending",
            timestamp=int(time.time() * 1000),
            memo=memo,
        )
        with self._lock:
            self._payments[payment.id] = payment
        logger.info("Payment intent %s: %s of %s to %s", payment.id, amount, mint, recipient)
        return payment.model_copy()

    def get(self, payment_id: str) -> PaymentRecord:
        with self._lock:
            payment = self._payments.get(payment_id)
            if payment is None:
                raise NotFoundError("Payment not found")
            return payment.model_copy()

    def mark_completed(self, payment_id: str, payer: str) -> bool:
        """Returns False when the id is unknown; verification still succeeds then."""
        with self._lock:
            payment = self._payments.get(payment_id)
            if payment is None:
                return False
            self._payments[payment_id] = payment.model_copy(update={"status": "completed", "payer": payer})
        logger.info("Payment %s completed by %s", payment_id, payer)
        return True

    def list(
        self,
        status: Optional[str] = None,
        recipient: Optional[str] = None,
        payer: Optional[str] = None,
    ) -> List[PaymentRecord]:
        with self._lock:
            items = list(self._payments.values())
        if status:
            items = [p for p in items if p.status == status]
        if recipient:
            items = [p for p in items if p.recipient == recipient]
        if payer:
            items = [p for p in items if p.payer == payer]
        return items
