from decimal import Decimal
from typing import Optional

import attrs

from src.service.cinema_booking.domain.enum.payment_status import PaymentMethod, PaymentStatus


@attrs.frozen
class PaymentReceipt:
    """Proof of a completed charge handed to confirm_payment."""

    reference: str
    amount: Decimal
    method: PaymentMethod


@attrs.frozen
class ChargeResult:
    status: PaymentStatus
    reference: str
    failure_reason: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status == PaymentStatus.COMPLETED
