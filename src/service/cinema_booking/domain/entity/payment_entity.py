from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

import attrs

from src.platform.exception.exceptions import DomainError
from src.service.cinema_booking.domain.enum.payment_status import PaymentMethod, PaymentStatus


@attrs.define
class Payment:
    reservation_id: UUID
    amount: Decimal
    method: PaymentMethod
    status: PaymentStatus = PaymentStatus.PENDING
    reference: Optional[str] = None
    failure_reason: Optional[str] = None
    charge_started_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def pending(
        cls, *, reservation_id: UUID, amount: Decimal, method: PaymentMethod, now: datetime
    ) -> 'Payment':
        return cls(
            reservation_id=reservation_id,
            amount=amount,
            method=method,
            status=PaymentStatus.PENDING,
            created_at=now,
            updated_at=now,
        )

    @property
    def is_terminal(self) -> bool:
        return self.status != PaymentStatus.PENDING

    @property
    def is_charging(self) -> bool:
        return self.status == PaymentStatus.PENDING and self.charge_started_at is not None

    def mark_as_completed(self, *, reference: str, amount: Decimal, now: datetime) -> 'Payment':
        if self.status == PaymentStatus.FAILED:
            raise DomainError('Cannot complete a failed payment')
        if self.status == PaymentStatus.COMPLETED and self.reference != reference:
            raise DomainError('Reservation was already paid by another payment')
        return attrs.evolve(
            self,
            status=PaymentStatus.COMPLETED,
            reference=reference,
            amount=amount,
            failure_reason=None,
            updated_at=now,
        )

    def mark_as_failed(
        self, *, reason: str, reference: Optional[str], now: datetime
    ) -> 'Payment':
        if self.status == PaymentStatus.COMPLETED:
            raise DomainError('Cannot fail a completed payment')
        return attrs.evolve(
            self,
            status=PaymentStatus.FAILED,
            reference=reference or self.reference,
            failure_reason=reason,
            updated_at=now,
        )
