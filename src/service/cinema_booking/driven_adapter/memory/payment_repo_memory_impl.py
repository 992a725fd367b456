from datetime import datetime
import threading
from typing import Dict
from uuid import UUID

import attrs

from src.service.cinema_booking.app.interface.i_payment_repo import IPaymentRepo
from src.service.cinema_booking.domain.entity.payment_entity import Payment
from src.service.cinema_booking.domain.enum.payment_status import PaymentStatus


class PaymentRepoMemoryImpl(IPaymentRepo):
    def __init__(self) -> None:
        self._payments: Dict[UUID, Payment] = {}
        self._mutex = threading.Lock()

    async def get_by_reservation(self, *, reservation_id: UUID) -> Payment | None:
        with self._mutex:
            return self._payments.get(reservation_id)

    async def save(self, *, payment: Payment) -> Payment:
        with self._mutex:
            self._payments[payment.reservation_id] = payment
            return payment

    async def claim_charge(self, *, reservation_id: UUID, now: datetime) -> bool:
        with self._mutex:
            payment = self._payments.get(reservation_id)
            if payment is None or payment.status != PaymentStatus.PENDING:
                return False
            if payment.charge_started_at is not None:
                return False
            self._payments[reservation_id] = attrs.evolve(
                payment, charge_started_at=now, updated_at=now
            )
            return True

    async def release_charge(self, *, reservation_id: UUID) -> None:
        with self._mutex:
            payment = self._payments.get(reservation_id)
            if payment is not None and payment.is_charging:
                self._payments[reservation_id] = attrs.evolve(payment, charge_started_at=None)
