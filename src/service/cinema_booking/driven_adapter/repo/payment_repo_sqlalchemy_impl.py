from datetime import datetime
from typing import AsyncContextManager, Callable
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.cinema_booking.app.interface.i_payment_repo import IPaymentRepo
from src.service.cinema_booking.domain.entity.payment_entity import Payment
from src.service.cinema_booking.domain.enum.payment_status import PaymentMethod, PaymentStatus
from src.service.cinema_booking.driven_adapter.model.payment_model import PaymentModel


class PaymentRepoSqlalchemyImpl(IPaymentRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]):
        self.session_factory = session_factory

    async def get_by_reservation(self, *, reservation_id: UUID) -> Payment | None:
        async with self.session_factory() as session:
            model = await session.get(PaymentModel, reservation_id)
            return self._model_to_entity(model) if model else None

    @Logger.io
    async def save(self, *, payment: Payment) -> Payment:
        async with self.session_factory() as session:
            await session.merge(
                PaymentModel(
                    reservation_id=payment.reservation_id,
                    amount=payment.amount,
                    method=payment.method,
                    status=payment.status,
                    reference=payment.reference,
                    failure_reason=payment.failure_reason,
                    charge_started_at=payment.charge_started_at,
                    created_at=payment.created_at,
                    updated_at=payment.updated_at,
                )
            )
            await session.commit()
            return payment

    @Logger.io
    async def claim_charge(self, *, reservation_id: UUID, now: datetime) -> bool:
        # Conditional update: only one session can move the marker off NULL
        async with self.session_factory() as session:
            result = await session.execute(
                update(PaymentModel)
                .where(
                    PaymentModel.reservation_id == reservation_id,
                    PaymentModel.status == PaymentStatus.PENDING.value,
                    PaymentModel.charge_started_at.is_(None),
                )
                .values(charge_started_at=now, updated_at=now)
            )
            await session.commit()
            return (result.rowcount or 0) == 1

    async def release_charge(self, *, reservation_id: UUID) -> None:
        async with self.session_factory() as session:
            await session.execute(
                update(PaymentModel)
                .where(
                    PaymentModel.reservation_id == reservation_id,
                    PaymentModel.status == PaymentStatus.PENDING.value,
                )
                .values(charge_started_at=None)
            )
            await session.commit()

    @staticmethod
    def _model_to_entity(model: PaymentModel) -> Payment:
        return Payment(
            reservation_id=model.reservation_id,
            amount=model.amount,
            method=PaymentMethod(model.method),
            status=PaymentStatus(model.status),
            reference=model.reference,
            failure_reason=model.failure_reason,
            charge_started_at=model.charge_started_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
