from datetime import datetime
from typing import Any, AsyncContextManager, Callable, List
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.cinema_booking.app.dto.rejection import (
    InvalidTransition,
    NotFound,
    SeatsUnavailable,
)
from src.service.cinema_booking.app.interface.i_reservation_ledger import IReservationLedger
from src.service.cinema_booking.domain.entity.reservation_entity import Reservation
from src.service.cinema_booking.domain.enum.reservation_status import (
    ACTIVE_RESERVATION_STATUSES,
    PENDING_RESERVATION_STATUSES,
    ReservationStatus,
)
from src.service.cinema_booking.domain.reservation_state_machine import is_transition_allowed
from src.service.cinema_booking.domain.value_object.holder import Holder
from src.service.cinema_booking.driven_adapter.model.reservation_model import ReservationModel


_ACTIVE = [status.value for status in ACTIVE_RESERVATION_STATUSES]
_PENDING = [status.value for status in PENDING_RESERVATION_STATUSES]
_INACTIVE = [ReservationStatus.EXPIRED.value, ReservationStatus.CANCELLED.value]


class ReservationLedgerSqlalchemyImpl(IReservationLedger):
    """
    PostgreSQL reservation ledger.

    Transitions lock the reservation row (`SELECT ... FOR UPDATE`) and only
    write when the stored status still equals the expected one.
    """

    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]):
        self.session_factory = session_factory

    @Logger.io
    async def create(self, *, reservation: Reservation) -> Reservation | SeatsUnavailable:
        async with self.session_factory() as session:
            rows = await session.execute(
                select(ReservationModel.seat_ids).where(
                    ReservationModel.screening_id == reservation.screening_id,
                    ReservationModel.status.in_(_ACTIVE),
                    ReservationModel.seat_ids.overlap(reservation.seat_ids),
                )
            )
            referenced = {seat_id for seat_ids in rows.scalars() for seat_id in seat_ids}
            taken = [seat_id for seat_id in reservation.seat_ids if seat_id in referenced]
            if taken:
                await session.rollback()
                return SeatsUnavailable(seat_ids=taken)

            session.add(self._entity_to_model(reservation))
            await session.commit()
            return reservation

    async def get(self, *, reservation_id: UUID) -> Reservation | None:
        async with self.session_factory() as session:
            model = await session.get(ReservationModel, reservation_id)
            return self._model_to_entity(model) if model else None

    @Logger.io
    async def transition(
        self,
        *,
        reservation_id: UUID,
        from_status: ReservationStatus,
        to_status: ReservationStatus,
        now: datetime,
        **changes: Any,
    ) -> Reservation | InvalidTransition | NotFound:
        async with self.session_factory() as session:
            model = await session.get(ReservationModel, reservation_id, with_for_update=True)
            if model is None:
                await session.rollback()
                return NotFound(entity='Reservation', key=str(reservation_id))

            current = self._model_to_entity(model)
            if current.status != from_status or not is_transition_allowed(from_status, to_status):
                await session.rollback()
                return InvalidTransition(
                    reservation_id=reservation_id,
                    from_status=from_status,
                    to_status=to_status,
                    current_status=current.status,
                )

            updated = current.transition_to(to_status, now=now, **changes)
            model.status = updated.status
            model.updated_at = now
            model.total_price = updated.total_price
            model.confirmation_code = updated.confirmation_code
            model.payment_reference = updated.payment_reference
            model.confirmed_at = updated.confirmed_at
            model.cancellation_reason = updated.cancellation_reason
            model.cancelled_by = updated.cancelled_by
            await session.commit()
            return updated

    async def find_by_seat(self, *, seat_id: int) -> Reservation | None:
        async with self.session_factory() as session:
            model = await session.scalar(
                select(ReservationModel).where(
                    ReservationModel.seat_ids.any(seat_id),
                    ReservationModel.status.in_(_ACTIVE),
                )
            )
            return self._model_to_entity(model) if model else None

    async def find_by_confirmation_code(self, *, code: str) -> Reservation | None:
        async with self.session_factory() as session:
            model = await session.scalar(
                select(ReservationModel).where(ReservationModel.confirmation_code == code)
            )
            return self._model_to_entity(model) if model else None

    async def list_expired(
        self, *, now: datetime, screening_id: int | None = None
    ) -> List[Reservation]:
        stmt = select(ReservationModel).where(
            ReservationModel.status.in_(_PENDING), ReservationModel.expires_at <= now
        )
        if screening_id is not None:
            stmt = stmt.where(ReservationModel.screening_id == screening_id)

        async with self.session_factory() as session:
            result = await session.execute(stmt.order_by(ReservationModel.expires_at))
            return [self._model_to_entity(model) for model in result.scalars()]

    async def list_by_screening(self, *, screening_id: int) -> List[Reservation]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(ReservationModel)
                .where(ReservationModel.screening_id == screening_id)
                .order_by(ReservationModel.created_at)
            )
            return [self._model_to_entity(model) for model in result.scalars()]

    @Logger.io
    async def purge_inactive(self, *, screening_id: int) -> int:
        async with self.session_factory() as session:
            result = await session.execute(
                delete(ReservationModel).where(
                    ReservationModel.screening_id == screening_id,
                    ReservationModel.status.in_(_INACTIVE),
                )
            )
            await session.commit()
            return result.rowcount or 0

    @staticmethod
    def _entity_to_model(reservation: Reservation) -> ReservationModel:
        return ReservationModel(
            id=reservation.id,
            screening_id=reservation.screening_id,
            seat_ids=list(reservation.seat_ids),
            user_id=reservation.holder.user_id,
            guest_name=reservation.holder.guest_name,
            guest_email=reservation.holder.guest_email,
            guest_phone=reservation.holder.guest_phone,
            status=reservation.status,
            expires_at=reservation.expires_at,
            total_price=reservation.total_price,
            confirmation_code=reservation.confirmation_code,
            payment_reference=reservation.payment_reference,
            confirmed_at=reservation.confirmed_at,
            cancellation_reason=reservation.cancellation_reason,
            cancelled_by=reservation.cancelled_by,
            created_at=reservation.created_at,
            updated_at=reservation.updated_at,
        )

    @staticmethod
    def _model_to_entity(model: ReservationModel) -> Reservation:
        return Reservation(
            id=model.id,
            screening_id=model.screening_id,
            seat_ids=list(model.seat_ids),
            holder=Holder(
                user_id=model.user_id,
                guest_name=model.guest_name,
                guest_email=model.guest_email,
                guest_phone=model.guest_phone,
            ),
            status=ReservationStatus(model.status),
            expires_at=model.expires_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
            total_price=model.total_price,
            confirmation_code=model.confirmation_code,
            payment_reference=model.payment_reference,
            confirmed_at=model.confirmed_at,
            cancellation_reason=model.cancellation_reason,
            cancelled_by=model.cancelled_by,
        )
