from typing import AsyncContextManager, Callable, List, Sequence

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import func

from src.platform.exception.exceptions import ConflictError
from src.platform.logging.loguru_io import Logger
from src.service.cinema_booking.app.dto.rejection import HasActiveHolds, SeatStatusChange
from src.service.cinema_booking.app.interface.i_seat_inventory import ISeatInventory
from src.service.cinema_booking.domain.entity.seat_entity import Seat
from src.service.cinema_booking.domain.enum.seat_status import SeatStatus
from src.service.cinema_booking.domain.value_object.seat_position import SeatPosition
from src.service.cinema_booking.driven_adapter.model.seat_model import SeatModel


class SeatInventorySqlalchemyImpl(ISeatInventory):
    """
    PostgreSQL seat inventory.

    The compare-and-swap is a single `UPDATE ... WHERE status = :from`; when
    fewer rows match than requested the transaction is rolled back, so no
    partial batch is ever committed, also across processes.
    """

    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]):
        self.session_factory = session_factory

    @Logger.io
    async def initialize_seats(
        self, *, screening_id: int, positions: Sequence[SeatPosition]
    ) -> List[Seat]:
        async with self.session_factory() as session:
            existing = await session.scalar(
                select(func.count(SeatModel.id)).where(SeatModel.screening_id == screening_id)
            )
            if existing:
                raise ConflictError(f'Screening {screening_id} already has seats')

            models = self._build_models(screening_id=screening_id, positions=positions)
            session.add_all(models)
            await session.commit()
            return [self._model_to_entity(model) for model in models]

    async def seats_for(self, *, screening_id: int) -> List[Seat]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(SeatModel)
                .where(SeatModel.screening_id == screening_id)
                .order_by(SeatModel.row, SeatModel.number)
            )
            return [self._model_to_entity(model) for model in result.scalars()]

    async def get_seats(self, *, seat_ids: Sequence[int]) -> List[Seat]:
        if not seat_ids:
            return []
        async with self.session_factory() as session:
            result = await session.execute(
                select(SeatModel).where(SeatModel.id.in_(list(seat_ids))).order_by(SeatModel.id)
            )
            return [self._model_to_entity(model) for model in result.scalars()]

    async def seat_status(self, *, seat_id: int) -> SeatStatus | None:
        async with self.session_factory() as session:
            status = await session.scalar(select(SeatModel.status).where(SeatModel.id == seat_id))
            return SeatStatus(status) if status else None

    @Logger.io
    async def set_status(
        self, *, seat_ids: Sequence[int], from_status: SeatStatus, to_status: SeatStatus
    ) -> SeatStatusChange:
        requested = list(dict.fromkeys(seat_ids))
        async with self.session_factory() as session:
            result = await session.execute(
                update(SeatModel)
                .where(SeatModel.id.in_(requested), SeatModel.status == from_status)
                .values(status=to_status, updated_at=func.now())
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == len(requested):
                await session.commit()
                return SeatStatusChange(applied=True)

            await session.rollback()
            rows = await session.execute(
                select(SeatModel.id, SeatModel.status).where(SeatModel.id.in_(requested))
            )
            current = {seat_id: status for seat_id, status in rows.all()}
            return SeatStatusChange(
                applied=False,
                conflicting_seat_ids=[
                    seat_id for seat_id in requested if current.get(seat_id) != from_status
                ],
            )

    @Logger.io
    async def regenerate(
        self, *, screening_id: int, positions: Sequence[SeatPosition]
    ) -> List[Seat] | HasActiveHolds:
        async with self.session_factory() as session:
            rows = await session.execute(
                select(SeatModel.id, SeatModel.status)
                .where(SeatModel.screening_id == screening_id)
                .with_for_update()
            )
            active = [
                seat_id for seat_id, status in rows.all() if status != SeatStatus.AVAILABLE
            ]
            if active:
                await session.rollback()
                return HasActiveHolds(screening_id=screening_id, seat_ids=active)

            await session.execute(delete(SeatModel).where(SeatModel.screening_id == screening_id))
            models = self._build_models(screening_id=screening_id, positions=positions)
            session.add_all(models)
            await session.commit()
            return [self._model_to_entity(model) for model in models]

    @staticmethod
    def _build_models(
        *, screening_id: int, positions: Sequence[SeatPosition]
    ) -> List[SeatModel]:
        return [
            SeatModel(
                screening_id=screening_id,
                row=position.row,
                number=position.number,
                status=SeatStatus.AVAILABLE,
            )
            for position in positions
        ]

    @staticmethod
    def _model_to_entity(model: SeatModel) -> Seat:
        return Seat(
            id=model.id,
            screening_id=model.screening_id,
            row=model.row,
            number=model.number,
            status=SeatStatus(model.status),
            updated_at=model.updated_at,
        )
